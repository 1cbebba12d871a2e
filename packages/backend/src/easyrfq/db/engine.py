"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode over asyncpg. create_async_engine for
connection pooling, AsyncSession for per-request database access,
dependency injection via FastAPI. create_app() builds one engine from
its Settings and keeps it on app.state, so an app made with a custom
database_url really talks to that database. The services mostly run raw
SQL on the session's connection (see db/sql.py), but they still go
through the session so commit/rollback and test savepoints work the
usual way.
"""

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from easyrfq.config import Settings


def build_engine(settings: Settings) -> AsyncEngine:
    # Connection pool: min 5, max 20 connections.
    # echo=True in debug to see SQL queries.
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_size=5,
        max_overflow=15,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Each request gets its own session from this factory."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncSession:
    """FastAPI dependency that yields a session per request and closes it."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
