"""Test fixtures — app per test, optional Postgres with rollback.

Learn: Two kinds of tests live here:

1. Pure tests (tokens, guards, middleware, SQL builder, error envelope)
   need no database. They use `app`/`client`, built with create_app()
   and a test Settings, and talk to it through httpx's ASGITransport.
2. Data tests are marked `postgres` and use `db_session`/`db_client`.
   Each test gets its own engine + connection + transaction; the session
   uses join_transaction_mode="create_savepoint" so a service's commit()
   becomes a SAVEPOINT, and the outer transaction is rolled back after
   the test. Tables are created inside that transaction, so they vanish
   too. Without EASYRFQ_TEST_DATABASE_URL (or a reachable server) these
   tests are skipped.
"""

import asyncio
import os
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

os.environ.setdefault("EASYRFQ_ENVIRONMENT", "test")

from easyrfq.auth.tokens import TokenService  # noqa: E402
from easyrfq.config import Settings  # noqa: E402
from easyrfq.db.engine import get_db  # noqa: E402
from easyrfq.db.models import Base  # noqa: E402
from easyrfq.main import create_app  # noqa: E402

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"

# Postgres tests run only when this points at a throwaway database
TEST_DB_URL = os.getenv("EASYRFQ_TEST_DATABASE_URL")

# A fixed point in the past; PyJWT rejects an iat in the future
ISSUED_AT = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        jwt_secret=TEST_SECRET,
        environment="test",
        bcrypt_work_factor=4,
    )


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def tokens() -> TokenService:
    return TokenService(TEST_SECRET)


@pytest.fixture()
def auth_headers(tokens):
    """Build an Authorization header for an ad-hoc identity."""

    def _headers(id=1, is_admin=False, company_id=1) -> dict:
        token = tokens.create_token(
            {"id": id, "is_admin": is_admin, "company_id": company_id},
            now=ISSUED_AT,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client for tests that never reach the database."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ─── Postgres ──────────────────────────────────────────


@pytest_asyncio.fixture()
async def db_session():
    """Per-test session with automatic rollback via savepoints."""
    if not TEST_DB_URL:
        pytest.skip("EASYRFQ_TEST_DATABASE_URL not set - skipping postgres test")

    engine = create_async_engine(TEST_DB_URL, echo=False)
    try:
        conn = await asyncio.wait_for(engine.connect().start(), timeout=5)
    except (OSError, SQLAlchemyError, asyncio.TimeoutError) as e:
        await engine.dispose()
        pytest.skip(f"Postgres not reachable at {TEST_DB_URL}: {e}")

    try:
        trans = await conn.begin()
        await conn.run_sync(Base.metadata.create_all)
        session = AsyncSession(
            bind=conn,
            expire_on_commit=False,
            join_transaction_mode="create_savepoint",
        )
        try:
            yield session
        finally:
            await session.close()
            await trans.rollback()
    finally:
        await conn.close()
        await engine.dispose()


@pytest_asyncio.fixture()
async def db_client(app, db_session):
    """HTTP client whose requests share the test's rolled-back session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
