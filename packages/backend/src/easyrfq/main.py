"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (the database engine).
Middleware, CORS, exception handlers and routers are all registered here.

Tests call create_app(Settings(...)) with their own secret; uvicorn uses
the module-level `app` built from the environment.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from easyrfq import __version__
from easyrfq.api import api_router
from easyrfq.auth.middleware import JWTAuthMiddleware
from easyrfq.auth.tokens import TokenService
from easyrfq.config import Settings, settings as default_settings
from easyrfq.db.engine import build_engine, build_session_factory
from easyrfq.errors import AppError
from easyrfq.log import configure_logging
from easyrfq.middleware.request_log import RequestLogMiddleware

logger = structlog.get_logger()


def error_response(
    message: str, status_code: int, headers: Optional[dict[str, str]] = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "status": status_code}},
        headers=headers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown.
    """
    cfg: Settings = app.state.settings
    logger.info(
        "easyrfq.starting",
        version=__version__,
        environment=cfg.environment,
        port=cfg.port,
    )

    yield

    logger.info("easyrfq.shutdown")
    await app.state.engine.dispose()


def install_error_handlers(app: FastAPI) -> None:
    """Render every failure as {"error": {"message", "status"}}."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        return error_response(exc.message, exc.status_code, exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        # Unknown routes and wrong methods
        return error_response(str(exc.detail), exc.status_code, exc.headers)

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        # Constraint violations (unknown customer/item, check constraints)
        logger.info("db.integrity_error", error=str(exc.orig))
        return error_response("Request violates a data constraint", 400)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("http.unhandled_error", path=request.url.path)
        return error_response("Internal Server Error", 500)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or default_settings
    configure_logging(settings.environment, settings.debug)

    app = FastAPI(
        title="EasyRFQ",
        description="Multi-tenant RFQ and quoting API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tokens = TokenService(
        settings.jwt_secret,
        settings.jwt_algorithm,
        settings.access_token_expire_minutes,
    )
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestLog → JWTAuth → handler
    app.add_middleware(JWTAuthMiddleware, tokens=app.state.tokens)
    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: easyrfq.main:app)
app = create_app()
