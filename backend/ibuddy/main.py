"""
iBuddy Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application.
Who:   uvicorn (`uvicorn ibuddy.main:app`) in production, create_app() in tests.

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate configuration (logged, not fatal)
    3. Construct the Database handle and attach it to app.state
    4. For SQLite URLs, create missing tables (server databases use Alembic)

    Shutdown:
    1. Dispose the Database handle (closes pooled connections)

The Database handle is created here and nowhere else; handlers reach it only
through the get_db_session dependency.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ibuddy import __version__
from ibuddy.config import Settings, settings
from ibuddy.database import Database
from ibuddy.exceptions import (
    AuthenticationError,
    IBuddyError,
    InvariantViolationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from ibuddy.middleware import RequestContextMiddleware
from ibuddy.routes import auth, health, mentees, users

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Configure the root logger once, before anything else logs."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def build_lifespan(app_settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(app_settings.log_level)
        logger.info("iBuddy backend %s starting up", __version__)

        try:
            app_settings.validate_required_for_production()
        except ValueError as e:
            logger.error("Configuration error: %s", str(e))

        database = Database.from_settings(app_settings)
        if app_settings.is_sqlite:
            await database.create_all()
        app.state.database = database
        logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)

        yield

        logger.info("iBuddy backend shutting down")
        await database.dispose()

    return lifespan


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════


def _error(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: Optional[dict] = None,
    headers=None,
):
    # request.state outlives the middleware call, so the outermost handler sees it too
    request_id = getattr(request.state, "request_id", "")
    content = {"error": error, "message": message, "request_id": request_id}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to JSON error bodies:

        ValidationError          → 400
        AuthenticationError      → 401
        PermissionDeniedError    → 403 (message is the rule's reason)
        NotFoundError            → 404
        InvariantViolationError  → 500
        SQLAlchemyError          → 500 (generic message, details only in logs)
        Exception                → 500
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info("Validation error: %s", exc.message)
        return _error(request, 400, "validation_error", exc.message, exc.context)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error(request, 401, "unauthorized", exc.message, headers={"WWW-Authenticate": "Bearer"})

    @app.exception_handler(PermissionDeniedError)
    async def handle_permission_denied(request: Request, exc: PermissionDeniedError):
        logger.info("Permission denied on %s: %s", request.url.path, exc.reason)
        return _error(request, 403, "forbidden", exc.reason)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(request, 404, "not_found", exc.message)

    @app.exception_handler(InvariantViolationError)
    async def handle_invariant_violation(request: Request, exc: InvariantViolationError):
        logger.error("Invariant violated: %s | Context: %s", exc.message, exc.context)
        return _error(request, 500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(IBuddyError)
    async def handle_app_error(request: Request, exc: IBuddyError):
        logger.error("Unhandled application error: %s | Context: %s", exc.message, exc.context)
        return _error(request, 500, "server_error", exc.message)

    @app.exception_handler(SQLAlchemyError)
    async def handle_store_error(request: Request, exc: SQLAlchemyError):
        logger.error("Document store error: %s", str(exc), exc_info=True)
        return _error(request, 500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return _error(
            request,
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(
        title="iBuddy API",
        description="Mentee onboarding tracking for buddy programmes.",
        version=__version__,
        lifespan=build_lifespan(app_settings),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(mentees.router)
    app.include_router(health.router)

    return app


app = create_app()
