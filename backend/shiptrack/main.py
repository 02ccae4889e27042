"""
ShipTrack Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn shiptrack.main:app`) and `python -m shiptrack serve`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌──────────┐ │
    │  │  Req ID  │→│  Logging    │→│ GZip │→│   CORS   │ │
    │  └──────────┘ └─────────────┘ └──────┘ └──────────┘ │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌────────────────┐ ┌────────────┐ │
    │  │ /api/auth/*  │ │ /api/shipments │ │ /api/health│ │
    │  └──────────────┘ └────────────────┘ └────────────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌────────────────────────────────────────────────┐ │
    │  │ Validation/Conflict→400 │ Auth→401/403 │ →404  │ │
    │  │ Database/Config/unexpected→500 (generic body)  │ │
    │  └────────────────────────────────────────────────┘ │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, refuse to start without JWT_SECRET
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Tuple, Type

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from shiptrack import __version__
from shiptrack.config import settings
from shiptrack.database import dispose_engine
from shiptrack.exceptions import (
    ConfigurationError,
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    ShipTrackError,
    UnauthenticatedError,
    ValidationError,
)
from shiptrack.middleware.logging import RequestLoggingMiddleware
from shiptrack.middleware.request_id import RequestIDMiddleware, request_id_var
from shiptrack.routes import auth, health, shipments

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2024-06-10T12:00:00 [INFO] shiptrack.services.user_service: message
    Output: stdout (captured by Docker / the process supervisor)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup and shutdown procedures.

    A missing JWT_SECRET aborts startup: the server must never come up in a
    state where it would hand out unsigned or unverifiable tokens.
    """
    setup_logging()
    logger.info("ShipTrack Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.critical("Configuration error: %s", str(e))
        raise ConfigurationError(message=str(e)) from e

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("API docs: http://%s:%d/docs", settings.host, settings.port)

    yield

    logger.info("ShipTrack Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

# Client-facing errors: the exception's own message is safe to return.
CLIENT_ERRORS: Dict[Type[ShipTrackError], Tuple[int, str]] = {
    ValidationError: (400, "validation_error"),
    ConflictError: (400, "conflict"),
    UnauthenticatedError: (401, "unauthenticated"),
    InvalidCredentialsError: (401, "invalid_credentials"),
    ForbiddenError: (403, "forbidden"),
    NotFoundError: (404, "not_found"),
}

GENERIC_SERVER_MESSAGE = "Internal server error"


def _error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and JSON error bodies.

    Handler hierarchy:
        ValidationError, ConflictError      → 400
        UnauthenticatedError                → 401
        InvalidCredentialsError             → 401
        ForbiddenError                      → 403
        NotFoundError                       → 404
        RequestValidationError (FastAPI)    → 400
        DatabaseError, ConfigurationError   → 500 (generic message)
        Exception (fallback)                → 500 (generic message)

    Server-side failures are logged with full context; the response body
    never includes stack traces, SQL or configuration details.
    """

    @app.exception_handler(ShipTrackError)
    async def handle_app_error(request: Request, exc: ShipTrackError):
        for exc_type, (status_code, code) in CLIENT_ERRORS.items():
            if isinstance(exc, exc_type):
                if exc.context:
                    logger.info("%s: %s | Context: %s", code, exc.message, exc.context)
                return _error_response(status_code, code, exc.message)

        logger.error(
            "[%s] %s: %s | Context: %s",
            request_id_var.get(""),
            type(exc).__name__,
            exc.message,
            exc.context,
        )
        return _error_response(500, "server_error", GENERIC_SERVER_MESSAGE)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Malformed JSON or wrongly typed fields."""
        logger.info("Request body rejected: %s", exc.errors())
        return _error_response(400, "validation_error", "Invalid request body")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=exc,
        )
        return _error_response(500, "internal_server_error", GENERIC_SERVER_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers into a FastAPI app."""
    app = FastAPI(
        title="ShipTrack API",
        description=(
            "Shipment tracking backend: account registration and login, "
            "shipment creation, tracking and admin status updates."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(shipments.router)
    app.include_router(health.router)

    return app


# uvicorn expects `shiptrack.main:app` to be importable
app = create_app()
