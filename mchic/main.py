"""
Mchic Setlist — FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes settings, store selection, middleware, exception
       handlers, route mounting and lifecycle management in one place.
How:   Factory pattern: create_app(settings) returns a configured app.
Who:   uvicorn imports `mchic.main:app`; tests call create_app() with
       their own Settings.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  app.state: settings (frozen) · song_store          │
    │                                                     │
    │  Middleware: Request ID → Logging → GZip → CORS     │
    │                                                     │
    │  Routes:                                            │
    │   public: POST /api/login · GET /api/health         │
    │   gated:  /api/songs · /api/songs/{id}              │
    │           POST /api/reset (file backend only)       │
    │   last:   /api/* fallback · static + index.html     │
    │                                                     │
    │  Exception Handlers:                                │
    │   Validation→400 │ Auth→401 │ NotFound→404 │ *→500  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging → store.initialize() (seed file / schema)
    Shutdown: store.close() (dispose the database pool)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mchic import __version__
from mchic.config import Settings
from mchic.dependencies import build_song_store
from mchic.exceptions import (
    INTERNAL_ERROR_MESSAGE,
    UNAUTHORIZED_MESSAGE,
    AuthenticationError,
    DatabaseError,
    FileStorageError,
    NotFoundError,
    ValidationError,
)
from mchic.middleware.logging import RequestLoggingMiddleware
from mchic.middleware.request_id import RequestIDMiddleware, request_id_var
from mchic.routes import auth, frontend, health, reset, songs
from mchic.security import AUTH_REALM
from mchic.services.song_store import SeededSongStore

logger = logging.getLogger(__name__)

INVALID_REQUEST_MESSAGE = "Richiesta non valida."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by the container runtime)
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize the song store on startup; release it on shutdown."""
    settings: Settings = app.state.settings
    store = app.state.song_store

    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("Mchic Setlist %s starting up...", __version__)
    logger.info("Storage backend: %s", store.backend_name)

    await store.initialize()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Mchic Setlist shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the shared error body.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        RequestValidationError  → 400 Bad Request (malformed JSON)
        AuthenticationError     → 401 Unauthorized (+ challenge when gated)
        NotFoundError           → 404 Not Found
        FileStorageError        → 500 (generic message)
        DatabaseError           → 500 (generic message)
        HTTPException           → its own status, same body shape
        Exception (fallback)    → 500 (generic message, traceback logged)

    Security: 5xx bodies never contain paths, SQL or exception text.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent an invalid song: return the pipeline's reason."""
        logger.info("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", INVALID_REQUEST_MESSAGE),
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        headers = {}
        if exc.challenge:
            headers["WWW-Authenticate"] = f'Basic realm="{AUTH_REALM}"'
        return JSONResponse(
            status_code=401,
            content=_error_body("unauthorized", exc.message),
            headers=headers,
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        """File system error: generic message, details logged."""
        rid = request_id_var.get("")
        logger.error("[%s] File storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", INTERNAL_ERROR_MESSAGE),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        """Database error: generic message, details logged."""
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", INTERNAL_ERROR_MESSAGE),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """
        Framework-raised errors (405, malformed Basic header) in our format.

        HTTPBasic rejects undecodable headers with a 401 of its own; the
        message is replaced so every 401 reads the same.
        """
        message = UNAUTHORIZED_MESSAGE if exc.status_code == 401 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body("http_error", message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: traceback to the log, generic message to the client."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body("internal_server_error", INTERNAL_ERROR_MESSAGE),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit configuration (tests). When omitted, settings
                  are loaded from the environment / .env file.

    Returns:
        Fully configured FastAPI instance ready to receive requests.
    """
    settings = settings or Settings()
    store = build_song_store(settings)

    app = FastAPI(
        title="Mchic Setlist API",
        description="Repertoire management for a vocal/instrumental duo.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.song_store = store

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(health.router)
    app.include_router(songs.router)
    if isinstance(store, SeededSongStore):
        app.include_router(reset.router)

    # Catch-alls must come after every concrete route
    app.include_router(frontend.api_fallback_router)
    app.include_router(frontend.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `mchic.main:app` to be importable
app = create_app()
