"""
notestack: Notes API Application Factory
==========================================

What:  Builds the FastAPI app for the database-backed notes API.
How:   create_app() wires middleware, exception handlers and routes; the
       lifespan handler performs the bootstrap when no store was injected.
Who:   uvicorn (through notestack.cli) and the test suite.

Application Layout:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging                  │
    │                                                     │
    │  Routes:                                            │
    │    GET /healthz   POST /notes   GET /notes          │
    │    DELETE /notes/{id}                               │
    │                                                     │
    │  Exception Handlers:                                │
    │    Validation→400  NotFound→404  Storage→500        │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup (only when create_app() got no store):
    1. Configure logging
    2. Require DATABASE_URL
    3. Probe the database with exponential backoff until STARTUP_DEADLINE
    4. CREATE TABLE IF NOT EXISTS notes
    5. Attach a SqlNoteStore to app.state

    Any failure raises StartupError out of the lifespan; uvicorn then
    reports "Application startup failed" and exits non-zero.

    Shutdown:
    1. Dispose the engine (close pooled connections)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notestack import __version__
from notestack.config import Settings, get_settings
from notestack.database import (
    create_engine,
    create_session_factory,
    dispose_engine,
    ensure_schema,
    wait_for_database,
)
from notestack.exceptions import (
    NotestackError,
    NotFoundError,
    StartupError,
    StorageError,
    ValidationError,
)
from notestack.logs import setup_logging
from notestack.middleware.logging import RequestLoggingMiddleware
from notestack.middleware.request_id import RequestIDMiddleware, request_id_var
from notestack.routes import health, notes
from notestack.storage import NoteStore, SqlNoteStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Bootstrap the database connection unless a store was injected.

    Raises:
        StartupError: Configuration missing, database unreachable, or
                      schema creation failed.
    """
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    logger.info("notestack notes API %s starting up", __version__)

    engine = None
    if app.state.note_store is None:
        try:
            engine = create_engine(settings)
            await wait_for_database(
                engine,
                deadline=settings.startup_deadline,
                backoff_initial=settings.startup_backoff_initial,
                backoff_max=settings.startup_backoff_max,
            )
            await ensure_schema(engine)
        except StartupError as e:
            logger.critical("Startup failed: %s | Context: %s", e.message, e.context)
            if engine is not None:
                await dispose_engine(engine)
            raise
        app.state.note_store = SqlNoteStore(
            create_session_factory(engine),
            timeout=settings.query_timeout,
        )

    logger.info("Listening on %s:%d", settings.host, settings.port)

    yield

    logger.info("notestack notes API shutting down...")
    if engine is not None:
        await dispose_engine(engine)
        app.state.note_store = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, error: str, message: str, **extra) -> JSONResponse:
    content = {"error": error, "message": message, "request_id": request_id_var.get("")}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to HTTP responses.

    Handler hierarchy:
        RequestValidationError  → 400 "invalid json" (body failed to decode)
        ValidationError         → 400
        NotFoundError           → 404
        StorageError            → 500 generic message
        NotestackError (base)   → 500
        HTTPException           → its own status (404/405 from routing)
        Exception (fallback)    → 500

    Details from StorageError.context are logged, never returned.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(e.get("loc", ())), "type": e.get("type"), "msg": e.get("msg")}
            for e in exc.errors()
        ]
        logger.warning("[%s] Malformed request body: %s", request_id_var.get(""), errors)
        return _error(400, "validation_error", "invalid json", details={"errors": errors})

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error(400, "validation_error", exc.message, details=exc.context)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, "not_found", exc.message)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        logger.error(
            "[%s] Storage error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(NotestackError)
    async def handle_app_error(request: Request, exc: NotestackError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return _error(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        response = _error(exc.status_code, "http_error", str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again later.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    store: Optional[NoteStore] = None,
) -> FastAPI:
    """
    Create and configure the notes API.

    Args:
        settings: Defaults to a fresh Settings() from the environment.
        store: Note backend to use. When None, the lifespan connects to
               DATABASE_URL and installs a SqlNoteStore.

    Returns:
        Configured FastAPI instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="notestack notes API",
        description="Create, list and delete short notes stored in PostgreSQL.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.note_store = store

    # Last added runs first: Request ID → Logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(notes.router)

    return app


# uvicorn notestack.main:app
app = create_app()
