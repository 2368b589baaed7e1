"""
notestack: Journal Service Application Factory
================================================

What:  Builds the FastAPI app for the file-backed journal service.
How:   Same middleware as the notes API; errors are answered in plain text
       because every endpoint of this service speaks text/plain.

Routes:
    GET  /          service description
    GET  /healthz   "ok"
    POST /save      append raw body + newline  → 201 "saved"
    GET  /notes     whole file, or "(no notes yet)"

Startup creates the directory holding NOTES_FILE. Failure to create it is
fatal, the same as a missing database for the notes API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notestack import __version__
from notestack.config import Settings, get_settings
from notestack.exceptions import (
    FileStorageError,
    NotestackError,
    StartupError,
    ValidationError,
)
from notestack.logs import setup_logging
from notestack.middleware.logging import RequestLoggingMiddleware
from notestack.middleware.request_id import RequestIDMiddleware, request_id_var
from notestack.routes import health, journal as journal_routes
from notestack.storage import JournalFile

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    logger.info("notestack journal %s starting up", __version__)

    journal: JournalFile = app.state.journal
    try:
        journal.ensure_directory()
    except FileStorageError as e:
        logger.critical("Startup failed: %s | Context: %s", e.message, e.context)
        raise StartupError(message="Journal directory is not writable", context=e.context) from e

    logger.info("Journal file: %s", journal.path)
    yield
    logger.info("notestack journal shutting down...")


def register_exception_handlers(app: FastAPI) -> None:
    """Plain-text error responses: 400 / 500 / routing errors."""

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return PlainTextResponse(exc.message, status_code=400)

    @app.exception_handler(NotestackError)
    async def handle_app_error(request: Request, exc: NotestackError):
        logger.error(
            "[%s] %s: %s | Context: %s",
            request_id_var.get(""),
            type(exc).__name__,
            exc.message,
            exc.context,
        )
        return PlainTextResponse(exc.message, status_code=500)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(
            str(exc.detail),
            status_code=exc.status_code,
            headers=exc.headers,
        )


def create_journal_app(
    settings: Optional[Settings] = None,
    journal: Optional[JournalFile] = None,
) -> FastAPI:
    """
    Create and configure the journal service.

    Args:
        settings: Defaults to a fresh Settings() from the environment.
        journal: File backend. Defaults to JournalFile(settings.notes_file).
    """
    settings = settings or get_settings()
    if journal is None:
        journal = JournalFile(settings.notes_file, lock_writes=settings.journal_lock_writes)

    app = FastAPI(
        title="notestack journal",
        description="Append lines of text to a file and read them back.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.journal = journal

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(journal_routes.router)

    return app


# uvicorn notestack.journal_app:app
app = create_journal_app()
