"""
notestack: Command Line Entry Points
======================================

    notestack-api       notes API on HOST:PORT (needs DATABASE_URL)
    notestack-journal   journal service on HOST:PORT (writes NOTES_FILE)

lifespan="on" makes uvicorn exit with a non-zero status when startup
raises, instead of serving without a working backend.
"""

import uvicorn

from notestack.config import get_settings


def _serve(app_path: str) -> None:
    settings = get_settings()
    uvicorn.run(
        app_path,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        lifespan="on",
    )


def run_api() -> None:
    _serve("notestack.main:app")


def run_journal() -> None:
    _serve("notestack.journal_app:app")
