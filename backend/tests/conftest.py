"""
notestack: Test Configuration (conftest.py)
=============================================

Fixtures:
    settings:        Settings isolated from the host environment
    memory_store:    Empty MemoryNoteStore
    api_client:      httpx AsyncClient on the notes API (memory store)
    journal:         JournalFile under tmp_path
    journal_client:  httpx AsyncClient on the journal service
    sqlite_engine:   In-memory aiosqlite engine with the schema created
    sql_store:       SqlNoteStore on sqlite_engine
"""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

# Keep the host's configuration out of the tests
os.environ.pop("DATABASE_URL", None)
os.environ["LOG_LEVEL"] = "WARNING"

from notestack.config import Settings  # noqa: E402
from notestack.database import create_session_factory, ensure_schema  # noqa: E402
from notestack.storage import JournalFile, MemoryNoteStore, SqlNoteStore  # noqa: E402


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=None,
        log_level="WARNING",
        notes_file=str(tmp_path / "data" / "notes.txt"),
    )


@pytest.fixture
def memory_store():
    return MemoryNoteStore()


@pytest_asyncio.fixture
async def api_client(settings, memory_store):
    """
    Notes API wired to the in-memory store.

    ASGITransport does not run the lifespan, so no database is touched.
    """
    from notestack.main import create_app

    app = create_app(settings=settings, store=memory_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def journal(settings):
    return JournalFile(settings.notes_file)


@pytest_asyncio.fixture
async def journal_client(settings, journal):
    from notestack.journal_app import create_journal_app

    app = create_journal_app(settings=settings, journal=journal)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def sqlite_engine():
    """
    One shared in-memory SQLite connection with the notes table created.

    StaticPool keeps every session on the same connection, so they all see
    the same in-memory database.
    """
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await ensure_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def sql_store(sqlite_engine):
    return SqlNoteStore(create_session_factory(sqlite_engine), timeout=3.0)
