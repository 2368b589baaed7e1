"""
notestack: SqlNoteStore Tests
===============================

What:  The SQL statements, ordering, not-found handling, and error
       translation of SqlNoteStore.
How:   Runs against in-memory SQLite through aiosqlite (see conftest).
       The statements are dialect-neutral; PostgreSQL-only behaviour
       (SERIAL, TIMESTAMPTZ) is not exercised here.
"""

import asyncio
from unittest.mock import patch

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from notestack.database import create_session_factory
from notestack.exceptions import DatabaseError, NotFoundError, StorageError
from notestack.storage import SqlNoteStore


class TestSqlNoteStore:

    @pytest.mark.asyncio
    async def test_create_returns_assigned_fields(self, sql_store):
        note = await sql_store.create("a", "b")

        assert note.id == 1
        assert note.title == "a"
        assert note.body == "b"
        assert note.created_at is not None

    @pytest.mark.asyncio
    async def test_list_orders_by_id_desc(self, sql_store):
        for title in ("first", "second", "third"):
            await sql_store.create(title, "body")

        notes = await sql_store.list()

        assert [n.title for n in notes] == ["third", "second", "first"]
        assert [n.id for n in notes] == [3, 2, 1]

    @pytest.mark.asyncio
    async def test_list_empty(self, sql_store):
        assert await sql_store.list() == []

    @pytest.mark.asyncio
    async def test_delete_removes_row(self, sql_store):
        keep = await sql_store.create("keep", "x")
        drop = await sql_store.create("drop", "y")

        await sql_store.delete(drop.id)

        assert [n.id for n in await sql_store.list()] == [keep.id]

    @pytest.mark.asyncio
    async def test_delete_unknown_id_raises_not_found(self, sql_store):
        with pytest.raises(NotFoundError):
            await sql_store.delete(999)

    @pytest.mark.asyncio
    async def test_delete_twice_raises_not_found(self, sql_store):
        note = await sql_store.create("a", "b")
        await sql_store.delete(note.id)

        with pytest.raises(NotFoundError):
            await sql_store.delete(note.id)

    @pytest.mark.asyncio
    async def test_values_are_bound_not_interpolated(self, sql_store):
        title = "'); DROP TABLE notes; --"
        await sql_store.create(title, "body")

        notes = await sql_store.list()

        assert notes[0].title == title


class TestSqlNoteStoreFaults:

    @pytest.mark.asyncio
    async def test_slow_operation_times_out(self, sqlite_engine):
        store = SqlNoteStore(create_session_factory(sqlite_engine), timeout=0.05)

        async def hang():
            await asyncio.sleep(5)

        with patch.object(store, "_select_all", side_effect=hang):
            with pytest.raises(DatabaseError) as exc_info:
                await store.list()

        assert exc_info.value.context["error_type"] == "TimeoutError"
        assert exc_info.value.context["operation"] == "query"

    @pytest.mark.asyncio
    async def test_unreachable_database_becomes_storage_error(self, tmp_path):
        missing = tmp_path / "no-such-dir" / "notes.db"
        engine = create_async_engine(f"sqlite+aiosqlite:///{missing}")
        store = SqlNoteStore(create_session_factory(engine))
        try:
            with pytest.raises(StorageError) as exc_info:
                await store.create("a", "b")
        finally:
            await engine.dispose()

        # Driver detail stays in the context, not in the message
        assert "sqlite" not in exc_info.value.message.lower()
        assert exc_info.value.context["operation"] == "insert"
