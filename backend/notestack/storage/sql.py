"""
notestack: SQL Note Store
===========================

What:  NoteStore backed by the `notes` table through async SQLAlchemy.
How:   One short-lived session per operation, taken from the shared pool.
       Every operation is wrapped in asyncio.wait_for(QUERY_TIMEOUT); when the
       request is cancelled or the timer fires, the session is closed and the
       connection returned to the pool.

Statements (all parameterized):
    create: INSERT INTO notes(title, body) VALUES (:t, :b)
            RETURNING id, title, body, created_at
    list:   SELECT id, title, body, created_at FROM notes ORDER BY id DESC
    delete: DELETE FROM notes WHERE id = :id    (rowcount 0 → NotFoundError)

Error translation:
    asyncio.TimeoutError, SQLAlchemyError, OSError → DatabaseError
    The user-facing message stays generic; the operation name and exception
    type go into the error context for the server log.
"""

import asyncio
import logging
from typing import Awaitable, List, TypeVar

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notestack.exceptions import DatabaseError, NotFoundError
from notestack.models.note import Note
from notestack.schemas.note import NoteResponse
from notestack.storage.base import NoteStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 3.0


class SqlNoteStore(NoteStore):
    """
    PostgreSQL-backed note storage.

    Args:
        session_factory: From notestack.database.create_session_factory().
        timeout: Seconds allowed per operation (QUERY_TIMEOUT).
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._session_factory = session_factory
        self.timeout = timeout

    async def _bounded(self, operation: str, coro: Awaitable[T]) -> T:
        """Run one storage operation under the timeout, translating faults."""
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error("Database %s timed out after %.1fs", operation, self.timeout)
            raise DatabaseError(
                context={"operation": operation, "error_type": "TimeoutError"},
            ) from e
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database %s failed: %s", operation, e)
            raise DatabaseError(
                context={"operation": operation, "error_type": type(e).__name__},
            ) from e

    # ── Operations ────────────────────────────────────────────────────────

    async def create(self, title: str, body: str) -> NoteResponse:
        return await self._bounded("insert", self._insert(title, body))

    async def list(self) -> List[NoteResponse]:
        return await self._bounded("query", self._select_all())

    async def delete(self, note_id: int) -> None:
        deleted = await self._bounded("delete", self._delete(note_id))
        if deleted == 0:
            raise NotFoundError(resource="note", resource_id=str(note_id))

    # ── Statements ────────────────────────────────────────────────────────

    async def _insert(self, title: str, body: str) -> NoteResponse:
        stmt = (
            insert(Note)
            .values(title=title, body=body)
            .returning(Note.id, Note.title, Note.body, Note.created_at)
        )
        async with self._session_factory() as session:
            async with session.begin():
                row = (await session.execute(stmt)).one()
        note = NoteResponse.model_validate(dict(row._mapping))
        logger.info("Note %d created", note.id)
        return note

    async def _select_all(self) -> List[NoteResponse]:
        stmt = select(Note).order_by(Note.id.desc())
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [NoteResponse.model_validate(n) for n in result.scalars().all()]

    async def _delete(self, note_id: int) -> int:
        stmt = (
            delete(Note)
            .where(Note.id == note_id)
            .execution_options(synchronize_session=False)
        )
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(stmt)
                deleted = result.rowcount
        if deleted:
            logger.info("Note %d deleted", note_id)
        return deleted
