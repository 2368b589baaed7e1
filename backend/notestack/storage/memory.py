"""
notestack: In-Memory Note Store
=================================

What:  A NoteStore kept in a dict, for tests and for running the API
       without PostgreSQL.
How:   Ids come from a counter that never goes backwards, so a deleted id
       is never reused (same as a SERIAL column).
"""

from datetime import datetime, timezone
from typing import Dict, List

from notestack.exceptions import NotFoundError
from notestack.schemas.note import NoteResponse
from notestack.storage.base import NoteStore


class MemoryNoteStore(NoteStore):

    def __init__(self) -> None:
        self._notes: Dict[int, NoteResponse] = {}
        self._last_id = 0

    async def create(self, title: str, body: str) -> NoteResponse:
        self._last_id += 1
        note = NoteResponse(
            id=self._last_id,
            title=title,
            body=body,
            created_at=datetime.now(timezone.utc),
        )
        self._notes[note.id] = note
        return note

    async def list(self) -> List[NoteResponse]:
        return [self._notes[k] for k in sorted(self._notes, reverse=True)]

    async def delete(self, note_id: int) -> None:
        if self._notes.pop(note_id, None) is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))

    def __len__(self) -> int:
        return len(self._notes)
