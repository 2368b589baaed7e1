"""
notestack: Note Service
=========================

What:  Input checks for the notes API, then a single call into the store.
Who:   Called by the /notes route handlers; holds a NoteStore injected by
       the app factory.

Flow (every operation):
    validate → delegate to NoteStore → return result

The service raises ValidationError for bad input and lets NotFoundError and
StorageError from the store propagate unchanged to the global handlers.
"""

import logging
import re
from typing import List

from notestack.exceptions import NotFoundError, ValidationError
from notestack.schemas.note import NoteResponse
from notestack.storage.base import NoteStore

logger = logging.getLogger(__name__)

_NOTE_ID_RE = re.compile(r"[+-]?[0-9]+")

# Largest value a 64-bit id parameter can carry
MAX_ID_VALUE = 2**63 - 1

# Largest id the SERIAL (int4) column can hold
MAX_NOTE_ID = 2**31 - 1


def parse_note_id(raw: str) -> int:
    """
    Parse the {id} path segment of DELETE /notes/{id}.

    Accepts an optionally signed run of ASCII digits. Anything else, any
    value below 1, and any value past MAX_ID_VALUE is rejected.

    Raises:
        ValidationError: "invalid id"
    """
    if not _NOTE_ID_RE.fullmatch(raw):
        raise ValidationError(message="invalid id", field="id", context={"value": raw})
    try:
        note_id = int(raw)
    except ValueError as e:
        # Past the interpreter's int string length limit
        raise ValidationError(message="invalid id", field="id") from e
    if note_id <= 0 or note_id > MAX_ID_VALUE:
        raise ValidationError(message="invalid id", field="id", context={"value": raw})
    return note_id


class NoteService:
    """
    Create, list and delete notes.

    Args:
        store: Backend that persists notes.
    """

    def __init__(self, store: NoteStore):
        self.store = store

    async def create_note(self, title: str, body: str) -> NoteResponse:
        """
        Trim and store a new note.

        Raises:
            ValidationError: title or body is empty after trimming.
            StorageError: The store failed.
        """
        title = title.strip()
        body = body.strip()
        if not title or not body:
            raise ValidationError(
                message="title and body required",
                field="title" if not title else "body",
            )
        return await self.store.create(title, body)

    async def list_notes(self) -> List[NoteResponse]:
        """All notes, newest first. Empty list when there are none."""
        return await self.store.list()

    async def delete_note(self, note_id: int) -> None:
        """
        Ids past MAX_NOTE_ID cannot exist and are answered as not found
        without a round trip to the store.

        Raises:
            NotFoundError: No note has this id.
            StorageError: The store failed.
        """
        if note_id > MAX_NOTE_ID:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        await self.store.delete(note_id)
