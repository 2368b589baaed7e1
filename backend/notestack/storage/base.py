"""
notestack: Abstract Note Store
================================

What:  The contract every note backend implements.
Who:   NoteService depends on this interface only; the app factory decides
       which implementation gets injected.

Implementations:
    - SqlNoteStore: PostgreSQL (production)
    - MemoryNoteStore: process-local dict (tests, local runs without a database)
"""

from abc import ABC, abstractmethod
from typing import List

from notestack.schemas.note import NoteResponse


class NoteStore(ABC):
    """
    Abstract persistence for notes.

    Contract:
        - Implementations assign id (monotonically increasing) and created_at
        - list() is ordered by id descending and returns [] when empty
        - Backend faults surface as StorageError subclasses, never raw
          driver exceptions
    """

    @abstractmethod
    async def create(self, title: str, body: str) -> NoteResponse:
        """
        Persist a new note.

        Args:
            title: Already trimmed, non-empty title.
            body:  Already trimmed, non-empty body.

        Returns:
            The stored note including its assigned id and created_at.

        Raises:
            StorageError: The backend failed.
        """

    @abstractmethod
    async def list(self) -> List[NoteResponse]:
        """
        Return every note, newest id first.

        Raises:
            StorageError: The backend failed.
        """

    @abstractmethod
    async def delete(self, note_id: int) -> None:
        """
        Remove one note.

        Raises:
            NotFoundError: No note has this id.
            StorageError: The backend failed.
        """

    async def close(self) -> None:
        """Release backend resources. Default: nothing to release."""
        return None
