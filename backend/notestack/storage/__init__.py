"""
notestack: Storage Backends
=============================

Inventory:
    - NoteStore (abstract): create / list / delete contract for notes
    - SqlNoteStore:         PostgreSQL via async SQLAlchemy, bounded by a timeout
    - MemoryNoteStore:      in-process fake with the same contract
    - JournalFile:          append-only text file for the journal service
"""

from notestack.storage.base import NoteStore
from notestack.storage.journal import JournalFile
from notestack.storage.memory import MemoryNoteStore
from notestack.storage.sql import SqlNoteStore

__all__ = ["NoteStore", "SqlNoteStore", "MemoryNoteStore", "JournalFile"]
