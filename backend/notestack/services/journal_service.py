"""
notestack: Journal Service
============================

What:  Save raw request bodies as lines in the journal file and read the
       file back.
Who:   Called by the journal route handlers.
"""

import logging

from notestack.exceptions import ValidationError
from notestack.storage.journal import JournalFile

logger = logging.getLogger(__name__)

NO_NOTES_YET = "(no notes yet)"


class JournalService:

    def __init__(self, journal: JournalFile):
        self.journal = journal

    async def save(self, raw: bytes) -> None:
        """
        Append the body plus a newline.

        The body is stored byte for byte, whatever its encoding.

        Raises:
            ValidationError: The body is empty.
            FileStorageError: The write failed.
        """
        if not raw:
            raise ValidationError(message="empty body", field="body")
        await self.journal.append(raw + b"\n")

    async def read_notes(self) -> str:
        """
        Full file contents, or NO_NOTES_YET when nothing has been saved.

        Decoded as UTF-8 for the text/plain response; undecodable bytes show
        as U+FFFD here but stay intact in the file.
        """
        data = await self.journal.read_all()
        if data is None:
            return NO_NOTES_YET
        return data.decode("utf-8", errors="replace")
