"""
notestack: Journal File Storage
=================================

What:  Append-only file used by the journal service. Bytes in, bytes out.
How:   aiofiles for non-blocking reads and writes. The parent directory and
       the file are created on first append.

Concurrency:
    With lock_writes=True (the default), an asyncio.Lock serializes appends
    and whole-file reads inside one worker process, so a read never observes
    a half-written line from the same process. Separate worker processes are
    not coordinated; their appends rely on O_APPEND, and a reader in one
    process may or may not see a concurrent append from another.
"""

import asyncio
import contextlib
import logging
from pathlib import Path
from typing import AsyncIterator, Optional, Union

import aiofiles

from notestack.exceptions import FileStorageError

logger = logging.getLogger(__name__)


class JournalFile:
    """
    A flat, append-only notes file.

    Args:
        path: Location of the file (NOTES_FILE), usually on a mounted volume.
        lock_writes: Serialize appends and reads within this process.
    """

    def __init__(self, path: Union[str, Path], lock_writes: bool = True):
        self.path = Path(path)
        self._lock: Optional[asyncio.Lock] = asyncio.Lock() if lock_writes else None

    @contextlib.asynccontextmanager
    async def _guard(self) -> AsyncIterator[None]:
        if self._lock is None:
            yield
            return
        async with self._lock:
            yield

    def ensure_directory(self) -> None:
        """
        Create the directory that will hold the file.

        Raises:
            FileStorageError: The directory cannot be created.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Could not create journal directory %s: %s", self.path.parent, e)
            raise FileStorageError(
                message="Could not save note",
                context={"path": str(self.path.parent), "error": str(e)},
            ) from e

    async def append(self, data: bytes) -> None:
        """
        Append raw bytes to the end of the file, creating it if needed.

        The bytes are written unchanged; no encoding is applied.

        Raises:
            FileStorageError: The write failed.
        """
        self.ensure_directory()
        async with self._guard():
            try:
                async with aiofiles.open(self.path, "ab") as f:
                    await f.write(data)
            except OSError as e:
                logger.error("Journal append to %s failed: %s", self.path, e)
                raise FileStorageError(
                    message="Could not save note",
                    context={"path": str(self.path), "error": str(e)},
                ) from e
        logger.debug("Appended %d bytes to %s", len(data), self.path)

    async def read_all(self) -> Optional[bytes]:
        """
        Return the whole file, or None when it has never been written.

        Raises:
            FileStorageError: The file exists but cannot be read.
        """
        async with self._guard():
            try:
                async with aiofiles.open(self.path, "rb") as f:
                    return await f.read()
            except FileNotFoundError:
                return None
            except OSError as e:
                logger.error("Journal read from %s failed: %s", self.path, e)
                raise FileStorageError(
                    message="Could not read notes",
                    context={"path": str(self.path), "error": str(e)},
                ) from e
