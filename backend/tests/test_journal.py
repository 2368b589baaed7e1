"""
notestack: Journal Tests
==========================

What:  JournalFile storage, JournalService rules, and the journal endpoints.
How:   Real files under pytest's tmp_path; aiofiles patched only to inject
       write failures.
"""

import asyncio
from unittest.mock import patch

import pytest

from notestack.config import Settings
from notestack.exceptions import FileStorageError, StartupError, ValidationError
from notestack.journal_app import create_journal_app
from notestack.services.journal_service import NO_NOTES_YET, JournalService
from notestack.storage import JournalFile


class TestJournalFile:

    @pytest.mark.asyncio
    async def test_read_before_any_write_is_none(self, journal):
        assert await journal.read_all() is None

    @pytest.mark.asyncio
    async def test_append_creates_directory_and_file(self, tmp_path):
        journal = JournalFile(tmp_path / "a" / "b" / "notes.txt")

        await journal.append(b"one\n")

        assert journal.path.read_bytes() == b"one\n"

    @pytest.mark.asyncio
    async def test_appends_accumulate_in_order(self, journal):
        await journal.append(b"one\n")
        await journal.append(b"two\n")

        assert await journal.read_all() == b"one\ntwo\n"

    @pytest.mark.asyncio
    async def test_concurrent_appends_keep_whole_lines(self, journal):
        lines = [f"line-{i}-".encode() + b"x" * 200 + b"\n" for i in range(50)]

        await asyncio.gather(*(journal.append(line) for line in lines))

        stored = (await journal.read_all()).splitlines(keepends=True)
        assert sorted(stored) == sorted(lines)

    @pytest.mark.asyncio
    async def test_write_failure_raises_file_storage_error(self, journal):
        with patch("notestack.storage.journal.aiofiles.open", side_effect=PermissionError("read-only")):
            with pytest.raises(FileStorageError):
                await journal.append(b"x\n")

    @pytest.mark.asyncio
    async def test_unlocked_mode_still_appends(self, tmp_path):
        journal = JournalFile(tmp_path / "notes.txt", lock_writes=False)

        await journal.append(b"a\n")

        assert await journal.read_all() == b"a\n"


class TestJournalService:

    @pytest.mark.asyncio
    async def test_save_adds_newline(self, journal):
        service = JournalService(journal)

        await service.save(b"hello")

        assert await journal.read_all() == b"hello\n"

    @pytest.mark.asyncio
    async def test_save_stores_non_utf8_bytes_unchanged(self, journal):
        service = JournalService(journal)

        await service.save(b"caf\xe9\x00\xff")

        assert journal.path.read_bytes() == b"caf\xe9\x00\xff\n"
        assert await service.read_notes() == "caf\ufffd\x00\ufffd\n"

    @pytest.mark.asyncio
    async def test_empty_body_rejected(self, journal):
        with pytest.raises(ValidationError):
            await JournalService(journal).save(b"")

        assert await journal.read_all() is None

    @pytest.mark.asyncio
    async def test_read_without_file_is_sentinel(self, journal):
        assert await JournalService(journal).read_notes() == NO_NOTES_YET


class TestJournalEndpoints:

    @pytest.mark.asyncio
    async def test_index(self, journal_client):
        response = await journal_client.get("/")

        assert response.status_code == 200
        assert "POST /save" in response.text

    @pytest.mark.asyncio
    async def test_healthz(self, journal_client):
        response = await journal_client.get("/healthz")

        assert response.status_code == 200
        assert response.text == "ok"

    @pytest.mark.asyncio
    async def test_notes_before_any_save(self, journal_client):
        response = await journal_client.get("/notes")

        assert response.status_code == 200
        assert response.text == "(no notes yet)"

    @pytest.mark.asyncio
    async def test_save_then_read(self, journal_client):
        saved = await journal_client.post("/save", content=b"hello")

        assert saved.status_code == 201
        assert saved.text == "saved"

        response = await journal_client.get("/notes")
        assert response.status_code == 200
        assert "hello" in response.text.splitlines()

    @pytest.mark.asyncio
    async def test_save_keeps_body_verbatim(self, journal_client):
        await journal_client.post("/save", content="  spaced  ".encode())
        await journal_client.post("/save", content=b'{"json": "too"}')

        response = await journal_client.get("/notes")

        assert response.text == '  spaced  \n{"json": "too"}\n'

    @pytest.mark.asyncio
    async def test_empty_save_is_400(self, journal_client):
        response = await journal_client.post("/save", content=b"")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_filesystem_fault_is_500(self, journal_client):
        with patch("notestack.storage.journal.aiofiles.open", side_effect=OSError("disk full")):
            response = await journal_client.post("/save", content=b"hello")

        assert response.status_code == 500
        assert "disk full" not in response.text

    @pytest.mark.asyncio
    async def test_wrong_method_is_405(self, journal_client):
        response = await journal_client.get("/save")

        assert response.status_code == 405

    @pytest.mark.asyncio
    async def test_save_round_trips_invalid_utf8(self, journal_client, journal):
        saved = await journal_client.post("/save", content=b"caf\xe9\x00\xff")

        assert saved.status_code == 201
        assert journal.path.read_bytes() == b"caf\xe9\x00\xff\n"

        response = await journal_client.get("/notes")
        assert response.status_code == 200
        assert response.text == "caf\ufffd\x00\ufffd\n"


class TestJournalStartup:

    @pytest.mark.asyncio
    async def test_startup_creates_notes_directory(self, tmp_path):
        notes_file = tmp_path / "volume" / "nested" / "notes.txt"
        app = create_journal_app(
            settings=Settings(log_level="WARNING", notes_file=str(notes_file))
        )

        async with app.router.lifespan_context(app):
            assert notes_file.parent.is_dir()
            assert not notes_file.exists()

    @pytest.mark.asyncio
    async def test_unwritable_notes_directory_aborts_startup(self, tmp_path):
        # A regular file where the directory should be
        blocker = tmp_path / "volume"
        blocker.write_text("not a directory")
        app = create_journal_app(
            settings=Settings(log_level="WARNING", notes_file=str(blocker / "notes.txt"))
        )

        with pytest.raises(StartupError, match="not writable"):
            async with app.router.lifespan_context(app):
                pass
