"""Tests for the filesystem note storage."""

from __future__ import annotations

from pathlib import Path

import pytest

from contactctl.infrastructure.storage import FileSystemStorage, StorageError


@pytest.fixture
def storage(tmp_path: Path) -> FileSystemStorage:
    return FileSystemStorage(tmp_path)


class TestListNotes:
    @pytest.mark.asyncio
    async def test_missing_folder(self, storage: FileSystemStorage) -> None:
        assert await storage.list_notes("Contacts") is None

    @pytest.mark.asyncio
    async def test_lists_markdown_only_sorted(self, storage: FileSystemStorage, tmp_path: Path) -> None:
        folder = tmp_path / "Contacts"
        (folder / "nested").mkdir(parents=True)
        (folder / "b.md").write_text("b")
        (folder / "a.md").write_text("a")
        (folder / "image.png").write_bytes(b"\x89PNG")
        (folder / "nested" / "c.md").write_text("c")

        notes = await storage.list_notes("Contacts")
        assert notes is not None
        assert [(info.id, info.path) for info in notes] == [
            ("a", "Contacts/a.md"),
            ("b", "Contacts/b.md"),
        ]
        assert notes[0].modified.tzinfo is not None


class TestReadWrite:
    @pytest.mark.asyncio
    async def test_line_endings_preserved(self, storage: FileSystemStorage, tmp_path: Path) -> None:
        text = "---\r\ncontact: true\r\n---\r\n"
        await storage.write_note("Contacts/a.md", text)
        assert (tmp_path / "Contacts" / "a.md").read_bytes() == text.encode()
        assert await storage.read_note("Contacts/a.md") == text

    @pytest.mark.asyncio
    async def test_read_missing_raises(self, storage: FileSystemStorage) -> None:
        with pytest.raises(StorageError, match="missing.md"):
            await storage.read_note("missing.md")

    @pytest.mark.asyncio
    async def test_path_escape_refused(self, storage: FileSystemStorage) -> None:
        with pytest.raises(StorageError, match="escapes"):
            await storage.write_note("../outside.md", "x")

    @pytest.mark.asyncio
    async def test_exists(self, storage: FileSystemStorage, tmp_path: Path) -> None:
        (tmp_path / "a.md").write_text("a")
        assert await storage.exists("a.md")
        assert not await storage.exists("b.md")


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_note(self, storage: FileSystemStorage) -> None:
        info = await storage.create_note("Contacts/jane-doe.md", "hello")
        assert info.id == "jane-doe"
        assert info.path == "Contacts/jane-doe.md"

    @pytest.mark.asyncio
    async def test_create_existing_raises(self, storage: FileSystemStorage) -> None:
        await storage.create_note("a.md", "one")
        with pytest.raises(StorageError, match="already exists"):
            await storage.create_note("a.md", "two")
        assert await storage.read_note("a.md") == "one"

    @pytest.mark.asyncio
    async def test_create_folder_is_idempotent(self, storage: FileSystemStorage, tmp_path: Path) -> None:
        await storage.create_folder("People/Work")
        await storage.create_folder("People/Work")
        assert (tmp_path / "People" / "Work").is_dir()


class TestFindFile:
    @pytest.mark.asyncio
    async def test_finds_by_base_name(self, storage: FileSystemStorage, tmp_path: Path) -> None:
        (tmp_path / "Projects").mkdir()
        (tmp_path / "Projects" / "Roadmap.md").write_text("r")
        assert await storage.find_file("Roadmap") == "Projects/Roadmap.md"

    @pytest.mark.asyncio
    async def test_skips_tool_directories(self, storage: FileSystemStorage, tmp_path: Path) -> None:
        (tmp_path / ".obsidian").mkdir()
        (tmp_path / ".obsidian" / "Roadmap.md").write_text("r")
        assert await storage.find_file("Roadmap") is None
