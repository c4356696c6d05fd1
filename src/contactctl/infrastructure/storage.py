"""Note storage — the async boundary between the core and the vault files.

INVARIANT: Files are truth. Nothing read through storage is cached; every
contact listing re-reads the notes.

Paths are vault-relative POSIX strings (``"Contacts/jane-doe.md"``).
Absence is reported through :meth:`NoteStorage.exists` and ``None``
returns, never by raising. Real I/O failures raise :class:`StorageError`.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path, PurePosixPath

NOTE_SUFFIX = ".md"

# Directories never searched when resolving a file by name.
_SKIP_DIRS = frozenset({".contactctl", ".obsidian", ".git", ".trash"})


class StorageError(Exception):
    """A note could not be read, written, or created."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


@dataclass(frozen=True)
class NoteInfo:
    """A note found in a folder listing (text is read separately)."""

    id: str  # base name without extension
    path: str
    created: datetime
    modified: datetime


class NoteStorage(ABC):
    """Abstract vault storage consumed by the services."""

    @abstractmethod
    async def exists(self, path: str) -> bool: ...

    @abstractmethod
    async def list_notes(self, folder: str) -> list[NoteInfo] | None:
        """List Markdown notes directly inside *folder*; None if it is missing."""

    @abstractmethod
    async def read_note(self, path: str) -> str: ...

    @abstractmethod
    async def write_note(self, path: str, text: str) -> None: ...

    @abstractmethod
    async def create_note(self, path: str, text: str) -> NoteInfo:
        """Create a new note; raises StorageError if *path* already exists."""

    @abstractmethod
    async def create_folder(self, path: str) -> None: ...

    @abstractmethod
    async def find_file(self, name: str) -> str | None:
        """Return the path of the first file whose base name is *name*."""


def _timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=UTC)


class FileSystemStorage(NoteStorage):
    """:class:`NoteStorage` over a local directory.

    Blocking ``pathlib`` calls run in a worker thread via
    :func:`asyncio.to_thread`.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def resolve(self, path: str) -> Path:
        """Map a vault-relative path to the filesystem, refusing escapes."""
        result = (self.root / PurePosixPath(path)).resolve()
        if not result.is_relative_to(self.root.resolve()):
            raise StorageError(path, "path escapes vault root")
        return result

    def _info(self, path: Path) -> NoteInfo:
        stat = path.stat()
        rel = path.relative_to(self.root.resolve()).as_posix()
        return NoteInfo(
            id=path.stem,
            path=rel,
            created=_timestamp(stat.st_ctime),
            modified=_timestamp(stat.st_mtime),
        )

    # ------------------------------------------------------------------
    # Sync implementations
    # ------------------------------------------------------------------

    def _list_notes(self, folder: str) -> list[NoteInfo] | None:
        directory = self.resolve(folder)
        if not directory.is_dir():
            return None
        try:
            return [
                self._info(child)
                for child in sorted(directory.iterdir())
                if child.is_file() and child.suffix == NOTE_SUFFIX
            ]
        except OSError as exc:
            raise StorageError(folder, str(exc)) from exc

    def _read(self, path: str) -> str:
        try:
            with self.resolve(path).open(encoding="utf-8", newline="") as fh:
                return fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(path, str(exc)) from exc

    def _write(self, path: str, text: str) -> None:
        target = self.resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # newline="" keeps the note's own line endings.
            with target.open("w", encoding="utf-8", newline="") as fh:
                fh.write(text)
        except OSError as exc:
            raise StorageError(path, str(exc)) from exc

    def _create(self, path: str, text: str) -> NoteInfo:
        target = self.resolve(path)
        if target.exists():
            raise StorageError(path, "already exists")
        self._write(path, text)
        return self._info(target)

    def _create_folder(self, path: str) -> None:
        try:
            self.resolve(path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(path, str(exc)) from exc

    def _find_file(self, name: str) -> str | None:
        root = self.root.resolve()
        for path in sorted(root.rglob("*")):
            rel = path.relative_to(root)
            if any(part in _SKIP_DIRS for part in rel.parts):
                continue
            if path.is_file() and path.stem == name:
                return rel.as_posix()
        return None

    # ------------------------------------------------------------------
    # NoteStorage
    # ------------------------------------------------------------------

    async def exists(self, path: str) -> bool:
        return await asyncio.to_thread(lambda: self.resolve(path).exists())

    async def list_notes(self, folder: str) -> list[NoteInfo] | None:
        return await asyncio.to_thread(self._list_notes, folder)

    async def read_note(self, path: str) -> str:
        return await asyncio.to_thread(self._read, path)

    async def write_note(self, path: str, text: str) -> None:
        await asyncio.to_thread(self._write, path, text)

    async def create_note(self, path: str, text: str) -> NoteInfo:
        return await asyncio.to_thread(self._create, path, text)

    async def create_folder(self, path: str) -> None:
        await asyncio.to_thread(self._create_folder, path)

    async def find_file(self, name: str) -> str | None:
        return await asyncio.to_thread(self._find_file, name)
