"""Tests for ContactService."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from contactctl.config.settings import ContactSettings
from contactctl.domain.frontmatter import parse_frontmatter
from contactctl.infrastructure.storage import NoteInfo, NoteStorage, StorageError
from contactctl.infrastructure.vault import Vault
from contactctl.services.contacts import ContactService


class TestEnsureFolder:
    @pytest.mark.asyncio
    async def test_existing_folder(self, vault: Vault) -> None:
        result = await ContactService(vault).ensure_folder()
        assert result.ok
        assert result.data == {"vault": "my-vault", "folder": "Contacts", "created": False}

    @pytest.mark.asyncio
    async def test_creates_folder(self, vault: Vault, vault_root: Path) -> None:
        (vault_root / "Contacts").rmdir()
        result = await ContactService(vault).ensure_folder()
        assert result.data["created"] is True
        assert (vault_root / "Contacts").is_dir()


class TestCreateContact:
    @pytest.mark.asyncio
    async def test_create(self, vault: Vault, vault_root: Path) -> None:
        result = await ContactService(vault).create_contact(
            "Jane Doe",
            email="jane@example.com",
            company="Acme",
            tags=["client", "design"],
            links=["Projects/Q3 Plan.md", "Roadmap", "Roadmap.md"],
        )
        assert result.ok, result.error
        assert result.data == {
            "id": "jane-doe",
            "name": "Jane Doe",
            "path": "Contacts/jane-doe.md",
            "links": ["Q3 Plan", "Roadmap"],
        }

        text = (vault_root / "Contacts" / "jane-doe.md").read_text()
        fm = parse_frontmatter(text)
        assert fm is not None
        assert fm.flag("contact")
        assert fm.text("email") == "jane@example.com"
        assert fm.items_of("links") == ["Q3 Plan", "Roadmap"]
        assert "- [[Q3 Plan]]\n- [[Roadmap]]" in text

    @pytest.mark.asyncio
    async def test_created_note_reads_back(self, vault: Vault) -> None:
        service = ContactService(vault)
        await service.create_contact("Jane Doe", tags=["vip"], links=["Roadmap"])
        result = await service.get_contact("jane-doe")
        assert result.ok
        assert result.data["name"] == "Jane Doe"
        assert result.data["tags"] == ["vip"]
        assert result.data["links"] == ["Roadmap"]

    @pytest.mark.asyncio
    async def test_duplicate(self, vault: Vault) -> None:
        service = ContactService(vault)
        await service.create_contact("Jane Doe")
        result = await service.create_contact("jane  doe")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "ALREADY_EXISTS"

    @pytest.mark.asyncio
    async def test_invalid_name(self, vault: Vault) -> None:
        result = await ContactService(vault).create_contact("???")
        assert result.error is not None
        assert result.error.code == "INVALID_NAME"

    @pytest.mark.asyncio
    async def test_link_targets_trimmed_and_checked(self, vault: Vault) -> None:
        service = ContactService(vault)
        bad = await service.create_contact("Jane Doe", links=["Roadmap", "a|b"])
        assert bad.error is not None
        assert bad.error.code == "INVALID_NAME"
        ok = await service.create_contact("Jane Doe", links=[" Roadmap ", "Roadmap.md"])
        assert ok.data["links"] == ["Roadmap"]

    @pytest.mark.asyncio
    async def test_boolean_name_warns(self, vault: Vault) -> None:
        result = await ContactService(vault).create_contact("true")
        assert result.ok
        assert result.warnings == ["name 'true' will not read back as text"]

    @pytest.mark.asyncio
    async def test_newlines_flattened(self, vault: Vault) -> None:
        service = ContactService(vault)
        await service.create_contact("Jane Doe", company="Acme\nInc")
        result = await service.get_contact("jane-doe")
        assert result.data["company"] == "Acme Inc"

    @pytest.mark.asyncio
    async def test_creates_missing_folder(self, vault: Vault, vault_root: Path) -> None:
        (vault_root / "Contacts").rmdir()
        result = await ContactService(vault).create_contact("Jane Doe")
        assert result.ok
        assert (vault_root / "Contacts" / "jane-doe.md").is_file()


class TestListContacts:
    @pytest.mark.asyncio
    async def test_list_skips_non_contacts(
        self,
        vault: Vault,
        seed_contact: Callable[..., str],
        write_note: Callable[[str, str], str],
    ) -> None:
        seed_contact("jane-doe", "Jane Doe")
        seed_contact("bob", "Bob Smith")
        write_note("Contacts/readme.md", "# Not a contact\n")

        result = await ContactService(vault).list_contacts()
        assert result.ok
        assert result.data["count"] == 2
        assert [item["id"] for item in result.data["items"]] == ["bob", "jane-doe"]

    @pytest.mark.asyncio
    async def test_search(self, vault: Vault, seed_contact: Callable[..., str]) -> None:
        seed_contact("jane-doe", "Jane Doe")
        seed_contact("bob", "Bob Smith")
        result = await ContactService(vault).list_contacts(search="SMITH")
        assert [item["id"] for item in result.data["items"]] == ["bob"]

    @pytest.mark.asyncio
    async def test_missing_folder_is_a_warning(self, vault: Vault, vault_root: Path) -> None:
        (vault_root / "Contacts").rmdir()
        result = await ContactService(vault).list_contacts()
        assert result.ok
        assert result.data["count"] == 0
        assert result.warnings == ["Contacts folder not found: Contacts"]

    @pytest.mark.asyncio
    async def test_non_text_name_reported(
        self, vault: Vault, write_note: Callable[[str, str], str]
    ) -> None:
        write_note("Contacts/vip.md", "---\ncontact: true\nname: [VIP]\n---\n")
        result = await ContactService(vault).list_contacts()
        assert result.data["items"][0]["name"] == "vip"
        assert result.warnings == ["Ignored non-text name in Contacts/vip.md"]

    @pytest.mark.asyncio
    async def test_unreadable_note_skipped(self, vault: Vault, seed_contact: Callable[..., str]) -> None:
        seed_contact("jane-doe", "Jane Doe")
        (vault.root / "Contacts" / "broken.md").write_bytes(b"---\ncontact: true\n\xff\xfe\n---\n")
        result = await ContactService(vault).list_contacts()
        assert result.ok
        assert [item["id"] for item in result.data["items"]] == ["jane-doe"]
        assert result.warnings == ["Skipped unreadable note Contacts/broken.md"]


class TestGetContact:
    @pytest.mark.asyncio
    async def test_not_found(self, vault: Vault) -> None:
        result = await ContactService(vault).get_contact("nobody")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


class TestLinkFile:
    @pytest.mark.asyncio
    async def test_link(self, vault: Vault, vault_root: Path, seed_contact: Callable[..., str]) -> None:
        seed_contact("jane-doe", "Jane Doe", links='["X"]', body="## Linked Files\n- [[X]]\n")
        result = await ContactService(vault).link_file("jane-doe", "Projects/Y.md")
        assert result.ok, result.error
        assert result.data["status"] == "linked"
        assert result.data["file"] == "Y"
        assert result.data["links"] == ["X", "Y"]

        text = (vault_root / "Contacts" / "jane-doe.md").read_text()
        assert "## Linked Files\n- [[Y]]\n- [[X]]\n" in text

    @pytest.mark.asyncio
    async def test_already_linked_does_not_write(
        self, vault: Vault, vault_root: Path, seed_contact: Callable[..., str]
    ) -> None:
        seed_contact("jane-doe", "Jane Doe", body="Met at [[Y|kickoff]].\n")
        note = vault_root / "Contacts" / "jane-doe.md"
        before = note.read_bytes()
        result = await ContactService(vault).link_file("jane-doe", "Y.md")
        assert result.ok
        assert result.data["status"] == "already_linked"
        assert note.read_bytes() == before

    @pytest.mark.asyncio
    async def test_contact_not_found(self, vault: Vault) -> None:
        result = await ContactService(vault).link_file("nobody", "Y.md")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_invalid_contact_id(self, vault: Vault) -> None:
        result = await ContactService(vault).link_file("../escape", "Y.md")
        assert result.error is not None
        assert result.error.code == "INVALID_NAME"

    @pytest.mark.asyncio
    async def test_empty_file_name(self, vault: Vault, seed_contact: Callable[..., str]) -> None:
        seed_contact("jane-doe", "Jane Doe")
        result = await ContactService(vault).link_file("jane-doe", "")
        assert result.error is not None
        assert result.error.code == "INVALID_NAME"

    @pytest.mark.asyncio
    async def test_require_existing_file(
        self, vault_root: Path, seed_contact: Callable[..., str], write_note: Callable[[str, str], str]
    ) -> None:
        (vault_root / "contactctl.toml").write_text("[contacts]\nrequire_existing_file = true\n")
        v = Vault(ContactSettings.from_cli(vault_root=vault_root))
        seed_contact("jane-doe", "Jane Doe")

        missing = await ContactService(v).link_file("jane-doe", "Ghost.md")
        assert missing.error is not None
        assert missing.error.code == "FILE_NOT_FOUND"

        write_note("Projects/Roadmap.md", "# Roadmap\n")
        found = await ContactService(v).link_file("jane-doe", "Roadmap.md")
        assert found.ok

    @pytest.mark.asyncio
    async def test_multiline_links_rejected(
        self, vault: Vault, vault_root: Path, write_note: Callable[[str, str], str]
    ) -> None:
        text = "---\ncontact: true\nlinks:\n  - X\n---\n"
        write_note("Contacts/jane.md", text)
        result = await ContactService(vault).link_file("jane", "Y.md")
        assert result.error is not None
        assert result.error.code == "UNSUPPORTED_FORMAT"
        assert (vault_root / "Contacts" / "jane.md").read_text() == text

    @pytest.mark.asyncio
    async def test_multiline_flow_list_rejected(
        self, vault: Vault, vault_root: Path, write_note: Callable[[str, str], str]
    ) -> None:
        text = '---\ncontact: true\nlinks: [\n  "X",\n  "Z"\n]\n---\n'
        write_note("Contacts/jane.md", text)
        result = await ContactService(vault).link_file("jane", "Y.md")
        assert result.error is not None
        assert result.error.code == "UNSUPPORTED_FORMAT"
        assert (vault_root / "Contacts" / "jane.md").read_text() == text

    @pytest.mark.asyncio
    async def test_padded_file_name_links_once(
        self, vault: Vault, vault_root: Path, seed_contact: Callable[..., str]
    ) -> None:
        seed_contact("jane-doe", "Jane Doe")
        service = ContactService(vault)
        first = await service.link_file("jane-doe", " Alpha .md")
        assert first.data["file"] == "Alpha"
        second = await service.link_file("jane-doe", " Alpha ")
        assert second.data["status"] == "already_linked"
        text = (vault_root / "Contacts" / "jane-doe.md").read_text()
        assert text.count("- [[Alpha]]") == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("file_path", ["a|b.md", "Projects/a[[b.md", "a]]b"])
    async def test_wikilink_syntax_in_file_name(
        self, vault: Vault, seed_contact: Callable[..., str], file_path: str
    ) -> None:
        seed_contact("jane-doe", "Jane Doe")
        result = await ContactService(vault).link_file("jane-doe", file_path)
        assert result.error is not None
        assert result.error.code == "INVALID_NAME"


class _ReadOnlyStorage(NoteStorage):
    """Storage whose writes always fail."""

    def __init__(self, text: str) -> None:
        self._text = text

    async def exists(self, path: str) -> bool:
        return True

    async def list_notes(self, folder: str) -> list[NoteInfo] | None:
        return []

    async def read_note(self, path: str) -> str:
        return self._text

    async def write_note(self, path: str, text: str) -> None:
        raise StorageError(path, "read-only")

    async def create_note(self, path: str, text: str) -> NoteInfo:
        raise StorageError(path, "read-only")

    async def create_folder(self, path: str) -> None:
        raise StorageError(path, "read-only")

    async def find_file(self, name: str) -> str | None:
        return None


class TestStorageFailures:
    @pytest.mark.asyncio
    async def test_link_write_failure(self, vault_root: Path) -> None:
        storage = _ReadOnlyStorage("---\ncontact: true\n---\n")
        v = Vault(ContactSettings.from_cli(vault_root=vault_root), storage=storage)
        result = await ContactService(v).link_file("jane", "Y.md")
        assert result.error is not None
        assert result.error.code == "WRITE_FAILED"
        assert "read-only" in result.error.message

    @pytest.mark.asyncio
    async def test_create_write_failure(self, vault_root: Path) -> None:
        storage = _ReadOnlyStorage("")

        async def missing(path: str) -> bool:
            return False

        storage.exists = missing  # type: ignore[method-assign]
        v = Vault(ContactSettings.from_cli(vault_root=vault_root), storage=storage)
        result = await ContactService(v).create_contact("Jane Doe")
        assert result.error is not None
        assert result.error.code == "WRITE_FAILED"
