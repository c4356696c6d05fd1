"""Shared pytest fixtures and test helpers for contactctl tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from contactctl.config.settings import ContactSettings
from contactctl.infrastructure.vault import Vault


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def vault_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary vault directory with an empty contacts folder.

    This is the single source of truth for the vault directory layout.
    All vault-related fixtures (vault, _isolated_vault) build on this.
    """
    monkeypatch.delenv("CONTACTCTL_CONFIG", raising=False)
    (tmp_path / "Contacts").mkdir()
    return tmp_path


@pytest.fixture
def vault(vault_root: Path) -> Vault:
    """Vault with default settings on the temp directory."""
    settings = ContactSettings.from_cli(vault_root=vault_root)
    return Vault(settings)


@pytest.fixture
def _isolated_vault(vault_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp vault root so the CLI resolves an isolated vault.

    Use via ``@pytest.mark.usefixtures("_isolated_vault")`` on command test
    classes. Tests that need the path can also request ``vault_root``.
    """
    monkeypatch.chdir(vault_root)


@pytest.fixture
def write_note(vault_root: Path) -> Callable[[str, str], str]:
    """Write a note under the vault root and return its vault-relative path."""

    def _write(rel_path: str, text: str) -> str:
        target = vault_root / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(text.encode("utf-8"))
        return rel_path

    return _write


@pytest.fixture
def seed_contact(write_note: Callable[[str, str], str]) -> Callable[..., str]:
    """Write a minimal contact note into the contacts folder.

    Returns the vault-relative path. *links* is the raw frontmatter value.
    """

    def _seed(contact_id: str, name: str, *, links: str | None = None, body: str = "") -> str:
        lines = ["---", "contact: true", f"name: {name}"]
        if links is not None:
            lines.append(f"links: {links}")
        lines.append("---")
        return write_note(f"Contacts/{contact_id}.md", "\n".join(lines) + "\n" + body)

    return _seed
