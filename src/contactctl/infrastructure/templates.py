"""Shared Jinja2 template loading with per-vault override support."""

from __future__ import annotations

from pathlib import Path

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader

CONTACT_TEMPLATE = "contact.md.j2"


def build_template_environment(*, vault_root: Path | None = None) -> Environment:
    """Build a Jinja2 environment with user overrides before packaged defaults.

    User overrides are loaded from ``.contactctl/templates/`` inside the
    vault, so a vault can reshape new contact notes without touching the
    package.
    """

    loaders: list[BaseLoader] = []
    if vault_root is not None:
        loaders.append(FileSystemLoader(str(vault_root / ".contactctl" / "templates")))

    loaders.append(PackageLoader("contactctl", "templates"))
    return Environment(loader=ChoiceLoader(loaders), keep_trailing_newline=True)
