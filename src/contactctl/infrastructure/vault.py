"""Vault — the single dependency injected into every service.

Bundles the resolved settings, the note storage, and the template
environment. The vault holds no contact state of its own: contacts are
re-read from storage by each operation.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from contactctl.infrastructure.storage import NOTE_SUFFIX, FileSystemStorage, NoteStorage
from contactctl.infrastructure.templates import build_template_environment

if TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Environment

    from contactctl.config.models import ContactsConfig, GraphConfig
    from contactctl.config.settings import ContactSettings

logger = logging.getLogger(__name__)


class Vault:
    """Settings + storage for one vault root."""

    def __init__(self, settings: ContactSettings, *, storage: NoteStorage | None = None) -> None:
        self._settings = settings
        self._storage = storage or FileSystemStorage(settings.vault_root)
        self._templates: Environment | None = None
        logger.debug("Vault opened at %s", settings.vault_root)

    @property
    def root(self) -> Path:
        return self._settings.vault_root

    @property
    def settings(self) -> ContactSettings:
        return self._settings

    @property
    def storage(self) -> NoteStorage:
        return self._storage

    @property
    def contacts_config(self) -> ContactsConfig:
        return self._settings.contacts

    @property
    def graph_config(self) -> GraphConfig:
        return self._settings.graph

    @property
    def templates(self) -> Environment:
        """Jinja2 environment (built lazily on first access)."""
        if self._templates is None:
            self._templates = build_template_environment(vault_root=self.root)
        return self._templates

    @property
    def contacts_folder(self) -> str:
        return PurePosixPath(self.contacts_config.folder).as_posix()

    def contact_path(self, contact_id: str) -> str:
        """Vault-relative path of the note for *contact_id*."""
        return f"{self.contacts_folder}/{contact_id}{NOTE_SUFFIX}"
