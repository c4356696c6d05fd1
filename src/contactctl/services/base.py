"""BaseService — abstract foundation for all contactctl services.

Every service receives a :class:`Vault` at construction time. The vault
provides storage access and the resolved configuration sections.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import structlog

from contactctl.domain.contacts import Contact, build_contact, non_text_fields
from contactctl.infrastructure.storage import StorageError

if TYPE_CHECKING:
    from contactctl.infrastructure.vault import Vault

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Subclasses implement domain-specific operations using the vault for
    all data access.

    Usage::

        class ContactService(BaseService):
            async def list_contacts(self) -> ServiceResult:
                contacts, warnings = await self._load_contacts()
                ...
    """

    def __init__(self, vault: Vault) -> None:
        self._vault = vault

    async def _load_contacts(self) -> tuple[list[Contact] | None, list[str]]:
        """Read every contact note in the contacts folder.

        Notes are read one at a time. A note that cannot be read is logged
        and skipped with a warning; the others are still returned. Returns
        ``(None, warnings)`` when the folder itself does not exist.
        """
        log = structlog.get_logger("contactctl.contacts")
        storage = self._vault.storage
        folder = self._vault.contacts_folder
        heading = self._vault.contacts_config.linked_files_heading
        warnings: list[str] = []

        notes = await storage.list_notes(folder)
        if notes is None:
            warnings.append(f"Contacts folder not found: {folder}")
            return None, warnings

        contacts: list[Contact] = []
        for info in notes:
            try:
                text = await storage.read_note(info.path)
            except StorageError as exc:
                log.warning("contact_read_failed", path=info.path, error=str(exc))
                warnings.append(f"Skipped unreadable note {info.path}")
                continue
            contact = build_contact(
                info.id,
                text,
                created=info.created,
                modified=info.modified,
                heading=heading,
            )
            if contact is None:
                continue
            ignored = non_text_fields(text)
            if ignored:
                log.warning("contact_fields_ignored", path=info.path, fields=ignored)
                warnings.append(f"Ignored non-text {', '.join(ignored)} in {info.path}")
            contacts.append(contact)

        logger.debug("Loaded %d contacts from %s", len(contacts), folder)
        return contacts, warnings
