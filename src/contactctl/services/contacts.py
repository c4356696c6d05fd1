"""ContactService — contact listing, creation, and file linking.

Every operation re-reads the notes it needs; there is no contact cache.
Storage failures are caught here and reported as ``ok=False`` results.
"""

from __future__ import annotations

import logging
from typing import Any

from contactctl.domain.contacts import generate_contact_id, non_text_fields
from contactctl.domain.frontmatter import format_list
from contactctl.domain.links import is_valid_link_target, link_target_from_path
from contactctl.domain.note import inject_link
from contactctl.infrastructure.storage import StorageError
from contactctl.infrastructure.templates import CONTACT_TEMPLATE
from contactctl.services.base import BaseService
from contactctl.services.result import ServiceResult

logger = logging.getLogger(__name__)


def _single_line(value: str) -> str:
    """Frontmatter values must stay on one line."""
    return " ".join(value.splitlines()).strip()


def _valid_id(contact_id: str) -> bool:
    return bool(contact_id) and not any(sep in contact_id for sep in ("/", "\\", ".."))


class ContactService(BaseService):
    """Handles contact notes in the configured contacts folder."""

    # ------------------------------------------------------------------
    # init
    # ------------------------------------------------------------------

    async def ensure_folder(self) -> ServiceResult:
        """Create the contacts folder if it does not exist yet."""
        folder = self._vault.contacts_folder
        storage = self._vault.storage
        data = {"vault": self._vault.settings.vault.name, "folder": folder, "created": False}
        try:
            if await storage.exists(folder):
                return ServiceResult(ok=True, op="init", data=data)
            await storage.create_folder(folder)
        except StorageError as exc:
            return ServiceResult.failure("init", "WRITE_FAILED", str(exc), folder=folder)

        logger.info("Created contacts folder %s", folder)
        return ServiceResult(ok=True, op="init", data={**data, "created": True})

    # ------------------------------------------------------------------
    # list / show
    # ------------------------------------------------------------------

    async def list_contacts(self, *, search: str | None = None) -> ServiceResult:
        """List all contacts, optionally filtered by a name substring."""
        try:
            contacts, warnings = await self._load_contacts()
        except StorageError as exc:
            return ServiceResult.failure("list_contacts", "READ_FAILED", str(exc))

        contacts = contacts or []
        if search:
            contacts = [contact for contact in contacts if contact.matches(search)]

        items = [contact.model_dump(mode="json") for contact in contacts]
        return ServiceResult(
            ok=True,
            op="list_contacts",
            data={"count": len(items), "items": items},
            warnings=warnings,
        )

    async def get_contact(self, contact_id: str) -> ServiceResult:
        """Return a single contact by id."""
        try:
            contacts, warnings = await self._load_contacts()
        except StorageError as exc:
            return ServiceResult.failure("get_contact", "READ_FAILED", str(exc))

        for contact in contacts or []:
            if contact.id == contact_id:
                return ServiceResult(
                    ok=True,
                    op="get_contact",
                    data=contact.model_dump(mode="json"),
                    warnings=warnings,
                )
        return ServiceResult.failure(
            "get_contact",
            "NOT_FOUND",
            f"Contact '{contact_id}' not found",
            contact_id=contact_id,
        )

    # ------------------------------------------------------------------
    # create
    # ------------------------------------------------------------------

    async def create_contact(
        self,
        name: str,
        *,
        email: str = "",
        phone: str = "",
        company: str = "",
        title: str = "",
        notes: str = "",
        tags: list[str] | None = None,
        links: list[str] | None = None,
    ) -> ServiceResult:
        """Create a contact note from the contact template.

        The id is derived from *name* once, here, and becomes the file name.
        """
        op = "create_contact"
        config = self._vault.contacts_config
        name = _single_line(name)
        contact_id = generate_contact_id(name, max_length=config.max_id_length)
        if not contact_id:
            return ServiceResult.failure(op, "INVALID_NAME", f"Cannot derive an id from {name!r}")

        path = self._vault.contact_path(contact_id)
        link_names: list[str] = []
        for link in links or []:
            target = link_target_from_path(link)
            if not target:
                continue
            if not is_valid_link_target(target):
                return ServiceResult.failure(op, "INVALID_NAME", f"Invalid link target {target!r}")
            if target not in link_names:
                link_names.append(target)

        context: dict[str, Any] = {
            "name": name,
            "email": _single_line(email),
            "phone": _single_line(phone),
            "company": _single_line(company),
            "title": _single_line(title),
            "notes": notes,
            "tags": [_single_line(tag) for tag in tags or [] if tag.strip()],
            "links": link_names,
            "links_array": format_list(link_names),
            "linked_files_heading": config.linked_files_heading,
        }
        text = self._vault.templates.get_template(CONTACT_TEMPLATE).render(**context)
        warnings = [
            f"{field} {context[field]!r} will not read back as text"
            for field in non_text_fields(text)
        ]

        storage = self._vault.storage
        try:
            if await storage.exists(path):
                return ServiceResult.failure(
                    op,
                    "ALREADY_EXISTS",
                    f"A contact with the id '{contact_id}' already exists",
                    contact_id=contact_id,
                )
            await storage.create_folder(self._vault.contacts_folder)
            await storage.create_note(path, text)
        except StorageError as exc:
            return ServiceResult.failure(op, "WRITE_FAILED", str(exc), path=path)

        logger.info("Created contact %s at %s", contact_id, path)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": contact_id, "name": name, "path": path, "links": link_names},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # link
    # ------------------------------------------------------------------

    async def link_file(self, contact_id: str, file_path: str) -> ServiceResult:
        """Link a vault file to a contact note.

        Adds the file's base name to the note's ``links`` entry and under
        its Linked Files heading. Returns ``status: already_linked``
        without writing when the note already links the file.
        """
        op = "link_file"
        config = self._vault.contacts_config
        storage = self._vault.storage
        target = link_target_from_path(file_path)
        if not target:
            return ServiceResult.failure(op, "INVALID_NAME", f"No file name in {file_path!r}")
        if not is_valid_link_target(target):
            return ServiceResult.failure(op, "INVALID_NAME", f"Invalid link target {target!r}")
        if not _valid_id(contact_id):
            return ServiceResult.failure(op, "INVALID_NAME", f"Invalid contact id {contact_id!r}")

        path = self._vault.contact_path(contact_id)
        try:
            if not await storage.exists(path):
                return ServiceResult.failure(
                    op,
                    "NOT_FOUND",
                    f"Contact with ID '{contact_id}' not found",
                    contact_id=contact_id,
                )
            if config.require_existing_file and await storage.find_file(target) is None:
                return ServiceResult.failure(
                    op,
                    "FILE_NOT_FOUND",
                    f"File '{target}' not found in vault",
                    file=target,
                )
            text = await storage.read_note(path)
        except StorageError as exc:
            return ServiceResult.failure(op, "READ_FAILED", str(exc), path=path)

        injection = inject_link(text, target, heading=config.linked_files_heading)
        data: dict[str, Any] = {
            "id": contact_id,
            "file": target,
            "path": path,
            "status": injection.status,
            "links": injection.links,
        }
        if injection.status == "already_linked":
            return ServiceResult(ok=True, op=op, data=data)
        if injection.status == "unsupported_format":
            return ServiceResult.failure(
                op,
                "UNSUPPORTED_FORMAT",
                "The links entry spans several lines; only the single-line bracketed form is supported",
                path=path,
            )

        try:
            await storage.write_note(path, injection.text)
        except StorageError as exc:
            return ServiceResult.failure(op, "WRITE_FAILED", str(exc), path=path)

        logger.info("Linked %s to contact %s", target, contact_id)
        return ServiceResult(ok=True, op=op, data=data)
