"""Contact model, contact ids, and the record builder.

A contact is a Markdown note whose frontmatter carries ``contact: true``.
Contacts are rebuilt from note text on every read; the text is the only
source of truth.

INVARIANT: A contact id is derived once, when the note is created, and
becomes the note's file name. It is never recomputed from the display
name afterwards.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import datetime

from pydantic import BaseModel, Field

from contactctl.domain.frontmatter import TextValue, parse_frontmatter
from contactctl.domain.links import LINKED_FILES_HEADING, extract_contact_links

DEFAULT_MAX_ID_LENGTH = 50

# Optional text fields copied verbatim from frontmatter.
TEXT_FIELDS: tuple[str, ...] = ("email", "phone", "company", "title", "notes")


class Contact(BaseModel):
    """A contact record parsed from a note."""

    model_config = {"frozen": True}

    id: str
    name: str
    email: str = ""
    phone: str = ""
    company: str = ""
    title: str = ""
    notes: str = ""
    links: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    created: datetime | None = None
    modified: datetime | None = None

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on the display name."""
        return term.lower() in self.name.lower()


def generate_contact_id(name: str, *, max_length: int = DEFAULT_MAX_ID_LENGTH) -> str:
    """Derive a slug id from a display name.

    Lowercases, applies NFKC normalization, drops punctuation, joins
    words with hyphens and truncates to *max_length* characters.

    Examples:
        >>> generate_contact_id("Jane Doe")
        'jane-doe'
        >>> generate_contact_id("Dr. J. O'Neil, PhD")
        'dr-j-oneil-phd'
    """
    text = unicodedata.normalize("NFKC", name.lower())
    text = re.sub(r"[^\w\s]", "", text).strip()
    text = re.sub(r"\s+", "-", text)
    return text[:max_length]


def parse_tags(value: list[str] | str | None) -> list[str]:
    """Normalize a ``tags`` value: lists pass through, strings split on commas."""
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    return []


def build_contact(
    note_id: str,
    text: str,
    *,
    created: datetime | None = None,
    modified: datetime | None = None,
    heading: str = LINKED_FILES_HEADING,
) -> Contact | None:
    """Build a :class:`Contact` from a note, or None if it is not a contact.

    Notes without frontmatter, or whose ``contact`` field is not the
    boolean ``true``, contribute nothing.
    """
    fm = parse_frontmatter(text)
    if fm is None or not fm.flag("contact"):
        return None

    tags_value = fm.items_of("tags")
    return Contact(
        id=note_id,
        name=fm.text("name").strip() or note_id,
        links=extract_contact_links(fm, text, heading=heading),
        tags=parse_tags(tags_value if tags_value is not None else fm.text("tags")),
        created=created,
        modified=modified,
        **{key: fm.text(key) for key in TEXT_FIELDS},
    )


def non_text_fields(text: str) -> list[str]:
    """Name the contact fields whose value did not parse as plain text.

    A display name written as ``true`` or ``[VIP]`` reads back as a
    boolean or list, so :func:`build_contact` ignores it.
    """
    fm = parse_frontmatter(text)
    if fm is None:
        return []
    return [
        key
        for key in ("name", *TEXT_FIELDS)
        if key in fm and not isinstance(fm[key], TextValue)
    ]
