"""Link extraction — frontmatter ``links`` plus body wikilinks.

Pure functions, no infrastructure dependencies. Consumed by the contact
builder and by the link-injection mutator in :mod:`contactctl.domain.note`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath

from contactctl.domain.frontmatter import Frontmatter

# [[Target]] or [[Target|Display Text]]; the target may not contain "]]".
_WIKILINK_PATTERN = re.compile(r"\[\[(.+?)\]\]")

# Any Markdown ATX heading closes the Linked Files section.
_HEADING_PATTERN = re.compile(r"^#{1,6}\s")

LINKED_FILES_HEADING = "## Linked Files"

# Wikilink syntax; a target containing these would split or end the link.
_RESERVED_TOKENS = ("|", "[[", "]]")


@dataclass(frozen=True)
class WikiLink:
    """A wikilink extracted from note text."""

    raw: str  # target portion, trimmed
    display: str | None = None  # display text after | if present


def extract_wikilinks(text: str) -> list[WikiLink]:
    """Extract all ``[[wikilinks]]`` from *text*, left to right.

    Handles both ``[[Target]]`` and ``[[Target|Display Text]]`` formats.
    Tokens with an empty target are skipped.
    """
    results: list[WikiLink] = []
    for match in _WIKILINK_PATTERN.finditer(text):
        parts = match.group(1).split("|", 1)
        target = parts[0].strip()
        if not target:
            continue
        display = parts[1].strip() if len(parts) > 1 else None
        results.append(WikiLink(raw=target, display=display))
    return results


def has_wikilink(text: str, target: str) -> bool:
    """Return True if *text* already links to exactly *target*."""
    return any(link.raw == target for link in extract_wikilinks(text))


def linked_files_section(text: str, heading: str = LINKED_FILES_HEADING) -> str | None:
    """Return the text under *heading* up to the next heading, or None."""
    lines = text.splitlines()
    for i, line in enumerate(lines):
        if line.strip() != heading:
            continue
        section: list[str] = []
        for follower in lines[i + 1 :]:
            if _HEADING_PATTERN.match(follower):
                break
            section.append(follower)
        return "\n".join(section)
    return None


def _append_new(links: list[str], candidates: list[str]) -> None:
    for candidate in candidates:
        if candidate and candidate not in links:
            links.append(candidate)


def extract_contact_links(
    frontmatter: Frontmatter | None,
    text: str,
    *,
    heading: str = LINKED_FILES_HEADING,
) -> list[str]:
    """Collect every link target a contact note declares.

    Order: frontmatter ``links`` first, then inline wikilinks anywhere in
    *text* (frontmatter region included), then wikilinks found only in the
    Linked Files section. Duplicates are dropped by exact string match.
    """
    links: list[str] = []
    if frontmatter is not None:
        _append_new(links, frontmatter.items_of("links") or [])

    _append_new(links, [link.raw for link in extract_wikilinks(text)])

    section = linked_files_section(text, heading)
    if section:
        _append_new(links, [link.raw for link in extract_wikilinks(section)])
    return links


def link_target_from_path(path: str) -> str:
    """Reduce a vault path to the bare note name used in wikilinks.

    ``"Projects/Alpha Plan.md"`` -> ``"Alpha Plan"``.
    """
    return PurePosixPath(path.replace("\\", "/")).stem.strip()


def is_valid_link_target(target: str) -> bool:
    """True when *target* reads back unchanged from a ``[[target]]`` token."""
    return bool(target) and target == target.strip() and not any(
        token in target for token in _RESERVED_TOKENS
    )
