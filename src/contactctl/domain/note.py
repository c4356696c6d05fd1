"""Line-structured note editing and link injection.

A note is held as its list of physical lines (line endings kept) plus the
position of the frontmatter sentinels. Edits replace or insert whole
lines, so every line they do not address is reproduced byte for byte
when the note is rendered again.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Literal

from contactctl.domain.frontmatter import (
    FRONTMATTER_DELIMITER,
    ListValue,
    TextValue,
    find_frontmatter_span,
    format_list,
    parse_frontmatter,
)
from contactctl.domain.links import LINKED_FILES_HEADING, has_wikilink, is_valid_link_target

InjectionStatus = Literal["linked", "already_linked", "unsupported_format"]


def _line_ending(line: str) -> str:
    if line.endswith("\r\n"):
        return "\r\n"
    if line.endswith("\n"):
        return "\n"
    return ""


@dataclass
class NoteDocument:
    """Mutable line view of a note."""

    lines: list[str]
    newline: str = "\n"

    @classmethod
    def parse(cls, text: str) -> NoteDocument:
        lines = text.splitlines(keepends=True)
        newline = _line_ending(lines[0]) if lines else ""
        return cls(lines=lines, newline=newline or "\n")

    def render(self) -> str:
        return "".join(self.lines)

    @property
    def frontmatter_span(self) -> tuple[int, int] | None:
        return find_frontmatter_span(self.lines)

    @property
    def body_start(self) -> int:
        span = self.frontmatter_span
        return 0 if span is None else span[1] + 1

    # ------------------------------------------------------------------
    # Frontmatter edits
    # ------------------------------------------------------------------

    def find_key(self, key: str) -> int | None:
        """Return the index of the last frontmatter line defining *key*."""
        span = self.frontmatter_span
        if span is None:
            return None
        found: int | None = None
        for i in range(span[0] + 1, span[1]):
            name, sep, _ = self.lines[i].partition(":")
            if sep and name.strip() == key:
                found = i
        return found

    def has_multiline_value(self, key: str) -> bool:
        """True when the value of *key* continues past its own line.

        Covers YAML block lists (an empty value followed by indented or
        ``-`` lines) and flow lists whose ``[`` is not closed on that line.
        """
        idx = self.find_key(key)
        span = self.frontmatter_span
        if idx is None or span is None:
            return False
        value = self.lines[idx].partition(":")[2].strip()
        if value:
            return value.startswith("[") and not value.endswith("]")
        nxt = idx + 1
        return nxt < span[1] and self.lines[nxt][:1] in (" ", "\t", "-")

    def set_value(self, key: str, raw_value: str) -> None:
        """Set ``key: raw_value`` in the frontmatter block.

        An existing line keeps its key text, colon and spacing; only the
        value segment changes. A missing key is inserted just before the
        closing sentinel. A note without frontmatter gets a new block.
        """
        idx = self.find_key(key)
        if idx is not None:
            line = self.lines[idx]
            ending = _line_ending(line)
            head, _, rest = line[: len(line) - len(ending)].partition(":")
            spacing = rest[: len(rest) - len(rest.lstrip())] or " "
            self.lines[idx] = f"{head}:{spacing}{raw_value}{ending or self.newline}"
            return

        entry = f"{key}: {raw_value}{self.newline}"
        span = self.frontmatter_span
        if span is not None:
            self.lines.insert(span[1], entry)
            return

        nl = self.newline
        self.lines[0:0] = [f"{FRONTMATTER_DELIMITER}{nl}", entry, f"{FRONTMATTER_DELIMITER}{nl}"]

    # ------------------------------------------------------------------
    # Body edits
    # ------------------------------------------------------------------

    def find_heading(self, heading: str) -> int | None:
        for i in range(self.body_start, len(self.lines)):
            if self.lines[i].strip() == heading:
                return i
        return None

    def _terminate(self, idx: int) -> None:
        if not _line_ending(self.lines[idx]):
            self.lines[idx] += self.newline

    def insert_after(self, idx: int, text: str) -> None:
        """Insert a new line directly below line *idx*."""
        self._terminate(idx)
        self.lines.insert(idx + 1, text + self.newline)

    def append_section(self, heading: str, text: str) -> None:
        """Append *heading* and a first line under it at the end of the note."""
        if self.lines:
            self._terminate(len(self.lines) - 1)
            self.lines.append(self.newline)
        self.lines.append(heading + self.newline)
        self.lines.append(text + self.newline)


# ---------------------------------------------------------------------------
# Link injection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LinkInjection:
    """Outcome of :func:`inject_link`."""

    status: InjectionStatus
    text: str
    links: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.status == "linked"


def existing_links(text: str) -> list[str]:
    """Read the frontmatter ``links`` entry in any of its accepted shapes.

    A list value is used directly. A text value is parsed as a JSON array
    first and, failing that, split on commas.
    """
    fm = parse_frontmatter(text)
    if fm is None:
        return []
    value = fm.get("links")
    if isinstance(value, ListValue):
        return [item for item in value.items if item]
    if isinstance(value, TextValue):
        try:
            loaded = json.loads(value.value)
        except ValueError:
            loaded = None
        if isinstance(loaded, list):
            return [str(item).strip() for item in loaded if str(item).strip()]
        return [part.strip() for part in value.value.split(",") if part.strip()]
    return []


def inject_link(
    text: str,
    target: str,
    *,
    heading: str = LINKED_FILES_HEADING,
) -> LinkInjection:
    """Add *target* to a note's ``links`` entry and Linked Files section.

    *target* must already be a bare note name. Returns status
    ``already_linked`` with the text untouched when any ``[[target]]`` or
    ``[[target|...]]`` token exists, and ``unsupported_format`` when
    ``links`` spans several lines.

    Surrounding whitespace is trimmed from *target*. Raises ValueError when
    it is empty or contains ``|``, ``[[`` or ``]]``.
    """
    target = target.strip()
    if not is_valid_link_target(target):
        msg = f"Invalid link target: {target!r}"
        raise ValueError(msg)

    if has_wikilink(text, target):
        return LinkInjection(status="already_linked", text=text, links=existing_links(text))

    doc = NoteDocument.parse(text)
    if doc.has_multiline_value("links"):
        return LinkInjection(status="unsupported_format", text=text)

    links = existing_links(text)
    if target not in links:
        links.append(target)
    doc.set_value("links", format_list(links))

    bullet = f"- [[{target}]]"
    heading_idx = doc.find_heading(heading)
    if heading_idx is not None:
        doc.insert_after(heading_idx, bullet)
    else:
        doc.append_section(heading, bullet)

    return LinkInjection(status="linked", text=doc.render(), links=links)
