"""Restricted frontmatter parsing and rendering.

Contact notes carry a small ``key: value`` header between ``---`` lines.
This is deliberately not YAML: each entry is a single line and each value
is one of three shapes, modelled as a tagged variant:

- ``BoolValue``  — the literals ``true`` / ``false``
- ``ListValue``  — a bracketed, comma-separated list (``["a", "b"]``)
- ``TextValue``  — anything else, kept verbatim after trimming

Multi-line YAML constructs (block lists, nested maps) are not supported.
Their continuation lines carry no colon-separated key of their own and
are therefore ignored by the parser rather than misread.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TypeAlias

FRONTMATTER_DELIMITER = "---"


# ---------------------------------------------------------------------------
# Value variant
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BoolValue:
    """A ``true`` / ``false`` literal."""

    value: bool


@dataclass(frozen=True)
class ListValue:
    """A bracketed list of strings."""

    items: tuple[str, ...] = ()


@dataclass(frozen=True)
class TextValue:
    """A plain string value (also the fallback for malformed lists)."""

    value: str


FrontmatterValue: TypeAlias = BoolValue | ListValue | TextValue


class Frontmatter(dict[str, FrontmatterValue]):
    """Ordered ``key -> FrontmatterValue`` mapping with typed accessors."""

    def text(self, key: str, default: str = "") -> str:
        """Return the string value of *key*, or *default* for any other shape."""
        value = self.get(key)
        if isinstance(value, TextValue):
            return value.value
        return default

    def flag(self, key: str) -> bool:
        """Return True only when *key* holds the boolean literal ``true``."""
        value = self.get(key)
        return isinstance(value, BoolValue) and value.value

    def items_of(self, key: str) -> list[str] | None:
        """Return the list value of *key*, or None when it is not a list."""
        value = self.get(key)
        if isinstance(value, ListValue):
            return list(value.items)
        return None


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def find_frontmatter_span(lines: list[str]) -> tuple[int, int] | None:
    """Return ``(open_idx, close_idx)`` of the sentinel lines, or None.

    The opening sentinel must be the very first line. Lines may still
    carry their line endings (``str.splitlines(keepends=True)``).
    """
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return None
    for i in range(1, len(lines)):
        if lines[i].strip() == FRONTMATTER_DELIMITER:
            return 0, i
    return None


def _unquote(item: str) -> str:
    if len(item) >= 2 and item[0] == item[-1] and item[0] in "\"'":
        return item[1:-1]
    return item


def _parse_list(raw: str) -> list[str] | None:
    """Parse a bracketed list; None means the brackets are malformed."""
    try:
        loaded = json.loads(raw)
    except ValueError:
        loaded = None
    if isinstance(loaded, list) and all(isinstance(item, str) for item in loaded):
        return [item.strip() for item in loaded]

    inner = raw[1:-1].strip()
    if not inner:
        return []
    if "[" in inner or "]" in inner:
        return None
    return [_unquote(part.strip()) for part in inner.split(",")]


def parse_value(raw: str) -> FrontmatterValue:
    """Interpret a trimmed raw value as bool, list, or text."""
    if raw == "true":
        return BoolValue(True)
    if raw == "false":
        return BoolValue(False)
    if raw.startswith("[") and raw.endswith("]"):
        items = _parse_list(raw)
        if items is None:
            return TextValue(raw)
        return ListValue(tuple(items))
    return TextValue(raw)


def parse_frontmatter(content: str) -> Frontmatter | None:
    """Parse the leading frontmatter block of *content*.

    Returns None when the text does not open with a sentinel-delimited
    block. Callers treat that as "not a contact note", never as an error.
    Lines without a colon are skipped; for repeated keys the last wins.
    """
    lines = content.splitlines()
    span = find_frontmatter_span(lines)
    if span is None:
        return None

    open_idx, close_idx = span
    fm = Frontmatter()
    for line in lines[open_idx + 1 : close_idx]:
        if not line.strip():
            continue
        key, sep, raw = line.partition(":")
        if not sep:
            continue
        fm[key.strip()] = parse_value(raw.strip())
    return fm


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def format_list(items: list[str] | tuple[str, ...]) -> str:
    """Render a list value as ``["a", "b"]``."""
    return json.dumps(list(items), ensure_ascii=False)


def render_value(value: FrontmatterValue) -> str:
    """Render a single value in the form :func:`parse_value` reads back."""
    if isinstance(value, BoolValue):
        return "true" if value.value else "false"
    if isinstance(value, ListValue):
        return format_list(value.items)
    return value.value


def render_frontmatter(fm: Frontmatter) -> str:
    """Serialize *fm* as a sentinel-delimited block of ``key: value`` lines."""
    lines = [FRONTMATTER_DELIMITER]
    lines.extend(f"{key}: {render_value(value)}" for key, value in fm.items())
    lines.append(FRONTMATTER_DELIMITER)
    return "\n".join(lines) + "\n"
