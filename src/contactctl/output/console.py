"""Rich Console factory and theme for contactctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CONTACT_THEME = Theme(
    {
        "cc.ok": "bold green",
        "cc.error": "bold red",
        "cc.op": "bold cyan",
        "cc.key": "dim",
        "cc.id": "bold blue",
        "cc.path": "dim",
        "cc.name": "bold",
        "cc.kind.contact": "blue",
        "cc.kind.file": "green",
        "cc.score": "magenta",
    }
)

_KIND_STYLES: dict[str, str] = {
    "contact": "cc.kind.contact",
    "file": "cc.kind.file",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=CONTACT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Return the Rich style name for a graph node kind."""
    return _KIND_STYLES.get(kind, "")
