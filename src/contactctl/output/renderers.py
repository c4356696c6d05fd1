"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from contactctl.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from contactctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items") or result.data.get("nodes")
    if items and isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    if isinstance(item, dict):
        val = item.get("id")
        if val is not None:
            return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="cc.ok")
    op = Text(f"  {result.op}", style="cc.op")
    console.print(Text.assemble(label, op))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="cc.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="cc.id")
    elif key == "path":
        v = Text(str(value), style="cc.path")
    elif key == "name":
        v = Text(str(value), style="cc.name")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="cc.error")
    op = Text(f"  {result.op}", style="cc.op")
    sep = Text(" — ")
    console.print(Text.assemble(label, op, sep, msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Contact renderers ─────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render init/create/link results."""
    _status_line(console, result)
    for key in ("id", "name", "file", "status", "path", "vault", "folder", "created"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose and "links" in result.data:
        _field(console, "links", result.data["links"])


def _render_contact_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="cc.id", no_wrap=True)
    table.add_column("Name", style="cc.name")
    table.add_column("Email")
    table.add_column("Company")
    table.add_column("Links", justify="right")
    if verbose:
        table.add_column("Tags")
        table.add_column("Modified", style="dim")

    for item in items:
        row = [
            str(item.get("id", "")),
            str(item.get("name", "")),
            str(item.get("email", "")),
            str(item.get("company", "")),
            str(len(item.get("links", []))),
        ]
        if verbose:
            row.append(", ".join(item.get("tags", [])))
            row.append(str(item.get("modified", "")))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} contacts")


def _render_contact(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a single contact as a panel."""
    d = result.data
    lines: list[str] = []
    for key in ("email", "phone", "company", "title"):
        if d.get(key):
            lines.append(f"{key}: {d[key]}")
    if d.get("tags"):
        lines.append(f"tags: {', '.join(d['tags'])}")
    if verbose:
        for key in ("created", "modified"):
            if d.get(key):
                lines.append(f"{key}: {d[key]}")
    if d.get("notes"):
        lines.append(f"\n{d['notes']}")
    if d.get("links"):
        lines.append("\nLinked Files:")
        lines.extend(f"  - {link}" for link in d["links"])

    title = f"{d.get('id', '?')} — {d.get('name', '')}"
    console.print(Panel(Text("\n".join(lines) or "(no details)"), title=title, expand=False))


# ── Graph renderers ───────────────────────────────────────────────────


def _node_table(nodes: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Node", style="cc.id", no_wrap=True)
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Size", justify="right")
    for node in nodes:
        kind = str(node.get("kind", ""))
        table.add_row(
            str(node.get("id", "")),
            str(node.get("display_name", "")),
            Text(kind, style=style_for_kind(kind)),
            f"{float(node.get('size', 0)):.1f}",
        )
    return table


def _edge_table(edges: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Source", style="cc.id", no_wrap=True)
    table.add_column("Target", style="cc.id", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Strength", style="cc.score", justify="right")
    for edge in edges:
        table.add_row(
            str(edge.get("source_id", "")),
            str(edge.get("target_id", "")),
            str(edge.get("kind", "")),
            f"{float(edge.get('strength', 0)):.2f}",
        )
    return table


def _render_graph(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    nodes = result.data.get("nodes", [])
    edges = result.data.get("edges", [])
    console.print(_node_table(nodes))
    console.print()
    console.print(_edge_table(edges))
    console.print(f"\n{len(nodes)} nodes, {len(edges)} edges")


def _render_graph_search(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    console.print(_node_table(items))
    if verbose:
        console.print()
        console.print(_edge_table(result.data.get("edges", [])))
    console.print(f"\n{result.data.get('count', len(items))} matches for {result.data.get('term')!r}")


def _render_rank(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Node", style="cc.id", no_wrap=True)
    table.add_column("Name", style="cc.name")
    table.add_column("Degree", justify="right")
    table.add_column("Score", style="cc.score", justify="right")
    for item in items:
        table.add_row(
            str(item.get("id", "")),
            str(item.get("name", "")),
            str(item.get("degree", "")),
            f"{float(item.get('score', 0)):.4f}",
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} results")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "init": _render_mutation,
    "create_contact": _render_mutation,
    "link_file": _render_mutation,
    "list_contacts": _render_contact_table,
    "get_contact": _render_contact,
    "graph": _render_graph,
    "graph_search": _render_graph_search,
    "rank": _render_rank,
    "graph_summary": _render_generic,
}
