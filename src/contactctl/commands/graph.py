"""Command group: contact/file graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from contactctl.commands._base import ContactGroup
from contactctl.services.graph import GraphService

if TYPE_CHECKING:
    from contactctl.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  contactctl graph show
  contactctl graph search acme
  contactctl graph rank --top 10
  contactctl graph summary
  contactctl --json graph show"""


@click.group(cls=ContactGroup, examples=_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Derive and query the contact/file graph."""


@graph.command(
    examples="""\
  contactctl graph show
  contactctl --json graph show > graph.json"""
)
@click.pass_obj
def show(app: AppContext) -> None:
    """Show every node and edge of the graph."""
    app.run(GraphService(app.vault).show())


@graph.command(
    examples="""\
  contactctl graph search jane
  contactctl -v graph search roadmap"""
)
@click.argument("term")
@click.pass_obj
def search(app: AppContext, term: str) -> None:
    """Find nodes whose name contains TERM."""
    app.run(GraphService(app.vault).search(term))


@graph.command(
    examples="""\
  contactctl graph rank
  contactctl graph rank --top 5"""
)
@click.option("--top", default=20, type=int, help="Max results.")
@click.pass_obj
def rank(app: AppContext, top: int) -> None:
    """Rank contacts by degree centrality."""
    app.run(GraphService(app.vault).rank(top=top))


@graph.command(
    examples="""\
  contactctl graph summary
  contactctl --json graph summary"""
)
@click.pass_obj
def summary(app: AppContext) -> None:
    """Count nodes, edges, and connected components."""
    app.run(GraphService(app.vault).summary())
