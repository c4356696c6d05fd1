"""Subcommand modules for contactctl.

Provides register_commands() which defers imports until registration so
``contactctl --help`` does not pull in the service layer eagerly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the command groups and standalone commands on the root group."""
    # --- Groups ---
    from contactctl.commands.contact import contact
    from contactctl.commands.graph import graph

    cli.add_command(contact)
    cli.add_command(graph)

    # --- Standalone commands ---
    from contactctl.commands.init_cmd import init_cmd

    cli.add_command(init_cmd)
