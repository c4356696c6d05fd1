"""Command: contacts folder initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from contactctl.commands._base import ContactCommand
from contactctl.services.contacts import ContactService

if TYPE_CHECKING:
    from contactctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  contactctl init
  contactctl --config ~/notes/contactctl.toml init
  CONTACTCTL_CONTACTS__FOLDER=People contactctl init"""


@click.command("init", cls=ContactCommand, examples=_INIT_EXAMPLES)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the contacts folder in the vault if it is missing."""
    app.run(ContactService(app.vault).ensure_folder())
