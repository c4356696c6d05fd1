"""Command group: contact notes (create, list, show, link)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from contactctl.commands._base import ContactGroup
from contactctl.domain.contacts import parse_tags
from contactctl.services.contacts import ContactService

if TYPE_CHECKING:
    from contactctl.commands._context import AppContext

_CONTACT_EXAMPLES = """\
  contactctl contact create "Jane Doe" --email jane@example.com --company Acme
  contactctl contact list --search jane
  contactctl contact show jane-doe
  contactctl contact link jane-doe "Projects/Q3 Plan.md"
  contactctl --json contact list"""


@click.group(cls=ContactGroup, examples=_CONTACT_EXAMPLES)
@click.pass_obj
def contact(app: AppContext) -> None:
    """Create, list, and link contact notes."""


@contact.command(
    examples="""\
  contactctl contact create "Jane Doe"
  contactctl contact create "Jane Doe" --email jane@example.com --tags "client, design"
  contactctl contact create "Bob Smith" --link "Meeting Notes.md" --link Roadmap"""
)
@click.argument("name")
@click.option("--email", default="", help="Email address.")
@click.option("--phone", default="", help="Phone number.")
@click.option("--company", default="", help="Company or organization.")
@click.option("--title", default="", help="Job title.")
@click.option("--notes", default="", help="Free-text notes for the Notes section.")
@click.option("--tags", default=None, help="Comma-separated tags.")
@click.option("--link", "links", multiple=True, help="File to link (repeatable).")
@click.pass_obj
def create(
    app: AppContext,
    name: str,
    email: str,
    phone: str,
    company: str,
    title: str,
    notes: str,
    tags: str | None,
    links: tuple[str, ...],
) -> None:
    """Create a contact note named after NAME."""
    app.run(
        ContactService(app.vault).create_contact(
            name,
            email=email,
            phone=phone,
            company=company,
            title=title,
            notes=notes,
            tags=parse_tags(tags) if tags else None,
            links=list(links),
        )
    )


@contact.command(
    "list",
    examples="""\
  contactctl contact list
  contactctl contact list --search acme
  contactctl -q contact list""",
)
@click.option("--search", default=None, help="Case-insensitive name filter.")
@click.pass_obj
def list_cmd(app: AppContext, search: str | None) -> None:
    """List contacts in the contacts folder."""
    app.run(ContactService(app.vault).list_contacts(search=search))


@contact.command(
    examples="""\
  contactctl contact show jane-doe
  contactctl --json contact show jane-doe"""
)
@click.argument("contact_id")
@click.pass_obj
def show(app: AppContext, contact_id: str) -> None:
    """Show a single contact."""
    app.run(ContactService(app.vault).get_contact(contact_id))


@contact.command(
    examples="""\
  contactctl contact link jane-doe "Projects/Q3 Plan.md"
  contactctl contact link jane-doe Roadmap
  contactctl --json contact link bob-smith notes/kickoff.md"""
)
@click.argument("contact_id")
@click.argument("file_path")
@click.pass_obj
def link(app: AppContext, contact_id: str, file_path: str) -> None:
    """Link the file at FILE_PATH to a contact."""
    app.run(ContactService(app.vault).link_file(contact_id, file_path))
