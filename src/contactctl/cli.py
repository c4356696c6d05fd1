"""Root CLI group for contactctl with global flags and command registration."""

from __future__ import annotations

import click

from contactctl import __version__
from contactctl.commands import register_commands
from contactctl.commands._context import AppContext
from contactctl.config.settings import ContactSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="contactctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """contactctl — contacts and file links in a Markdown vault."""
    ctx.ensure_object(dict)
    settings = ContactSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
