"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Vault initialization, the bridge from
Click's synchronous callbacks to the async services, and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click

from contactctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from collections.abc import Coroutine
    from typing import Any

    from contactctl.config.settings import ContactSettings
    from contactctl.infrastructure.vault import Vault
    from contactctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The vault is lazily created on first use so ``--help`` and
    ``--version`` never touch the filesystem.
    """

    def __init__(self, settings: ContactSettings) -> None:
        self.settings = settings
        self._vault: Vault | None = None

        from contactctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def vault(self) -> Vault:
        """The vault instance (created lazily on first access)."""
        if self._vault is None:
            from contactctl.infrastructure.vault import Vault

            self._vault = Vault(self.settings)
        return self._vault

    def run(self, operation: Coroutine[Any, Any, ServiceResult]) -> None:
        """Drive an async service call to completion and emit its result."""
        self.emit(asyncio.run(operation))

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
