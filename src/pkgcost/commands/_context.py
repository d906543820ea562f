"""AppContext: the object every subcommand receives via ``@click.pass_obj``.

It owns the invocation's settings, builds the :class:`Toolchain` only when
a command first needs it, and turns a ServiceResult into output plus an
exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from pkgcost.config.logging import configure_logging
from pkgcost.output.formatters import OutputSettings, format_result
from pkgcost.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from pkgcost.config.settings import PkgCostSettings
    from pkgcost.infrastructure.toolchain import Toolchain
    from pkgcost.services.result import ServiceResult


class AppContext:
    """Per-invocation state shared by the root group and its subcommands.

    ``--help``, ``--version`` and ``--examples`` never touch the toolchain,
    so they work without ``go`` on PATH or a platform root.
    """

    def __init__(self, settings: PkgCostSettings) -> None:
        self.settings = settings
        self._toolchain: Toolchain | None = None

        configure_logging(
            verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json
        )
        if settings.verbose:
            enable_telemetry()

    def override(self, **sections: dict[str, Any]) -> None:
        """Fold command options into the settings before the toolchain exists."""
        self.settings = self.settings.with_overrides(**sections)
        self._toolchain = None

    @property
    def toolchain(self) -> Toolchain:
        if self._toolchain is None:
            from pkgcost.infrastructure.toolchain import Toolchain

            self._toolchain = Toolchain(self.settings)
        return self._toolchain

    def emit(self, result: ServiceResult) -> None:
        """Print *result*: stdout on success, stderr plus exit code 1 on failure.

        Warnings go to stderr so piped trees stay clean; in ``--json`` mode
        they are already part of the payload.
        """
        output_settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            abbreviations=dict(self.settings.display.abbreviations),
        )
        text = format_result(result, settings=output_settings)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if not output_settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
