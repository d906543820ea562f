"""Root CLI group for pkgcost with global flags and command registration."""

from __future__ import annotations

import click

from pkgcost import __version__
from pkgcost.commands import register_commands
from pkgcost.commands._base import PkgGroup
from pkgcost.commands._context import AppContext
from pkgcost.config.settings import PkgCostSettings


@click.group(
    cls=PkgGroup,
    invoke_without_command=True,
    examples="""
        pkgcost analyze github.com/spf13/cobra
        pkgcost --json analyze ./...
        pkgcost classify fmt C github.com/spf13/cobra
    """,
)
@click.version_option(version=__version__, prog_name="pkgcost")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output, no progress on stderr.")
@click.option("-v", "--verbose", is_flag=True, help="Progress logs, local costs, and timings.")
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
    """pkgcost — what does a Go package really pull in?"""
    ctx.ensure_object(dict)
    settings = PkgCostSettings.from_cli(
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
