"""Subcommand modules for pkgcost.

Provides register_commands() which uses deferred imports to keep
``pkgcost --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from pkgcost.commands.analyze import analyze
    from pkgcost.commands.inspect import classify, resolve

    cli.add_command(analyze)
    cli.add_command(resolve)
    cli.add_command(classify)
