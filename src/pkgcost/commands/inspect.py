"""Commands: inspect single packages (resolver facts, classification)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pkgcost.commands._base import PkgCommand

if TYPE_CHECKING:
    from pkgcost.commands._context import AppContext


@click.command(
    cls=PkgCommand,
    examples="""
        pkgcost resolve github.com/spf13/cobra
        pkgcost -v resolve net/http
        pkgcost --json resolve github.com/acme/api/internal/store
    """,
)
@click.argument("import_path")
@click.pass_obj
def resolve(app: AppContext, import_path: str) -> None:
    """Print what 'go list' reports for IMPORT_PATH."""
    from pkgcost.services.inspect import InspectService

    app.emit(InspectService(app.toolchain).resolve(import_path))


@click.command(
    cls=PkgCommand,
    examples="""
        pkgcost classify fmt C github.com/spf13/cobra
        pkgcost -q classify net/http
    """,
)
@click.argument("import_paths", nargs=-1, required=True)
@click.pass_obj
def classify(app: AppContext, import_paths: tuple[str, ...]) -> None:
    """Tell which IMPORT_PATHS would be left out of an analysis."""
    from pkgcost.services.inspect import InspectService

    app.emit(InspectService(app.toolchain).classify(list(import_paths)))
