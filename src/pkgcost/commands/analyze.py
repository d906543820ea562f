"""Command: measure the dependency tree of one or more packages."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pkgcost.commands._base import PkgCommand

if TYPE_CHECKING:
    from pkgcost.commands._context import AppContext


@click.command(
    cls=PkgCommand,
    examples="""
        pkgcost analyze github.com/spf13/cobra
        pkgcost analyze ./cmd/... --workers 4
        pkgcost analyze github.com/acme/api --fetch --timeout 120
        pkgcost --json analyze github.com/acme/api > tree.json
        pkgcost -q analyze github.com/acme/api
    """,
)
@click.argument("patterns", nargs=-1, required=True)
@click.option("--fetch/--no-fetch", default=None, help="Run 'go get -d' on entries first.")
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Parallel entry points.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Abort the whole analysis after this many seconds.",
)
@click.option(
    "--expand-vendored/--collapse-vendored",
    default=None,
    help="Expand the dependencies of vendored packages.",
)
@click.pass_obj
def analyze(
    app: AppContext,
    patterns: tuple[str, ...],
    fetch: bool | None,
    workers: int | None,
    timeout: float | None,
    expand_vendored: bool | None,
) -> None:
    """Show the dependency tree of PATTERNS with complexity and size totals.

    Each line reads "complexity (size) [import path]" and counts the package
    plus everything it pulls in, shared dependencies counted once.
    """
    from pkgcost.services.analyze import AnalysisService

    app.override(
        analysis={"fetch": fetch, "workers": workers, "timeout_seconds": timeout},
        display={"expand_vendored": expand_vendored},
    )
    app.emit(AnalysisService(app.toolchain).analyze(list(patterns)))
