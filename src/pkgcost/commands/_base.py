"""Click base classes with an on-demand ``--examples`` flag.

``--help`` stays short; ``--examples`` prints ready-to-paste invocations
and exits before any argument validation or toolchain access happens.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


def _examples_option(examples: str) -> click.Option:
    """Build an eager flag that prints *examples* and exits."""

    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(textwrap.indent(textwrap.dedent(examples).strip("\n"), "  "))
        ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples.",
    )


class _ExamplesMixin:
    examples: str | None

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)  # type: ignore[call-arg]
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))  # type: ignore[attr-defined]


class PkgCommand(_ExamplesMixin, click.Command):
    """Command that accepts ``examples=`` and exposes ``--examples``."""


class PkgGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`PkgCommand`."""

    command_class = PkgCommand
