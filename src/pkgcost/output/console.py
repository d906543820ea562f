"""Rich Console factory and theme for pkgcost output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PKG_THEME = Theme(
    {
        "pkg.ok": "bold green",
        "pkg.error": "bold red",
        "pkg.warning": "bold yellow",
        "pkg.op": "bold cyan",
        "pkg.key": "dim",
        "pkg.complexity": "yellow",
        "pkg.size": "green",
        "pkg.path": "blue",
        "pkg.collapsed": "dim",
        "pkg.vendored": "dim italic",
        "pkg.class.platform": "dim",
        "pkg.class.native": "magenta",
        "pkg.class.external": "bold",
    }
)

_CLASS_STYLES: dict[str, str] = {
    "platform": "pkg.class.platform",
    "native": "pkg.class.native",
    "external": "pkg.class.external",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PKG_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_classification(classification: str) -> str:
    """Return the Rich style name for a classifier verdict."""
    return _CLASS_STYLES.get(classification, "")
