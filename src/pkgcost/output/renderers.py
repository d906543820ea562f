"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from rich.filesize import decimal
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from pkgcost.output.console import create_console, get_output, style_for_classification

if TYPE_CHECKING:
    from rich.console import Console

    from pkgcost.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(
    result: ServiceResult,
    *,
    verbose: bool = False,
    abbreviations: Mapping[str, str] | None = None,
) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        if result.op == "analyze":
            _render_analysis(result, console, verbose=verbose, abbreviations=abbreviations or {})
        else:
            renderer = _OP_RENDERERS.get(result.op, _render_generic)
            renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "analyze":
        total = result.data.get("total", {})
        return f"{total.get('complexity', 0)} {total.get('size', 0)} {total.get('files', 0)}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("import_path", "")) for item in items)

    return f"OK: {result.op}"


def abbreviate(import_path: str, abbreviations: Mapping[str, str]) -> str:
    """Shorten the first matching prefix (``github.com/x`` → ``@x``)."""
    for prefix, short in abbreviations.items():
        if import_path.startswith(prefix):
            return short + import_path[len(prefix) :]
    return import_path


def node_label(node: Mapping[str, Any], abbreviations: Mapping[str, str]) -> Text:
    """``<complexity> (<size>) [<import path>]`` using roll-up totals."""
    rollup = node["rollup"]
    label = Text()
    label.append(str(rollup["complexity"]), style="pkg.complexity")
    label.append(" (")
    label.append(decimal(rollup["size"]), style="pkg.size")
    label.append(") [")
    label.append(abbreviate(node["import_path"], abbreviations), style="pkg.path")
    label.append("]")
    return label


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "pkg.ok"), ("  " + result.op, "pkg.op")))


def _field(console: Console, key: str, value: Any) -> None:
    style = "pkg.path" if key in ("import_path", "directory") else ""
    console.print(Text.assemble((f"  {key}: ", "pkg.key"), (str(value), style)))


def _timing_style(duration_ms: float) -> str:
    if duration_ms > 1000:
        return "bold red"
    if duration_ms > 100:
        return "yellow"
    return "dim"


def _span_label(span: Mapping[str, Any]) -> Text:
    duration = span.get("duration_ms", 0.0)
    label = Text(f"{duration:>9.2f}ms", style=_timing_style(duration))
    label.append(f"  {span.get('name', '?')}")
    annotations = span.get("annotations") or {}
    if annotations:
        pairs = ", ".join(f"{k}={v}" for k, v in annotations.items())
        label.append(f"  ({pairs})", style="pkg.key")
    return label


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Timings (as a span tree) and any other meta keys; verbose only."""
    if not result.meta:
        return
    console.print()
    for key, value in result.meta.items():
        if key != "telemetry":
            console.print(Text(f"  {key}: {value}", style="pkg.key"))
            continue
        tree = Tree(_span_label(value), guide_style="dim")
        stack: list[tuple[Tree, Mapping[str, Any]]] = [(tree, value)]
        while stack:
            branch, span = stack.pop()
            for child in span.get("children", []):
                stack.append((branch.add(_span_label(child)), child))
        console.print(tree)


def _cost_text(cost: Mapping[str, int]) -> str:
    return f"{cost['files']} files, {decimal(cost['size'])}, complexity {cost['complexity']}"


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text.assemble(("ERROR", "pkg.error"), ("  " + result.op, "pkg.op"), " — ", msg)
    )
    if err is None or not err.detail:
        return

    # Where the run broke is shown even without -v
    for key in ("import_path", "path"):
        if key in err.detail:
            console.print(Text(f"  {key}: {err.detail[key]}"))
    if verbose:
        console.print(Text("  detail:", style="dim"))
        for key, value in err.detail.items():
            console.print(Text(f"    {key}: {value}"))


# ── Analysis renderer ─────────────────────────────────────────────────


def _build_tree(
    node: Mapping[str, Any], abbreviations: Mapping[str, str], *, verbose: bool
) -> Tree:
    """Convert a nested tree payload into a ``rich.tree.Tree`` without recursion."""

    def label_for(data: Mapping[str, Any]) -> Text:
        label = node_label(data, abbreviations)
        if verbose:
            label.append(f"  local: {_cost_text(data['local'])}", style="pkg.key")
        if data.get("collapsed"):
            hidden = data.get("hidden_children", 0)
            note = f"  … {hidden} deps shown above" if hidden else "  (shown above)"
            label.append(note, style="pkg.collapsed")
        return label

    tree = Tree(label_for(node))
    stack: list[tuple[Tree, Mapping[str, Any]]] = [(tree, node)]
    while stack:
        branch, data = stack.pop()
        if data.get("vendored") and not data.get("collapsed") and data.get("hidden_children"):
            branch.add(Text("(...ignoring deps of vendored package)", style="pkg.vendored"))
            continue
        for child in data.get("children", []):
            stack.append((branch.add(label_for(child)), child))
    return tree


def _render_analysis(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    abbreviations: Mapping[str, str],
) -> None:
    d = result.data
    console.print(_build_tree(d["tree"], abbreviations, verbose=verbose))
    console.print()
    console.print(
        Text(f"{d['package_count']} packages — {_cost_text(d['total'])}", style="pkg.key")
    )
    if verbose:
        _render_meta(console, result)


# ── Inspection renderers ──────────────────────────────────────────────


def _render_facts(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    for key in ("import_path", "name", "directory", "is_platform"):
        _field(console, key, d.get(key, ""))
    _field(console, "source_files", len(d.get("source_files", [])))
    imports = d.get("imports", [])
    _field(console, "imports", len(imports))
    if verbose:
        for name in d.get("source_files", []):
            console.print(f"    file {name}")
        for name in imports:
            console.print(f"    import {name}")


def _render_classify(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Import path", style="pkg.path", no_wrap=True)
    table.add_column("Class")
    table.add_column("Skipped")
    for item in result.data.get("items", []):
        cls = str(item["classification"])
        table.add_row(
            str(item["import_path"]),
            Text(cls, style=style_for_classification(cls)),
            "yes" if item["skipped"] else "no",
        )
    console.print(table)
    console.print(f"\nplatform root: {result.data.get('platform_root', '')}")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "resolve": _render_facts,
    "classify": _render_classify,
}
