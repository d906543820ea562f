"""Package resolution via ``go list -json``.

``go list -json <path>`` prints a stream of concatenated JSON objects, one
per matched package. Resolving a single import path must yield exactly one
object; anything else is a :class:`ResolutionError` with the raw output
attached, never a crash.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable, Iterator, Sequence
from typing import Any

import structlog

from pkgcost.domain.errors import ResolutionError
from pkgcost.domain.graph import PackageFacts
from pkgcost.infrastructure.process import Deadline, ToolInvocationError, run_tool

log = structlog.get_logger(__name__)

type _Runner = Callable[[Sequence[str]], str]

WILDCARD = "..."


def iter_json_objects(payload: str) -> Iterator[dict[str, Any]]:
    """Yield each top-level JSON object in a concatenated stream."""
    decoder = json.JSONDecoder()
    idx = 0
    end = len(payload)
    while True:
        while idx < end and payload[idx].isspace():
            idx += 1
        if idx >= end:
            return
        obj, idx = decoder.raw_decode(payload, idx)
        yield obj


def facts_from_json(data: dict[str, Any]) -> PackageFacts:
    """Map one ``go list -json`` object onto :class:`PackageFacts`.

    Source files are the package's Go files followed by its cgo files.
    """
    files = [*(data.get("GoFiles") or []), *(data.get("CgoFiles") or [])]
    return PackageFacts(
        import_path=data["ImportPath"],
        directory=data.get("Dir", ""),
        name=data.get("Name", ""),
        source_files=tuple(files),
        imports=tuple(data.get("Imports") or []),
        is_platform=bool(data.get("Goroot") or data.get("Standard")),
    )


class GoListResolver:
    """Resolves import paths by shelling out to the ``go`` command."""

    def __init__(
        self,
        go_binary: str = "go",
        *,
        deadline: Deadline | None = None,
        runner: _Runner | None = None,
    ) -> None:
        self.go_binary = go_binary
        self._deadline = deadline
        self._runner = runner or self._run

    def _run(self, args: Sequence[str]) -> str:
        return run_tool(args, deadline=self._deadline)

    def resolve(self, import_path: str) -> PackageFacts:
        started = time.perf_counter()
        try:
            payload = self._runner([self.go_binary, "list", "-json", import_path])
        except ToolInvocationError as exc:
            msg = f"while walking {import_path}: {exc.message}"
            raise ResolutionError(msg, import_path=import_path, output=exc.output or None) from exc
        finally:
            log.debug(
                "resolve",
                import_path=import_path,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

        try:
            infos = list(iter_json_objects(payload))
        except json.JSONDecodeError as exc:
            msg = f"while decoding go list output for {import_path}: {exc.msg}"
            raise ResolutionError(msg, import_path=import_path) from exc

        if len(infos) != 1:
            msg = f"expected 1 package for {import_path}, go list reported {len(infos)}"
            raise ResolutionError(msg, import_path=import_path, count=len(infos))

        try:
            return facts_from_json(infos[0])
        except KeyError as exc:
            msg = f"go list output for {import_path} has no {exc.args[0]} field"
            raise ResolutionError(msg, import_path=import_path) from exc

    def expand(self, patterns: Sequence[str]) -> list[str]:
        """Expand ``...`` wildcards into concrete import paths.

        Plain import paths pass through untouched and keep their order;
        duplicates are dropped.
        """
        expanded: list[str] = []
        for pattern in patterns:
            if WILDCARD not in pattern:
                expanded.append(pattern)
                continue
            try:
                output = self._runner([self.go_binary, "list", pattern])
            except ToolInvocationError as exc:
                msg = f"while expanding {pattern}: {exc.message}"
                raise ResolutionError(msg, import_path=pattern, output=exc.output or None) from exc
            expanded.extend(line.strip() for line in output.splitlines() if line.strip())
        return list(dict.fromkeys(expanded))

    def fetch(self, import_path: str) -> None:
        """Download *import_path* and its dependencies (``go get -d``)."""
        try:
            self._runner([self.go_binary, "get", "-d", import_path])
        except ToolInvocationError as exc:
            msg = f"while fetching dependencies of {import_path}: {exc.message}"
            raise ResolutionError(msg, import_path=import_path, output=exc.output or None) from exc
