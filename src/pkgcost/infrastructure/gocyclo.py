"""Cyclomatic complexity via ``gocyclo``.

``gocyclo <file>`` prints one line per function, e.g.::

    12 mypkg (*Server).handle server.go:41:1

Only the leading count is consumed; the rest of the line is kept as a
label. A line whose first token is not a plain decimal count aborts the
run: the cost model needs complete accounting, so nothing is skipped.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from pkgcost.domain.errors import CostCollectionError
from pkgcost.infrastructure.process import Deadline, ToolInvocationError, run_tool

type _Runner = Callable[[Sequence[str]], str]


def parse_complexity_output(output: str, *, path: str) -> list[tuple[int, str]]:
    """Parse line-oriented scorer output into ``(score, label)`` pairs.

    Blank lines are ignored. A score is a run of ASCII digits: signs,
    underscores and non-ASCII digits are rejected.

    Raises:
        CostCollectionError: a line's first token is not a non-negative integer.
    """
    scores: list[tuple[int, str]] = []
    for lineno, line in enumerate(output.splitlines(), start=1):
        if not line.strip():
            continue
        token, *rest = line.split(maxsplit=1)
        if not (token.isascii() and token.isdigit()):
            msg = f"while parsing gocyclo output for {path}: line {lineno}: {line!r}"
            raise CostCollectionError(msg, path=path, line=lineno)
        label = rest[0].strip() if rest else ""
        scores.append((int(token), label))
    return scores


class GocycloScorer:
    """Scores Go files by shelling out to ``gocyclo``."""

    def __init__(
        self,
        binary: str = "gocyclo",
        *,
        deadline: Deadline | None = None,
        runner: _Runner | None = None,
    ) -> None:
        self.binary = binary
        self._deadline = deadline
        self._runner = runner or self._run

    def _run(self, args: Sequence[str]) -> str:
        return run_tool(args, deadline=self._deadline)

    def score(self, path: str) -> list[tuple[int, str]]:
        try:
            output = self._runner([self.binary, path])
        except ToolInvocationError as exc:
            msg = f"while running gocyclo on {path}: {exc.message}"
            raise CostCollectionError(msg, path=path, output=exc.output or None) from exc
        return parse_complexity_output(output, path=path)
