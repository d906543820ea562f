"""Subprocess plumbing shared by the Go toolchain adapters.

Every external tool call goes through :func:`run_tool` so the analysis
wall-clock budget applies uniformly: each call gets whatever time is left
on the :class:`Deadline`, and running out raises ``AnalysisTimeoutError``.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from pkgcost.domain.errors import AnalysisTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deadline:
    """Wall-clock budget for one analysis run. ``seconds=None`` means unbounded."""

    seconds: float | None = None
    started: float = field(default_factory=time.monotonic)

    def remaining(self) -> float | None:
        if self.seconds is None:
            return None
        return self.seconds - (time.monotonic() - self.started)

    def check(self, what: str = "analysis") -> None:
        """Raise ``AnalysisTimeoutError`` once the budget is spent."""
        left = self.remaining()
        if left is not None and left <= 0:
            msg = f"Timed out after {self.seconds:g}s during {what}"
            raise AnalysisTimeoutError(msg, timeout_seconds=self.seconds)


class ToolInvocationError(Exception):
    """An external tool could not be started or exited non-zero."""

    def __init__(self, args: Sequence[str], message: str, *, output: str = "") -> None:
        super().__init__(message)
        self.args_list = list(args)
        self.message = message
        self.output = output


def run_tool(
    args: Sequence[str],
    *,
    deadline: Deadline | None = None,
    cwd: str | None = None,
) -> str:
    """Run *args* and return its stdout.

    Raises:
        ToolInvocationError: the binary is missing or exited non-zero
            (stderr is attached as ``output``).
        AnalysisTimeoutError: the deadline expired before or during the call.
    """
    timeout: float | None = None
    if deadline is not None:
        deadline.check(args[0])
        timeout = deadline.remaining()

    started = time.perf_counter()
    try:
        proc = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            cwd=cwd,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        msg = f"{args[0]!r} not found on PATH"
        raise ToolInvocationError(args, msg) from exc
    except subprocess.TimeoutExpired as exc:
        seconds = deadline.seconds if deadline else None
        msg = f"Timed out after {seconds:g}s running {args[0]}" if seconds else "Timed out"
        raise AnalysisTimeoutError(msg, timeout_seconds=seconds) from exc
    finally:
        logger.debug(
            "%s finished in %.1fms", " ".join(args), (time.perf_counter() - started) * 1000
        )

    if proc.returncode != 0:
        output = (proc.stderr or proc.stdout or "").strip()
        msg = f"{args[0]} exited with status {proc.returncode}"
        raise ToolInvocationError(args, msg, output=output)
    return proc.stdout
