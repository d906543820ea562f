"""Error hierarchy for an analysis run.

INVARIANT: every kind aborts the whole analysis. Roll-up totals computed
over an incomplete graph would silently under-report, so there is no
best-effort mode. Services translate these into ``ServiceError`` payloads.
"""

from __future__ import annotations

from typing import Any


class PkgCostError(Exception):
    """Base class for all fatal analysis errors."""

    code = "ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = {k: v for k, v in detail.items() if v is not None}


class ConfigurationError(PkgCostError):
    """The toolchain environment is unusable (e.g. no platform root)."""

    code = "CONFIGURATION"


class ResolutionError(PkgCostError):
    """An entry or transitive import could not be resolved to package facts."""

    code = "RESOLUTION"

    def __init__(self, message: str, *, import_path: str, **detail: Any) -> None:
        super().__init__(message, import_path=import_path, **detail)
        self.import_path = import_path


class CostCollectionError(PkgCostError):
    """A file size lookup failed or complexity output was malformed."""

    code = "COST_COLLECTION"

    def __init__(self, message: str, *, path: str, **detail: Any) -> None:
        super().__init__(message, path=path, **detail)
        self.path = path


class AnalysisTimeoutError(PkgCostError):
    """The wall-clock budget for the analysis ran out."""

    code = "TIMEOUT"
