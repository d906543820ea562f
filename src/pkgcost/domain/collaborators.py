"""Protocols for the external tools the analysis consumes as black boxes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pkgcost.domain.graph import PackageFacts


class PackageResolver(Protocol):
    """Turns an import path into raw package facts.

    Must be idempotent for a given import path within one run.
    """

    def resolve(self, import_path: str) -> PackageFacts: ...


class FileSizeProvider(Protocol):
    def size(self, path: str) -> int: ...


class ComplexityScorer(Protocol):
    """Returns ``(score, label)`` pairs for every function in a file."""

    def score(self, path: str) -> list[tuple[int, str]]: ...


class PlatformClassifier(Protocol):
    def is_skipped(self, import_path: str) -> bool: ...


class PackageSource(PackageResolver, Protocol):
    """A resolver that can also expand wildcard patterns and fetch sources."""

    def expand(self, patterns: Sequence[str]) -> list[str]: ...

    def fetch(self, import_path: str) -> None: ...
