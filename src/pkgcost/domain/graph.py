"""Dependency graph model — nodes, costs, and the per-run resolution scope.

A :class:`DependencyGraph` is created per analysis run and discarded after
rendering. It owns every :class:`PackageNode`; a node's ``dependencies`` are
shared references into that set, so a diamond dependency is one instance
reachable from several parents.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

ROOT_IMPORT_PATH = "<root>"

# cgo pseudo-package: declares C interop, never resolvable.
NATIVE_INTEROP_IMPORT = "C"


@dataclass(frozen=True)
class Cost:
    """File count, byte size, and complexity units for one or more packages."""

    files: int = 0
    size: int = 0
    complexity: int = 0

    def __add__(self, other: Cost) -> Cost:
        return Cost(
            files=self.files + other.files,
            size=self.size + other.size,
            complexity=self.complexity + other.complexity,
        )

    def to_dict(self) -> dict[str, int]:
        return {"files": self.files, "size": self.size, "complexity": self.complexity}


ZERO_COST = Cost()


@dataclass(frozen=True)
class PackageFacts:
    """Raw facts about one package, as reported by a resolver."""

    import_path: str
    directory: str = ""
    name: str = ""
    source_files: tuple[str, ...] = ()
    imports: tuple[str, ...] = ()
    is_platform: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "import_path": self.import_path,
            "directory": self.directory,
            "name": self.name,
            "source_files": list(self.source_files),
            "imports": list(self.imports),
            "is_platform": self.is_platform,
        }


@dataclass(eq=False)
class PackageNode:
    """One resolved package inside a :class:`DependencyGraph`.

    Identity is the import path. ``dependencies`` is append-only while the
    graph is being built; ``local_cost`` may be assigned exactly once.
    """

    import_path: str
    is_platform: bool = False
    directory: str = ""
    name: str = ""
    source_files: tuple[str, ...] = ()
    raw_imports: tuple[str, ...] = ()
    dependencies: list[PackageNode] = field(default_factory=list, repr=False)
    _local_cost: Cost | None = field(default=None, repr=False)

    @classmethod
    def from_facts(cls, facts: PackageFacts) -> PackageNode:
        node = cls(import_path=facts.import_path)
        node.apply(facts)
        return node

    def apply(self, facts: PackageFacts) -> None:
        """Fill a claimed placeholder with the resolver's facts."""
        self.is_platform = facts.is_platform
        self.directory = facts.directory
        self.name = facts.name
        self.source_files = tuple(facts.source_files)
        self.raw_imports = tuple(dict.fromkeys(facts.imports))

    @property
    def is_synthetic(self) -> bool:
        return not self.directory

    @property
    def local_cost(self) -> Cost | None:
        return self._local_cost

    @local_cost.setter
    def local_cost(self, cost: Cost) -> None:
        if self._local_cost is not None:
            msg = f"Local cost of {self.import_path!r} is already set"
            raise ValueError(msg)
        self._local_cost = cost

    def __repr__(self) -> str:
        return f"PackageNode({self.import_path!r}, deps={len(self.dependencies)})"


class DependencyGraph:
    """Resolution-memoization scope for one analysis run.

    ``resolved`` maps import path to node and doubles as the visited set.
    All mutation goes through :meth:`claim`, which is the atomic
    test-and-set used to break cycles and deduplicate diamonds.
    """

    def __init__(self, root_import_path: str = ROOT_IMPORT_PATH) -> None:
        self.root = PackageNode(import_path=root_import_path)
        self.resolved: dict[str, PackageNode] = {}
        self._lock = threading.Lock()

    def claim(self, import_path: str) -> tuple[PackageNode, bool]:
        """Return the node for *import_path*, inserting a placeholder if absent.

        The boolean is True only for the caller whose call inserted the node;
        that caller is responsible for resolving and descending into it.
        A node that is still being resolved counts as already resolved.
        """
        with self._lock:
            node = self.resolved.get(import_path)
            if node is not None:
                return node, False
            node = PackageNode(import_path=import_path)
            self.resolved[import_path] = node
            return node, True

    def get(self, import_path: str) -> PackageNode | None:
        with self._lock:
            return self.resolved.get(import_path)

    def nodes(self) -> list[PackageNode]:
        """Snapshot of every resolved node (root excluded)."""
        with self._lock:
            return list(self.resolved.values())

    @property
    def entry_points(self) -> list[PackageNode]:
        return list(self.root.dependencies)

    def __len__(self) -> int:
        return len(self.resolved)

    def __contains__(self, import_path: object) -> bool:
        return import_path in self.resolved
