"""GraphBuilder — cycle-safe, memoized resolution of the import graph.

Each import path is resolved exactly once per :class:`DependencyGraph`.
A node is inserted into ``graph.resolved`` (via :meth:`DependencyGraph.claim`)
*before* its own imports are walked, so an import cycle reaching back to a
node that is still being resolved is simply reused instead of re-entered.

Traversal is an explicit stack of ``(node, pending imports)`` frames rather
than Python recursion, so deep graphs cannot hit the recursion limit and the
visiting order is the same depth-first, declared-import order the tool has
always used.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Sequence
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import TYPE_CHECKING

import structlog

from pkgcost.config.logging import PROGRESS_LOGGER
from pkgcost.domain.errors import PkgCostError, ResolutionError
from pkgcost.domain.graph import DependencyGraph, PackageFacts, PackageNode

if TYPE_CHECKING:
    from pkgcost.domain.collaborators import PackageResolver, PlatformClassifier
    from pkgcost.infrastructure.process import Deadline

log = structlog.get_logger(__name__)
progress = structlog.get_logger(PROGRESS_LOGGER)


class _Aborted(Exception):
    """Another worker failed; stop descending."""


class GraphBuilder:
    """Builds a :class:`DependencyGraph` from entry import paths.

    Args:
        resolver: Source of package facts.
        classifier: Decides which imports are left out of the graph.
        workers: Entry points descended concurrently (1 = single-threaded).
        deadline: Optional wall-clock budget for the whole build.
    """

    def __init__(
        self,
        resolver: PackageResolver,
        classifier: PlatformClassifier,
        *,
        workers: int = 1,
        deadline: Deadline | None = None,
    ) -> None:
        self._resolver = resolver
        self._classifier = classifier
        self._workers = max(1, workers)
        self._deadline = deadline

    def build(self, entry_import_paths: Sequence[str]) -> DependencyGraph:
        """Resolve every entry point and everything it transitively imports.

        Entry points are not filtered by the classifier: asking about a
        standard-library package yields that package (as a zero-cost
        platform node) rather than an empty graph.

        Raises:
            PkgCostError: any resolution failure or timeout. No partial
                graph is ever returned.
        """
        graph = DependencyGraph()
        fresh_entries: list[PackageNode] = []

        for import_path in entry_import_paths:
            self._check_deadline()
            progress.info("entry_point", import_path=import_path)
            facts = self._resolve(import_path)
            node, fresh = graph.claim(facts.import_path)
            if fresh:
                node.apply(facts)
                fresh_entries.append(node)
            if node not in graph.root.dependencies:
                graph.root.dependencies.append(node)

        graph.root.raw_imports = tuple(n.import_path for n in graph.root.dependencies)

        if self._workers > 1 and len(fresh_entries) > 1:
            self._descend_concurrently(graph, fresh_entries)
        else:
            for node in fresh_entries:
                self._descend(graph, node)

        log.debug("graph_built", nodes=len(graph), entries=len(graph.root.dependencies))
        return graph

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _descend(
        self,
        graph: DependencyGraph,
        start: PackageNode,
        abort: threading.Event | None = None,
    ) -> None:
        """Walk *start*'s imports depth-first, resolving unseen packages.

        Only the caller that claimed a node walks its imports, so each
        node's ``dependencies`` list has a single writer.
        """
        if start.is_platform:
            return

        stack: list[tuple[PackageNode, Iterator[str]]] = [(start, iter(start.raw_imports))]
        while stack:
            if abort is not None and abort.is_set():
                raise _Aborted
            node, pending = stack[-1]
            dep = next(pending, None)
            if dep is None:
                stack.pop()
                continue
            if self._classifier.is_skipped(dep):
                continue

            child, fresh = graph.claim(dep)
            if fresh:
                self._check_deadline()
                child.apply(self._resolve(dep))
                if not child.is_platform:
                    stack.append((child, iter(child.raw_imports)))
            node.dependencies.append(child)

    def _descend_concurrently(self, graph: DependencyGraph, entries: list[PackageNode]) -> None:
        """One worker per entry point; the first failure aborts the rest."""
        abort = threading.Event()
        with ThreadPoolExecutor(max_workers=self._workers) as pool:
            futures = [pool.submit(self._descend, graph, node, abort) for node in entries]
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            failed = next((f for f in done if f.exception() is not None), None)
            if failed is not None:
                abort.set()
                pool.shutdown(wait=True, cancel_futures=True)
                exc = failed.exception()
                assert exc is not None
                raise exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve(self, import_path: str) -> PackageFacts:
        try:
            return self._resolver.resolve(import_path)
        except PkgCostError:
            raise
        except Exception as exc:
            msg = f"while walking {import_path}: {exc}"
            raise ResolutionError(msg, import_path=import_path) from exc

    def _check_deadline(self) -> None:
        if self._deadline is not None:
            self._deadline.check("dependency resolution")

