"""CostAggregator — local package costs and diamond-safe roll-ups.

Local cost comes from the package's own source files. Roll-up cost is the
sum of local costs over the *unique* packages reachable from a node, so a
dependency shared by several parents is counted once in any common
ancestor's total, never once per path.

Platform packages are invisible here: zero local cost, and the roll-up
walk never enters them.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import networkx as nx
import structlog

from pkgcost.domain.errors import CostCollectionError
from pkgcost.domain.graph import ZERO_COST, Cost

if TYPE_CHECKING:
    from pkgcost.domain.collaborators import ComplexityScorer, FileSizeProvider
    from pkgcost.domain.graph import DependencyGraph, PackageNode

log = structlog.get_logger(__name__)


class CostAggregator:
    """Computes and caches costs for the nodes of one dependency graph."""

    def __init__(self, sizes: FileSizeProvider, scorer: ComplexityScorer) -> None:
        self._sizes = sizes
        self._scorer = scorer
        self._rollups: dict[str, Cost] = {}
        self._dag: nx.DiGraph | None = None
        self._nodes: dict[str, PackageNode] = {}

    # ------------------------------------------------------------------
    # Local cost
    # ------------------------------------------------------------------

    def compute_local_cost(self, node: PackageNode) -> Cost:
        """Measure one package's own files.

        Synthetic nodes (no directory) count their files but have no size
        or complexity to measure.

        Raises:
            CostCollectionError: a size lookup or complexity score failed.
        """
        if node.is_platform:
            return ZERO_COST

        size = 0
        complexity = 0
        if node.directory:
            for filename in node.source_files:
                path = os.path.join(node.directory, filename)
                size += self._sizes.size(path)
                complexity += sum(score for score, _label in self._scorer.score(path))

        cost = Cost(files=len(node.source_files), size=size, complexity=complexity)
        log.debug("local_cost", import_path=node.import_path, **cost.to_dict())
        return cost

    def annotate(self, graph: DependencyGraph) -> None:
        """Set ``local_cost`` on every node of *graph* (root included), once."""
        for node in [graph.root, *graph.nodes()]:
            if node.local_cost is None:
                node.local_cost = self.compute_local_cost(node)
        self._index(graph)

    # ------------------------------------------------------------------
    # Roll-up cost
    # ------------------------------------------------------------------

    def compute_rollup(self, node: PackageNode) -> Cost:
        """Sum of local costs over the unique non-platform nodes reachable
        from *node*, itself included. Pure over already-computed local costs.
        """
        if node.is_platform:
            return ZERO_COST

        cached = self._rollups.get(node.import_path)
        if cached is not None:
            return cached

        dag = self._dag_for(node)
        total = ZERO_COST
        for import_path in {node.import_path} | nx.descendants(dag, node.import_path):
            total = total + self._local(self._nodes[import_path])
        self._rollups[node.import_path] = total
        return total

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _local(self, node: PackageNode) -> Cost:
        if node.local_cost is None:
            msg = f"Local cost of {node.import_path} was never collected"
            raise CostCollectionError(msg, path=node.directory or node.import_path)
        return node.local_cost

    def _index(self, graph: DependencyGraph) -> None:
        self._dag = None
        self._rollups.clear()
        self._nodes = {}
        self._add_reachable(graph.root)

    def _dag_for(self, node: PackageNode) -> nx.DiGraph:
        if node.import_path not in self._nodes:
            self._add_reachable(node)
        if self._dag is None:
            self._dag = self._build_dag()
        return self._dag

    def _add_reachable(self, start: PackageNode) -> None:
        """Register every non-platform node reachable from *start*."""
        stack = [start]
        while stack:
            node = stack.pop()
            if node.is_platform or node.import_path in self._nodes:
                continue
            self._nodes[node.import_path] = node
            stack.extend(node.dependencies)
        self._dag = None

    def _build_dag(self) -> nx.DiGraph:
        """Directed graph over non-platform nodes; platform nodes and the
        edges into them are left out entirely."""
        dag = nx.DiGraph()
        for import_path, node in self._nodes.items():
            dag.add_node(import_path)
            for dep in node.dependencies:
                if not dep.is_platform:
                    dag.add_edge(import_path, dep.import_path)
        return dag
