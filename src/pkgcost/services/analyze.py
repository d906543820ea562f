"""AnalysisService — expand, build, cost, and render in one pass.

One call is one analysis run: the graph and every cache built along the way
are discarded afterwards. Any fatal error aborts the whole run and comes
back as a failed ServiceResult; there is no partial tree.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from pkgcost.config.logging import PROGRESS_LOGGER
from pkgcost.domain.errors import PkgCostError
from pkgcost.services.base import BaseService
from pkgcost.services.builder import GraphBuilder
from pkgcost.services.contracts import AnalysisResultData, dump_validated
from pkgcost.services.costs import CostAggregator
from pkgcost.services.result import ServiceError, ServiceResult
from pkgcost.services.telemetry import trace_span, traced
from pkgcost.services.tree import TreeRenderer, display_root

log = structlog.get_logger(__name__)
progress = structlog.get_logger(PROGRESS_LOGGER)


class AnalysisService(BaseService):
    """Measures the transitive cost of one or more entry packages."""

    @traced
    def analyze(self, patterns: Sequence[str]) -> ServiceResult:
        """Analyze *patterns* (import paths, ``...`` wildcards allowed).

        Steps: classify setup (fails fast on a missing platform root),
        pattern expansion, optional fetch, graph build, cost collection,
        tree rendering.
        """
        settings = self._toolchain.settings
        resolver = self._toolchain.resolver
        try:
            classifier = self._toolchain.classifier

            with trace_span("expand_patterns"):
                entries = resolver.expand(list(patterns))
            if not entries:
                return ServiceResult(
                    ok=False,
                    op="analyze",
                    error=ServiceError(
                        code="NO_PACKAGES",
                        message="No packages matched the given patterns",
                        detail={"patterns": list(patterns)},
                    ),
                )

            if settings.analysis.fetch:
                with trace_span("fetch"):
                    for import_path in entries:
                        progress.info("fetch", import_path=import_path)
                        resolver.fetch(import_path)

            with trace_span("build_graph") as span:
                builder = GraphBuilder(
                    resolver,
                    classifier,
                    workers=settings.analysis.workers,
                    deadline=self._toolchain.deadline,
                )
                graph = builder.build(entries)
                if span:
                    span.annotate("packages", len(graph))

            with trace_span("collect_costs"):
                aggregator = CostAggregator(self._toolchain.sizes, self._toolchain.scorer)
                aggregator.annotate(graph)
                total = aggregator.compute_rollup(graph.root)

            with trace_span("render_tree"):
                renderer = TreeRenderer(
                    aggregator.compute_rollup,
                    expand_vendored=settings.display.expand_vendored,
                )
                tree = renderer.render(display_root(graph.root))
        except PkgCostError as exc:
            log.warning("analysis_failed", code=exc.code, error=exc.message, **exc.detail)
            return ServiceResult.failure("analyze", exc)

        package_count = sum(1 for node in graph.nodes() if not node.is_platform)
        return ServiceResult(
            ok=True,
            op="analyze",
            data=dump_validated(
                AnalysisResultData,
                {
                    "entries": [node.import_path for node in graph.entry_points],
                    "package_count": package_count,
                    "total": total.to_dict(),
                    "tree": tree.to_dict(),
                },
            ),
        )
