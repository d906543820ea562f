"""InspectService — look at single packages without building a graph."""

from __future__ import annotations

from collections.abc import Sequence

from pkgcost.domain.errors import PkgCostError
from pkgcost.services.base import BaseService
from pkgcost.services.contracts import ClassifyResultData, PackageFactsData, dump_validated
from pkgcost.services.result import ServiceResult
from pkgcost.services.telemetry import traced


class InspectService(BaseService):
    """Raw resolver facts and classifier verdicts, for debugging a graph."""

    @traced
    def resolve(self, import_path: str) -> ServiceResult:
        try:
            facts = self._toolchain.resolver.resolve(import_path)
        except PkgCostError as exc:
            return ServiceResult.failure("resolve", exc)
        return ServiceResult(
            ok=True,
            op="resolve",
            data=dump_validated(PackageFactsData, facts.to_dict()),
        )

    @traced
    def classify(self, import_paths: Sequence[str]) -> ServiceResult:
        try:
            classifier = self._toolchain.classifier
        except PkgCostError as exc:
            return ServiceResult.failure("classify", exc)

        items = [
            {
                "import_path": path,
                "classification": classifier.classify(path),
                "skipped": classifier.is_skipped(path),
            }
            for path in import_paths
        ]
        return ServiceResult(
            ok=True,
            op="classify",
            data=dump_validated(
                ClassifyResultData,
                {
                    "platform_root": str(classifier.platform_root),
                    "count": len(items),
                    "items": items,
                },
            ),
        )
