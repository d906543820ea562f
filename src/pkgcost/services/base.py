"""BaseService — foundation for all pkgcost services.

Every service receives a :class:`Toolchain` at construction time. The
Toolchain provides the resolver, file sizes, complexity scorer, and
platform classifier for exactly one analysis run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pkgcost.infrastructure.toolchain import Toolchain


class BaseService:
    """Base for service-layer classes.

    Usage::

        class AnalysisService(BaseService):
            def analyze(self, patterns: list[str]) -> ServiceResult:
                graph = GraphBuilder(self._toolchain.resolver, ...).build(...)
    """

    def __init__(self, toolchain: Toolchain) -> None:
        self._toolchain = toolchain
