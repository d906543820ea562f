"""Toolchain — the single dependency injected into every service.

Bundles the external collaborators of one analysis run (resolver, file
sizes, complexity scorer, platform classifier) and the run's wall-clock
:class:`Deadline`. Collaborators are created lazily so commands that only
need one of them never probe the others, and any of them can be swapped
for an in-memory fake in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pkgcost.infrastructure.filesystem import StatFileSizeProvider
from pkgcost.infrastructure.gocyclo import GocycloScorer
from pkgcost.infrastructure.golist import GoListResolver
from pkgcost.infrastructure.platform import RootClassifier, discover_platform_root
from pkgcost.infrastructure.process import Deadline

if TYPE_CHECKING:
    from pkgcost.config.settings import PkgCostSettings
    from pkgcost.domain.collaborators import ComplexityScorer, FileSizeProvider, PackageSource


class Toolchain:
    """Per-run collaborator bundle.

    Never shared between runs: the classifier cache lives here, and a fresh
    Toolchain means a fresh cache.
    """

    def __init__(
        self,
        settings: PkgCostSettings,
        *,
        resolver: PackageSource | None = None,
        sizes: FileSizeProvider | None = None,
        scorer: ComplexityScorer | None = None,
        classifier: RootClassifier | None = None,
    ) -> None:
        self.settings = settings
        self.deadline = Deadline(settings.analysis.timeout_seconds)
        self._resolver = resolver
        self._sizes = sizes
        self._scorer = scorer
        self._classifier = classifier

    @property
    def resolver(self) -> PackageSource:
        if self._resolver is None:
            self._resolver = GoListResolver(
                self.settings.toolchain.go_binary, deadline=self.deadline
            )
        return self._resolver

    @property
    def sizes(self) -> FileSizeProvider:
        if self._sizes is None:
            self._sizes = StatFileSizeProvider()
        return self._sizes

    @property
    def scorer(self) -> ComplexityScorer:
        if self._scorer is None:
            self._scorer = GocycloScorer(
                self.settings.toolchain.gocyclo_binary, deadline=self.deadline
            )
        return self._scorer

    @property
    def classifier(self) -> RootClassifier:
        """The platform classifier. Raises ``ConfigurationError`` on first use
        when no platform root can be found."""
        if self._classifier is None:
            root = discover_platform_root(self.settings.toolchain.goroot)
            self._classifier = RootClassifier(root)
        return self._classifier
