"""Shared pytest fixtures for pkgcost tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from pkgcost.config.settings import PkgCostSettings
from pkgcost.domain.graph import PackageFacts
from pkgcost.infrastructure.platform import RootClassifier
from pkgcost.infrastructure.toolchain import Toolchain
from pkgcost.services.telemetry import disable_telemetry

from fakes import FakeResolver, FakeScorer, FakeSizes, pkg

PLATFORM_PACKAGES = ("fmt", "os", "net/http", "strings")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_resolver() -> Callable[..., FakeResolver]:
    """Factory: ``make_resolver(pkg("a", "b"), pkg("b"))``."""

    def factory(*facts: PackageFacts) -> FakeResolver:
        return FakeResolver({f.import_path: f for f in facts})

    return factory


@pytest.fixture
def diamond(make_resolver: Callable[..., FakeResolver]) -> FakeResolver:
    """A -> B, A -> C, B -> D, C -> D; every package has one file."""
    return make_resolver(
        pkg("example.com/a", "example.com/b", "example.com/c", "fmt"),
        pkg("example.com/b", "example.com/d", "strings"),
        pkg("example.com/c", "example.com/d"),
        pkg("example.com/d", "C", "os"),
    )


@pytest.fixture
def platform_root(tmp_path: Path) -> Path:
    """A fake GOROOT containing a handful of standard-library packages."""
    root = tmp_path / "goroot"
    for name in PLATFORM_PACKAGES:
        (root / "src" / name).mkdir(parents=True)
    return root


@pytest.fixture
def classifier(platform_root: Path) -> RootClassifier:
    return RootClassifier(platform_root)


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> PkgCostSettings:
    monkeypatch.delenv("PKGCOST_CONFIG", raising=False)
    return PkgCostSettings.from_cli(project_root=tmp_path)


@pytest.fixture
def make_toolchain(
    settings: PkgCostSettings, classifier: RootClassifier
) -> Callable[..., Toolchain]:
    """Factory for a Toolchain wired to fakes (override any collaborator)."""

    def factory(
        resolver: FakeResolver,
        *,
        sizes: FakeSizes | None = None,
        scorer: FakeScorer | None = None,
        settings_override: PkgCostSettings | None = None,
    ) -> Toolchain:
        return Toolchain(
            settings_override or settings,
            resolver=resolver,
            sizes=sizes or FakeSizes(),
            scorer=scorer or FakeScorer(),
            classifier=classifier,
        )

    return factory


@pytest.fixture
def patch_toolchain(
    monkeypatch: pytest.MonkeyPatch, classifier: RootClassifier
) -> Callable[..., None]:
    """Make CLI invocations build their Toolchain around the given fakes."""

    def install(
        resolver: FakeResolver,
        *,
        sizes: FakeSizes | None = None,
        scorer: FakeScorer | None = None,
    ) -> None:
        original_init = Toolchain.__init__

        def patched_init(self: Toolchain, settings: PkgCostSettings, **_: object) -> None:
            original_init(
                self,
                settings,
                resolver=resolver,
                sizes=sizes or FakeSizes(),
                scorer=scorer or FakeScorer(),
                classifier=classifier,
            )

        monkeypatch.setattr(Toolchain, "__init__", patched_init)

    return install


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run CLI tests from an empty temp directory with no config discovery leaks."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PKGCOST_CONFIG", raising=False)


@pytest.fixture(autouse=True)
def _reset_cli_state() -> Generator[None]:
    """``-v`` turns telemetry on and every CLI run reconfigures logging."""
    yield
    disable_telemetry()
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
