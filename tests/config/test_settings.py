"""Tests for PkgCostSettings: TOML, env vars, CLI flags, overrides."""

from __future__ import annotations

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from pkgcost.config.settings import PkgCostSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PKGCOST_CONFIG", raising=False)
    monkeypatch.delenv("PKGCOST_ANALYSIS__WORKERS", raising=False)


class TestDefaults:
    def test_code_defaults(self, tmp_path: Path) -> None:
        settings = PkgCostSettings.from_cli(project_root=tmp_path)
        assert settings.config_path is None
        assert settings.toolchain.goroot is None
        assert settings.toolchain.go_binary == "go"
        assert settings.analysis.workers == 1
        assert settings.analysis.timeout_seconds is None
        assert settings.display.abbreviations == {"github.com/": "@"}
        assert settings.display.expand_vendored is False


class TestToml:
    def test_sections_loaded(self, tmp_path: Path) -> None:
        (tmp_path / "pkgcost.toml").write_text(
            '[toolchain]\ngoroot = "/opt/go"\n\n[analysis]\nworkers = 4\ntimeout_seconds = 30\n'
        )
        settings = PkgCostSettings.from_cli(project_root=tmp_path)
        assert settings.config_path == tmp_path / "pkgcost.toml"
        assert settings.toolchain.goroot == "/opt/go"
        assert settings.analysis.workers == 4
        assert settings.analysis.timeout_seconds == 30

    def test_sparse_table_keeps_other_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "pkgcost.toml").write_text('[display.abbreviations]\n"golang.org/x/" = "x:"\n')
        settings = PkgCostSettings.from_cli(project_root=tmp_path)
        assert settings.display.abbreviations == {"golang.org/x/": "x:"}
        assert settings.display.expand_vendored is False
        assert settings.analysis.fetch is False

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text("[display]\nexpand_vendored = true\n")
        settings = PkgCostSettings.from_cli(config_path=str(cfg))
        assert settings.display.expand_vendored is True
        assert settings.project_root == tmp_path

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "pkgcost.toml").write_text("[analysis\nworkers = ")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            PkgCostSettings.from_cli(project_root=tmp_path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        (tmp_path / "pkgcost.toml").write_text("[analysis]\nworkers = 0\n")
        with pytest.raises(ValidationError):
            PkgCostSettings.from_cli(project_root=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pkgcost.toml").write_text("[analysis]\nworkers = 4\n")
        monkeypatch.setenv("PKGCOST_ANALYSIS__WORKERS", "8")
        settings = PkgCostSettings.from_cli(project_root=tmp_path)
        assert settings.analysis.workers == 8

    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = PkgCostSettings.from_cli(project_root=tmp_path, json_output=True, verbose=True)
        assert settings.json_output is True
        assert settings.verbose is True


class TestWithOverrides:
    def test_none_values_ignored(self, tmp_path: Path) -> None:
        settings = PkgCostSettings.from_cli(project_root=tmp_path)
        updated = settings.with_overrides(analysis={"workers": None, "fetch": None})
        assert updated is settings

    def test_section_copy(self, tmp_path: Path) -> None:
        settings = PkgCostSettings.from_cli(project_root=tmp_path)
        updated = settings.with_overrides(
            analysis={"workers": 3, "timeout_seconds": None},
            display={"expand_vendored": True},
        )
        assert updated.analysis.workers == 3
        assert updated.display.expand_vendored is True
        assert updated.display.abbreviations == {"github.com/": "@"}
        assert settings.analysis.workers == 1


class TestExplicitConfig:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            PkgCostSettings.from_cli(config_path=str(tmp_path / "absent.toml"))
