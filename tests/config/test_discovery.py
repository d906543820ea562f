"""Tests for config file discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from pkgcost.config.discovery import find_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PKGCOST_CONFIG", raising=False)


class TestFindConfig:
    def test_walks_up(self, tmp_path: Path) -> None:
        cfg = tmp_path / "pkgcost.toml"
        cfg.write_text("")
        nested = tmp_path / "cmd" / "server"
        nested.mkdir(parents=True)
        assert find_config(nested) == cfg.resolve()

    def test_not_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        cfg = tmp_path / "elsewhere.toml"
        cfg.write_text("")
        monkeypatch.setenv("PKGCOST_CONFIG", str(cfg))
        assert find_config(tmp_path / "unrelated") == cfg

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PKGCOST_CONFIG", str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None
