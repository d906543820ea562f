"""PkgCostSettings: one frozen object built from every configuration source.

Sources, strongest first:

1. keyword arguments (the global CLI flags),
2. ``PKGCOST_*`` environment variables, nested with ``__``
   (``PKGCOST_ANALYSIS__WORKERS=4``),
3. ``pkgcost.toml`` (``--config``, ``$PKGCOST_CONFIG`` or walk-up discovery),
4. the defaults in :mod:`pkgcost.config.models`.

``$GOROOT`` is not read here. When ``[toolchain] goroot`` is unset the
platform root is found by :func:`pkgcost.infrastructure.platform.discover_platform_root`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pkgcost.config.discovery import find_config
from pkgcost.config.models import AnalysisConfig, DisplayConfig, ToolchainConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Feeds the tables of one ``pkgcost.toml`` into pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._tables: dict[str, Any] = _read_toml(toml_path) if toml_path else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._tables.get(field_name), field_name, field_name in self._tables

    def __call__(self) -> dict[str, Any]:
        return self._tables


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc


# pydantic-settings builds sources from a classmethod, so the file chosen by
# from_cli() is handed over per thread.
_pending = threading.local()


class PkgCostSettings(BaseSettings):
    """Settings for one pkgcost invocation.

    Attributes:
        project_root: Directory holding ``pkgcost.toml``, or the CWD when no
            config file was found.
        config_path: The TOML file that was loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PKGCOST_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml = TomlSettingsSource(settings_cls, getattr(_pending, "toml_path", None))
        return init_settings, env_settings, toml

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> PkgCostSettings:
        """Build settings for a CLI run.

        An explicit *config_path* must exist; otherwise ``pkgcost.toml`` is
        looked up from *project_root* (or the CWD) upwards.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
        else:
            toml_path = find_config(project_root)

        if project_root is None:
            project_root = toml_path.parent if toml_path else Path.cwd()

        _pending.toml_path = toml_path
        try:
            return cls(project_root=project_root, config_path=toml_path, **cli_flags)
        finally:
            _pending.toml_path = None

    def with_overrides(self, **sections: dict[str, Any]) -> PkgCostSettings:
        """Copy with per-command section overrides; ``None`` means "not given"."""
        update: dict[str, Any] = {}
        for name, values in sections.items():
            changes = {k: v for k, v in values.items() if v is not None}
            if changes:
                update[name] = getattr(self, name).model_copy(update=changes)
        return self.model_copy(update=update) if update else self
