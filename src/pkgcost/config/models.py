"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pkgcost.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ToolchainConfig(BaseModel):
    """[toolchain] section."""

    model_config = {"frozen": True}

    goroot: str | None = None
    go_binary: str = "go"
    gocyclo_binary: str = "gocyclo"


class AnalysisConfig(BaseModel):
    """[analysis] section."""

    model_config = {"frozen": True}

    workers: int = Field(default=1, ge=1)
    timeout_seconds: float | None = Field(default=None, gt=0)
    fetch: bool = False


class DisplayConfig(BaseModel):
    """[display] section."""

    model_config = {"frozen": True}

    abbreviations: dict[str, str] = Field(default_factory=lambda: {"github.com/": "@"})
    expand_vendored: bool = False
