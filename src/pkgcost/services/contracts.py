"""Typed payload contracts for service and adapter boundaries.

These models validate operation payload shapes before they leave the
service layer so key regressions (for example ``rollup`` vs ``total``)
fail fast in tests and during development.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class CostData(BaseModel):
    """File count, byte size, and complexity units."""

    files: int = Field(ge=0)
    size: int = Field(ge=0)
    complexity: int = Field(ge=0)


class TreeNodeData(BaseModel):
    """One rendered tree position."""

    import_path: str
    local: CostData
    rollup: CostData
    collapsed: bool = False
    vendored: bool = False
    hidden_children: int = 0
    children: list[TreeNodeData] = Field(default_factory=list)


class AnalysisResultData(BaseModel):
    """Payload contract for ``AnalysisService.analyze``."""

    entries: list[str]
    package_count: int
    total: CostData
    tree: TreeNodeData


class PackageFactsData(BaseModel):
    """Payload contract for ``InspectService.resolve``."""

    import_path: str
    directory: str
    name: str
    source_files: list[str]
    imports: list[str]
    is_platform: bool


class ClassifyItem(BaseModel):
    """One classified import path."""

    import_path: str
    classification: Literal["native", "platform", "external"]
    skipped: bool


class ClassifyResultData(BaseModel):
    """Payload contract for ``InspectService.classify``."""

    platform_root: str
    count: int
    items: list[ClassifyItem]
