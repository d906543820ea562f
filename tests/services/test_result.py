"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from pkgcost.domain.errors import ResolutionError
from pkgcost.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="analyze", data={"package_count": 3})
        assert result.ok is True
        assert result.op == "analyze"
        assert result.data == {"package_count": 3}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_json_serialization(self) -> None:
        result = ServiceResult(
            ok=True,
            op="resolve",
            data={"import_path": "example.com/a"},
            meta={"duration_ms": 42},
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["import_path"] == "example.com/a"
        assert parsed["meta"]["duration_ms"] == 42

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="analyze")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_failure_from_exception(self) -> None:
        exc = ResolutionError("cannot find package", import_path="example.com/x")
        result = ServiceResult.failure("analyze", exc)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "RESOLUTION"
        assert result.error.message == "cannot find package"
        assert result.error.detail == {"import_path": "example.com/x"}


class TestServiceError:
    def test_detail_defaults_empty(self) -> None:
        error = ServiceError(code="NO_PACKAGES", message="nothing matched")
        assert error.detail == {}
