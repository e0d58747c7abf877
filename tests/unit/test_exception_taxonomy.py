"""Tests for the viewer exception taxonomy.

Validates:
- ViewerError structured attributes and to_error_dict() keys
- Category classification (validation, contract, permanent)
- Loader and config exceptions are ViewerError subclasses with stable codes
"""

from __future__ import annotations

from typing import ClassVar

import pytest

from kml_viewer.activities.load_kml import (
    InvalidCoordinateError,
    KmlParseError,
    KmlValidationError,
)
from kml_viewer.core.config import ConfigValidationError
from kml_viewer.core.exceptions import (
    ContractError,
    PermanentError,
    ValidationError,
    ViewerError,
)


class TestViewerErrorBase:
    """ViewerError base class behaviour."""

    def test_default_attributes(self) -> None:
        err = ViewerError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""
        assert err.retryable is False
        assert err.correlation_id == ""
        assert str(err) == "boom"

    def test_custom_attributes(self) -> None:
        err = ViewerError("fail", stage="ingress", code="X", retryable=True, correlation_id="c-1")
        assert (err.stage, err.code, err.retryable, err.correlation_id) == (
            "ingress",
            "X",
            True,
            "c-1",
        )
        assert err.category == "transient"

    def test_error_dict_keys(self) -> None:
        assert set(ViewerError("x").to_error_dict()) == {
            "category",
            "code",
            "stage",
            "message",
            "retryable",
            "correlation_id",
        }


class TestCategories:
    """Category derives from the concrete class."""

    @pytest.mark.parametrize(
        ("exc", "category"),
        [
            (ValidationError("v"), "validation"),
            (ContractError("c"), "contract"),
            (PermanentError("p"), "permanent"),
            (ViewerError("x"), "permanent"),
        ],
    )
    def test_category(self, exc: ViewerError, category: str) -> None:
        assert exc.category == category
        assert exc.to_error_dict()["category"] == category

    @pytest.mark.parametrize("cls", [ValidationError, ContractError, PermanentError])
    def test_never_retryable_by_default(self, cls: type[ViewerError]) -> None:
        assert cls("x").retryable is False


class TestDomainExceptions:
    """Every domain exception is a ViewerError with a stable code."""

    CASES: ClassVar[list[tuple[type[ViewerError], str, str]]] = [
        (KmlParseError, "load_kml", "KML_PARSE_FAILED"),
        (KmlValidationError, "load_kml", "KML_VALIDATION_FAILED"),
        (InvalidCoordinateError, "load_kml", "KML_COORDINATE_INVALID"),
    ]

    @pytest.mark.parametrize(("cls", "stage", "code"), CASES)
    def test_loader_errors(self, cls: type[ViewerError], stage: str, code: str) -> None:
        err = cls("bad")
        assert isinstance(err, PermanentError)
        assert err.stage == stage
        assert err.code == code
        assert err.category == "permanent"

    def test_loader_hierarchy(self) -> None:
        assert issubclass(InvalidCoordinateError, KmlValidationError)
        assert issubclass(KmlValidationError, KmlParseError)

    def test_config_error(self) -> None:
        err = ConfigValidationError("MAP_ZOOM", 99, "must be between 0 and 22")
        assert isinstance(err, ViewerError)
        assert err.key == "MAP_ZOOM"
        assert err.value == 99
        assert "MAP_ZOOM=99" in err.message
        assert err.to_error_dict()["stage"] == "config"
