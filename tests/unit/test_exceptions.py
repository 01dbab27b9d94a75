"""Tests for the unified exception taxonomy.

Validates:
- MapError hierarchy and structured attributes
- Category classification (validation, transient, permanent)
- ``to_error_dict()`` produces stable payload keys
- Domain and provider exceptions map onto the taxonomy
"""

from __future__ import annotations

from typing import ClassVar

from idn_area_map.activities.area_image import FallbackImageUnavailableError
from idn_area_map.core.config import ConfigValidationError
from idn_area_map.core.exceptions import (
    ConfigurationError,
    EmptyGeometryError,
    MapError,
    PermanentError,
    SimplificationError,
    TransientError,
    UpstreamFetchError,
    ValidationError,
)
from idn_area_map.models.area import InvalidAreaCodeError
from idn_area_map.models.boundary import InvalidBoundaryError
from idn_area_map.models.style import StyleValidationError
from idn_area_map.providers.base import BoundaryNotFoundError, BoundarySourceError, ProviderError


class TestMapErrorBase:
    """MapError base class behavior."""

    def test_default_attributes(self) -> None:
        err = MapError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""
        assert err.retryable is False
        assert err.correlation_id == ""

    def test_custom_attributes(self) -> None:
        err = MapError(
            "fail",
            stage="fetch_image",
            code="UPSTREAM_FETCH_FAILED",
            retryable=True,
            correlation_id="req-42",
        )
        assert err.stage == "fetch_image"
        assert err.code == "UPSTREAM_FETCH_FAILED"
        assert err.retryable is True
        assert err.correlation_id == "req-42"

    def test_str_is_message(self) -> None:
        assert str(MapError("human-readable error")) == "human-readable error"

    def test_error_dict_keys_are_stable(self) -> None:
        payload = MapError("x").to_error_dict()
        assert set(payload) == {"category", "code", "stage", "message", "retryable"}

    def test_error_dict_includes_correlation_id_when_set(self) -> None:
        err = MapError("x").with_correlation_id("inv-7")
        assert err.to_error_dict()["correlation_id"] == "inv-7"

    def test_with_correlation_id_returns_same_error(self) -> None:
        err = EmptyGeometryError("nothing left")
        assert err.with_correlation_id("inv-8") is err
        assert err.correlation_id == "inv-8"


class TestCategories:
    """Category property follows the concrete class."""

    def test_validation(self) -> None:
        err = ValidationError("bad")
        assert err.category == "validation"
        assert err.retryable is False

    def test_transient(self) -> None:
        err = TransientError("later")
        assert err.category == "transient"
        assert err.retryable is True

    def test_permanent(self) -> None:
        err = PermanentError("never")
        assert err.category == "permanent"
        assert err.retryable is False

    def test_base_falls_back_to_retry_flag(self) -> None:
        assert MapError("x", retryable=True).category == "transient"
        assert MapError("x").category == "permanent"


class TestDomainErrors:
    """Domain exceptions carry their stage and code."""

    def test_empty_geometry(self) -> None:
        err = EmptyGeometryError("nothing left")
        assert isinstance(err, ValidationError)
        assert err.stage == "filter"
        assert err.code == "EMPTY_GEOMETRY"

    def test_configuration(self) -> None:
        err = ConfigurationError("no token")
        assert isinstance(err, PermanentError)
        assert err.code == "MAPBOX_NOT_CONFIGURED"
        assert err.category == "permanent"

    def test_simplification_is_internal_map_error(self) -> None:
        err = SimplificationError("bad ring")
        assert err.stage == "simplify"
        assert err.code == "SIMPLIFICATION_FAILED"

    def test_upstream_fetch_preserves_response(self) -> None:
        err = UpstreamFetchError(422, "Unprocessable Entity", "Overlay too large")
        assert err.status_code == 422
        assert err.reason == "Unprocessable Entity"
        assert err.body == "Overlay too large"
        assert err.message == "Mapbox API error (422): Unprocessable Entity. Overlay too large"
        assert err.retryable is False

    def test_upstream_fetch_without_body(self) -> None:
        err = UpstreamFetchError(0, "ConnectError", retryable=True)
        assert err.message == "Mapbox API error (0): ConnectError."
        assert err.category == "transient"


class TestAllErrorsAreMapErrors:
    """Every exception raised by the package derives from MapError."""

    EXCEPTIONS: ClassVar[list[type[Exception]]] = [
        ConfigValidationError,
        ConfigurationError,
        EmptyGeometryError,
        FallbackImageUnavailableError,
        InvalidAreaCodeError,
        InvalidBoundaryError,
        ProviderError,
        BoundaryNotFoundError,
        BoundarySourceError,
        SimplificationError,
        StyleValidationError,
        UpstreamFetchError,
    ]

    def test_subclass(self) -> None:
        for exc_type in self.EXCEPTIONS:
            assert issubclass(exc_type, MapError), exc_type.__name__

    def test_validation_errors_never_retryable(self) -> None:
        for exc_type in (InvalidAreaCodeError, InvalidBoundaryError, StyleValidationError):
            err = exc_type("bad")
            assert err.category == "validation"
            assert err.retryable is False


class TestProviderErrors:
    """Boundary source exceptions."""

    def test_not_found(self) -> None:
        err = BoundaryNotFoundError("idn-area-boundary", "missing")
        assert err.status_code == 404
        assert err.code == "BOUNDARY_NOT_FOUND"
        assert err.retryable is False
        assert str(err) == "[idn-area-boundary] missing"

    def test_source_error_retry_flag(self) -> None:
        err = BoundarySourceError("idn-area-boundary", "timeout", retryable=True)
        assert err.code == "BOUNDARY_SOURCE_FAILED"
        assert err.category == "transient"
