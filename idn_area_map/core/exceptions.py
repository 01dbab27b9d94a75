"""Error types shared by every layer of the map service.

All domain exceptions derive from ``MapError``. Each subclass declares
where it is raised (``default_stage``), a machine-readable
``default_code`` and whether a retry could help, so the HTTP layer and
the logs can report any failure with the same structured payload.

Categories
----------
``ValidationError`` covers bad input and is never retried.
``TransientError`` covers network and throttling failures.
``PermanentError`` covers deployment mistakes that a retry cannot fix.
"""

from __future__ import annotations

from typing import ClassVar


class MapError(Exception):
    """Base exception for all map-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Where the error was raised (e.g. ``"filter"``).
        code: Machine-readable error code (e.g. ``"EMPTY_GEOMETRY"``).
        retryable: Whether a caller could reasonably retry.
        correlation_id: Identifier of the request that failed, if known.
    """

    default_stage: ClassVar[str] = ""
    default_code: ClassVar[str] = ""
    #: ``None`` means the retry flag passed to ``__init__`` decides.
    fixed_category: ClassVar[str | None] = None
    default_retryable: ClassVar[bool] = False

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool | None = None,
        correlation_id: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = self.default_retryable if retryable is None else retryable
        self.correlation_id = correlation_id

    @property
    def category(self) -> str:
        if self.fixed_category is not None:
            return self.fixed_category
        return "transient" if self.retryable else "permanent"

    def with_correlation_id(self, correlation_id: str) -> MapError:
        """Tag the error with the request it belongs to and return it."""
        self.correlation_id = correlation_id
        return self

    def to_error_dict(self) -> dict[str, object]:
        """Structured payload with stable keys, for logs and JSON bodies."""
        payload: dict[str, object] = {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
        }
        if self.correlation_id:
            payload["correlation_id"] = self.correlation_id
        return payload


class ValidationError(MapError):
    """Bad input. Never retryable."""

    fixed_category = "validation"


class TransientError(MapError):
    """Temporary failure that may succeed on retry."""

    fixed_category = "transient"
    default_retryable = True


class PermanentError(MapError):
    """Failure a retry cannot fix."""

    fixed_category = "permanent"


# ---------------------------------------------------------------------------
# Pipeline errors
# ---------------------------------------------------------------------------


class EmptyGeometryError(ValidationError):
    """Degenerate-ring filtering left no polygon to draw."""

    default_stage = "filter"
    default_code = "EMPTY_GEOMETRY"


class ConfigurationError(PermanentError):
    """The Mapbox access token is not configured."""

    default_stage = "build_url"
    default_code = "MAPBOX_NOT_CONFIGURED"


class SimplificationError(MapError):
    """A geometry could not be simplified.

    Never escapes ``simplify_boundary``; the original feature is used instead.
    """

    default_stage = "simplify"
    default_code = "SIMPLIFICATION_FAILED"


class UpstreamFetchError(MapError):
    """The static image request failed.

    Attributes:
        status_code: HTTP status (``0`` when the request never completed).
        reason: HTTP reason phrase or transport error name.
        body: Response body text, for diagnostics.
    """

    default_stage = "fetch_image"
    default_code = "UPSTREAM_FETCH_FAILED"

    def __init__(
        self,
        status_code: int,
        reason: str,
        body: str = "",
        *,
        retryable: bool = False,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(
            f"Mapbox API error ({status_code}): {reason}. {body}".rstrip(),
            retryable=retryable,
        )
