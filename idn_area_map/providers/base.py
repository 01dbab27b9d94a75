"""Shared plumbing for the external HTTP collaborators.

Both upstreams (the Mapbox Static Images API and the boundary GeoJSON
data set) are plain HTTPS GETs made with ``httpx``. Callers may inject
a long-lived ``httpx.Client`` (tests pass one built on
``httpx.MockTransport``); otherwise a short-lived client is opened per
request.
"""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

import httpx

from idn_area_map.core.exceptions import MapError

if TYPE_CHECKING:
    from collections.abc import Iterator


@contextlib.contextmanager
def http_client(client: httpx.Client | None, timeout_s: float) -> Iterator[httpx.Client]:
    """Yield *client*, or a temporary client closed on exit."""
    if client is not None:
        yield client
        return
    with httpx.Client(timeout=timeout_s, follow_redirects=True) as owned:
        yield owned


def is_retryable_status(status_code: int) -> bool:
    """Whether an HTTP status indicates a temporary upstream condition."""
    return status_code == 429 or status_code >= 500


# ---------------------------------------------------------------------------
# Provider exceptions
# ---------------------------------------------------------------------------


class ProviderError(MapError):
    """Base exception for upstream data-source errors.

    Attributes:
        provider: Name of the upstream that raised the error.
        message: Human-readable error description.
        status_code: HTTP status, ``0`` if no response was received.
        retryable: Whether the caller could retry the operation.
    """

    default_stage = "provider"
    default_code = "PROVIDER_ERROR"

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        status_code: int = 0,
        retryable: bool = False,
    ) -> None:
        self.provider = provider
        self.status_code = status_code
        super().__init__(message, retryable=retryable)

    def __str__(self) -> str:
        return f"[{self.provider}] {self.message}"


class BoundaryNotFoundError(ProviderError):
    """The boundary data set has no file for the requested area."""

    default_code = "BOUNDARY_NOT_FOUND"

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(provider, message, status_code=404, retryable=False)


class BoundarySourceError(ProviderError):
    """The boundary data set could not be read (network, non-2xx, bad JSON)."""

    default_code = "BOUNDARY_SOURCE_FAILED"
