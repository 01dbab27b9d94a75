"""Boundary GeoJSON data set client.

Boundaries are static files laid out as
``{base}/{plural area}/{dotted code}.geojson``, for example
``.../regencies/96.03.geojson``.
"""

from __future__ import annotations

import logging

import httpx

from idn_area_map.core.constants import DEFAULT_BOUNDARY_SOURCE_URL
from idn_area_map.models.area import BOUNDARY_AREAS, Area, InvalidAreaCodeError, add_dot_separator
from idn_area_map.models.boundary import BoundaryFeature
from idn_area_map.providers.base import (
    BoundaryNotFoundError,
    BoundarySourceError,
    http_client,
    is_retryable_status,
)

logger = logging.getLogger("idn_area_map.providers.boundary_source")

PROVIDER_NAME = "idn-area-boundary"

_HEADERS = {"User-Agent": "idn-area-boundary", "Accept": "application/geo+json, application/json"}


class BoundarySource:
    """Reads area boundaries from the static boundary data set.

    Args:
        base_url: Root of the data set (without trailing slash).
        timeout_s: Per-request timeout when no *client* is given.
        client: Optional shared ``httpx.Client``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BOUNDARY_SOURCE_URL,
        *,
        timeout_s: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._client = client

    def boundary_url(self, area: Area, code: str) -> str:
        """Return the data set URL holding the boundary of *code*."""
        return f"{self._base_url}/{area.plural}/{add_dot_separator(code)}.geojson"

    def get_boundary(self, area: Area, code: str) -> BoundaryFeature:
        """Fetch and parse the boundary of one area.

        Raises:
            InvalidAreaCodeError: If *area* has no boundary data.
            BoundaryNotFoundError: If the data set has no such file.
            BoundarySourceError: On network failure, a non-2xx status,
                or a body that is not a GeoJSON feature.
        """
        if area not in BOUNDARY_AREAS:
            msg = f"{area.value} has no boundary data"
            raise InvalidAreaCodeError(msg)

        url = self.boundary_url(area, code)
        logger.debug("Fetching boundary | area=%s | code=%s | url=%s", area.value, code, url)

        try:
            with http_client(self._client, self._timeout_s) as client:
                response = client.get(url, headers=_HEADERS)
        except httpx.HTTPError as exc:
            msg = f"Boundary request failed: {type(exc).__name__}: {exc}"
            raise BoundarySourceError(PROVIDER_NAME, msg, retryable=True) from exc

        if response.status_code == 404:
            msg = f"No boundary for {area.value} {code}"
            raise BoundaryNotFoundError(PROVIDER_NAME, msg)

        if not response.is_success:
            msg = f"Boundary request returned HTTP {response.status_code}"
            raise BoundarySourceError(
                PROVIDER_NAME,
                msg,
                status_code=response.status_code,
                retryable=is_retryable_status(response.status_code),
            )

        try:
            payload = response.json()
        except ValueError as exc:
            msg = f"Boundary file for {code} is not valid JSON"
            raise BoundarySourceError(PROVIDER_NAME, msg) from exc

        feature = BoundaryFeature.from_geojson(payload)
        logger.info(
            "Boundary loaded | area=%s | code=%s | geometry=%s | islands=%d",
            area.value,
            code,
            feature.geometry_type,
            feature.island_count,
        )
        return feature
