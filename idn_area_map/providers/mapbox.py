"""Mapbox Static Images API adapter.

Projects a boundary style into the two overlay encodings the API
accepts and builds complete request URLs:

- ``geojson(...)`` overlay: a simplestyle-spec GeoJSON feature, embedded
  percent-encoded in the path (best fidelity, most bytes).
- ``path-...(...)`` overlays: one encoded polyline per outer ring
  (lossless at 1e-5 degrees, far fewer bytes).
- bounding box viewport: no overlay at all, only the framed area.

Every builder checks the access token itself, since each is callable
independently of the adaptive generator. ``fetch_static_image`` performs
the single request for the chosen URL.

References:
    https://docs.mapbox.com/api/maps/static-images/
    https://github.com/mapbox/simplestyle-spec
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, urlencode

import httpx

from idn_area_map.core.constants import (
    DEFAULT_COORDINATE_PRECISION,
    DEFAULT_FILL_OPACITY,
    STATIC_QUERY_PARAMS,
    STROKE_OPACITY,
    STROKE_WIDTH,
)
from idn_area_map.core.exceptions import ConfigurationError, UpstreamFetchError
from idn_area_map.models.style import StyleValidationError
from idn_area_map.providers.base import http_client, is_retryable_status
from idn_area_map.utils.geometry import truncate_coordinates, truncate_geometry_coordinates
from idn_area_map.utils.polyline import encode_polyline

if TYPE_CHECKING:
    from collections.abc import Sequence

    from idn_area_map.core.config import MapboxConfig
    from idn_area_map.models.boundary import BoundaryFeature, Ring
    from idn_area_map.models.style import RenderSize, StyleDescriptor
    from idn_area_map.utils.geometry import BBox

logger = logging.getLogger("idn_area_map.providers.mapbox")

# Characters JavaScript's encodeURIComponent leaves alone (besides A-Z a-z 0-9 - _ . ~).
_URI_COMPONENT_SAFE = "!*'()"

_TOKEN_PATTERN = re.compile(r"(access_token=)[^&]+")


# ---------------------------------------------------------------------------
# Style projection
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FillStyle:
    """Fill colour split into an opaque ``#RRGGBB`` colour and an opacity."""

    fill: str
    fill_opacity: float


def parse_fill_color(fill_color: str) -> FillStyle:
    """Split an alpha-carrying hex colour into colour + opacity.

    ``#RRGGBBAA`` and ``#RGBA`` carry their own alpha; any other string
    is used as-is with the default opacity of 0.6.

    Raises:
        StyleValidationError: If the alpha digits are not hexadecimal.
    """
    try:
        if len(fill_color) == 9:
            return FillStyle(fill=fill_color[:7], fill_opacity=int(fill_color[7:9], 16) / 255)

        if len(fill_color) == 5:
            r, g, b, a = fill_color[1:5]
            return FillStyle(fill=f"#{r}{r}{g}{g}{b}{b}", fill_opacity=int(a + a, 16) / 255)
    except ValueError as exc:
        msg = f"Invalid alpha in fill colour {fill_color!r}"
        raise StyleValidationError(msg) from exc

    return FillStyle(fill=fill_color, fill_opacity=DEFAULT_FILL_OPACITY)


def to_simplestyle_geojson(boundary: BoundaryFeature, style: StyleDescriptor) -> dict[str, Any]:
    """Build a minimal simplestyle-spec Feature for a GeoJSON overlay.

    Only the five styling properties are emitted, and coordinates are
    truncated to 4 decimals, to keep the encoded URL short.
    """
    fill = parse_fill_color(style.fill_color)
    return {
        "type": "Feature",
        "properties": {
            "stroke": style.color,
            "stroke-width": STROKE_WIDTH,
            "stroke-opacity": STROKE_OPACITY,
            "fill": fill.fill,
            "fill-opacity": fill.fill_opacity,
        },
        "geometry": truncate_geometry_coordinates(boundary.geometry, DEFAULT_COORDINATE_PRECISION),
    }


# ---------------------------------------------------------------------------
# URL builders
# ---------------------------------------------------------------------------


def encode_uri_component(value: str) -> str:
    """Percent-encode *value* exactly like JavaScript's ``encodeURIComponent``."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_geojson_overlay_url(
    geojson: dict[str, Any],
    size: RenderSize,
    config: MapboxConfig,
) -> str:
    """Build a static image URL with a GeoJSON overlay.

    Raises:
        ConfigurationError: If no access token is configured.
    """
    token = _require_token(config)
    payload = encode_uri_component(_compact_json(geojson))
    return f"{config.static_base_url}/geojson({payload})/auto/{size}?{_query(token)}"


def build_path_overlay_url(
    rings: Sequence[Ring],
    style: StyleDescriptor,
    size: RenderSize,
    config: MapboxConfig,
) -> str:
    """Build a static image URL with one encoded-polyline path per ring.

    Each overlay reads ``path-2+STROKE-1+FILL-OPACITY(POLYLINE)``; ring
    coordinates are truncated to 4 decimals before encoding.

    Raises:
        ConfigurationError: If no access token is configured.
    """
    token = _require_token(config)

    fill = parse_fill_color(style.fill_color)
    stroke_color = _normalize_hex_color(style.color)
    fill_color = _normalize_hex_color(fill.fill)
    opacity = _format_number(round(fill.fill_opacity, 2))
    stroke_opacity = _format_number(STROKE_OPACITY)

    overlays = ",".join(
        f"path-{STROKE_WIDTH}+{stroke_color}-{stroke_opacity}+{fill_color}-{opacity}"
        f"({encode_uri_component(encode_polyline(_truncate_ring(ring)))})"
        for ring in rings
    )
    return f"{config.static_base_url}/{overlays}/auto/{size}?{_query(token)}"


def build_bbox_url(bbox: BBox, size: RenderSize, config: MapboxConfig) -> str:
    """Build a static image URL framing *bbox* with no overlay drawn.

    Raises:
        ConfigurationError: If no access token is configured.
    """
    token = _require_token(config)
    viewport = ",".join(_format_number(value) for value in bbox)
    return f"{config.static_base_url}/[{viewport}]/{size}?{_query(token)}"


# ---------------------------------------------------------------------------
# Fetch
# ---------------------------------------------------------------------------


def fetch_static_image(
    url: str,
    config: MapboxConfig,
    *,
    client: httpx.Client | None = None,
) -> bytes:
    """Request *url* and return the image bytes.

    Not retried: the caller has already exhausted its fallbacks when
    choosing *url*.

    Raises:
        UpstreamFetchError: On a transport failure or a non-2xx response
            (status, reason and body preserved).
    """
    try:
        with http_client(client, config.timeout_s) as session:
            response = session.get(url)
    except httpx.HTTPError as exc:
        logger.error(
            "Static image request failed | url=%s | error=%s",
            redact_token(url),
            type(exc).__name__,
        )
        raise UpstreamFetchError(0, type(exc).__name__, str(exc), retryable=True) from exc

    if not response.is_success:
        logger.error(
            "Static image request rejected | status=%d | url_length=%d | url=%s",
            response.status_code,
            len(url),
            redact_token(url),
        )
        raise UpstreamFetchError(
            response.status_code,
            response.reason_phrase,
            response.text,
            retryable=is_retryable_status(response.status_code),
        )

    logger.debug("Static image fetched | bytes=%d", len(response.content))
    return response.content


def redact_token(url: str) -> str:
    """Hide the access token in *url* for logging."""
    return _TOKEN_PATTERN.sub(r"\1***", url)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require_token(config: MapboxConfig) -> str:
    if not config.access_token:
        msg = "Mapbox access token is not configured"
        raise ConfigurationError(msg)
    return config.access_token


def _query(token: str) -> str:
    return urlencode([("access_token", token), *STATIC_QUERY_PARAMS])


def _normalize_hex_color(color: str) -> str:
    return color[1:] if color.startswith("#") else color


def _truncate_ring(ring: Ring) -> Ring:
    return [truncate_coordinates(coord, DEFAULT_COORDINATE_PRECISION) for coord in ring]


def _format_number(value: float) -> str:
    """Render a number the way JavaScript stringifies it (``1.0`` -> ``1``)."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _js_numbers(value: Any) -> Any:
    """Turn whole-number floats into ints so they serialise as ``106``, not ``106.0``."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {key: _js_numbers(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_js_numbers(item) for item in value]
    return value


def _compact_json(value: Any) -> str:
    return json.dumps(_js_numbers(value), separators=(",", ":"))
