"""Area image activity: render the social-share image for one area code.

Resolves the area level from the code, loads its boundary, runs the
adaptive static map pipeline and fetches the PNG. Any failure after
the code has been validated (no style for the level, Mapbox disabled,
boundary missing, upstream rejection) degrades to the site's generic
OpenGraph image instead of failing the request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from idn_area_map.core.constants import FALLBACK_IMAGE_PATH, IMAGE_CONTENT_TYPE
from idn_area_map.core.exceptions import (
    ConfigurationError,
    EmptyGeometryError,
    TransientError,
    UpstreamFetchError,
)
from idn_area_map.models.area import determine_area_by_code
from idn_area_map.models.boundary import InvalidBoundaryError
from idn_area_map.models.style import RenderSize, StyleValidationError, style_for_area
from idn_area_map.orchestrators.static_map import plan_static_map
from idn_area_map.providers.base import ProviderError, http_client
from idn_area_map.providers.boundary_source import BoundarySource
from idn_area_map.providers.mapbox import fetch_static_image

if TYPE_CHECKING:
    from idn_area_map.core.config import AppConfig

logger = logging.getLogger("idn_area_map.activities.area_image")

SOURCE_MAPBOX = "mapbox"
SOURCE_FALLBACK = "fallback"


class FallbackImageUnavailableError(TransientError):
    """Raised when even the generic fallback image cannot be fetched."""

    default_stage = "fallback_image"
    default_code = "FALLBACK_IMAGE_UNAVAILABLE"


@dataclass(frozen=True, slots=True)
class AreaImage:
    """Rendered image bytes plus where they came from.

    Attributes:
        content: Image bytes.
        content_type: MIME type of *content*.
        source: ``"mapbox"`` for a rendered map, ``"fallback"`` otherwise.
        stage: Pipeline stage that produced the map URL (empty for fallback).
    """

    content: bytes
    content_type: str = IMAGE_CONTENT_TYPE
    source: str = SOURCE_MAPBOX
    stage: str = ""


def render_area_image(
    code: str,
    config: AppConfig,
    *,
    boundary_source: BoundarySource | None = None,
    client: httpx.Client | None = None,
    correlation_id: str = "",
) -> AreaImage:
    """Render the static map image for area *code*.

    Args:
        code: Area code (digits only).
        config: Application configuration.
        boundary_source: Override for the boundary data set client.
        client: Shared ``httpx.Client`` for every outbound request.
        correlation_id: Request identifier attached to logs and errors.

    Raises:
        InvalidAreaCodeError: If *code* is not a known area code shape.
        FallbackImageUnavailableError: If rendering failed and the
            fallback image could not be fetched either.
    """
    area = determine_area_by_code(code)

    style = style_for_area(area)
    if style is None:
        logger.info(
            "No map style for area | area=%s | code=%s | correlation_id=%s",
            area.value,
            code,
            correlation_id,
        )
        return fetch_fallback_image(config, client=client, correlation_id=correlation_id)

    if not config.mapbox.is_enabled:
        logger.warning(
            "Mapbox access token not configured | code=%s | correlation_id=%s",
            code,
            correlation_id,
        )
        return fetch_fallback_image(config, client=client, correlation_id=correlation_id)

    source = boundary_source or BoundarySource(
        config.boundary_source_url,
        timeout_s=config.mapbox.timeout_s,
        client=client,
    )
    size = RenderSize(config.image_width, config.image_height)

    try:
        boundary = source.get_boundary(area, code)
        plan = plan_static_map(boundary, style, size, config.mapbox)
        content = fetch_static_image(plan.url, config.mapbox, client=client)
    except (
        ProviderError,
        InvalidBoundaryError,
        EmptyGeometryError,
        StyleValidationError,
        ConfigurationError,
        UpstreamFetchError,
    ) as exc:
        exc.with_correlation_id(correlation_id)
        logger.error(
            "Area image render failed, using fallback | code=%s | error_code=%s | "
            "correlation_id=%s | error=%s",
            code,
            exc.code,
            correlation_id,
            exc,
        )
        return fetch_fallback_image(config, client=client, correlation_id=correlation_id)

    logger.info(
        "Area image rendered | area=%s | code=%s | stage=%s | bytes=%d | correlation_id=%s",
        area.value,
        code,
        plan.stage.value,
        len(content),
        correlation_id,
    )
    return AreaImage(content=content, source=SOURCE_MAPBOX, stage=plan.stage.value)


def fetch_fallback_image(
    config: AppConfig,
    *,
    client: httpx.Client | None = None,
    correlation_id: str = "",
) -> AreaImage:
    """Fetch the site's generic OpenGraph image.

    Raises:
        FallbackImageUnavailableError: On network failure or a non-2xx status.
    """
    url = f"{config.app_url.rstrip('/')}{FALLBACK_IMAGE_PATH}"
    try:
        with http_client(client, config.mapbox.timeout_s) as session:
            response = session.get(url)
            response.raise_for_status()
    except httpx.HTTPError as exc:
        msg = f"Fallback image unavailable at {url}: {exc}"
        raise FallbackImageUnavailableError(msg, correlation_id=correlation_id) from exc

    content_type = response.headers.get("content-type", IMAGE_CONTENT_TYPE)
    return AreaImage(content=response.content, content_type=content_type, source=SOURCE_FALLBACK)
