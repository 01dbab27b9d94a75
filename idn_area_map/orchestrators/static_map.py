"""Adaptive static map generation.

A boundary overlay has to travel inside a single GET URL, capped at
``MAX_URL_LENGTH`` characters. Candidate URLs are produced from highest
to lowest fidelity and the first one that fits is used:

1. Filter degenerate rings (always).
2. GeoJSON overlay, at most 50 islands.
3. Polyline overlays of the largest 100 / 75 / 50 / 30 islands.
4. Simplified polylines (increasing tolerance, up to 30 islands).
5. Emergency polylines of the largest 15 / 10 / 5 / 3 / 1 islands.
6. Bounding box viewport (never fails).

Candidates are generated lazily, so a small boundary pays for one URL
build and no simplification at all.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from idn_area_map.core.constants import (
    COVERAGE_ISLAND_CAPS,
    EMERGENCY_ISLAND_CAPS,
    FINE_TOLERANCE_STEPS,
    FINE_TOLERANCE_THRESHOLD,
    GEOJSON_MAX_POLYGONS,
    MAX_URL_LENGTH,
    SIMPLIFICATION_MULTIPLIERS,
    SIMPLIFIED_MAX_RINGS,
)
from idn_area_map.core.exceptions import EmptyGeometryError
from idn_area_map.models.boundary import InvalidBoundaryError
from idn_area_map.providers.mapbox import (
    build_bbox_url,
    build_geojson_overlay_url,
    build_path_overlay_url,
    fetch_static_image,
    to_simplestyle_geojson,
)
from idn_area_map.utils.geometry import (
    filter_degenerate_polygons,
    get_bounding_box,
    get_major_rings,
    limit_polygons,
    sort_polygons_by_area,
)
from idn_area_map.utils.simplify import simplify_boundary

if TYPE_CHECKING:
    from collections.abc import Iterator

    import httpx

    from idn_area_map.core.config import MapboxConfig
    from idn_area_map.models.boundary import BoundaryFeature, PolygonCoords, Ring
    from idn_area_map.models.style import RenderSize, StyleDescriptor

logger = logging.getLogger("idn_area_map.orchestrators.static_map")


class MapStage(enum.Enum):
    """Degradation stage that produced the final URL."""

    GEOJSON = "geojson"
    COVERAGE = "coverage"
    SIMPLIFIED = "simplified"
    EMERGENCY = "emergency"
    BBOX = "bbox"


@dataclass(frozen=True, slots=True)
class StaticMapPlan:
    """A candidate (or the chosen) static image request.

    Attributes:
        url: Complete request URL, access token included.
        stage: Stage that built the URL.
        ring_count: Islands drawn (polygons for GeoJSON, rings for
            polyline stages, ``0`` for the bounding box).
        rings: Outer rings drawn by polyline stages, largest first.
        tolerance: Simplification tolerance applied, if any.
    """

    url: str
    stage: MapStage
    ring_count: int = 0
    rings: list[Ring] = field(default_factory=list, repr=False)
    tolerance: float | None = None

    @property
    def url_length(self) -> int:
        return len(self.url)


def build_simplification_attempts(base_tolerance: float) -> list[float]:
    """Return the ascending tolerances tried in the simplification stage.

    Multiples (2x, 4x, 8x) of the style tolerance, plus fixed fine
    steps when the style tolerance is below 0.02 degrees.
    """
    attempts = [base_tolerance * m for m in SIMPLIFICATION_MULTIPLIERS]
    if base_tolerance < FINE_TOLERANCE_THRESHOLD:
        attempts.extend(FINE_TOLERANCE_STEPS)
    return sorted({t for t in attempts if t > 0})


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


def plan_static_map(
    boundary: BoundaryFeature,
    style: StyleDescriptor,
    size: RenderSize,
    config: MapboxConfig,
    *,
    max_url_length: int = MAX_URL_LENGTH,
) -> StaticMapPlan:
    """Choose the highest-fidelity URL that fits within *max_url_length*.

    Deterministic: the same inputs always produce the same plan.

    Raises:
        InvalidBoundaryError: If *boundary* is not a Polygon or MultiPolygon.
        EmptyGeometryError: If no ring survives degenerate-ring filtering.
        ConfigurationError: If no access token is configured.
    """
    if not boundary.is_polygonal:
        msg = f"Cannot render {boundary.geometry_type or 'untyped'} geometry as a boundary"
        raise InvalidBoundaryError(msg)

    filtered = filter_degenerate_polygons(boundary)

    for candidate in _candidates(filtered, style, size, config):
        logger.debug(
            "Stage attempt | stage=%s | rings=%d | tolerance=%s | url_length=%d",
            candidate.stage.value,
            candidate.ring_count,
            candidate.tolerance,
            candidate.url_length,
        )
        if candidate.url_length <= max_url_length:
            _log_accepted(candidate)
            return candidate

    bbox = get_bounding_box(filtered.geometry)
    plan = StaticMapPlan(url=build_bbox_url(bbox, size, config), stage=MapStage.BBOX)
    logger.warning(
        "All overlay stages exceed URL limit, using bounding box | islands=%d | bbox=%s",
        filtered.island_count,
        bbox,
    )
    _log_accepted(plan)
    return plan


def generate_static_map(
    boundary: BoundaryFeature,
    style: StyleDescriptor,
    size: RenderSize,
    config: MapboxConfig,
    *,
    client: httpx.Client | None = None,
) -> bytes:
    """Plan the static map request for *boundary* and fetch the image.

    Raises:
        UpstreamFetchError: If the image service rejects the request.
        plus everything ``plan_static_map`` raises.
    """
    plan = plan_static_map(boundary, style, size, config)
    return fetch_static_image(plan.url, config, client=client)


def _candidates(
    filtered: BoundaryFeature,
    style: StyleDescriptor,
    size: RenderSize,
    config: MapboxConfig,
) -> Iterator[StaticMapPlan]:
    """Yield overlay candidates from highest to lowest fidelity."""
    is_multi = filtered.is_multi
    total_islands = filtered.island_count
    sorted_polygons = sort_polygons_by_area(filtered.polygons)

    # GeoJSON: only if no island would be dropped
    if not is_multi or total_islands <= GEOJSON_MAX_POLYGONS:
        limited = limit_polygons(filtered, GEOJSON_MAX_POLYGONS, sorted_polygons)
        yield StaticMapPlan(
            url=build_geojson_overlay_url(to_simplestyle_geojson(limited, style), size, config),
            stage=MapStage.GEOJSON,
            ring_count=limited.island_count,
        )
    else:
        logger.debug(
            "GeoJSON stage skipped | islands=%d | max=%d",
            total_islands,
            GEOJSON_MAX_POLYGONS,
        )

    # Coverage: full-resolution polylines, most islands first
    if is_multi:
        yield from _ring_candidates(
            filtered, sorted_polygons, COVERAGE_ISLAND_CAPS, MapStage.COVERAGE, style, size, config
        )

    # Simplified
    last_simplified: tuple[BoundaryFeature, list[PolygonCoords], float] | None = None
    for tolerance in build_simplification_attempts(style.tolerance):
        simplified = simplify_boundary(filtered, tolerance)
        try:
            cleaned = filter_degenerate_polygons(simplified)
        except EmptyGeometryError:
            logger.debug("Simplification collapsed every ring | tolerance=%s", tolerance)
            continue

        cleaned_sorted = sort_polygons_by_area(cleaned.polygons)
        last_simplified = (cleaned, cleaned_sorted, tolerance)
        rings = get_major_rings(cleaned, SIMPLIFIED_MAX_RINGS, cleaned_sorted)
        yield _path_plan(MapStage.SIMPLIFIED, rings, style, size, config, tolerance)

    # Emergency: a handful of islands from the most simplified geometry
    if is_multi:
        if last_simplified is not None:
            source, source_sorted, tolerance = last_simplified
        else:
            source, source_sorted, tolerance = filtered, sorted_polygons, None
        yield from _ring_candidates(
            source,
            source_sorted,
            EMERGENCY_ISLAND_CAPS,
            MapStage.EMERGENCY,
            style,
            size,
            config,
            tolerance,
        )


def _ring_candidates(
    feature: BoundaryFeature,
    sorted_polygons: list[PolygonCoords],
    caps: tuple[int, ...],
    stage: MapStage,
    style: StyleDescriptor,
    size: RenderSize,
    config: MapboxConfig,
    tolerance: float | None = None,
) -> Iterator[StaticMapPlan]:
    previous_count = -1
    for cap in caps:
        rings = get_major_rings(feature, cap, sorted_polygons)
        # A cap above the island count repeats the previous URL.
        if len(rings) == previous_count:
            continue
        previous_count = len(rings)
        yield _path_plan(stage, rings, style, size, config, tolerance)


def _path_plan(
    stage: MapStage,
    rings: list[Ring],
    style: StyleDescriptor,
    size: RenderSize,
    config: MapboxConfig,
    tolerance: float | None = None,
) -> StaticMapPlan:
    return StaticMapPlan(
        url=build_path_overlay_url(rings, style, size, config),
        stage=stage,
        ring_count=len(rings),
        rings=rings,
        tolerance=tolerance,
    )


def _log_accepted(plan: StaticMapPlan) -> None:
    logger.info(
        "Static map stage accepted | stage=%s | rings=%d | tolerance=%s | url_length=%d",
        plan.stage.value,
        plan.ring_count,
        plan.tolerance,
        plan.url_length,
    )
