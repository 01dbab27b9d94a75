"""Pure geometry helpers for boundary overlays.

Coordinate truncation, bounding boxes, the bounding-box area proxy used
to rank islands by importance, and degenerate-ring filtering. No I/O;
every function returns new structures and leaves its input untouched.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any

from idn_area_map.core.constants import DEFAULT_COORDINATE_PRECISION, MIN_RING_POINTS
from idn_area_map.core.exceptions import EmptyGeometryError
from idn_area_map.models.boundary import MULTI_POLYGON, POLYGON

if TYPE_CHECKING:
    from collections.abc import Sequence

    from idn_area_map.models.boundary import BoundaryFeature, PolygonCoords, Position, Ring

logger = logging.getLogger("idn_area_map.utils.geometry")

BBox = tuple[float, float, float, float]


# ---------------------------------------------------------------------------
# Coordinate truncation
# ---------------------------------------------------------------------------


def truncate_coordinates(
    point: Sequence[float],
    precision: int = DEFAULT_COORDINATE_PRECISION,
) -> Position:
    """Round every component of a position to *precision* decimal places.

    Ties round away from zero on the exact binary value, so ``1.03125``
    becomes ``1.0313`` rather than the banker's ``1.0312``.
    """
    step = Decimal(1).scaleb(-precision)
    return [_round_half_up(value, step) for value in point]


def _round_half_up(value: float, step: Decimal) -> float:
    if not math.isfinite(value):
        return value
    return float(Decimal(value).quantize(step, rounding=ROUND_HALF_UP))


def truncate_geometry_coordinates(
    geometry: dict[str, Any],
    precision: int = DEFAULT_COORDINATE_PRECISION,
) -> dict[str, Any]:
    """Recursively truncate all coordinates in a GeoJSON geometry.

    Non-coordinate members are preserved. Unknown geometry types are
    returned unchanged.
    """
    kind = geometry.get("type")

    if kind == "Point":
        return {**geometry, "coordinates": truncate_coordinates(geometry["coordinates"], precision)}

    if kind in ("LineString", "MultiPoint"):
        return {
            **geometry,
            "coordinates": [truncate_coordinates(c, precision) for c in geometry["coordinates"]],
        }

    if kind in ("Polygon", "MultiLineString"):
        return {
            **geometry,
            "coordinates": [
                [truncate_coordinates(c, precision) for c in ring]
                for ring in geometry["coordinates"]
            ],
        }

    if kind == "MultiPolygon":
        return {
            **geometry,
            "coordinates": [
                [[truncate_coordinates(c, precision) for c in ring] for ring in polygon]
                for polygon in geometry["coordinates"]
            ],
        }

    if kind == "GeometryCollection":
        return {
            **geometry,
            "geometries": [
                truncate_geometry_coordinates(g, precision) for g in geometry["geometries"]
            ],
        }

    return geometry


# ---------------------------------------------------------------------------
# Area proxy ranking
# ---------------------------------------------------------------------------


def calculate_polygon_area_proxy(polygon: PolygonCoords) -> float:
    """Return the area of the polygon's axis-aligned bounding box.

    A fast stand-in for true area, used only to rank islands. Zero when
    the bounding box degenerates to a point or a line (or the polygon
    has no coordinates).
    """
    min_lon = min_lat = math.inf
    max_lon = max_lat = -math.inf

    for ring in polygon:
        for coord in ring:
            lon, lat = coord[0], coord[1]
            min_lon = min(min_lon, lon)
            max_lon = max(max_lon, lon)
            min_lat = min(min_lat, lat)
            max_lat = max(max_lat, lat)

    if min_lon == math.inf:
        return 0.0
    return (max_lon - min_lon) * (max_lat - min_lat)


def sort_polygons_by_area(polygons: Sequence[PolygonCoords]) -> list[PolygonCoords]:
    """Sort polygons by area proxy, largest first.

    The sort is stable: ties keep their original relative order.
    """
    return sorted(polygons, key=calculate_polygon_area_proxy, reverse=True)


def limit_polygons(
    feature: BoundaryFeature,
    max_count: int,
    pre_sorted: list[PolygonCoords] | None = None,
) -> BoundaryFeature:
    """Keep only the *max_count* largest polygons of a MultiPolygon feature.

    Args:
        feature: The feature to cap. Non-MultiPolygon features are
            returned unchanged.
        max_count: Maximum number of polygons to keep.
        pre_sorted: Polygons of *feature* already ranked by
            ``sort_polygons_by_area``; avoids sorting again.
    """
    if not feature.is_multi:
        return feature
    ranked = pre_sorted if pre_sorted is not None else sort_polygons_by_area(feature.polygons)
    return feature.with_coordinates(ranked[:max_count])


# ---------------------------------------------------------------------------
# Degenerate ring filtering
# ---------------------------------------------------------------------------


def _valid_rings(polygon: PolygonCoords) -> PolygonCoords:
    return [ring for ring in polygon if len(ring) >= MIN_RING_POINTS]


def filter_degenerate_polygons(feature: BoundaryFeature) -> BoundaryFeature:
    """Drop rings with fewer than 4 positions (3 vertices + closure).

    For a MultiPolygon, each polygon's rings are filtered and polygons
    left without any ring are dropped. Non-polygonal features pass
    through unchanged.

    Raises:
        EmptyGeometryError: If nothing valid remains.
    """
    if feature.geometry_type == POLYGON:
        rings = _valid_rings(feature.geometry["coordinates"])
        if not rings:
            msg = "No valid polygon rings after filtering degenerate polygons"
            raise EmptyGeometryError(msg)
        return feature.with_coordinates(rings)

    if feature.geometry_type == MULTI_POLYGON:
        polygons = [
            rings
            for rings in (_valid_rings(p) for p in feature.geometry["coordinates"])
            if rings
        ]
        if not polygons:
            msg = "No valid polygons after filtering degenerate polygons"
            raise EmptyGeometryError(msg)
        dropped = len(feature.geometry["coordinates"]) - len(polygons)
        if dropped:
            logger.debug(
                "Dropped degenerate polygons | dropped=%d | kept=%d", dropped, len(polygons)
            )
        return feature.with_coordinates(polygons)

    return feature


# ---------------------------------------------------------------------------
# Bounding box and ring selection
# ---------------------------------------------------------------------------


def get_bounding_box(geometry: dict[str, Any]) -> BBox:
    """Compute ``(min_lon, min_lat, max_lon, max_lat)`` of a (Multi)Polygon.

    Raises:
        EmptyGeometryError: If the geometry has no coordinates.
    """
    kind = geometry.get("type")
    if kind == POLYGON:
        polygons = [geometry["coordinates"]]
    elif kind == MULTI_POLYGON:
        polygons = geometry["coordinates"]
    else:
        polygons = []

    min_lon = min_lat = math.inf
    max_lon = max_lat = -math.inf
    for polygon in polygons:
        for ring in polygon:
            for coord in ring:
                min_lon = min(min_lon, coord[0])
                max_lon = max(max_lon, coord[0])
                min_lat = min(min_lat, coord[1])
                max_lat = max(max_lat, coord[1])

    if min_lon == math.inf:
        msg = f"Cannot compute bounding box of empty {kind} geometry"
        raise EmptyGeometryError(msg, stage="bbox")
    return (min_lon, min_lat, max_lon, max_lat)


def get_major_rings(
    feature: BoundaryFeature,
    max_count: int,
    pre_sorted: list[PolygonCoords] | None = None,
) -> list[Ring]:
    """Return the outer rings of the *max_count* largest polygons.

    A ``Polygon`` yields its single outer ring. A ``MultiPolygon`` yields
    outer rings ordered by area proxy, largest first, reusing
    *pre_sorted* when given.
    """
    if feature.geometry_type == POLYGON:
        return [feature.geometry["coordinates"][0]]

    ranked = pre_sorted if pre_sorted is not None else sort_polygons_by_area(feature.polygons)
    return [polygon[0] for polygon in ranked[:max_count]]
