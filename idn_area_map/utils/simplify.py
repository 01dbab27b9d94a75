"""Best-effort boundary simplification.

Runs Shapely's Douglas-Peucker simplifier on every ring independently,
so the polygon/ring structure of the feature is preserved one-to-one.
Rings that collapse below a valid polygon ring are left in place for
the caller's degenerate-ring filter to drop.

Simplification is an optimisation, never a requirement: any failure
returns the original feature unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from shapely.errors import ShapelyError
from shapely.geometry import LineString

from idn_area_map.core.exceptions import SimplificationError
from idn_area_map.models.boundary import MULTI_POLYGON, POLYGON

if TYPE_CHECKING:
    from idn_area_map.models.boundary import BoundaryFeature, PolygonCoords, Ring

logger = logging.getLogger("idn_area_map.utils.simplify")


def simplify_boundary(feature: BoundaryFeature, tolerance: float) -> BoundaryFeature:
    """Simplify *feature* with the given tolerance (degrees).

    Returns:
        A new simplified feature, or *feature* itself if simplification
        failed for any reason.
    """
    try:
        coordinates = _simplify_coordinates(feature, tolerance)
    except (SimplificationError, ShapelyError, TypeError, ValueError, IndexError) as exc:
        logger.warning(
            "Simplification skipped | tolerance=%s | geometry=%s | reason=%s: %s",
            tolerance,
            feature.geometry_type,
            type(exc).__name__,
            exc,
        )
        return feature
    return feature.with_coordinates(coordinates)


def _simplify_coordinates(feature: BoundaryFeature, tolerance: float) -> list[object]:
    coordinates = feature.geometry.get("coordinates")
    if not isinstance(coordinates, list):
        msg = "Geometry has no coordinate array"
        raise SimplificationError(msg)
    if feature.geometry_type == POLYGON:
        return _simplify_polygon(coordinates, tolerance)
    if feature.geometry_type == MULTI_POLYGON:
        return [_simplify_polygon(p, tolerance) for p in coordinates]
    msg = f"Cannot simplify {feature.geometry_type or 'untyped'} geometry"
    raise SimplificationError(msg)


def _simplify_polygon(polygon: PolygonCoords, tolerance: float) -> PolygonCoords:
    return [_simplify_ring(ring, tolerance) for ring in polygon]


def _simplify_ring(ring: Ring, tolerance: float) -> Ring:
    try:
        line = LineString(ring).simplify(tolerance, preserve_topology=False)
    except (ShapelyError, ValueError, TypeError, IndexError) as exc:
        msg = f"{type(exc).__name__}: {exc}"
        raise SimplificationError(msg) from exc
    return [list(coord) for coord in line.coords]
