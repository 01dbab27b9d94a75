"""Data model for an administrative boundary feature.

A ``BoundaryFeature`` wraps a GeoJSON Feature whose geometry is a
``Polygon`` (first ring = outer boundary, the rest holes) or a
``MultiPolygon`` (one polygon per island). Coordinates stay in plain
GeoJSON nested lists of ``[lon, lat]`` pairs so they can be serialised
straight into an overlay URL.

Instances are never mutated: every geometry transform returns a new
feature via ``with_coordinates()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from idn_area_map.core.exceptions import ValidationError

Position = list[float]
Ring = list[Position]
PolygonCoords = list[Ring]

POLYGON = "Polygon"
MULTI_POLYGON = "MultiPolygon"


class InvalidBoundaryError(ValidationError):
    """Raised when a payload cannot be interpreted as a boundary feature."""

    default_stage = "boundary"
    default_code = "INVALID_BOUNDARY"


@dataclass(frozen=True, slots=True)
class BoundaryFeature:
    """A single GeoJSON feature describing an area boundary.

    Attributes:
        geometry: GeoJSON geometry dict (``type`` + ``coordinates``).
        properties: GeoJSON properties carried through untouched.
    """

    geometry: dict[str, Any]
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def geometry_type(self) -> str:
        return str(self.geometry.get("type", ""))

    @property
    def is_multi(self) -> bool:
        """Whether the geometry is a ``MultiPolygon``."""
        return self.geometry_type == MULTI_POLYGON

    @property
    def is_polygonal(self) -> bool:
        return self.geometry_type in (POLYGON, MULTI_POLYGON)

    @property
    def polygons(self) -> list[PolygonCoords]:
        """Polygons of the feature (one for a ``Polygon``, empty if not polygonal)."""
        if self.geometry_type == POLYGON:
            return [self.geometry["coordinates"]]
        if self.geometry_type == MULTI_POLYGON:
            return list(self.geometry["coordinates"])
        return []

    @property
    def island_count(self) -> int:
        return len(self.polygons)

    def with_coordinates(self, coordinates: list[Any]) -> BoundaryFeature:
        """Return a copy of this feature with new geometry coordinates."""
        return BoundaryFeature(
            geometry={**self.geometry, "coordinates": coordinates},
            properties=dict(self.properties),
        )

    def to_geojson(self) -> dict[str, Any]:
        """Serialise to a GeoJSON ``Feature`` dict."""
        return {
            "type": "Feature",
            "properties": dict(self.properties),
            "geometry": self.geometry,
        }

    @classmethod
    def from_geojson(cls, data: object) -> BoundaryFeature:
        """Build a feature from a GeoJSON payload.

        Accepts a ``Feature``, a bare geometry, or a ``FeatureCollection``
        holding exactly one feature.

        Raises:
            InvalidBoundaryError: If the payload has none of those shapes.
        """
        if not isinstance(data, dict):
            msg = f"GeoJSON payload must be an object, got {type(data).__name__}"
            raise InvalidBoundaryError(msg)

        kind = data.get("type")
        if kind == "FeatureCollection":
            features = data.get("features")
            if not isinstance(features, list) or len(features) != 1:
                count = len(features) if isinstance(features, list) else 0
                msg = f"FeatureCollection must contain exactly one feature, got {count}"
                raise InvalidBoundaryError(msg)
            return cls.from_geojson(features[0])

        if kind == "Feature":
            geometry = data.get("geometry")
            if not isinstance(geometry, dict) or "type" not in geometry:
                msg = "Feature has no geometry"
                raise InvalidBoundaryError(msg)
            properties = data.get("properties") or {}
            if not isinstance(properties, dict):
                msg = f"Feature properties must be an object, got {type(properties).__name__}"
                raise InvalidBoundaryError(msg)
            return cls(geometry=dict(geometry), properties=dict(properties))

        if isinstance(kind, str) and ("coordinates" in data or "geometries" in data):
            return cls(geometry=dict(data))

        msg = f"Unsupported GeoJSON type: {kind!r}"
        raise InvalidBoundaryError(msg)
