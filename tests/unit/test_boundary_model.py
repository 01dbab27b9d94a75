"""Tests for the BoundaryFeature GeoJSON wrapper."""

from __future__ import annotations

import pytest

from idn_area_map.models.boundary import BoundaryFeature, InvalidBoundaryError

TRIANGLE = [[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [0.0, 0.0]]


class TestFromGeoJSON:
    """Accepted payload shapes."""

    def test_feature(self, square_feature_geojson: dict[str, object]) -> None:
        feature = BoundaryFeature.from_geojson(square_feature_geojson)
        assert feature.geometry_type == "Polygon"
        assert feature.properties["code"] == "31"

    def test_bare_geometry(self) -> None:
        feature = BoundaryFeature.from_geojson(
            {"type": "MultiPolygon", "coordinates": [[TRIANGLE]]}
        )
        assert feature.is_multi is True
        assert feature.properties == {}

    def test_single_feature_collection(self, square_feature_geojson: dict[str, object]) -> None:
        payload = {"type": "FeatureCollection", "features": [square_feature_geojson]}
        assert BoundaryFeature.from_geojson(payload).geometry_type == "Polygon"

    def test_null_properties(self) -> None:
        payload = {
            "type": "Feature",
            "properties": None,
            "geometry": {"type": "Polygon", "coordinates": [TRIANGLE]},
        }
        assert BoundaryFeature.from_geojson(payload).properties == {}

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            "Feature",
            {"type": "FeatureCollection", "features": []},
            {"type": "Feature", "geometry": None},
            {"type": "Topology"},
        ],
    )
    def test_rejected(self, payload: object) -> None:
        with pytest.raises(InvalidBoundaryError):
            BoundaryFeature.from_geojson(payload)


class TestPolygonAccessors:
    """Polygon list and island count accessors."""

    def test_polygon_is_one_island(self, square_polygon: BoundaryFeature) -> None:
        assert square_polygon.is_multi is False
        assert square_polygon.is_polygonal is True
        assert square_polygon.island_count == 1
        assert square_polygon.polygons == [square_polygon.geometry["coordinates"]]

    def test_multipolygon_islands(self) -> None:
        feature = BoundaryFeature(
            geometry={"type": "MultiPolygon", "coordinates": [[TRIANGLE], [TRIANGLE]]}
        )
        assert feature.island_count == 2
        assert len(feature.polygons) == 2

    def test_line_is_not_polygonal(self) -> None:
        feature = BoundaryFeature(geometry={"type": "LineString", "coordinates": TRIANGLE})
        assert feature.is_polygonal is False


class TestCopies:
    """Transforms return new features and leave the original alone."""

    def test_with_coordinates(self, square_polygon: BoundaryFeature) -> None:
        original = square_polygon.geometry["coordinates"]
        updated = square_polygon.with_coordinates([TRIANGLE])
        assert updated.geometry["coordinates"] == [TRIANGLE]
        assert updated.geometry["type"] == "Polygon"
        assert square_polygon.geometry["coordinates"] is original
        assert updated.properties == square_polygon.properties

    def test_to_geojson(self, square_polygon: BoundaryFeature) -> None:
        payload = square_polygon.to_geojson()
        assert payload["type"] == "Feature"
        assert payload["geometry"] == square_polygon.geometry
        assert payload["properties"]["name"] == "DKI JAKARTA"
