"""Tests for best-effort boundary simplification."""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from idn_area_map.models.boundary import BoundaryFeature
from idn_area_map.utils.simplify import simplify_boundary

SQUARE_WITH_MIDPOINT = [[0.0, 0.0], [0.5, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.0, 0.0]]


class TestSimplifyBoundary:
    """Per-ring Douglas-Peucker simplification."""

    def test_drops_collinear_vertex(self) -> None:
        feature = BoundaryFeature(
            geometry={"type": "Polygon", "coordinates": [SQUARE_WITH_MIDPOINT]}
        )
        result = simplify_boundary(feature, 0.01)
        ring = result.geometry["coordinates"][0]
        assert len(ring) == 5
        assert [0.5, 0.0] not in ring
        assert ring[0] == ring[-1]

    def test_multipolygon_structure_preserved(self) -> None:
        feature = BoundaryFeature(
            geometry={
                "type": "MultiPolygon",
                "coordinates": [
                    [SQUARE_WITH_MIDPOINT],
                    [SQUARE_WITH_MIDPOINT, SQUARE_WITH_MIDPOINT],
                ],
            },
            properties={"code": "11"},
        )
        result = simplify_boundary(feature, 0.01)
        assert result.geometry["type"] == "MultiPolygon"
        assert [len(polygon) for polygon in result.geometry["coordinates"]] == [1, 2]
        assert result.properties == {"code": "11"}

    def test_input_not_mutated(self) -> None:
        feature = BoundaryFeature(
            geometry={"type": "Polygon", "coordinates": [list(SQUARE_WITH_MIDPOINT)]}
        )
        simplify_boundary(feature, 0.01)
        assert feature.geometry["coordinates"][0] == SQUARE_WITH_MIDPOINT

    def test_large_tolerance_collapses_small_ring(self) -> None:
        tiny = [[0.0, 0.0], [0.001, 0.0], [0.001, 0.001], [0.0, 0.001], [0.0, 0.0]]
        feature = BoundaryFeature(geometry={"type": "Polygon", "coordinates": [tiny]})
        ring = simplify_boundary(feature, 0.1).geometry["coordinates"][0]
        assert len(ring) < 4


class TestSimplificationFailure:
    """Any failure returns the original feature unchanged."""

    def test_shapely_error(self, square_polygon: BoundaryFeature) -> None:
        with patch("idn_area_map.utils.simplify.LineString", side_effect=ValueError("bad ring")):
            assert simplify_boundary(square_polygon, 0.01) is square_polygon

    def test_missing_coordinates(self) -> None:
        feature = BoundaryFeature(geometry={"type": "Polygon", "coordinates": None})
        assert simplify_boundary(feature, 0.01) is feature

    def test_non_polygonal(self) -> None:
        feature = BoundaryFeature(
            geometry={"type": "LineString", "coordinates": [[0.0, 0.0], [1.0, 1.0]]}
        )
        assert simplify_boundary(feature, 0.01) is feature

    def test_failure_is_logged(
        self, square_polygon: BoundaryFeature, caplog: pytest.LogCaptureFixture
    ) -> None:
        with (
            caplog.at_level(logging.WARNING, logger="idn_area_map.utils.simplify"),
            patch("idn_area_map.utils.simplify.LineString", side_effect=TypeError("nope")),
        ):
            simplify_boundary(square_polygon, 0.05)
        assert "Simplification skipped" in caplog.text
        assert "tolerance=0.05" in caplog.text

    def test_malformed_polygon_entry(self) -> None:
        feature = BoundaryFeature(
            geometry={
                "type": "MultiPolygon",
                "coordinates": [[[[0, 0], [1, 0], [1, 1], [0, 0]]], 5],
            },
        )
        assert simplify_boundary(feature, 0.1) is feature
