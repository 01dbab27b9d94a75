"""Shared pytest fixtures for the idn-area-map test suite."""

from __future__ import annotations

import pytest

from idn_area_map.core.config import AppConfig, MapboxConfig
from idn_area_map.models.area import Area
from idn_area_map.models.boundary import BoundaryFeature
from idn_area_map.models.style import FEATURE_STYLES, RenderSize, StyleDescriptor

TEST_TOKEN = "pk.test-token"
APP_URL = "https://app.example"
BOUNDARY_URL = "https://data.example/data"

# ---------------------------------------------------------------------------
# Configuration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mapbox_config() -> MapboxConfig:
    """Mapbox settings with a test access token."""
    return MapboxConfig(access_token=TEST_TOKEN)


@pytest.fixture()
def app_config(mapbox_config: MapboxConfig) -> AppConfig:
    """Application settings pointing at fake hosts."""
    return AppConfig(app_url=APP_URL, boundary_source_url=BOUNDARY_URL, mapbox=mapbox_config)


@pytest.fixture()
def render_size() -> RenderSize:
    return RenderSize(800, 400)


@pytest.fixture()
def province_style() -> StyleDescriptor:
    return FEATURE_STYLES[Area.PROVINCE]


# ---------------------------------------------------------------------------
# Geometry fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def square_ring() -> list[list[float]]:
    """Closed 0.1-degree square near Jakarta."""
    return [[106.8, -6.3], [106.9, -6.3], [106.9, -6.2], [106.8, -6.2], [106.8, -6.3]]


@pytest.fixture()
def square_polygon(square_ring: list[list[float]]) -> BoundaryFeature:
    """Single-ring Polygon feature."""
    return BoundaryFeature(
        geometry={"type": "Polygon", "coordinates": [square_ring]},
        properties={"code": "31", "name": "DKI JAKARTA"},
    )


@pytest.fixture()
def square_feature_geojson(square_ring: list[list[float]]) -> dict[str, object]:
    """The square as a raw GeoJSON Feature payload."""
    return {
        "type": "Feature",
        "properties": {"code": "31", "name": "DKI JAKARTA"},
        "geometry": {"type": "Polygon", "coordinates": [square_ring]},
    }
