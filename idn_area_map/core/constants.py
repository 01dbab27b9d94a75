"""Shared constants for static map generation.

Centralises the URL budget, per-stage island caps, and fixed overlay
parameters used by the URL builders and the adaptive generator.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Mapbox Static Images API
# ---------------------------------------------------------------------------

MAX_URL_LENGTH: int = 8192
"""Hard ceiling on request URL length accepted by the Static Images API."""

DEFAULT_MAPBOX_API_URL: str = "https://api.mapbox.com"
DEFAULT_MAPBOX_STYLE: str = "mapbox/streets-v12"
DEFAULT_MAPBOX_TIMEOUT_S: float = 30.0

#: Fixed query parameters appended after ``access_token``, in order.
STATIC_QUERY_PARAMS: tuple[tuple[str, str], ...] = (
    ("padding", "20"),
    ("attribution", "false"),
    ("logo", "false"),
)

# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

MIN_RING_POINTS: int = 4
"""3 distinct vertices + the closing point."""

DEFAULT_COORDINATE_PRECISION: int = 4
"""Decimal places kept in encoded overlays (~11 m)."""

POLYLINE_SCALE: float = 1e5

# ---------------------------------------------------------------------------
# Simplestyle overlay
# ---------------------------------------------------------------------------

DEFAULT_FILL_OPACITY: float = 0.6
STROKE_WIDTH: int = 2
STROKE_OPACITY: float = 1.0

# ---------------------------------------------------------------------------
# Degradation ladder
# ---------------------------------------------------------------------------

GEOJSON_MAX_POLYGONS: int = 50
COVERAGE_ISLAND_CAPS: tuple[int, ...] = (100, 75, 50, 30)
SIMPLIFIED_MAX_RINGS: int = 30
SIMPLIFICATION_MULTIPLIERS: tuple[float, ...] = (2.0, 4.0, 8.0)
#: Absolute tolerances added when the base tolerance is very fine.
FINE_TOLERANCE_THRESHOLD: float = 0.02
FINE_TOLERANCE_STEPS: tuple[float, ...] = (0.02, 0.05, 0.1)
EMERGENCY_ISLAND_CAPS: tuple[int, ...] = (15, 10, 5, 3, 1)

# ---------------------------------------------------------------------------
# Open Graph preview
# ---------------------------------------------------------------------------

DEFAULT_APP_URL: str = "https://idn-area-map.vercel.app"
DEFAULT_BOUNDARY_SOURCE_URL: str = (
    "https://raw.githubusercontent.com/fityannugroho/idn-area-boundary/main/data"
)
DEFAULT_IMAGE_WIDTH: int = 800
DEFAULT_IMAGE_HEIGHT: int = 400
FALLBACK_IMAGE_PATH: str = "/opengraph-image.png"
IMAGE_CONTENT_TYPE: str = "image/png"
