"""Data models.

- Area: Administrative level and area-code helpers
- BoundaryFeature: GeoJSON boundary wrapper
- StyleDescriptor / RenderSize: Overlay style and target image size
"""

from idn_area_map.models.area import (
    Area,
    BoundaryParams,
    InvalidAreaCodeError,
    add_dot_separator,
    determine_area_by_code,
)
from idn_area_map.models.boundary import BoundaryFeature, InvalidBoundaryError
from idn_area_map.models.style import (
    FEATURE_STYLES,
    RenderSize,
    StyleDescriptor,
    StyleValidationError,
    style_for_area,
)

__all__ = [
    "FEATURE_STYLES",
    "Area",
    "BoundaryFeature",
    "BoundaryParams",
    "InvalidAreaCodeError",
    "InvalidBoundaryError",
    "RenderSize",
    "StyleDescriptor",
    "StyleValidationError",
    "add_dot_separator",
    "determine_area_by_code",
    "style_for_area",
]
