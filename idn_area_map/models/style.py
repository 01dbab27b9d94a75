"""Per-area overlay styles and render size.

Each boundary area level has its own stroke/fill colours, a z-order hint
for interactive layers, and the base Douglas-Peucker tolerance (degrees)
the adaptive generator starts simplifying from.
"""

from __future__ import annotations

from dataclasses import dataclass

from idn_area_map.core.exceptions import ValidationError
from idn_area_map.models.area import Area


class StyleValidationError(ValidationError):
    """Raised when a style or render size is constructed with invalid values."""

    default_stage = "style"
    default_code = "STYLE_VALIDATION_FAILED"


@dataclass(frozen=True, slots=True)
class StyleDescriptor:
    """Overlay style for one area level.

    Attributes:
        color: Stroke colour as ``#RRGGBB``.
        fill_color: Fill colour as ``#RRGGBB``, ``#RRGGBBAA`` or ``#RGBA``.
        order: Draw order hint (higher draws on top). Not used for static maps.
        tolerance: Base simplification tolerance in degrees (>= 0).
    """

    color: str
    fill_color: str
    order: int = 0
    tolerance: float = 0.0

    def __post_init__(self) -> None:
        if self.tolerance < 0:
            msg = f"StyleDescriptor.tolerance={self.tolerance!r}: must be >= 0"
            raise StyleValidationError(msg)
        if not self.color:
            msg = "StyleDescriptor.color must not be empty"
            raise StyleValidationError(msg)
        if not self.fill_color:
            msg = "StyleDescriptor.fill_color must not be empty"
            raise StyleValidationError(msg)


@dataclass(frozen=True, slots=True)
class RenderSize:
    """Target image size in pixels."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            msg = f"RenderSize must be positive, got {self.width}x{self.height}"
            raise StyleValidationError(msg)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


FEATURE_STYLES: dict[Area, StyleDescriptor] = {
    Area.PROVINCE: StyleDescriptor(
        color="#2563eb",
        fill_color="#2563eb33",
        order=1,
        tolerance=0.012,
    ),
    Area.REGENCY: StyleDescriptor(
        color="#16a34a",
        fill_color="#16a34a33",
        order=2,
        tolerance=0.005,
    ),
    Area.DISTRICT: StyleDescriptor(
        color="#ea580c",
        fill_color="#ea580c33",
        order=3,
        tolerance=0.001,
    ),
    Area.VILLAGE: StyleDescriptor(
        color="#dc2626",
        fill_color="#dc262633",
        order=4,
        tolerance=0.0001,
    ),
}


def style_for_area(area: Area) -> StyleDescriptor | None:
    """Return the overlay style for *area*, or ``None`` if it has no boundary."""
    return FEATURE_STYLES.get(area)
