"""Administrative area types and area-code helpers.

Indonesian area codes are hierarchical digit strings whose length
identifies the level: ``11`` (province), ``1101`` (regency), ``110101``
(district), ``1101012001`` (village). Island codes have 9 digits
(regency code + 5-digit island number).
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field, model_validator

from idn_area_map.core.exceptions import ValidationError


class InvalidAreaCodeError(ValidationError):
    """Raised when an area code is not a known code shape."""

    default_stage = "area_code"
    default_code = "INVALID_AREA_CODE"


class Area(enum.Enum):
    """Administrative level of an area."""

    PROVINCE = "province"
    REGENCY = "regency"
    DISTRICT = "district"
    VILLAGE = "village"
    ISLAND = "island"

    @property
    def plural(self) -> str:
        """Collection name used by the data sources (``"regencies"``)."""
        return _PLURALS[self]


_PLURALS: dict[Area, str] = {
    Area.PROVINCE: "provinces",
    Area.REGENCY: "regencies",
    Area.DISTRICT: "districts",
    Area.VILLAGE: "villages",
    Area.ISLAND: "islands",
}

_CODE_LENGTHS: dict[int, Area] = {
    2: Area.PROVINCE,
    4: Area.REGENCY,
    6: Area.DISTRICT,
    9: Area.ISLAND,
    10: Area.VILLAGE,
}

#: Areas that have polygon boundaries in the boundary data set.
BOUNDARY_AREAS: frozenset[Area] = frozenset(
    {Area.PROVINCE, Area.REGENCY, Area.DISTRICT, Area.VILLAGE}
)


def determine_area_by_code(code: str) -> Area:
    """Return the area level for *code*.

    Raises:
        InvalidAreaCodeError: If *code* is not all digits or has an
            unknown length.
    """
    if not code.isdigit():
        msg = f"Area code must be numeric, got {code!r}"
        raise InvalidAreaCodeError(msg)

    area = _CODE_LENGTHS.get(len(code))
    if area is None:
        msg = f"Unknown area code length {len(code)} for {code!r}"
        raise InvalidAreaCodeError(msg)
    return area


def add_dot_separator(code: str) -> str:
    """Insert the dots used by the boundary data set file names.

    - ``9603`` becomes ``96.03``
    - ``960301`` becomes ``96.03.01``
    - ``9603011001`` becomes ``96.03.01.1001``

    Other lengths are returned unchanged.
    """
    if len(code) == 4:
        return f"{code[:2]}.{code[2:]}"
    if len(code) == 6:
        return f"{code[:2]}.{code[2:4]}.{code[4:]}"
    if len(code) == 10:
        return f"{code[:2]}.{code[2:4]}.{code[4:6]}.{code[6:]}"
    return code


class BoundaryParams(BaseModel):
    """Validated ``(area, code)`` pair for a boundary lookup."""

    area: Area
    code: str = Field(pattern=r"^\d+$")

    @model_validator(mode="after")
    def _check_code_length(self) -> BoundaryParams:
        if self.area not in BOUNDARY_AREAS:
            msg = f"{self.area.value} has no boundary data"
            raise ValueError(msg)
        try:
            code_area = determine_area_by_code(self.code)
        except InvalidAreaCodeError as exc:
            raise ValueError(exc.message) from exc
        if code_area is not self.area:
            msg = "Invalid code length"
            raise ValueError(msg)
        return self
