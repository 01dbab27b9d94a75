"""Encoded polyline algorithm (precision 5).

Each ring is written as signed, zig-zag encoded deltas of
``round(value * 1e5)``: latitude first, then longitude, 5 bits per
character with ``0x20`` as the continuation bit, offset by 63.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from idn_area_map.core.constants import POLYLINE_SCALE
from idn_area_map.core.exceptions import EmptyGeometryError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from idn_area_map.models.boundary import Ring


def _ensure_closed_ring(ring: Sequence[Sequence[float]]) -> list[Sequence[float]]:
    if not ring:
        msg = "Polygon ring is empty"
        raise EmptyGeometryError(msg, stage="encode_polyline")

    first = ring[0]
    last = ring[-1]
    if first[0] == last[0] and first[1] == last[1]:
        return list(ring)
    return [*ring, first]


def _encode_signed_value(value: int) -> str:
    num = ~(value << 1) if value < 0 else value << 1
    chunks: list[str] = []
    while num >= 0x20:
        chunks.append(chr((0x20 | (num & 0x1F)) + 63))
        num >>= 5
    chunks.append(chr(num + 63))
    return "".join(chunks)


def _scale(value: float) -> int:
    # Half-up rounding, matching the reference encoders.
    return math.floor(value * POLYLINE_SCALE + 0.5)


def encode_polyline(ring: Sequence[Sequence[float]]) -> str:
    """Encode a ring of ``[lon, lat]`` positions as a polyline string.

    The ring is closed first if its last position differs from the first.

    Raises:
        EmptyGeometryError: If *ring* is empty.
    """
    last_lat = 0
    last_lng = 0
    parts: list[str] = []

    for coord in _ensure_closed_ring(ring):
        lat = _scale(coord[1])
        lng = _scale(coord[0])
        parts.append(_encode_signed_value(lat - last_lat))
        parts.append(_encode_signed_value(lng - last_lng))
        last_lat = lat
        last_lng = lng

    return "".join(parts)


def decode_polyline(encoded: str) -> Ring:
    """Decode a polyline string back into ``[lon, lat]`` positions.

    Raises:
        ValueError: If the string ends in the middle of a value.
    """
    coords: Ring = []
    index = 0
    lat = 0
    lng = 0
    length = len(encoded)

    while index < length:
        deltas: list[int] = []
        for _ in range(2):
            result = 0
            shift = 0
            while True:
                if index >= length:
                    msg = "Truncated polyline string"
                    raise ValueError(msg)
                byte = ord(encoded[index]) - 63
                index += 1
                result |= (byte & 0x1F) << shift
                shift += 5
                if byte < 0x20:
                    break
            deltas.append(~(result >> 1) if result & 1 else result >> 1)
        lat += deltas[0]
        lng += deltas[1]
        coords.append([lng / POLYLINE_SCALE, lat / POLYLINE_SCALE])

    return coords
