"""Encoded polyline format.

Each point is stored as a pair of deltas (latitude, longitude) to the
previous point, scaled by 1e5. Every delta is zig-zag encoded and split into
5-bit groups, least significant first. A group is written as one printable
character (value + 63); the 0x20 bit marks that more groups follow.
"""

from collections.abc import Iterable, Sequence

from transit_journeys.domain.errors import ParserError
from transit_journeys.domain.models.location import Point

_OFFSET = 63
_CONTINUATION_BIT = 0x20
_GROUP_MASK = 0x1F
_PRECISION = 1e5


def _read_value(encoded: str, index: int) -> tuple[int, int]:
    """Read one zig-zag value starting at index; returns (value, next index)."""
    raw = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise ParserError(f"Truncated polyline: value at offset {index} is incomplete")
        chunk = ord(encoded[index]) - _OFFSET
        if chunk < 0 or chunk > 0x3F:
            raise ParserError(f"Invalid polyline character {encoded[index]!r} at offset {index}")
        index += 1
        raw |= (chunk & _GROUP_MASK) << shift
        shift += 5
        if chunk < _CONTINUATION_BIT:
            break
    value = ~(raw >> 1) if raw & 1 else raw >> 1
    return value, index


def decode(encoded: str) -> list[Point]:
    """Decode an encoded polyline into points.

    Raises:
        ParserError: If the string ends inside a value or holds an unpaired value.
    """
    points: list[Point] = []
    lat = 0
    lon = 0
    index = 0
    while index < len(encoded):
        delta_lat, index = _read_value(encoded, index)
        if index >= len(encoded):
            raise ParserError("Truncated polyline: latitude without longitude")
        delta_lon, index = _read_value(encoded, index)
        lat += delta_lat
        lon += delta_lon
        points.append(Point(lat / _PRECISION, lon / _PRECISION))
    return points


def _write_value(value: int) -> str:
    raw = ~(value << 1) if value < 0 else value << 1
    chars = []
    while raw >= _CONTINUATION_BIT:
        chars.append(chr((_CONTINUATION_BIT | (raw & _GROUP_MASK)) + _OFFSET))
        raw >>= 5
    chars.append(chr(raw + _OFFSET))
    return "".join(chars)


def encode(points: Iterable[Point]) -> str:
    """Encode points with the same algorithm decode() reverses."""
    parts = []
    previous_lat = 0
    previous_lon = 0
    for point in points:
        lat = round(point.lat * _PRECISION)
        lon = round(point.lon * _PRECISION)
        parts.append(_write_value(lat - previous_lat))
        parts.append(_write_value(lon - previous_lon))
        previous_lat = lat
        previous_lon = lon
    return "".join(parts)


def path_from(
    encoded: str | None = None,
    points: Sequence[Point] | None = None,
    boundary: Iterable[Point | None] = (),
) -> tuple[Point, ...]:
    """Pick the richest available path source for a leg.

    An encoded polyline wins over explicit points, which win over the leg's
    boundary coordinates (departure, intermediate stops, arrival). Boundary
    entries without a coordinate are skipped.
    """
    if encoded:
        return tuple(decode(encoded))
    if points:
        return tuple(points)
    return tuple(point for point in boundary if point is not None)
