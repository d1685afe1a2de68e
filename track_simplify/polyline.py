"""Multi-field polyline encoding of decoded track points.

The format generalises Google's encoded polyline: every configured field of
every point is scaled to an integer, delta-encoded against the same field of
the previous point, zigzagged and written as 5-bit groups offset into the
printable ASCII range. There are no separators; each value terminates itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
from numbers import Integral
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .errors import ConfigurationError
from .geometry import Point

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


class PointField(Enum):
    """Point attribute selectable for polyline output."""

    Y = "y"
    X = "x"
    D = "d"
    E = "e"
    S = "S"
    R = "R"

    @property
    def takes_default(self) -> bool:
        return self in (PointField.S, PointField.R)


@dataclass(frozen=True, slots=True)
class PolylineOption:
    """One emitted field with its scale factor.

    ``default`` replaces a missing surface or road class id and is required
    for those two fields; the coordinate fields never take one.
    """

    field: PointField
    factor: float
    default: Optional[int] = None

    def __post_init__(self) -> None:
        if self.field.takes_default and self.default is None:
            raise ConfigurationError(
                f"Polyline parameter '{self.field.value}' requires a default value"
            )
        if not self.field.takes_default and self.default is not None:
            raise ConfigurationError(
                f"Polyline parameter '{self.field.value}' does not allow a default value"
            )


def parse_polyline_options(raw_options: Iterable[Sequence[Any]]) -> List[PolylineOption]:
    """Build options from ``(field_name, precision[, default])`` entries.

    ``precision`` is the number of decimal digits kept, i.e. the scale factor
    is ``10 ** precision``.
    """

    options: List[PolylineOption] = []
    for entry in raw_options:
        entry = tuple(entry)
        if len(entry) not in (2, 3):
            raise ConfigurationError(
                f"Polyline option must be (field, precision[, default]), got {entry!r}"
            )
        name, precision = entry[0], entry[1]
        default = entry[2] if len(entry) == 3 else None
        try:
            field = PointField(name)
        except ValueError:
            raise ConfigurationError(f"Polyline parameter '{name}' is not valid") from None
        if isinstance(precision, bool) or not isinstance(precision, Integral) or precision < 0:
            raise ConfigurationError(
                f"Polyline precision for '{name}' must be a non-negative integer"
            )
        if default is not None and (
            isinstance(default, bool) or not isinstance(default, Integral) or default < 0
        ):
            raise ConfigurationError(
                f"Polyline default for '{name}' must be a non-negative integer"
            )
        options.append(
            PolylineOption(
                field=field,
                factor=float(10 ** int(precision)),
                default=None if default is None else int(default),
            )
        )
    return options


def polyline_encode(points: Iterable[Point], options: Sequence[PolylineOption]) -> str:
    """Encode ``points`` field by field in the order given by ``options``."""

    # The implicit point before the first one is all zeros, surface and road
    # class included.
    previous = [0] * len(options)
    chunks: List[str] = []
    for point in points:
        for position, option in enumerate(options):
            current = _scale(_field_value(point, option), option.factor)
            chunks.append(_encode_signed(current - previous[position]))
            previous[position] = current
    return "".join(chunks)


def polyline_decode(encoded: str, precisions: Sequence[int]) -> List[Tuple[float, ...]]:
    """Decode a polyline back into one tuple per point.

    ``precisions`` lists the per-field precision used when encoding, in field
    order. Raises ``ValueError`` when the string ends inside a point.
    """

    if not precisions:
        raise ValueError("At least one field precision is required")
    factors = [10**precision for precision in precisions]
    totals = [0] * len(precisions)
    points: List[Tuple[float, ...]] = []
    index = 0
    length = len(encoded)
    while index < length:
        values = []
        for position, factor in enumerate(factors):
            if index >= length:
                raise ValueError("Polyline ends in the middle of a point")
            delta, index = _decode_signed(encoded, index)
            totals[position] += delta
            values.append(totals[position] / factor)
        points.append(tuple(values))
    return points


def _field_value(point: Point, option: PolylineOption) -> float:
    field = option.field
    if field is PointField.Y:
        return point.y
    if field is PointField.X:
        return point.x
    if field is PointField.D:
        return point.d
    if field is PointField.E:
        return point.e
    raw = point.s if field is PointField.S else point.r
    if raw is None:
        raw = option.default
    return float(_clamp_i32(raw))


def _clamp_i32(value: int) -> int:
    """Ids outside the signed 32-bit range encode as 0."""

    if _I32_MIN <= value <= _I32_MAX:
        return value
    return 0


def _scale(value: float, factor: float) -> int:
    """Scale and round half away from zero, saturating like a 64-bit cast."""

    scaled = value * factor
    if math.isnan(scaled):
        return 0
    if math.isinf(scaled):
        return _I64_MAX if scaled > 0 else _I64_MIN
    rounded = math.trunc(scaled)
    if abs(scaled - rounded) >= 0.5:
        rounded += 1 if scaled > 0 else -1
    return max(_I64_MIN, min(_I64_MAX, rounded))


def _encode_signed(value: int) -> str:
    value = ~(value << 1) if value < 0 else (value << 1)
    chunks = []
    while value >= 0x20:
        chunks.append(chr((0x20 | (value & 0x1F)) + 63))
        value >>= 5
    chunks.append(chr(value + 63))
    return "".join(chunks)


def _decode_signed(encoded: str, index: int) -> Tuple[int, int]:
    result = 0
    shift = 0
    length = len(encoded)
    while True:
        if index >= length:
            raise ValueError("Polyline ends in the middle of a value")
        chunk = ord(encoded[index]) - 63
        index += 1
        if chunk < 0 or chunk > 0x3F:
            raise ValueError(f"Invalid polyline character {encoded[index - 1]!r}")
        result |= (chunk & 0x1F) << shift
        shift += 5
        if chunk < 0x20:
            break
    value = ~(result >> 1) if result & 1 else result >> 1
    return value, index


__all__ = [
    "PointField",
    "PolylineOption",
    "parse_polyline_options",
    "polyline_encode",
    "polyline_decode",
]
