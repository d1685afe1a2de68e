"""Conversion between raw track rows and :class:`Point` sequences.

A row is a mapping of field name to value, with ``None`` (or a missing key)
meaning the field is absent for that sample.
"""

from __future__ import annotations

from enum import Enum
import logging
from numbers import Integral, Real
from typing import Any, Collection, Dict, Iterable, List, Mapping, Optional

from .errors import DecodeError
from .geometry import Point, haversine_distance

_LOG = logging.getLogger(__name__)

Row = Mapping[str, Any]


class IrrelevantPoints(Enum):
    """What to do with rows lacking x, y or e.

    ``COUNT`` keeps advancing the index so that point indices line up with the
    raw row stream; ``IGNORE`` numbers only the decoded points.
    """

    COUNT = "count"
    IGNORE = "ignore"


def row_to_point(index: int, prev: Optional[Point], row: Row) -> Optional[Point]:
    """Decode one row, returning ``None`` when x, y or e is missing."""

    x = _coordinate(row, "x")
    y = _coordinate(row, "y")
    e = _coordinate(row, "e")
    s = _identifier(row, "S")
    r = _identifier(row, "R")
    if x is None or y is None or e is None:
        return None
    d = prev.d + haversine_distance(prev, x, y) if prev is not None else 0.0
    return Point(index=index, x=x, y=y, d=d, e=e, s=s, r=r)


def rows_to_points(
    rows: Iterable[Row],
    irrelevant_points: IrrelevantPoints = IrrelevantPoints.IGNORE,
) -> List[Point]:
    """Decode every row, skipping those that cannot become points."""

    points: List[Point] = []
    index = 0
    skipped = 0
    for row in rows:
        point = row_to_point(index, points[-1] if points else None, row)
        if point is not None:
            points.append(point)
            index += 1
        else:
            skipped += 1
            if irrelevant_points is IrrelevantPoints.COUNT:
                index += 1
    if skipped:
        _LOG.debug(
            "Skipped %d rows without x/y/e (%s)", skipped, irrelevant_points.value
        )
    return points


def rows_with_indexes_to_records(
    rows: Iterable[Row], indexes: Collection[int]
) -> List[Dict[str, Any]]:
    """Return the present fields of every row whose position is in ``indexes``."""

    records: List[Dict[str, Any]] = []
    for position, row in enumerate(rows):
        if position in indexes:
            records.append({key: value for key, value in row.items() if value is not None})
    return records


def rows_with_indexes_to_column(
    rows: Iterable[Row], column: str, indexes: Collection[int]
) -> List[Any]:
    """Return ``column`` (or ``None``) for every row whose position is in ``indexes``."""

    return [row.get(column) for position, row in enumerate(rows) if position in indexes]


def _coordinate(row: Row, key: str) -> Optional[float]:
    value = row.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, Real):
        raise DecodeError(f"Field '{key}' must be a number, got {value!r}")
    return float(value)


def _identifier(row: Row, key: str) -> Optional[int]:
    value = row.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, Integral) or value < 0:
        raise DecodeError(f"Field '{key}' must be a non-negative integer, got {value!r}")
    return int(value)


__all__ = [
    "IrrelevantPoints",
    "Row",
    "row_to_point",
    "rows_to_points",
    "rows_with_indexes_to_records",
    "rows_with_indexes_to_column",
]
