"""Surface-aware Ramer-Douglas-Peucker simplification of decoded tracks."""

from __future__ import annotations

from itertools import groupby
import logging
from typing import Iterator, List, Sequence, Set, Tuple

from .geometry import CoordArray, Point, coordinate_arrays, farthest_in_arrays
from .surface import SurfaceMapping

_LOG = logging.getLogger(__name__)

IndexRange = Tuple[int, int]


def surface_partitions(
    points: Sequence[Point], mapping: SurfaceMapping
) -> Iterator[IndexRange]:
    """Yield half-open ``(start, end)`` ranges of equal surface group.

    Runs are maximal and taken in order, so together they cover ``points``
    exactly. Unclassified points (group ``None``) form runs of their own.
    """

    start = 0
    for _, run in groupby(points, key=mapping.get_surface_group):
        end = start + sum(1 for _ in run)
        yield start, end
        start = end


def simplify_points(
    points: Sequence[Point], mapping: SurfaceMapping, tolerance: float
) -> Set[int]:
    """Return the ``Point.index`` values kept after simplification.

    Every surface-group partition is reduced independently, so partition
    endpoints always survive. ``tolerance`` is in x/y units and is compared
    against the planar distance to each chord.
    """

    mapping.freeze()
    tolerance_sq = tolerance * tolerance
    xs, ys = coordinate_arrays(points)
    indexes = [point.index for point in points]

    anchors: Set[int] = set()
    partition_count = 0
    for start, end in surface_partitions(points, mapping):
        partition_count += 1
        _stack_rdp(xs, ys, indexes, start, end - 1, tolerance_sq, anchors)

    _LOG.debug(
        "Simplified %d points in %d partitions to %d (tolerance=%s)",
        len(points),
        partition_count,
        len(anchors),
        tolerance,
    )
    return anchors


def _stack_rdp(
    xs: CoordArray,
    ys: CoordArray,
    indexes: List[int],
    first: int,
    last: int,
    tolerance_sq: float,
    anchors: Set[int],
) -> None:
    """Reduce the inclusive range ``first..last`` into ``anchors``."""

    stack: List[IndexRange] = [(first, last)]
    while stack:
        low, high = stack.pop()
        farthest, distance_sq = farthest_in_arrays(xs[low : high + 1], ys[low : high + 1])
        if distance_sq > tolerance_sq:
            split = low + farthest
            stack.append((low, split))
            stack.append((split, high))
        else:
            anchors.add(indexes[low])
            anchors.add(indexes[high])


__all__ = ["surface_partitions", "simplify_points"]
