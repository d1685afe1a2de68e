"""Point type and planar/geodesic distance helpers for track simplification."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

CoordArray = NDArray[np.float64]

SurfaceTypeId = int
RoadClassId = int

_EARTH_RADIUS_M = 6_371_000.0


@dataclass(frozen=True, slots=True)
class Point:
    """One decoded track sample.

    ``index`` is the position of the sample in the source row stream and is
    what simplification reports back. ``d`` is the cumulative great-circle
    distance in metres from the first decoded point.
    """

    index: int
    x: float
    y: float
    d: float = 0.0
    e: float = 0.0
    s: Optional[SurfaceTypeId] = None
    r: Optional[RoadClassId] = None


def haversine_distance(prev: Point, x: float, y: float) -> float:
    """Return the great-circle distance in metres from ``prev`` to ``(x, y)``."""

    theta1 = math.radians(prev.y)
    theta2 = math.radians(y)
    delta_theta = math.radians(y - prev.y)
    delta_lambda = math.radians(x - prev.x)
    a = (
        math.sin(delta_theta / 2.0) ** 2
        + math.cos(theta1) * math.cos(theta2) * math.sin(delta_lambda / 2.0) ** 2
    )
    c = 2.0 * math.asin(math.sqrt(a))
    return _EARTH_RADIUS_M * c


def chord_distance_sq(point: Point, start: Point, end: Point) -> float:
    """Squared x/y distance from ``point`` to the chord ``start``-``end``."""

    distances = _chord_distances_sq(
        np.array([point.x], dtype=float),
        np.array([point.y], dtype=float),
        start.x,
        start.y,
        end.x,
        end.y,
    )
    return float(distances[0])


def farthest_point(points: Sequence[Point]) -> Tuple[int, float]:
    """Return the interior point farthest from the first-to-last chord.

    The result is ``(index, distance_sq)`` with ``index`` relative to
    ``points``. Slices without interior points, or whose interior points all
    lie on the chord, give ``(0, 0.0)``.
    """

    xs, ys = coordinate_arrays(points)
    return farthest_in_arrays(xs, ys)


def coordinate_arrays(points: Sequence[Point]) -> Tuple[CoordArray, CoordArray]:
    """Return float64 x and y arrays for ``points``."""

    count = len(points)
    xs = np.fromiter((point.x for point in points), dtype=float, count=count)
    ys = np.fromiter((point.y for point in points), dtype=float, count=count)
    return xs, ys


def farthest_in_arrays(xs: CoordArray, ys: CoordArray) -> Tuple[int, float]:
    """Array form of :func:`farthest_point`; ``xs``/``ys`` may be views."""

    count = xs.shape[0]
    if count < 3:
        return 0, 0.0
    distances = _chord_distances_sq(
        xs[1:-1], ys[1:-1], xs[0], ys[0], xs[count - 1], ys[count - 1]
    )
    # Points with NaN coordinates never become the split point.
    distances = np.where(np.isnan(distances), 0.0, distances)
    # argmax keeps the first of equal maxima.
    offset = int(np.argmax(distances))
    distance = float(distances[offset])
    if not distance > 0.0:
        return 0, 0.0
    return offset + 1, distance


def _chord_distances_sq(
    px: CoordArray,
    py: CoordArray,
    start_x: float,
    start_y: float,
    end_x: float,
    end_y: float,
) -> CoordArray:
    """Squared distances from each ``(px, py)`` to the clamped chord projection."""

    dx = end_x - start_x
    dy = end_y - start_y
    if dx != 0.0 or dy != 0.0:
        t = ((px - start_x) * dx + (py - start_y) * dy) / (dx * dx + dy * dy)
        near_x = np.where(t > 1.0, end_x, np.where(t > 0.0, start_x + dx * t, start_x))
        near_y = np.where(t > 1.0, end_y, np.where(t > 0.0, start_y + dy * t, start_y))
    else:
        # Degenerate chord: measure against the start point.
        near_x = start_x
        near_y = start_y
    ex = px - near_x
    ey = py - near_y
    return ex * ex + ey * ey


__all__ = [
    "Point",
    "SurfaceTypeId",
    "RoadClassId",
    "haversine_distance",
    "chord_distance_sq",
    "farthest_point",
    "coordinate_arrays",
    "farthest_in_arrays",
]
