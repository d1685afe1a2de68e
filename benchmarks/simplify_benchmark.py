"""Benchmark track simplification and polyline encoding with large point counts."""

from __future__ import annotations

import argparse
import math
import statistics
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from track_simplify.config import (  # noqa: E402
    POLYLINE_PRECISION,
    SIMPLIFY_TOLERANCE,
    UNKNOWN_SURFACE_ID,
)
from track_simplify.polyline import (  # noqa: E402
    parse_polyline_options,
    polyline_encode,
)
from track_simplify.rows import IrrelevantPoints, rows_to_points  # noqa: E402
from track_simplify.simplify import simplify_points  # noqa: E402
from track_simplify.surface import SurfaceMapping  # noqa: E402


@dataclass(slots=True)
class StageDurations:
    """Timing measurements (in seconds) for one simplify/encode run."""

    decode: float
    simplify: float
    encode: float

    @property
    def total(self) -> float:
        """Return the aggregate duration for this benchmark iteration."""

        return self.decode + self.simplify + self.encode


@dataclass(slots=True)
class BenchmarkSummary:
    """Aggregated statistics for multiple benchmark iterations."""

    point_count: int
    iterations: int
    retained_points: int
    mean_decode_ms: float
    mean_simplify_ms: float
    mean_encode_ms: float
    mean_total_ms: float
    worst_total_ms: float


def _build_rows(point_count: int) -> List[Dict[str, float | int]]:
    """Generate a wiggly lon/lat track switching surface every 500 samples."""

    base_lat = 37.0
    base_lon = -122.0
    step_deg = 1.2e-5
    rows: List[Dict[str, float | int]] = []
    for idx in range(point_count):
        rows.append(
            {
                "x": base_lon + 2.0e-4 * math.sin(idx / 50.0),
                "y": base_lat + idx * step_deg,
                "e": 100.0 + 10.0 * math.cos(idx / 200.0),
                "S": (idx // 500) % 3,
            }
        )
    return rows


def _build_mapping() -> SurfaceMapping:
    mapping = SurfaceMapping(UNKNOWN_SURFACE_ID)
    mapping.add_surface(0, "Paved")
    mapping.add_surface(1, "Gravel")
    mapping.add_surface(2, "Paved")
    return mapping


def _run_iteration(
    rows: List[Dict[str, float | int]],
    tolerance: float,
) -> tuple[StageDurations, int]:
    """Execute one benchmark iteration and capture per-stage timings."""

    start = time.perf_counter()
    points = rows_to_points(rows, IrrelevantPoints.IGNORE)
    decode = time.perf_counter() - start

    start = time.perf_counter()
    retained = simplify_points(points, _build_mapping(), tolerance)
    simplify = time.perf_counter() - start

    options = parse_polyline_options(
        [("y", POLYLINE_PRECISION), ("x", POLYLINE_PRECISION), ("d", 1), ("e", 1)]
    )
    start = time.perf_counter()
    encoded = polyline_encode([points[idx] for idx in sorted(retained)], options)
    _ = encoded  # guard against optimisation stripping the call
    encode = time.perf_counter() - start

    return StageDurations(decode=decode, simplify=simplify, encode=encode), len(retained)


def run_benchmark(
    point_count: int,
    iterations: int,
    tolerance: float = SIMPLIFY_TOLERANCE,
) -> BenchmarkSummary:
    """Benchmark the simplify/encode pipeline and return aggregated timings."""

    if point_count < 10000:
        raise ValueError("point_count must be at least 10,000")
    if iterations <= 0:
        raise ValueError("iterations must be positive")

    rows = _build_rows(point_count)
    durations: List[StageDurations] = []
    retained_points = 0
    for _ in range(iterations):
        stage, retained_points = _run_iteration(rows, tolerance)
        durations.append(stage)

    mean_decode = statistics.fmean(item.decode for item in durations)
    mean_simplify = statistics.fmean(item.simplify for item in durations)
    mean_encode = statistics.fmean(item.encode for item in durations)
    mean_total = statistics.fmean(item.total for item in durations)
    worst_total = max(item.total for item in durations)

    return BenchmarkSummary(
        point_count=point_count,
        iterations=iterations,
        retained_points=retained_points,
        mean_decode_ms=mean_decode * 1000.0,
        mean_simplify_ms=mean_simplify * 1000.0,
        mean_encode_ms=mean_encode * 1000.0,
        mean_total_ms=mean_total * 1000.0,
        worst_total_ms=worst_total * 1000.0,
    )


def _format_summary(summary: BenchmarkSummary) -> Dict[str, float]:
    """Return a JSON-friendly representation of the benchmark summary."""

    return {
        "point_count": summary.point_count,
        "iterations": summary.iterations,
        "retained_points": summary.retained_points,
        "mean_decode_ms": summary.mean_decode_ms,
        "mean_simplify_ms": summary.mean_simplify_ms,
        "mean_encode_ms": summary.mean_encode_ms,
        "mean_total_ms": summary.mean_total_ms,
        "worst_total_ms": summary.worst_total_ms,
    }


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments for the benchmark utility."""

    parser = argparse.ArgumentParser(
        description="Benchmark track simplification with large tracks",
    )
    parser.add_argument(
        "--points",
        type=int,
        default=50000,
        help="Number of points in the synthetic track",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of repetitions for averaging",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=SIMPLIFY_TOLERANCE,
        help="Simplification tolerance in coordinate units",
    )
    return parser.parse_args()


def main() -> None:
    """Entry point when running the module as a script."""

    args = _parse_args()
    summary = run_benchmark(args.points, args.iterations, args.tolerance)
    formatted = _format_summary(summary)
    for key, value in formatted.items():
        if key in {"point_count", "iterations", "retained_points"}:
            print(f"{key}: {value}")
        else:
            print(f"{key}: {value:.3f}")


if __name__ == "__main__":
    main()
