#!/usr/bin/env python3
"""Preview a simplified track on an interactive map.

Loads track rows from a CSV file (columns ``x``, ``y``, ``e`` and optionally
``S``/``R``), simplifies them and prints the encoded polyline. An HTML map
comparing the raw and simplified tracks can be written alongside.

Usage examples:

    # Print the polyline for a track at the default tolerance
    python -m track_simplify.tools.preview_map --input track.csv

    # Surface-aware simplification with a map preview
    python -m track_simplify.tools.preview_map \
        --input track.csv \
        --surface-config surfaces.json \
        --tolerance 0.00005 \
        --output-html preview.html
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Collection, Dict, List, Optional, Sequence, Tuple, Union

import folium
import pandas as pd

from ..config import (
    LOG_FORMAT,
    POLYLINE_DEFAULT_FIELDS,
    POLYLINE_PRECISION,
    PREVIEW_MAX_MARKERS,
    PREVIEW_SHOW_RETAINED_MARKERS,
    PREVIEW_ZOOM_START,
    SIMPLIFICATION_FIELDS,
    SIMPLIFY_TOLERANCE,
    UNKNOWN_SURFACE_ID,
)
from ..geometry import Point
from ..polyline import parse_polyline_options, polyline_encode
from ..rows import IrrelevantPoints, rows_to_points
from ..sections import MemorySection
from ..simplify import simplify_points, surface_partitions
from ..surface import SurfaceMapping, build_surface_mapping

LatLon = Tuple[float, float]
PathLike = Union[str, Path]

LOGGER = logging.getLogger("preview_map")

_RAW_COLOR = "#999999"
_RETAINED_COLOR = "#d73027"
_GROUP_COLORS = (
    "#2c7bb6",
    "#1a9641",
    "#fdae61",
    "#7b3294",
    "#e66101",
    "#018571",
)
_UNCLASSIFIED_COLOR = "#404040"


def create_preview_map(
    points: Sequence[Point],
    retained: Collection[int],
    *,
    mapping: Optional[SurfaceMapping] = None,
    output_html_path: Optional[PathLike] = None,
) -> folium.Map:
    """Create a map overlaying the simplified track on the raw one.

    Args:
        points: Decoded track points.
        retained: ``Point.index`` values kept by :func:`simplify_points`.
        mapping: Optional surface mapping; when given, the simplified track is
            drawn one polyline per surface-group partition.
        output_html_path: Optional path to persist the map as an HTML file.

    Returns:
        A :class:`folium.Map` instance containing the overlay.

    Raises:
        ValueError: If ``points`` is empty.
    """

    if not points:
        raise ValueError("Cannot preview an empty track")

    raw_latlon: List[LatLon] = [(point.y, point.x) for point in points]
    folium_map = folium.Map(
        location=raw_latlon[0], zoom_start=PREVIEW_ZOOM_START, control_scale=True
    )
    folium.PolyLine(
        raw_latlon,
        color=_RAW_COLOR,
        weight=3,
        opacity=0.6,
        tooltip=f"Raw track ({len(points)} points)",
    ).add_to(folium_map)

    for group, latlon in _simplified_runs(points, retained, mapping):
        if len(latlon) < 2:
            continue
        folium.PolyLine(
            latlon,
            color=_group_color(group, mapping),
            weight=5,
            opacity=0.9,
            tooltip=f"Simplified: {group}" if group is not None else "Simplified",
        ).add_to(folium_map)

    kept = [point for point in points if point.index in retained]
    if PREVIEW_SHOW_RETAINED_MARKERS and len(kept) <= PREVIEW_MAX_MARKERS:
        for point in kept:
            folium.CircleMarker(
                location=(point.y, point.x),
                radius=3,
                color=_RETAINED_COLOR,
                fill=True,
                fill_color=_RETAINED_COLOR,
                tooltip=f"Point {point.index}",
            ).add_to(folium_map)

    if output_html_path is not None:
        output_path = Path(output_html_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        folium_map.save(str(output_path))

    return folium_map


def _simplified_runs(
    points: Sequence[Point],
    retained: Collection[int],
    mapping: Optional[SurfaceMapping],
) -> List[Tuple[Optional[str], List[LatLon]]]:
    """Return retained coordinates grouped by surface partition."""

    if mapping is None:
        latlon = [(point.y, point.x) for point in points if point.index in retained]
        return [(None, latlon)]
    runs: List[Tuple[Optional[str], List[LatLon]]] = []
    for start, end in surface_partitions(points, mapping):
        partition = points[start:end]
        latlon = [(point.y, point.x) for point in partition if point.index in retained]
        runs.append((mapping.get_surface_group(partition[0]), latlon))
    return runs


def _group_color(group: Optional[str], mapping: Optional[SurfaceMapping]) -> str:
    if mapping is None:
        return _GROUP_COLORS[0]
    if group is None:
        return _UNCLASSIFIED_COLOR
    # Stable across runs, unlike hash() on str.
    return _GROUP_COLORS[sum(map(ord, group)) % len(_GROUP_COLORS)]


def load_points(csv_path: PathLike) -> List[Point]:
    """Read a CSV file of track rows into points."""

    frame = pd.read_csv(csv_path)
    section = MemorySection.from_frame(frame)
    return rows_to_points(section.rows(SIMPLIFICATION_FIELDS), IrrelevantPoints.IGNORE)


def load_surface_mapping(config_path: Optional[PathLike]) -> SurfaceMapping:
    """Load a surface mapping from JSON, or an empty one when no path is given."""

    if config_path is None:
        return SurfaceMapping(UNKNOWN_SURFACE_ID)
    with open(config_path, "r", encoding="utf-8") as handle:
        config: Dict[str, object] = json.load(handle)
    return build_surface_mapping(config)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simplify a track and preview the result as a polyline and map"
    )
    parser.add_argument(
        "--input",
        required=True,
        help="CSV file with x, y, e and optional S/R columns",
    )
    parser.add_argument(
        "--surface-config",
        help="JSON file describing surface groups and road class fallbacks",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=SIMPLIFY_TOLERANCE,
        help=f"Simplification tolerance in coordinate units (default: {SIMPLIFY_TOLERANCE})",
    )
    parser.add_argument(
        "--precision",
        type=int,
        default=POLYLINE_PRECISION,
        help=f"Decimal digits kept for x/y in the polyline (default: {POLYLINE_PRECISION})",
    )
    parser.add_argument(
        "--output-html",
        help="Write an interactive preview map to this path",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Python logging level",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the preview_map tool."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    points = load_points(args.input)
    if not points:
        LOGGER.warning("No usable points found in %s", args.input)
        return
    mapping = load_surface_mapping(args.surface_config)
    retained = simplify_points(points, mapping, args.tolerance)
    LOGGER.info(
        "Retained %d of %d points (tolerance=%s)",
        len(retained),
        len(points),
        args.tolerance,
    )

    options = parse_polyline_options(
        [(name, args.precision) for name in POLYLINE_DEFAULT_FIELDS]
    )
    simplified = [point for point in points if point.index in retained]
    print(polyline_encode(simplified, options))

    if args.output_html:
        create_preview_map(
            points, retained, mapping=mapping, output_html_path=args.output_html
        )
        LOGGER.info("Preview map written to %s", args.output_html)


if __name__ == "__main__":
    main()
