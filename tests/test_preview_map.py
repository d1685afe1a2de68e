"""Tests for the map preview tool."""

from __future__ import annotations

import json
from pathlib import Path

import folium
import polyline
import pytest

from conftest import make_point
from track_simplify.simplify import simplify_points
from track_simplify.tools.preview_map import (
    _RAW_COLOR,
    _RETAINED_COLOR,
    _UNCLASSIFIED_COLOR,
    create_preview_map,
    load_points,
    load_surface_mapping,
    main,
)


@pytest.fixture
def bent_track():
    coords = [
        (-3.1800, 51.4800),
        (-3.1800, 51.4802),
        (-3.1800, 51.4804),
        (-3.1815, 51.4806),
        (-3.1815, 51.4808),
        (-3.1800, 51.4810),
    ]
    return [make_point(i, x=x, y=y, s=0 if i < 3 else 7) for i, (x, y) in enumerate(coords)]


@pytest.fixture
def track_csv(tmp_path: Path) -> Path:
    path = tmp_path / "track.csv"
    path.write_text(
        "x,y,e,S\n"
        "-3.1800,51.4800,10,0\n"
        "-3.1800,51.4802,11,0\n"
        "-3.1800,51.4804,12,0\n"
        "-3.1815,51.4806,13,\n"
        "-3.1800,51.4810,14,0\n",
        encoding="utf-8",
    )
    return path


def _children_of(map_object: folium.Map, kind):
    return [child for child in map_object._children.values() if isinstance(child, kind)]


def test_create_preview_map_draws_raw_and_simplified(
    bent_track, numbered_surfaces, tmp_path: Path
) -> None:
    retained = simplify_points(bent_track, numbered_surfaces, 0.0001)
    output_path = tmp_path / "maps" / "preview.html"

    map_object = create_preview_map(
        bent_track, retained, mapping=numbered_surfaces, output_html_path=output_path
    )

    assert isinstance(map_object, folium.Map)
    assert output_path.exists()
    colors = {
        child.options.get("color")
        for child in _children_of(map_object, folium.vector_layers.PolyLine)
    }
    assert _RAW_COLOR in colors
    # Surface 7 has no group, so its run is drawn as unclassified.
    assert _UNCLASSIFIED_COLOR in colors
    markers = _children_of(map_object, folium.vector_layers.CircleMarker)
    assert len(markers) == len(retained)
    assert all(marker.options.get("color") == _RETAINED_COLOR for marker in markers)


def test_create_preview_map_without_mapping(bent_track) -> None:
    retained = {point.index for point in bent_track}
    map_object = create_preview_map(bent_track, retained)
    polylines = _children_of(map_object, folium.vector_layers.PolyLine)
    assert len(polylines) == 2


def test_create_preview_map_rejects_empty_track() -> None:
    with pytest.raises(ValueError):
        create_preview_map([], set())


def test_load_points_skips_rows_and_reads_surfaces(track_csv: Path) -> None:
    points = load_points(track_csv)
    assert len(points) == 5
    assert [point.s for point in points] == [0, 0, 0, None, 0]
    assert [point.index for point in points] == [0, 1, 2, 3, 4]
    assert points[0].d == 0.0
    assert points[-1].d > points[1].d


def test_load_surface_mapping(tmp_path: Path) -> None:
    assert load_surface_mapping(None).road_class_mappings == ()

    config_path = tmp_path / "surfaces.json"
    config_path.write_text(
        json.dumps({"unknown_surface_id": 99, "surfaces": {"0": "Paved"}}),
        encoding="utf-8",
    )
    mapping = load_surface_mapping(config_path)
    assert mapping.get_surface_group(make_point(0, s=0)) == "Paved"


def test_main_prints_polyline_and_writes_map(
    track_csv: Path, tmp_path: Path, capsys
) -> None:
    output_path = tmp_path / "preview.html"
    main(
        [
            "--input",
            str(track_csv),
            "--tolerance",
            "0.00001",
            "--precision",
            "5",
            "--output-html",
            str(output_path),
        ]
    )

    encoded = capsys.readouterr().out.strip()
    decoded = polyline.decode(encoded, 5)
    assert decoded[0] == (51.48, -3.18)
    assert decoded[-1] == (51.481, -3.18)
    assert output_path.exists()
