"""Tests for the multi-field polyline encoder."""

from __future__ import annotations

import math

import polyline
import pytest

from conftest import make_point
from track_simplify.errors import ConfigurationError
from track_simplify.polyline import (
    PointField,
    PolylineOption,
    parse_polyline_options,
    polyline_decode,
    polyline_encode,
)
from track_simplify.rows import rows_to_points


def _flatten(decoded):
    return [value for point in decoded for value in point]


@pytest.fixture
def two_points():
    return [make_point(0, x=40.0, y=12.0, e=2.0), make_point(1, x=41.0, y=800.0, e=2.0)]


def test_encodes_the_reference_google_polyline() -> None:
    points = [
        make_point(0, x=-120.2, y=38.5),
        make_point(1, x=-120.95, y=40.7),
        make_point(2, x=-126.453, y=43.252),
    ]
    options = parse_polyline_options([("y", 5), ("x", 5)])
    assert polyline_encode(points, options) == "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


def test_simple_case_in_both_field_orders(two_points) -> None:
    encoded = polyline_encode(two_points, parse_polyline_options([["y", 5], ["x", 5]]))
    assert polyline.decode(encoded, 5) == [(12.0, 40.0), (800.0, 41.0)]

    encoded = polyline_encode(two_points, parse_polyline_options([["x", 5], ["y", 5]]))
    assert _flatten(polyline_decode(encoded, [5, 5])) == [40.0, 12.0, 41.0, 800.0]


def test_fields_can_use_different_precisions(two_points) -> None:
    encoded = polyline_encode(two_points, parse_polyline_options([["y", 1], ["x", 5]]))
    assert _flatten(polyline_decode(encoded, [1, 5])) == [12.0, 40.0, 800.0, 41.0]

    encoded = polyline_encode(two_points, parse_polyline_options([["x", 5], ["y", 1]]))
    assert _flatten(polyline_decode(encoded, [5, 1])) == [40.0, 12.0, 41.0, 800.0]


def test_missing_surface_uses_configured_default() -> None:
    points = [
        make_point(0, x=40.0, y=12.0, s=10),
        make_point(1, x=100.0, y=0.5),
        make_point(2, x=41.0, y=800.0, s=20),
    ]
    options = parse_polyline_options([["y", 5], ["x", 5], ["S", 5, 99]])
    assert _flatten(polyline_decode(polyline_encode(points, options), [5, 5, 5])) == [
        12.0, 40.0, 10.0,
        0.5, 100.0, 99.0,
        800.0, 41.0, 20.0,
    ]


def test_road_class_default_and_out_of_range_ids() -> None:
    points = [
        make_point(0, r=None),
        make_point(1, r=3),
        make_point(2, r=2**31),
    ]
    options = parse_polyline_options([["R", 0, 7]])
    assert _flatten(polyline_decode(polyline_encode(points, options), [0])) == [
        7.0,
        3.0,
        0.0,
    ]


def test_distance_field_is_encoded() -> None:
    rows = [
        {"x": -122.402, "y": 72.1, "e": 2.0},
        {"x": -122.500, "y": 72.309, "e": 2.0},
    ]
    points = rows_to_points(rows)
    options = parse_polyline_options([["y", 5], ["x", 5], ["d", 5]])
    decoded = _flatten(polyline_decode(polyline_encode(points, options), [5, 5, 5]))

    assert decoded[:5] == [72.1, -122.402, 0.0, 72.309, -122.5]
    assert decoded[5] == pytest.approx(23477.14945, abs=1e-5)


def test_elevation_rounds_half_away_from_zero() -> None:
    points = [make_point(0, e=2.5), make_point(1, e=-0.5)]
    options = parse_polyline_options([["e", 0]])
    encoded = polyline_encode(points, options)
    assert _flatten(polyline_decode(encoded, [0])) == [3.0, -1.0]


def test_empty_track_encodes_to_empty_string() -> None:
    assert polyline_encode([], parse_polyline_options([["y", 5], ["x", 5]])) == ""


def test_round_trip_at_precision_six() -> None:
    coords = [
        (37.0 + 0.0001234567 * i, -122.0 - 0.0000987654 * i * i) for i in range(200)
    ]
    points = [make_point(i, x=lon, y=lat) for i, (lat, lon) in enumerate(coords)]
    encoded = polyline_encode(points, parse_polyline_options([("y", 6), ("x", 6)]))

    decoded = polyline.decode(encoded, 6)
    assert len(decoded) == len(coords)
    for (lat, lon), (dec_lat, dec_lon) in zip(coords, decoded):
        assert math.isclose(lat, dec_lat, abs_tol=0.5e-6 + 1e-12)
        assert math.isclose(lon, dec_lon, abs_tol=0.5e-6 + 1e-12)


def test_decode_rejects_truncated_input() -> None:
    encoded = polyline_encode(
        [make_point(0, x=1.0, y=2.0)], parse_polyline_options([("y", 5), ("x", 5)])
    )
    with pytest.raises(ValueError):
        polyline_decode(encoded[:-1], [5, 5])
    with pytest.raises(ValueError):
        polyline_decode(encoded, [5, 5, 5])


def test_parse_options_builds_factors() -> None:
    options = parse_polyline_options([("y", 6), ("x", 0), ("S", 2, 99)])
    assert options == [
        PolylineOption(PointField.Y, 1_000_000.0),
        PolylineOption(PointField.X, 1.0),
        PolylineOption(PointField.S, 100.0, default=99),
    ]


@pytest.mark.parametrize(
    "raw, message",
    [
        ([("q", 5)], "'q' is not valid"),
        ([("x", 5, 3)], "'x' does not allow a default"),
        ([("d", 5, 0)], "'d' does not allow a default"),
        ([("S", 5)], "'S' requires a default"),
        ([("R", 5, None)], "'R' requires a default"),
        ([("y", -1)], "non-negative integer"),
        ([("y", 1.5)], "non-negative integer"),
        ([("S", 0, "paved")], "default for 'S' must be a non-negative integer"),
        ([("S", 0, -3)], "default for 'S' must be a non-negative integer"),
        ([("R", 0, -1)], "default for 'R' must be a non-negative integer"),
        ([("y",)], "must be"),
    ],
)
def test_parse_options_rejects_bad_configuration(raw, message) -> None:
    with pytest.raises(ConfigurationError, match=message):
        parse_polyline_options(raw)
