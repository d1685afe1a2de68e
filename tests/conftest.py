"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable point and surface mapping
fixtures to avoid duplication across files.
"""
from __future__ import annotations

import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from track_simplify.geometry import Point
from track_simplify.surface import RoadClassMapping, SurfaceMapping


# --- Factory helpers -------------------------------------------------
def make_point(index, x=0.0, y=0.0, s=None, r=None, d=0.0, e=0.0):
    return Point(index=index, x=x, y=y, d=d, e=e, s=s, r=r)


def make_points(coords, s=None):
    return [make_point(i, x=x, y=y, s=s) for i, (x, y) in enumerate(coords)]


def make_row(x=None, y=None, e=None, **extra):
    row = {"x": x, "y": y, "e": e}
    row.update(extra)
    return row


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def numbered_surfaces():
    mapping = SurfaceMapping(99)
    mapping.add_surface(0, "0")
    mapping.add_surface(1, "1")
    mapping.add_surface(2, "2")
    return mapping


@pytest.fixture
def nested_mapping():
    """Three nested road-class scopes registered from most to least specific."""

    mapping = SurfaceMapping(95)
    for surface_id in (0, 1, 10, 11, 12, 20, 21, 22, 23):
        mapping.add_surface(surface_id, str(surface_id))

    inner = RoadClassMapping.from_bbox([-1.0, -1.0, 1.0, 1.0])
    inner.add_road_class(10, 0)
    inner.add_road_class(11, 1)
    mapping.add_road_class_mapping(inner)

    middle = RoadClassMapping.from_bbox([-10.0, -10.0, 10.0, 10.0])
    middle.add_road_class(10, 10)
    middle.add_road_class(11, 11)
    middle.add_road_class(12, 12)
    mapping.add_road_class_mapping(middle)

    outer = RoadClassMapping.from_bbox([-90.0, -180.0, 90.0, 180.0])
    outer.add_road_class(10, 20)
    outer.add_road_class(11, 21)
    outer.add_road_class(12, 22)
    outer.add_road_class(13, 23)
    mapping.add_road_class_mapping(outer)
    return mapping


@pytest.fixture
def empty_mapping():
    return SurfaceMapping(0)
