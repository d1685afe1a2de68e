"""Surface-aware track simplification and polyline encoding."""

from .errors import (
    ConfigurationError,
    DecodeError,
    IndexRangeError,
    SectionNotFoundError,
    TrackSimplifyError,
)
from .geometry import Point, farthest_point, haversine_distance
from .polyline import (
    PointField,
    PolylineOption,
    parse_polyline_options,
    polyline_decode,
    polyline_encode,
)
from .rows import IrrelevantPoints, rows_to_points
from .sections import MemorySection, MemoryTrack
from .services import SectionService
from .simplify import simplify_points, surface_partitions
from .surface import RoadClassMapping, SurfaceMapping, build_surface_mapping

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "IndexRangeError",
    "SectionNotFoundError",
    "TrackSimplifyError",
    "Point",
    "farthest_point",
    "haversine_distance",
    "PointField",
    "PolylineOption",
    "parse_polyline_options",
    "polyline_decode",
    "polyline_encode",
    "IrrelevantPoints",
    "rows_to_points",
    "MemorySection",
    "MemoryTrack",
    "SectionService",
    "simplify_points",
    "surface_partitions",
    "RoadClassMapping",
    "SurfaceMapping",
    "build_surface_mapping",
]
