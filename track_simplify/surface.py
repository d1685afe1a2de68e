"""Surface-group classification with bounding-box scoped road-class fallbacks."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
import logging
from numbers import Integral, Real
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import ConfigurationError
from .geometry import Point, RoadClassId, SurfaceTypeId

_LOG = logging.getLogger(__name__)

BBox = Tuple[float, float, float, float]


@dataclass(slots=True)
class RoadClassMapping:
    """Road class to surface table valid inside one bounding box.

    ``bbox`` is ``(min_y, min_x, max_y, max_x)``; containment is strict.
    """

    bbox: BBox
    road_classes: Dict[RoadClassId, SurfaceTypeId] = field(default_factory=dict)

    @classmethod
    def from_bbox(cls, bbox: Sequence[Any]) -> "RoadClassMapping":
        """Build an empty mapping, validating that ``bbox`` holds four numbers."""

        values = list(bbox)
        if len(values) != 4:
            raise ConfigurationError(
                f"Bounding box must have exactly 4 values, got {len(values)}"
            )
        for value in values:
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ConfigurationError(f"Bounding box value {value!r} is not a number")
        min_y, min_x, max_y, max_x = (float(value) for value in values)
        return cls(bbox=(min_y, min_x, max_y, max_x))

    def add_road_class(
        self, road_class_id: RoadClassId, surface_id: SurfaceTypeId
    ) -> None:
        self.road_classes[_as_id(road_class_id, "road class id")] = _as_id(
            surface_id, "surface id"
        )

    def contains(self, point: Point) -> bool:
        min_y, min_x, max_y, max_x = self.bbox
        return min_y < point.y < max_y and min_x < point.x < max_x

    def lookup(self, point: Point) -> Optional[SurfaceTypeId]:
        """Return the surface id for the point's road class, if in scope."""

        if point.r is None or not self.contains(point):
            return None
        return self.road_classes.get(point.r)

    def __repr__(self) -> str:
        return f"RoadClassMapping<bbox: {list(self.bbox)}, len: {len(self.road_classes)}>"


class SurfaceMapping:
    """Maps points to surface groups used to partition a track.

    Road-class scopes are consulted in insertion order, so register them from
    most to least specific. The mapping freezes the first time it is used for
    simplification; mutating it afterwards raises :class:`ConfigurationError`.
    """

    __slots__ = ("unknown_surface_id", "_groups", "_road_class_mappings", "_frozen")

    def __init__(self, unknown_surface_id: SurfaceTypeId) -> None:
        self.unknown_surface_id = _as_id(unknown_surface_id, "unknown surface id")
        self._groups: Dict[SurfaceTypeId, str] = {}
        self._road_class_mappings: List[RoadClassMapping] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def road_class_mappings(self) -> Tuple[RoadClassMapping, ...]:
        """Copies of the attached scopes, in lookup order."""

        return tuple(copy.deepcopy(scope) for scope in self._road_class_mappings)

    def freeze(self) -> None:
        self._frozen = True

    def add_surface(self, surface_id: SurfaceTypeId, group: str) -> None:
        self._ensure_mutable()
        self._groups[_as_id(surface_id, "surface id")] = str(group)

    def add_road_class_mapping(self, road_class_mapping: RoadClassMapping) -> None:
        """Append a fallback scope; a copy is stored."""

        self._ensure_mutable()
        self._road_class_mappings.append(copy.deepcopy(road_class_mapping))

    def get_surface_group(self, point: Point) -> Optional[str]:
        """Return the surface group of ``point`` or ``None`` when unclassified."""

        if point.s is None:
            return None
        if point.s == self.unknown_surface_id:
            for road_class_mapping in self._road_class_mappings:
                surface_id = road_class_mapping.lookup(point)
                if surface_id is not None:
                    return self._groups.get(surface_id)
            return None
        return self._groups.get(point.s)

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise ConfigurationError("SurfaceMapping cannot be modified once in use")

    def __repr__(self) -> str:
        return (
            f"SurfaceMapping<unknown_surface_id: {self.unknown_surface_id}, "
            f"groups: {len(self._groups)}, "
            f"road class mappings: {self._road_class_mappings!r}>"
        )


def build_surface_mapping(config: Mapping[str, Any]) -> SurfaceMapping:
    """Build a :class:`SurfaceMapping` from a JSON-style dictionary.

    Expected keys are ``unknown_surface_id``, ``surfaces`` (surface id to group
    name) and ``road_class_mappings``, a list of ``{"bbox": [...],
    "road_classes": {road_class_id: surface_id}}`` entries ordered from most to
    least specific. Ids may be given as strings of digits.
    """

    if "unknown_surface_id" not in config:
        raise ConfigurationError("Surface config requires 'unknown_surface_id'")
    mapping = SurfaceMapping(_as_id(config["unknown_surface_id"], "unknown surface id"))
    for surface_id, group in dict(config.get("surfaces") or {}).items():
        mapping.add_surface(_as_id(surface_id, "surface id"), group)
    for entry in config.get("road_class_mappings") or []:
        if "bbox" not in entry:
            raise ConfigurationError("Road class mapping entry requires 'bbox'")
        road_class_mapping = RoadClassMapping.from_bbox(entry["bbox"])
        for road_class_id, surface_id in dict(entry.get("road_classes") or {}).items():
            road_class_mapping.add_road_class(road_class_id, surface_id)
        mapping.add_road_class_mapping(road_class_mapping)
    _LOG.debug("Built %r", mapping)
    return mapping


def _as_id(value: Any, label: str) -> int:
    """Coerce ``value`` to a non-negative integer id."""

    if isinstance(value, str):
        digits = value.strip()
        if not (digits.isascii() and digits.isdigit()):
            raise ConfigurationError(f"Invalid {label}: {value!r}")
        return int(digits)
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise ConfigurationError(f"Invalid {label}: {value!r}")
    if value < 0:
        raise ConfigurationError(f"Invalid {label}: {value!r} is negative")
    return int(value)


__all__ = ["RoadClassMapping", "SurfaceMapping", "build_surface_mapping"]
