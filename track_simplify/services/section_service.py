"""Section-level simplification and encoding service.

Ties the row stream of a track section to decoding, simplification and
polyline encoding. Sections are read twice when serialising raw rows: once
for the point fields used to simplify, once for the data handed back.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral
import logging
from typing import Any, Dict, List, Optional, Sequence

from ..config import MAX_SECTION_INDEX, SIMPLIFICATION_FIELDS
from ..errors import IndexRangeError, SectionNotFoundError
from ..polyline import PolylineOption, polyline_encode
from ..rows import (
    IrrelevantPoints,
    rows_to_points,
    rows_with_indexes_to_column,
    rows_with_indexes_to_records,
)
from ..sections import Section, TrackReader
from ..simplify import simplify_points
from ..surface import SurfaceMapping


@dataclass(slots=True)
class SectionServiceConfig:
    simplification_fields: Sequence[str] = SIMPLIFICATION_FIELDS
    logger: logging.Logger | None = None


class SectionService:
    def __init__(self, track: TrackReader, config: SectionServiceConfig | None = None):
        self.track = track
        self.config = config or SectionServiceConfig()
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)

    def data_polyline(self, index: int, options: Sequence[PolylineOption]) -> str:
        """Encode every decodable point of the section."""

        section = self._section(index)
        points = rows_to_points(
            section.rows(self.config.simplification_fields), IrrelevantPoints.IGNORE
        )
        self._log.debug("Encoding %d points of section %d", len(points), index)
        return polyline_encode(points, options)

    def data_simplified_polyline(
        self,
        index: int,
        mapping: SurfaceMapping,
        tolerance: float,
        options: Sequence[PolylineOption],
    ) -> str:
        """Simplify the section and encode the retained points in order."""

        section = self._section(index)
        points = rows_to_points(
            section.rows(self.config.simplification_fields), IrrelevantPoints.IGNORE
        )
        retained = simplify_points(points, mapping, tolerance)
        # With IGNORE, a point's index is its position in ``points``.
        simplified = [points[point_index] for point_index in sorted(retained)]
        self._log.debug(
            "Section %d: encoding %d of %d points", index, len(simplified), len(points)
        )
        return polyline_encode(simplified, options)

    def data_simplified(
        self, index: int, mapping: SurfaceMapping, tolerance: float
    ) -> List[Dict[str, Any]]:
        """Return the retained raw rows, each as a dict of its present fields."""

        section = self._section(index)
        retained = self._retained_row_indexes(section, mapping, tolerance)
        return rows_with_indexes_to_records(section.rows(), retained)

    def column_simplified(
        self, index: int, column: str, mapping: SurfaceMapping, tolerance: float
    ) -> Optional[List[Any]]:
        """Return one column of the retained rows, or ``None`` if it does not exist."""

        section = self._section(index)
        if column not in section.fields:
            self._log.debug("Section %d has no column %r", index, column)
            return None
        retained = self._retained_row_indexes(section, mapping, tolerance)
        return rows_with_indexes_to_column(section.rows([column]), column, retained)

    def _retained_row_indexes(
        self, section: Section, mapping: SurfaceMapping, tolerance: float
    ) -> set[int]:
        points = rows_to_points(
            section.rows(self.config.simplification_fields), IrrelevantPoints.COUNT
        )
        retained = simplify_points(points, mapping, tolerance)
        self._log.debug("Retained %d of %d points", len(retained), len(points))
        return retained

    def _section(self, index: int) -> Section:
        if isinstance(index, bool) or not isinstance(index, Integral):
            raise IndexRangeError(f"Section index must be an integer, got {index!r}")
        if index < 0 or index > MAX_SECTION_INDEX:
            raise IndexRangeError(f"Section index {index} is out of range")
        section = self.track.section(int(index))
        if section is None:
            raise SectionNotFoundError(f"Section {index} does not exist")
        return section


__all__ = ["SectionService", "SectionServiceConfig"]
