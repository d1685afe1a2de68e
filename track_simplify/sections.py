"""Row-stream interfaces for track sections plus in-memory implementations.

The binary track format lives outside this package. Anything that can hand
out sections by index, each yielding rows as mappings, can be simplified; the
in-memory classes here cover callers that already hold decoded rows or a
pandas DataFrame.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)

import numpy as np
import pandas as pd

_INTEGER_FIELDS = ("S", "R")


@runtime_checkable
class Section(Protocol):
    """A sequential source of rows with a fixed set of fields."""

    @property
    def fields(self) -> Sequence[str]: ...

    def rows(self, fields: Optional[Sequence[str]] = None) -> Iterator[Dict[str, Any]]:
        """Yield every row restricted to ``fields`` that exist in the section."""
        ...


@runtime_checkable
class TrackReader(Protocol):
    """Gives access to the sections of one track."""

    def section(self, index: int) -> Optional[Section]: ...


@dataclass(slots=True)
class MemorySection:
    """Section backed by a list of row dictionaries."""

    fields: List[str]
    data: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        fields: Optional[Sequence[str]] = None,
    ) -> "MemorySection":
        """Build a section; fields default to keys in order of first appearance."""

        data = [dict(record) for record in records]
        if fields is None:
            seen: Dict[str, None] = {}
            for record in data:
                for key in record:
                    seen.setdefault(key, None)
            fields = list(seen)
        return cls(fields=list(fields), data=data)

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        integer_fields: Sequence[str] = _INTEGER_FIELDS,
    ) -> "MemorySection":
        """Build a section from a DataFrame, one row per sample.

        Missing cells become ``None``. Integer columns that pandas widened to
        float because of gaps are turned back into ``int`` values.
        """

        columns = [str(column) for column in frame.columns]
        data: List[Dict[str, Any]] = []
        for values in frame.itertuples(index=False, name=None):
            row: Dict[str, Any] = {}
            for column, value in zip(columns, values):
                row[column] = _clean_cell(value, column in integer_fields)
            data.append(row)
        return cls(fields=columns, data=data)

    def rows(self, fields: Optional[Sequence[str]] = None) -> Iterator[Dict[str, Any]]:
        selected = self.fields if fields is None else [f for f in fields if f in self.fields]
        for record in self.data:
            yield {name: record.get(name) for name in selected}

    def __len__(self) -> int:
        return len(self.data)


@dataclass(slots=True)
class MemoryTrack:
    """Track reader over a list of in-memory sections."""

    sections: List[Section] = field(default_factory=list)

    def section(self, index: int) -> Optional[Section]:
        if 0 <= index < len(self.sections):
            return self.sections[index]
        return None


def _clean_cell(value: Any, integer_field: bool) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if value is pd.NA or value is pd.NaT:
        return None
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        if np.isnan(value):
            return None
        value = float(value)
    if isinstance(value, np.bool_):
        return bool(value)
    if integer_field and isinstance(value, float) and value.is_integer():
        return int(value)
    return value


__all__ = ["Section", "TrackReader", "MemorySection", "MemoryTrack"]
