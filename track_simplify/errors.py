"""Central error types used across the package."""

from __future__ import annotations


class TrackSimplifyError(RuntimeError):
    """Base error for track simplification and encoding failures."""


class ConfigurationError(TrackSimplifyError):
    """Raised when polyline options or surface mappings are invalid."""


class DecodeError(TrackSimplifyError):
    """Raised when a track row carries a value of the wrong kind."""


class SectionNotFoundError(TrackSimplifyError, LookupError):
    """Raised when a track has no section at the requested index."""


class IndexRangeError(TrackSimplifyError, OverflowError):
    """Raised when a section index cannot be addressed."""


__all__ = [
    "TrackSimplifyError",
    "ConfigurationError",
    "DecodeError",
    "SectionNotFoundError",
    "IndexRangeError",
]
