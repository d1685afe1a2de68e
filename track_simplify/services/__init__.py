"""Service layer package.

Exports high-level services consumed by callers holding a track reader.
"""

from .section_service import SectionService, SectionServiceConfig

__all__ = ["SectionService", "SectionServiceConfig"]
