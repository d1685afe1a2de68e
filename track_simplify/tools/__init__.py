"""Utility entry points for supplementary track tooling."""

from .preview_map import create_preview_map

__all__ = ["create_preview_map"]
