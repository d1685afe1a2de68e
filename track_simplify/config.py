"""Central configuration for the track simplification package.

All values are constants imported by the rest of the package. Most of them can
be overridden through environment variables (optionally via a local `.env`).
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except Exception:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Simplification
# ---------------------------------------------------------------------------
# Default RDP tolerance, expressed in the same units as x/y (degrees for
# lon/lat tracks). 1e-5 degrees is roughly one metre of latitude.
SIMPLIFY_TOLERANCE = _env_float("TRACK_SIMPLIFY_TOLERANCE", 1e-5)

# Surface id that marks "surface unknown, fall back to the road class".
UNKNOWN_SURFACE_ID = _env_int("TRACK_SIMPLIFY_UNKNOWN_SURFACE_ID", 99)

# Fields decoded from every row before simplification.
SIMPLIFICATION_FIELDS = ("x", "y", "e", "S", "R")


# ---------------------------------------------------------------------------
# Polyline encoding
# ---------------------------------------------------------------------------
# Decimal digits kept for coordinates when no explicit options are given.
POLYLINE_PRECISION = _env_int("TRACK_SIMPLIFY_POLYLINE_PRECISION", 6)

# Field order used by the command line tools when no options are given.
POLYLINE_DEFAULT_FIELDS = ("y", "x")


# ---------------------------------------------------------------------------
# Section addressing
# ---------------------------------------------------------------------------
# Section indices must fit an unsigned 64-bit integer.
MAX_SECTION_INDEX = 2**64 - 1


# ---------------------------------------------------------------------------
# Preview map
# ---------------------------------------------------------------------------
PREVIEW_ZOOM_START = _env_int("TRACK_SIMPLIFY_PREVIEW_ZOOM", 13)

# Draw a marker for every retained point when True.
PREVIEW_SHOW_RETAINED_MARKERS = _env_bool("TRACK_SIMPLIFY_PREVIEW_MARKERS", True)

# Skip per-point markers above this many retained points (performance guard).
PREVIEW_MAX_MARKERS = _env_int("TRACK_SIMPLIFY_PREVIEW_MAX_MARKERS", 500)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
