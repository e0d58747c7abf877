"""Shared viewer constants.

Centralises the physical constants, unit labels and table captions used by
the measurement activities and the presentation models.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Geodesy
# ---------------------------------------------------------------------------

EARTH_RADIUS_KM: float = 6371.0
"""Mean Earth radius used by the spherical (haversine) distance model."""

LENGTH_UNIT: str = "km"
LENGTH_DECIMALS: int = 2

# WGS 84 coordinate bounds, in decimal degrees
MIN_LONGITUDE: float = -180.0
MAX_LONGITUDE: float = 180.0
MIN_LATITUDE: float = -90.0
MAX_LATITUDE: float = 90.0

# ---------------------------------------------------------------------------
# Presentation tables
# ---------------------------------------------------------------------------

SUMMARY_COLUMNS: tuple[str, str] = ("Element Type", "Count")
DETAIL_COLUMNS: tuple[str, str] = ("Element Type", "Total Length (km)")

SUMMARY_PLACEHOLDER: str = "No Data Available"
DETAIL_PLACEHOLDER: str = "No Line Data Available"

# ---------------------------------------------------------------------------
# Map widget defaults
# ---------------------------------------------------------------------------

DEFAULT_TILE_URL: str = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
DEFAULT_MAP_CENTER: tuple[float, float] = (20.0, 80.0)
"""Initial map centre as ``(lat, lon)``."""

DEFAULT_MAP_ZOOM: int = 4
MAX_MAP_ZOOM: int = 22

DEFAULT_MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
