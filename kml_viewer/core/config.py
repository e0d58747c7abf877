"""Viewer configuration loaded from environment variables.

Azure Functions app settings (or ``local.settings.json`` for local dev)
are the source of truth; every value has a default (OpenStreetMap tiles,
map centred on 20N 80E, zoom 4).

``from_env()`` raises ``ConfigValidationError`` if any value is out of
its valid range, so bad configuration is caught at startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from kml_viewer.core.constants import (
    DEFAULT_MAP_CENTER,
    DEFAULT_MAP_ZOOM,
    DEFAULT_MAX_UPLOAD_BYTES,
    DEFAULT_TILE_URL,
    MAX_MAP_ZOOM,
)
from kml_viewer.core.exceptions import ViewerError

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


class ConfigValidationError(ViewerError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ViewerConfig:
    """Immutable viewer configuration.

    Attributes:
        max_upload_bytes: Largest KML/GeoJSON request body accepted.
        tile_url: Tile server URL template for the map widget.
        map_center_lat: Initial map centre latitude in degrees.
        map_center_lon: Initial map centre longitude in degrees.
        map_zoom: Initial map zoom level.
        enable_lxml_fallback: Retry with the lxml walker when fiona fails.
    """

    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    tile_url: str = DEFAULT_TILE_URL
    map_center_lat: float = DEFAULT_MAP_CENTER[0]
    map_center_lon: float = DEFAULT_MAP_CENTER[1]
    map_zoom: int = DEFAULT_MAP_ZOOM
    enable_lxml_fallback: bool = True

    @classmethod
    def from_env(cls) -> ViewerConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or a boolean
                flag is not recognised.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``MAP_ZOOM=abc``).
        """
        config = cls(
            max_upload_bytes=int(os.getenv("KML_MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))),
            tile_url=os.getenv("MAP_TILE_URL", DEFAULT_TILE_URL),
            map_center_lat=float(os.getenv("MAP_CENTER_LAT", str(DEFAULT_MAP_CENTER[0]))),
            map_center_lon=float(os.getenv("MAP_CENTER_LON", str(DEFAULT_MAP_CENTER[1]))),
            map_zoom=int(os.getenv("MAP_ZOOM", str(DEFAULT_MAP_ZOOM))),
            enable_lxml_fallback=_parse_bool(
                "KML_ENABLE_LXML_FALLBACK", os.getenv("KML_ENABLE_LXML_FALLBACK", "true")
            ),
        )
        _validate(config)
        return config

    def map_options(self) -> dict[str, object]:
        """Return the options handed to the map widget."""
        return {
            "tile_url": self.tile_url,
            "center": [self.map_center_lat, self.map_center_lon],
            "zoom": self.map_zoom,
        }


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigValidationError(key, raw, "must be a boolean (true/false)")


def _validate(config: ViewerConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.max_upload_bytes <= 0:
        raise ConfigValidationError(
            "KML_MAX_UPLOAD_BYTES",
            config.max_upload_bytes,
            "must be > 0 (bytes)",
        )

    if not config.tile_url:
        raise ConfigValidationError("MAP_TILE_URL", config.tile_url, "must not be empty")

    if not -90.0 <= config.map_center_lat <= 90.0:
        raise ConfigValidationError(
            "MAP_CENTER_LAT",
            config.map_center_lat,
            "must be between -90 and 90 (degrees)",
        )

    if not -180.0 <= config.map_center_lon <= 180.0:
        raise ConfigValidationError(
            "MAP_CENTER_LON",
            config.map_center_lon,
            "must be between -180 and 180 (degrees)",
        )

    if not 0 <= config.map_zoom <= MAX_MAP_ZOOM:
        raise ConfigValidationError(
            "MAP_ZOOM",
            config.map_zoom,
            f"must be between 0 and {MAX_MAP_ZOOM}",
        )
