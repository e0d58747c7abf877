"""Coordinate, geometry and property normalization for KML loading.

Responsibilities:
- Convert raw coordinate arrays (tuples from fiona, text from lxml) into
  GeoJSON ``[lon, lat(, alt)]`` float lists
- Walk every position of a geometry for bounds validation
- Build GeoJSON ``properties`` from fiona fields or lxml ExtendedData
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from kml_viewer.activities.load_kml._validation import KmlValidationError

if TYPE_CHECKING:
    from lxml.etree import _Element

    from kml_viewer.models.contracts import GeometryPayload

# ---------------------------------------------------------------------------
# Coordinate normalization
# ---------------------------------------------------------------------------


def normalize_position(raw: object, index: int = 0) -> list[float]:
    """Convert one raw position to ``[lon, lat]`` or ``[lon, lat, alt]``.

    Raises:
        KmlValidationError: If the position is malformed.
    """
    if not isinstance(raw, list | tuple):
        msg = f"Malformed coordinate at index {index}: expected list/tuple, got {type(raw).__name__}"
        raise KmlValidationError(msg)
    if len(raw) < 2:
        msg = f"Malformed coordinate at index {index}: expected at least 2 elements, got {len(raw)}"
        raise KmlValidationError(msg)
    try:
        return [float(value) for value in raw[:3]]
    except (TypeError, ValueError) as exc:
        msg = f"Malformed coordinate at index {index}: cannot convert to float ({raw!r})"
        raise KmlValidationError(msg) from exc


def normalize_coordinates(raw: object) -> list[Any]:
    """Recursively convert a GeoJSON coordinate array to float lists.

    Works for any nesting depth: a sequence whose first element is a
    number is a position, anything else is a list of coordinate arrays.
    """
    if not isinstance(raw, list | tuple):
        msg = f"Malformed coordinates: expected list/tuple, got {type(raw).__name__}"
        raise KmlValidationError(msg)
    if raw and _is_number(raw[0]):
        return normalize_position(raw)
    return [
        normalize_position(item, idx) if _is_position(item) else normalize_coordinates(item)
        for idx, item in enumerate(raw)
    ]


def normalize_geometry(geometry: Mapping[str, Any]) -> GeometryPayload:
    """Return a plain-dict GeoJSON geometry with normalized coordinates."""
    geom_type = str(geometry.get("type", ""))
    if geom_type == "GeometryCollection":
        return {
            "type": geom_type,
            "geometries": [normalize_geometry(g) for g in geometry.get("geometries", []) or []],
        }
    return {"type": geom_type, "coordinates": normalize_coordinates(geometry.get("coordinates", []))}


def iter_positions(geometry: Mapping[str, Any]) -> Iterator[tuple[float, float]]:
    """Yield every ``(lon, lat)`` position of a normalized geometry."""
    if geometry.get("type") == "GeometryCollection":
        for child in geometry.get("geometries", []):
            yield from iter_positions(child)
        return
    yield from _walk_positions(geometry.get("coordinates", []))


def _walk_positions(coords: object) -> Iterator[tuple[float, float]]:
    if not isinstance(coords, list | tuple) or not coords:
        return
    if _is_number(coords[0]):
        yield (float(coords[0]), float(coords[1]))
        return
    for item in coords:
        yield from _walk_positions(item)


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _is_position(value: object) -> bool:
    return isinstance(value, list | tuple) and bool(value) and _is_number(value[0])


# ---------------------------------------------------------------------------
# KML coordinate text parsing
# ---------------------------------------------------------------------------


def parse_coordinates_text(text: str) -> list[list[float]]:
    """Parse KML coordinate text (``lon,lat[,alt] ...``) into GeoJSON positions.

    Tokens that do not hold at least two numbers are dropped.
    """
    positions: list[list[float]] = []
    for token in text.split():
        parts = [part for part in token.strip().split(",") if part]
        if len(parts) < 2:
            continue
        try:
            positions.append([float(part) for part in parts[:3]])
        except ValueError:
            continue
    return positions


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

# OGR KML fields that describe rendering rather than content.
_FIONA_SKIP_KEYS = frozenset(
    {
        "timestamp",
        "begin",
        "end",
        "altitudemode",
        "tessellate",
        "extrude",
        "visibility",
        "draworder",
        "icon",
        "snippet",
    }
)


def extract_properties_from_fiona(props: Mapping[str, object]) -> dict[str, str]:
    """Build GeoJSON properties from fiona fields.

    ``Name``/``Description`` are lower-cased to ``name``/``description``;
    rendering-only OGR fields and empty values are dropped.
    """
    properties: dict[str, str] = {}
    for key, value in props.items():
        lowered = key.lower()
        if lowered in _FIONA_SKIP_KEYS:
            continue
        if value is None or not str(value).strip():
            continue
        if lowered in ("name", "description"):
            key = lowered
        properties[key] = str(value).strip()
    return properties


def extract_properties_lxml(placemark_elem: _Element, ns: dict[str, str]) -> dict[str, str]:
    """Build GeoJSON properties from a Placemark element.

    Collects ``name``, ``description`` and both ExtendedData patterns:
    ``Data/value`` pairs and ``SchemaData/SimpleData`` typed fields.
    """
    properties: dict[str, str] = {}

    for tag in ("name", "description"):
        elem = placemark_elem.find(f"kml:{tag}", ns)
        if elem is not None and elem.text and elem.text.strip():
            properties[tag] = elem.text.strip()

    for data_elem in placemark_elem.findall("kml:ExtendedData/kml:Data", ns):
        key = data_elem.get("name", "")
        value_elem = data_elem.find("kml:value", ns)
        if key and value_elem is not None and value_elem.text:
            properties[key] = value_elem.text.strip()

    for schema_data in placemark_elem.findall("kml:ExtendedData/kml:SchemaData", ns):
        for simple_data in schema_data.findall("kml:SimpleData", ns):
            key = simple_data.get("name", "")
            if key and simple_data.text:
                properties[key] = simple_data.text.strip()

    return properties
