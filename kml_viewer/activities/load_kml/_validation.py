"""Validation helpers for KML loading.

Responsibilities:
- XML structure and KML root element validation
- Coordinate bounds checking (WGS 84)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lxml import etree  # type: ignore[attr-defined]

from kml_viewer.activities.load_kml._constants import KML_NAMESPACE
from kml_viewer.core.constants import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from kml_viewer.core.exceptions import PermanentError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lxml.etree import _Element

logger = logging.getLogger("kml_viewer.activities.load_kml")


# ---------------------------------------------------------------------------
# Exceptions (public API, re-exported from __init__)
# ---------------------------------------------------------------------------


class KmlParseError(PermanentError):
    """Raised when a KML document cannot be read."""

    default_stage = "load_kml"
    default_code = "KML_PARSE_FAILED"


class KmlValidationError(KmlParseError):
    """Raised when a KML document is well-formed but contains invalid data."""

    default_code = "KML_VALIDATION_FAILED"


class InvalidCoordinateError(KmlValidationError):
    """Raised when coordinates are outside valid WGS 84 bounds."""

    default_code = "KML_COORDINATE_INVALID"


# ---------------------------------------------------------------------------
# XML / KML validation
# ---------------------------------------------------------------------------


def safe_xml_parser() -> etree.XMLParser:
    """Return an XML parser with entity expansion and network access disabled."""
    return etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)


def validate_xml(content: bytes, source_filename: str = "") -> _Element:
    """Check that *content* is well-formed XML with a ``<kml>`` root.

    Returns:
        The parsed root element.

    Raises:
        KmlParseError: If the content is empty, not XML, or not KML.
    """
    label = source_filename or "document"

    if not content.strip():
        msg = f"KML file is empty: {label}"
        raise KmlParseError(msg)

    try:
        root = etree.fromstring(content, parser=safe_xml_parser())
    except etree.XMLSyntaxError as exc:
        msg = f"Not valid XML ({label}): {exc}"
        raise KmlParseError(msg) from exc

    tag = root.tag if isinstance(root.tag, str) else ""
    if f"{{{KML_NAMESPACE}}}" not in tag and "kml" not in tag.lower():
        msg = f"Not a KML file ({label}): root element is <{tag}>"
        raise KmlParseError(msg)

    return root


# ---------------------------------------------------------------------------
# Coordinate validation
# ---------------------------------------------------------------------------


def validate_coordinates(positions: Iterable[tuple[float, float]], placemark_name: str) -> None:
    """Validate that all ``(lon, lat)`` positions are within WGS 84 bounds.

    Raises:
        InvalidCoordinateError: If any position is out of bounds.
    """
    for lon, lat in positions:
        if not (MIN_LONGITUDE <= lon <= MAX_LONGITUDE):
            msg = (
                f"Longitude {lon} out of WGS 84 range [{MIN_LONGITUDE}, {MAX_LONGITUDE}] "
                f"in Placemark '{placemark_name}'"
            )
            raise InvalidCoordinateError(msg)
        if not (MIN_LATITUDE <= lat <= MAX_LATITUDE):
            msg = (
                f"Latitude {lat} out of WGS 84 range [{MIN_LATITUDE}, {MAX_LATITUDE}] "
                f"in Placemark '{placemark_name}'"
            )
            raise InvalidCoordinateError(msg)
