"""KML loading activity.

Reads a KML document into a GeoJSON ``FeatureCollection`` dict.  The
markup itself is parsed by fiona (OGR KML driver); when OGR cannot read
a document, an lxml element-tree walker is used instead.  Documents with a
standalone LinearRing Placemark go to the lxml walker directly, since OGR
would silently drop those Placemarks.

The loading pipeline is split into focused stages:
- **_validation**: XML/KML root check, coordinate bounds
- **_normalization**: coordinate arrays, KML coordinate text, properties
- **_fiona_loader**: primary loader using fiona/OGR
- **_lxml_loader**: fallback loader using lxml

All geometry types are kept (Point, LineString, Polygon, their Multi*
forms and GeometryCollection).  Placemarks without geometry, or with
coordinates outside WGS 84 bounds, are skipped with a warning so that
one bad Placemark does not hide the rest of the document.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from kml_viewer.activities.load_kml._constants import KML_NAMESPACE
from kml_viewer.activities.load_kml._fiona_loader import load_with_fiona
from kml_viewer.activities.load_kml._lxml_loader import (
    container_names,
    has_standalone_linear_ring,
    load_with_lxml,
)
from kml_viewer.activities.load_kml._normalization import (
    normalize_coordinates,
    normalize_geometry,
    parse_coordinates_text,
)
from kml_viewer.activities.load_kml._validation import (
    InvalidCoordinateError,
    KmlParseError,
    KmlValidationError,
    validate_coordinates,
    validate_xml,
)
from kml_viewer.models.contracts import FeatureCollectionPayload, feature_collection

if TYPE_CHECKING:
    from lxml.etree import _Element

    from kml_viewer.models.contracts import FeaturePayload

logger = logging.getLogger("kml_viewer.activities.load_kml")

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "KML_NAMESPACE",
    "InvalidCoordinateError",
    "KmlParseError",
    "KmlValidationError",
    "container_names",
    "has_standalone_linear_ring",
    "load_kml_file",
    "load_with_fiona",
    "load_with_lxml",
    "normalize_coordinates",
    "normalize_geometry",
    "parse_coordinates_text",
    "validate_coordinates",
    "validate_xml",
]


def load_kml_file(
    kml_path: Path | str,
    *,
    source_filename: str = "",
    enable_lxml_fallback: bool = True,
) -> FeatureCollectionPayload:
    """Load a KML file into a GeoJSON feature collection.

    Args:
        kml_path: Filesystem path to the KML file (str or pathlib.Path).
        source_filename: Original filename for log messages (defaults to
            the path's name).
        enable_lxml_fallback: Retry with the lxml walker when fiona fails.

    Returns:
        A ``FeatureCollection`` dict.  ``features`` is empty if the
        document has no Placemarks with geometry.

    Raises:
        KmlParseError: If the file cannot be read, is not valid XML or
            KML, or no loader could read it.
        KmlValidationError: If the document declares a non-WGS 84 CRS.
    """
    kml_path = Path(kml_path)
    if not source_filename:
        source_filename = kml_path.name

    logger.info("Loading KML file: %s", source_filename)

    try:
        content = kml_path.read_bytes()
    except OSError as exc:
        msg = f"Cannot read KML file {source_filename}: {exc}"
        raise KmlParseError(msg) from exc

    root = validate_xml(content, source_filename)
    features = _load_features(kml_path, content, root, source_filename, enable_lxml_fallback)

    logger.info(
        "Loaded %d feature(s) from %s",
        len(features),
        source_filename,
    )
    return feature_collection(features)


def _load_features(
    kml_path: Path,
    content: bytes,
    root: _Element,
    source_filename: str,
    enable_lxml_fallback: bool,
) -> list[FeaturePayload]:
    """Pick the loader for a validated document and run it."""
    if has_standalone_linear_ring(root):
        if enable_lxml_fallback:
            logger.info("Standalone LinearRing in %s, loading with lxml", source_filename)
            return load_with_lxml(content, source_filename)
        logger.warning(
            "Standalone LinearRing Placemarks in %s will be skipped by the OGR KML driver",
            source_filename,
        )

    try:
        return load_with_fiona(kml_path, source_filename, container_names(root))
    except KmlParseError:
        raise
    except Exception as fiona_err:
        if not enable_lxml_fallback:
            msg = f"fiona could not read {source_filename}: {fiona_err}"
            raise KmlParseError(msg) from fiona_err
        logger.warning(
            "Fiona load failed for %s, trying lxml fallback: %s",
            source_filename,
            fiona_err,
        )
        return load_with_lxml(content, source_filename)
