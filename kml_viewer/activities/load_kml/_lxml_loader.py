"""lxml-based KML loader (fallback).

Walks the element tree for documents the OGR KML driver cannot read, and
for documents with a standalone LinearRing Placemark, which OGR drops.
Every Placemark becomes one GeoJSON feature, in document order, whatever
Folder it sits in.  Geometry mapping:

- ``Point`` / ``LineString`` / ``Polygon`` map directly; a bare
  ``LinearRing`` becomes a ``LineString``.
- ``MultiGeometry`` whose children share one simple type becomes the
  matching ``Multi*`` type; a mixed one becomes a ``GeometryCollection``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lxml import etree  # type: ignore[attr-defined]

from kml_viewer.activities.load_kml._constants import (
    CONTAINER_TAGS,
    KML_NAMESPACE,
    MULTI_GEOMETRY_TAG,
    RING_BOUNDARY_TAGS,
    SIMPLE_GEOMETRY_TAGS,
)
from kml_viewer.activities.load_kml._normalization import (
    extract_properties_lxml,
    iter_positions,
    parse_coordinates_text,
)
from kml_viewer.activities.load_kml._validation import (
    InvalidCoordinateError,
    KmlValidationError,
    safe_xml_parser,
    validate_coordinates,
)

if TYPE_CHECKING:
    from lxml.etree import _Element

    from kml_viewer.models.contracts import FeaturePayload, GeometryPayload

logger = logging.getLogger("kml_viewer.activities.load_kml")

_GEOMETRY_TAGS = (*SIMPLE_GEOMETRY_TAGS, MULTI_GEOMETRY_TAG)


def load_with_lxml(content: bytes, source_filename: str) -> list[FeaturePayload]:
    """Load all Placemarks of a KML document by walking the element tree."""
    root: _Element = etree.fromstring(content, parser=safe_xml_parser())
    ns = {"kml": _namespace_of(root)}

    features: list[FeaturePayload] = []
    for idx, placemark in enumerate(root.iterfind(".//kml:Placemark", ns)):
        properties = extract_properties_lxml(placemark, ns)
        display_name = properties.get("name") or f"Feature {idx}"

        geometry_elem = _first_geometry(placemark, ns)
        if geometry_elem is None:
            logger.warning(
                "Skipping feature without geometry '%s' in %s",
                display_name,
                source_filename,
            )
            continue

        try:
            geometry = _parse_geometry(geometry_elem, ns)
            if geometry is None:
                msg = f"Placemark '{display_name}' has an empty <{_local_name(geometry_elem)}>"
                raise KmlValidationError(msg)
            validate_coordinates(iter_positions(geometry), display_name)
        except (KmlValidationError, InvalidCoordinateError) as exc:
            logger.warning(
                "Skipping invalid feature '%s' in %s: %s",
                display_name,
                source_filename,
                exc,
            )
            continue

        features.append({"type": "Feature", "geometry": geometry, "properties": properties})

    return features


# ---------------------------------------------------------------------------
# Document inspection
# ---------------------------------------------------------------------------


def container_names(root: _Element) -> list[str]:
    """Return the ``<name>`` of every Document and Folder, in document order."""
    names: list[str] = []
    for elem in root.iter():
        if not isinstance(elem.tag, str) or _local_name(elem) not in CONTAINER_TAGS:
            continue
        for child in elem:
            if isinstance(child.tag, str) and _local_name(child) == "name":
                if child.text and child.text.strip():
                    names.append(child.text.strip())
                break
    return names


def has_standalone_linear_ring(root: _Element) -> bool:
    """Whether any LinearRing sits outside a Polygon boundary.

    The OGR KML driver drops Placemarks whose geometry is such a ring.
    """
    for elem in root.iter():
        if not isinstance(elem.tag, str) or _local_name(elem) != "LinearRing":
            continue
        parent = elem.getparent()
        if parent is None or _local_name(parent) not in RING_BOUNDARY_TAGS:
            return True
    return False


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _namespace_of(root: _Element) -> str:
    """Return the namespace URI of the root element (KML 2.2 if none)."""
    tag = root.tag if isinstance(root.tag, str) else ""
    if tag.startswith("{"):
        return tag[1 : tag.index("}")]
    return KML_NAMESPACE


def _local_name(elem: _Element) -> str:
    return etree.QName(elem).localname


def _first_geometry(placemark: _Element, ns: dict[str, str]) -> _Element | None:
    for child in placemark:
        if isinstance(child.tag, str) and _local_name(child) in _GEOMETRY_TAGS:
            return child
    return None


def _parse_geometry(elem: _Element, ns: dict[str, str]) -> GeometryPayload | None:
    """Convert a KML geometry element, returning None if it holds no coordinates."""
    tag = _local_name(elem)

    if tag == MULTI_GEOMETRY_TAG:
        return _parse_multi_geometry(elem, ns)

    if tag == "Point":
        positions = _coordinates_of(elem, "kml:coordinates", ns)
        return {"type": "Point", "coordinates": positions[0]} if positions else None

    if tag in ("LineString", "LinearRing"):
        positions = _coordinates_of(elem, "kml:coordinates", ns)
        return {"type": "LineString", "coordinates": positions} if positions else None

    if tag == "Polygon":
        outer = _coordinates_of(elem, "kml:outerBoundaryIs/kml:LinearRing/kml:coordinates", ns)
        if not outer:
            return None
        rings = [outer]
        for inner in elem.findall("kml:innerBoundaryIs/kml:LinearRing/kml:coordinates", ns):
            ring = parse_coordinates_text(inner.text or "")
            if ring:
                rings.append(ring)
        return {"type": "Polygon", "coordinates": rings}

    return None


def _parse_multi_geometry(elem: _Element, ns: dict[str, str]) -> GeometryPayload | None:
    children: list[GeometryPayload] = []
    for child in elem:
        if not isinstance(child.tag, str) or _local_name(child) not in _GEOMETRY_TAGS:
            continue
        geometry = _parse_geometry(child, ns)
        if geometry is not None:
            children.append(geometry)

    if not children:
        return None

    types = {child["type"] for child in children}
    child_type = children[0]["type"]
    if len(types) == 1 and child_type in SIMPLE_GEOMETRY_TAGS.values():
        return {
            "type": f"Multi{child_type}",
            "coordinates": [child["coordinates"] for child in children],
        }
    return {"type": "GeometryCollection", "geometries": children}


def _coordinates_of(elem: _Element, path: str, ns: dict[str, str]) -> list[list[float]]:
    coords_elem = elem.find(path, ns)
    if coords_elem is None or not coords_elem.text:
        return []
    return parse_coordinates_text(coords_elem.text)
