"""Shared constants for KML loading."""

from __future__ import annotations

# KML 2.2 namespace
KML_NAMESPACE = "http://www.opengis.net/kml/2.2"

# OGR driver used by fiona
FIONA_DRIVER = "KML"

# KML geometry elements the lxml walker understands, mapped to GeoJSON types.
# LinearRing outside a Polygon is treated as an open path.
SIMPLE_GEOMETRY_TAGS: dict[str, str] = {
    "Point": "Point",
    "LineString": "LineString",
    "LinearRing": "LineString",
    "Polygon": "Polygon",
}
MULTI_GEOMETRY_TAG = "MultiGeometry"

# Containers the OGR KML driver turns into layers.
CONTAINER_TAGS = ("Document", "Folder")

# Parents of a LinearRing that is part of a Polygon.
RING_BOUNDARY_TAGS = ("outerBoundaryIs", "innerBoundaryIs")
