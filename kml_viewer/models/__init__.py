"""Data models and schemas.

Defines the data structures used throughout the viewer:
- Feature / Geometry / FeatureCollection: typed view over loaded GeoJSON
- GeometryKind: the closed set of geometry types
- DetailRecord / ViewerSnapshot: computed output handed to the presentation layer
"""

from kml_viewer.models.feature import (
    Feature,
    FeatureCollection,
    Geometry,
    GeometryKind,
)
from kml_viewer.models.tables import (
    DetailRecord,
    DetailTable,
    SummaryTable,
    ViewerSnapshot,
)

__all__ = [
    "DetailRecord",
    "DetailTable",
    "Feature",
    "FeatureCollection",
    "Geometry",
    "GeometryKind",
    "SummaryTable",
    "ViewerSnapshot",
]
