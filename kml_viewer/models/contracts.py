"""GeoJSON payload contracts exchanged between loader, core and HTTP layer.

The loader emits a ``FeatureCollectionPayload``; the ingress boundary
accepts the same shape from clients; the snapshot passes it through
unchanged to the map widget.

Design notes:
- ``TypedDict`` rather than ``dataclass`` because the payloads are
  serialised straight to JSON responses.
- ``coordinates`` is left as ``Any``: its nesting depth depends on the
  geometry type.
"""

from __future__ import annotations

from typing import Any, NotRequired, TypedDict


class GeometryPayload(TypedDict):
    """A GeoJSON geometry object."""

    type: str
    coordinates: NotRequired[Any]
    geometries: NotRequired[list[GeometryPayload]]


class FeaturePayload(TypedDict):
    """A GeoJSON feature as produced by the KML loader."""

    type: str
    geometry: GeometryPayload | None
    properties: dict[str, Any]


class FeatureCollectionPayload(TypedDict):
    """A GeoJSON feature collection (one per loaded document)."""

    type: str
    features: list[FeaturePayload]


def feature_collection(features: list[FeaturePayload]) -> FeatureCollectionPayload:
    """Wrap *features* in a ``FeatureCollection`` envelope."""
    return {"type": "FeatureCollection", "features": features}
