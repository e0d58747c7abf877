"""Typed view over a GeoJSON feature collection.

The loader produces plain GeoJSON dicts; the geometry core works on the
frozen ``Feature``/``Geometry`` dataclasses defined here so that
geometry-kind dispatch is over the closed ``GeometryKind`` enum instead of
open-ended string comparison.

``FeatureCollection.from_geojson`` is the single place where raw
mappings are checked.  Shape violations (wrong coordinate nesting for
the geometry type, positions that are not at least two finite numbers,
positions outside WGS 84 bounds) raise ``ContractError``;
features with a ``null`` geometry are skipped with a warning, matching
what the KML loader does for geometry-less Placemarks.
"""

from __future__ import annotations

import enum
import logging
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from kml_viewer.core.constants import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from kml_viewer.core.exceptions import ContractError

logger = logging.getLogger("kml_viewer.models.feature")


class GeometryKind(enum.Enum):
    """The fixed set of GeoJSON geometry types.

    Values are the GeoJSON ``type`` labels.
    """

    POINT = "Point"
    LINE_STRING = "LineString"
    POLYGON = "Polygon"
    MULTI_POINT = "MultiPoint"
    MULTI_LINE_STRING = "MultiLineString"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"

    @property
    def label(self) -> str:
        """GeoJSON type label, as shown in the tables."""
        return self.value

    @property
    def is_linear(self) -> bool:
        """Whether features of this kind get a length record."""
        return self in (GeometryKind.LINE_STRING, GeometryKind.MULTI_LINE_STRING)

    @property
    def coordinate_depth(self) -> int:
        """Array nesting above a single position (0 for a Point)."""
        return _COORDINATE_DEPTH[self]

    @classmethod
    def from_label(cls, label: object) -> GeometryKind:
        """Resolve a GeoJSON type label.

        Raises:
            ContractError: If *label* is not one of the seven GeoJSON types.
        """
        try:
            return cls(label)
        except ValueError:
            msg = f"Unknown geometry type: {label!r}"
            raise ContractError(msg, stage="ingress", code="UNKNOWN_GEOMETRY_TYPE") from None


@dataclass(frozen=True, slots=True)
class Geometry:
    """A single GeoJSON geometry.

    Attributes:
        kind: Geometry kind tag.
        coordinates: GeoJSON coordinate array, nested according to ``kind``.
            Empty for a GeometryCollection.
        geometries: Child geometries of a GeometryCollection.
    """

    kind: GeometryKind
    coordinates: list[Any] = field(default_factory=list)
    geometries: tuple[Geometry, ...] = ()

    @classmethod
    def from_dict(cls, data: object) -> Geometry:
        """Build a ``Geometry`` from a GeoJSON geometry mapping.

        Raises:
            ContractError: If the mapping is not a geometry object.
        """
        if not isinstance(data, Mapping):
            msg = f"Geometry must be an object, got {type(data).__name__}"
            raise ContractError(msg, stage="ingress", code="INVALID_GEOMETRY")

        kind = GeometryKind.from_label(data.get("type"))

        if kind is GeometryKind.GEOMETRY_COLLECTION:
            children = data.get("geometries", [])
            if not isinstance(children, list | tuple):
                msg = f"GeometryCollection.geometries must be a list, got {type(children).__name__}"
                raise ContractError(msg, stage="ingress", code="INVALID_GEOMETRY")
            return cls(kind=kind, geometries=tuple(cls.from_dict(child) for child in children))

        coordinates = data.get("coordinates")
        if not isinstance(coordinates, list | tuple):
            msg = f"{kind.label}.coordinates must be a list, got {type(coordinates).__name__}"
            raise ContractError(msg, stage="ingress", code="INVALID_GEOMETRY")
        _check_coordinates(coordinates, kind.coordinate_depth, kind)
        return cls(kind=kind, coordinates=list(coordinates))

    def iter_positions(self) -> Iterator[tuple[float, float]]:
        """Yield every ``(lon, lat)`` position, descending into collections."""
        if self.kind is GeometryKind.GEOMETRY_COLLECTION:
            for child in self.geometries:
                yield from child.iter_positions()
            return
        yield from _walk(self.coordinates)

    def to_dict(self) -> dict[str, object]:
        """Serialise back to a GeoJSON geometry mapping."""
        if self.kind is GeometryKind.GEOMETRY_COLLECTION:
            return {"type": self.kind.label, "geometries": [g.to_dict() for g in self.geometries]}
        return {"type": self.kind.label, "coordinates": self.coordinates}


@dataclass(frozen=True, slots=True)
class Feature:
    """One geographic element of a loaded document.

    Attributes:
        geometry: The feature's geometry.
        properties: Placemark properties (name, description, ...).
            Carried for display, never read by the geometry core.
        feature_index: Zero-based position in the source collection.
    """

    geometry: Geometry
    properties: dict[str, Any] = field(default_factory=dict)
    feature_index: int = 0

    @property
    def kind(self) -> GeometryKind:
        return self.geometry.kind


@dataclass(frozen=True, slots=True)
class FeatureCollection:
    """All features of one loaded document, plus the raw GeoJSON.

    Attributes:
        features: Features with a geometry, in document order.
        raw: The GeoJSON mapping the collection was built from.  Returned
            untouched by ``to_geojson()`` for the map widget.
    """

    features: tuple[Feature, ...] = ()
    raw: Mapping[str, Any] = field(
        default_factory=lambda: {"type": "FeatureCollection", "features": []}
    )

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def to_geojson(self) -> Mapping[str, Any]:
        return self.raw

    @classmethod
    def from_geojson(cls, data: object) -> FeatureCollection:
        """Build a typed collection from a GeoJSON ``FeatureCollection``.

        Raises:
            ContractError: If *data* is not a FeatureCollection or any
                feature geometry is malformed.
        """
        if not isinstance(data, Mapping):
            msg = f"Feature collection must be an object, got {type(data).__name__}"
            raise ContractError(msg, stage="ingress", code="INVALID_FEATURE_COLLECTION")
        if data.get("type") != "FeatureCollection":
            msg = f"Expected type 'FeatureCollection', got {data.get('type')!r}"
            raise ContractError(msg, stage="ingress", code="INVALID_FEATURE_COLLECTION")

        raw_features = data.get("features", [])
        if not isinstance(raw_features, list | tuple):
            msg = f"features must be a list, got {type(raw_features).__name__}"
            raise ContractError(msg, stage="ingress", code="INVALID_FEATURE_COLLECTION")

        features: list[Feature] = []
        for idx, raw_feature in enumerate(raw_features):
            if not isinstance(raw_feature, Mapping):
                msg = f"Feature {idx} must be an object, got {type(raw_feature).__name__}"
                raise ContractError(msg, stage="ingress", code="INVALID_FEATURE")

            geometry = raw_feature.get("geometry")
            if geometry is None:
                logger.warning("Skipping feature %d without geometry", idx)
                continue

            properties = raw_feature.get("properties") or {}
            if not isinstance(properties, Mapping):
                msg = f"Feature {idx} properties must be an object, got {type(properties).__name__}"
                raise ContractError(msg, stage="ingress", code="INVALID_FEATURE")

            try:
                parsed = Geometry.from_dict(geometry)
            except ContractError as exc:
                msg = f"Feature {idx}: {exc.message}"
                raise ContractError(msg, stage=exc.stage, code=exc.code) from exc

            features.append(
                Feature(
                    geometry=parsed,
                    properties=dict(properties),
                    feature_index=idx,
                )
            )

        return cls(features=tuple(features), raw=data)


def _walk(coords: object) -> Iterator[tuple[float, float]]:
    if not isinstance(coords, list | tuple) or not coords:
        return
    if isinstance(coords[0], int | float):
        yield (float(coords[0]), float(coords[1]))
        return
    for item in coords:
        yield from _walk(item)


_COORDINATE_DEPTH: dict[GeometryKind, int] = {
    GeometryKind.POINT: 0,
    GeometryKind.LINE_STRING: 1,
    GeometryKind.MULTI_POINT: 1,
    GeometryKind.POLYGON: 2,
    GeometryKind.MULTI_LINE_STRING: 2,
    GeometryKind.MULTI_POLYGON: 3,
    GeometryKind.GEOMETRY_COLLECTION: 0,
}


def _check_coordinates(coords: object, depth: int, kind: GeometryKind) -> None:
    """Check the nesting of *coords* and every position it holds.

    Raises:
        ContractError: If an array sits where a position belongs (or the
            reverse), or any position is malformed.
    """
    if depth == 0:
        _check_position(coords, kind)
        return
    if not isinstance(coords, list | tuple):
        msg = f"{kind.label} coordinates nested too shallowly: got {coords!r}"
        raise ContractError(msg, stage="ingress", code="INVALID_GEOMETRY")
    for item in coords:
        _check_coordinates(item, depth - 1, kind)


def _check_position(value: object, kind: GeometryKind) -> None:
    if not isinstance(value, list | tuple) or len(value) < 2:
        msg = f"{kind.label} position must be an array of at least 2 numbers, got {value!r}"
        raise ContractError(msg, stage="ingress", code="INVALID_GEOMETRY")
    if not all(_is_finite_number(item) for item in value):
        msg = f"{kind.label} position must hold finite numbers only, got {value!r}"
        raise ContractError(msg, stage="ingress", code="INVALID_GEOMETRY")

    lon, lat = value[0], value[1]
    if not MIN_LONGITUDE <= lon <= MAX_LONGITUDE:
        msg = f"Longitude {lon} out of WGS 84 range [{MIN_LONGITUDE}, {MAX_LONGITUDE}]"
        raise ContractError(msg, stage="ingress", code="INVALID_GEOMETRY")
    if not MIN_LATITUDE <= lat <= MAX_LATITUDE:
        msg = f"Latitude {lat} out of WGS 84 range [{MIN_LATITUDE}, {MAX_LATITUDE}]"
        raise ContractError(msg, stage="ingress", code="INVALID_GEOMETRY")


def _is_finite_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool) and math.isfinite(value)
