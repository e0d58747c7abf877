"""Path length aggregation activity.

Walks the vertex sequence of every line-like feature and sums the
great-circle distances between consecutive vertices.

Rules:
- ``LineString``: one record for the whole path.
- ``MultiLineString``: one record per constituent line string, in part
  order.  Each part is measured on its own; no distance is counted
  between the end of one part and the start of the next.
- Every other geometry type is omitted.

Coordinates are GeoJSON ``[lon, lat(, alt)]``; altitude is ignored.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml_viewer.core.constants import LENGTH_DECIMALS, LENGTH_UNIT
from kml_viewer.models.feature import GeometryKind
from kml_viewer.models.tables import DetailRecord
from kml_viewer.utils.geodesy import haversine_km

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from kml_viewer.models.feature import Feature

logger = logging.getLogger("kml_viewer.activities.measure_lines")


def path_length_km(coordinates: Sequence[Sequence[float]]) -> float:
    """Sum the haversine distances between consecutive ``[lon, lat]`` vertices.

    Returns ``0.0`` for paths with fewer than two vertices.
    """
    total = 0.0
    for previous, current in zip(coordinates, coordinates[1:]):
        lon1, lat1 = previous[0], previous[1]
        lon2, lat2 = current[0], current[1]
        total += haversine_km(lat1, lon1, lat2, lon2)
    return total


def format_length(length_km: float) -> str:
    """Format a length as ``"<km to two decimals> km"``."""
    return f"{length_km:.{LENGTH_DECIMALS}f} {LENGTH_UNIT}"


def measure_feature(feature: Feature) -> list[DetailRecord]:
    """Return the length records for a single feature (empty if not a line)."""
    kind = feature.kind
    if not kind.is_linear:
        return []

    if kind is GeometryKind.LINE_STRING:
        return [_record(kind, feature.geometry.coordinates, feature.feature_index)]

    return [
        _record(kind, part, feature.feature_index, part_index=part_idx)
        for part_idx, part in enumerate(feature.geometry.coordinates)
    ]


def measure_lines(features: Iterable[Feature]) -> list[DetailRecord]:
    """Compute a length record for every line path, in feature order.

    Args:
        features: Features of one collection.

    Returns:
        One ``DetailRecord`` per LineString feature and one per
        MultiLineString part.  Empty if the collection has no lines.
    """
    records: list[DetailRecord] = []
    for feature in features:
        records.extend(measure_feature(feature))

    logger.debug("Measured %d line path(s)", len(records))
    return records


def _record(
    kind: GeometryKind,
    coordinates: Sequence[Sequence[float]],
    feature_index: int,
    *,
    part_index: int | None = None,
) -> DetailRecord:
    length_km = path_length_km(coordinates)
    return DetailRecord(
        kind=kind.label,
        length_km=length_km,
        length=format_length(length_km),
        feature_index=feature_index,
        part_index=part_index,
    )
