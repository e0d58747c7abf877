"""Viewer pipeline: from a loaded document to a ``ViewerSnapshot``.

Every load runs the whole pipeline and returns a new snapshot; nothing
is carried over from a previous document.

Pipeline:
1. Load the KML document into a GeoJSON feature collection (optional;
   callers holding GeoJSON start at step 2).
2. Build the typed ``FeatureCollection`` (shape checks at the boundary).
3. ``compute``: classify features and measure line paths.
4. Attach the collection bounds for the map widget.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from shapely.geometry import MultiPoint

from kml_viewer.activities.classify_features import summarise_features
from kml_viewer.activities.load_kml import load_kml_file
from kml_viewer.activities.measure_lines import measure_lines
from kml_viewer.models.feature import FeatureCollection
from kml_viewer.models.tables import DetailRecord, ViewerSnapshot

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from kml_viewer.models.feature import Feature

logger = logging.getLogger("kml_viewer.orchestrators.viewer_pipeline")


def compute(features: Sequence[Feature]) -> tuple[dict[str, int], list[DetailRecord]]:
    """Derive the summary and the line details of a feature sequence.

    Pure: the same input always yields equal output.

    Returns:
        ``(summary, details)`` where ``summary`` maps geometry type label
        to feature count and ``details`` holds one record per line path.
    """
    return summarise_features(features), measure_lines(features)


def compute_bounds(collection: FeatureCollection) -> list[float] | None:
    """Return ``[min_lon, min_lat, max_lon, max_lat]`` or None if there are no positions."""
    positions = [
        position for feature in collection for position in feature.geometry.iter_positions()
    ]
    if not positions:
        return None
    return list(MultiPoint(positions).bounds)


def build_snapshot(geojson: Mapping[str, Any]) -> ViewerSnapshot:
    """Build a snapshot from a GeoJSON ``FeatureCollection`` mapping.

    Raises:
        ContractError: If the mapping is not a well-formed feature collection.
    """
    collection = FeatureCollection.from_geojson(geojson)
    summary, details = compute(collection.features)
    bbox = compute_bounds(collection)

    logger.info(
        "Snapshot built | features=%d | types=%d | line_paths=%d",
        len(collection),
        len(summary),
        len(details),
    )

    return ViewerSnapshot(
        summary=summary,
        details=details,
        geojson=dict(collection.to_geojson()),
        bbox=bbox,
    )


def build_snapshot_from_kml(
    kml_path: Path | str,
    *,
    source_filename: str = "",
    enable_lxml_fallback: bool = True,
) -> ViewerSnapshot:
    """Load a KML file and build its snapshot.

    Raises:
        KmlParseError: If the document cannot be loaded.
    """
    geojson = load_kml_file(
        kml_path,
        source_filename=source_filename,
        enable_lxml_fallback=enable_lxml_fallback,
    )
    return build_snapshot(geojson)
