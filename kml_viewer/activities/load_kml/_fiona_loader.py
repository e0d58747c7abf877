"""Fiona-based KML loader (primary).

Reads every layer of a KML document through fiona (OGR KML driver) and
emits GeoJSON features.  The OGR driver exposes each KML Folder as a
separate layer.  ``fiona.listlayers`` does not return layers in document
order, so callers pass the Document/Folder names in the order they appear
and layers are read in that order.  Features without a geometry, or whose
coordinates fail validation, are logged and skipped.

fiona ships the OGR KML driver disabled; ``enable_kml_driver`` registers
it for reading before the first open.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import fiona

from kml_viewer.activities.load_kml._constants import FIONA_DRIVER
from kml_viewer.activities.load_kml._normalization import (
    extract_properties_from_fiona,
    iter_positions,
    normalize_geometry,
)
from kml_viewer.activities.load_kml._validation import (
    InvalidCoordinateError,
    KmlValidationError,
    validate_coordinates,
)

if TYPE_CHECKING:
    from pathlib import Path

    from kml_viewer.models.contracts import FeaturePayload

logger = logging.getLogger("kml_viewer.activities.load_kml")


def enable_kml_driver() -> None:
    """Register the OGR KML driver with fiona for reading, if it is not already."""
    if FIONA_DRIVER not in fiona.supported_drivers:
        fiona.supported_drivers[FIONA_DRIVER] = "r"


def load_with_fiona(
    kml_path: Path,
    source_filename: str,
    layer_order: Sequence[str] = (),
) -> list[FeaturePayload]:
    """Load all features of a KML file using fiona.

    Args:
        kml_path: Path to the KML file.
        source_filename: Name used in log messages.
        layer_order: Document/Folder names in document order.  Layers are
            read in this order; layers not named here come last, in the
            order fiona lists them.

    Raises:
        KmlValidationError: If a layer declares a CRS other than WGS 84.
    """
    enable_kml_driver()
    features: list[FeaturePayload] = []

    for layer in _ordered_layers(fiona.listlayers(str(kml_path)), layer_order):
        with fiona.open(str(kml_path), driver=FIONA_DRIVER, layer=layer) as collection:
            _check_crs(collection)

            for idx, record in enumerate(collection):
                feature = _record_to_feature(_record_to_dict(record), source_filename, layer, idx)
                if feature is not None:
                    features.append(feature)

    return features


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _ordered_layers(layers: Sequence[str], layer_order: Sequence[str]) -> list[str]:
    rank: dict[str, int] = {}
    for name in layer_order:
        rank.setdefault(name, len(rank))
    return sorted(layers, key=lambda layer: rank.get(layer, len(rank)))


def _record_to_dict(record: object) -> Mapping[str, Any]:
    """Return a fiona record as a GeoJSON-like mapping."""
    geo = getattr(record, "__geo_interface__", None)
    if isinstance(geo, Mapping):
        return geo
    if isinstance(record, Mapping):
        return record
    msg = f"Unexpected fiona record type: {type(record).__name__}"
    raise KmlValidationError(msg)


def _record_to_feature(
    record: Mapping[str, Any],
    source_filename: str,
    layer: str,
    index: int,
) -> FeaturePayload | None:
    """Convert one fiona record, returning None if it must be skipped."""
    props = record.get("properties") or {}
    properties = extract_properties_from_fiona(props)
    display_name = properties.get("name") or f"{layer} feature {index}"

    geom = record.get("geometry")
    if geom is None:
        logger.warning(
            "Skipping feature without geometry '%s' in %s",
            display_name,
            source_filename,
        )
        return None

    try:
        geometry = normalize_geometry(geom)
        validate_coordinates(iter_positions(geometry), display_name)
    except (KmlValidationError, InvalidCoordinateError) as exc:
        logger.warning(
            "Skipping invalid feature '%s' in %s: %s",
            display_name,
            source_filename,
            exc,
        )
        return None

    return {"type": "Feature", "geometry": geometry, "properties": properties}


def _check_crs(collection: object) -> None:
    """Reject layers whose CRS is not WGS 84.

    Raises:
        KmlValidationError: If the CRS resolves to an EPSG code other than 4326.
    """
    crs = getattr(collection, "crs", None)
    if not crs:
        return

    epsg = getattr(crs, "to_epsg", lambda: None)()
    if epsg is not None and epsg != 4326:
        msg = f"Unexpected CRS: EPSG:{epsg} (expected EPSG:4326 for KML)"
        raise KmlValidationError(msg)
