"""Thin ingress boundary helpers for the Azure Functions HTTP routes.

Keeps ``function_app.py`` down to bindings and response wrapping:

- **view_kml_upload**: checks an uploaded KML body against the size
  limit, stages it in a temporary file for fiona and returns the
  snapshot response payload.
- **view_geojson_upload**: same for a client that already holds a
  GeoJSON ``FeatureCollection``.
- **correlation_id_from_headers**: propagates the caller's request id
  into error payloads.
"""

from __future__ import annotations

import json
import logging
import tempfile
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from kml_viewer.core.config import ViewerConfig
from kml_viewer.core.exceptions import ContractError, ValidationError
from kml_viewer.orchestrators.viewer_pipeline import build_snapshot, build_snapshot_from_kml

logger = logging.getLogger("kml_viewer.core.ingress")

DEFAULT_UPLOAD_NAME = "upload.kml"

_CORRELATION_HEADERS = ("x-correlation-id", "x-request-id")


def correlation_id_from_headers(headers: Mapping[str, str] | None) -> str:
    """Return the caller's correlation id, or a new one if none was sent."""
    if headers:
        lowered = {str(k).lower(): str(v) for k, v in headers.items()}
        for name in _CORRELATION_HEADERS:
            if lowered.get(name):
                return lowered[name]
    return str(uuid.uuid4())


def check_upload(body: bytes, config: ViewerConfig, *, correlation_id: str = "") -> None:
    """Reject empty or oversized request bodies.

    Raises:
        ValidationError: If *body* is empty or larger than
            ``config.max_upload_bytes``.
    """
    if not body:
        raise ValidationError(
            "Request body is empty",
            stage="ingress",
            code="EMPTY_UPLOAD",
            correlation_id=correlation_id,
        )
    if len(body) > config.max_upload_bytes:
        msg = f"Upload of {len(body)} bytes exceeds the limit of {config.max_upload_bytes} bytes"
        raise ValidationError(
            msg,
            stage="ingress",
            code="UPLOAD_TOO_LARGE",
            correlation_id=correlation_id,
        )


def safe_upload_name(filename: str | None) -> str:
    """Strip directories from a client-supplied filename and force ``.kml``."""
    name = Path(filename or "").name
    if not name:
        return DEFAULT_UPLOAD_NAME
    if not name.lower().endswith(".kml"):
        name = f"{name}.kml"
    return name


def view_kml_upload(
    body: bytes,
    *,
    filename: str | None = None,
    config: ViewerConfig | None = None,
    correlation_id: str = "",
) -> dict[str, Any]:
    """Build the snapshot response for an uploaded KML document.

    Raises:
        ValidationError: If the upload is empty or too large.
        KmlParseError: If the document cannot be loaded.
    """
    config = config or ViewerConfig()
    check_upload(body, config, correlation_id=correlation_id)
    name = safe_upload_name(filename)

    logger.info(
        "KML upload received | file=%s | size=%d | correlation_id=%s",
        name,
        len(body),
        correlation_id,
    )

    with tempfile.TemporaryDirectory(prefix="kml-viewer-") as tmp_dir:
        kml_path = Path(tmp_dir) / name
        kml_path.write_bytes(body)
        snapshot = build_snapshot_from_kml(
            kml_path,
            source_filename=name,
            enable_lxml_fallback=config.enable_lxml_fallback,
        )

    return snapshot.to_response()


def view_geojson_upload(
    body: bytes,
    *,
    config: ViewerConfig | None = None,
    correlation_id: str = "",
) -> dict[str, Any]:
    """Build the snapshot response for an uploaded GeoJSON FeatureCollection.

    Raises:
        ValidationError: If the upload is empty or too large.
        ContractError: If the body is not JSON or not a feature collection.
    """
    config = config or ViewerConfig()
    check_upload(body, config, correlation_id=correlation_id)

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = f"Request body is not valid JSON: {exc}"
        raise ContractError(
            msg,
            stage="ingress",
            code="INVALID_JSON",
            correlation_id=correlation_id,
        ) from exc

    try:
        snapshot = build_snapshot(payload)
    except ContractError as exc:
        exc.correlation_id = exc.correlation_id or correlation_id
        raise

    return snapshot.to_response()
