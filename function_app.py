"""Azure Functions entry point for the KML Viewer.

Registers the HTTP routes using the Python v2 programming model.

All business logic lives in the kml_viewer package. This file is purely
the wiring layer between Azure Functions bindings and application code.
"""

from __future__ import annotations

import json
import logging

import azure.functions as func

from kml_viewer.core.config import ViewerConfig
from kml_viewer.core.exceptions import ViewerError
from kml_viewer.core.ingress import (
    correlation_id_from_headers,
    view_geojson_upload,
    view_kml_upload,
)

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

logger = logging.getLogger("kml_viewer.function_app")

config = ViewerConfig.from_env()


def _json_response(body: object, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body),
        status_code=status_code,
        mimetype="application/json",
    )


def _error_response(exc: ViewerError) -> func.HttpResponse:
    logger.warning(
        "Request rejected | stage=%s | code=%s | correlation_id=%s | %s",
        exc.stage,
        exc.code,
        exc.correlation_id,
        exc.message,
    )
    return _json_response({"error": exc.to_error_dict()}, status_code=400)


# ---------------------------------------------------------------------------
# HTTP: KML upload → summary, details and map data
# ---------------------------------------------------------------------------


@app.function_name("view_kml")
@app.route(route="kml/view", methods=["POST"])
def view_kml(req: func.HttpRequest) -> func.HttpResponse:
    """Load an uploaded KML document and return its viewer snapshot.

    The request body is the raw KML; ``?filename=`` is optional and only
    used in log messages.
    """
    correlation_id = correlation_id_from_headers(req.headers)
    try:
        body = view_kml_upload(
            req.get_body(),
            filename=req.params.get("filename"),
            config=config,
            correlation_id=correlation_id,
        )
    except ViewerError as exc:
        exc.correlation_id = exc.correlation_id or correlation_id
        return _error_response(exc)
    except Exception:
        logger.exception("Unexpected failure loading KML | correlation_id=%s", correlation_id)
        raise

    return _json_response(body)


# ---------------------------------------------------------------------------
# HTTP: GeoJSON upload → summary and details
# ---------------------------------------------------------------------------


@app.function_name("view_geojson")
@app.route(route="geojson/view", methods=["POST"])
def view_geojson(req: func.HttpRequest) -> func.HttpResponse:
    """Return the viewer snapshot for an already-parsed FeatureCollection."""
    correlation_id = correlation_id_from_headers(req.headers)
    try:
        body = view_geojson_upload(
            req.get_body(),
            config=config,
            correlation_id=correlation_id,
        )
    except ViewerError as exc:
        exc.correlation_id = exc.correlation_id or correlation_id
        return _error_response(exc)
    except Exception:
        logger.exception("Unexpected failure building snapshot | correlation_id=%s", correlation_id)
        raise

    return _json_response(body)


# ---------------------------------------------------------------------------
# HTTP: Map widget configuration
# ---------------------------------------------------------------------------


@app.function_name("map_config")
@app.route(route="map/config", methods=["GET"])
def map_config(req: func.HttpRequest) -> func.HttpResponse:
    """Return tile URL, initial centre and zoom for the map widget."""
    return _json_response(config.map_options())
