"""Azure Functions entry point for the Indonesian area map service.

Registers the HTTP functions using the Python v2 programming model.
All business logic lives in the idn_area_map package; this file only
translates between HTTP requests and application calls.
"""

from __future__ import annotations

import functools
import json
import logging

import azure.functions as func
import httpx
from pydantic import ValidationError as PayloadValidationError

from idn_area_map.activities.area_image import FallbackImageUnavailableError, render_area_image
from idn_area_map.core.config import AppConfig
from idn_area_map.models.area import BoundaryParams, InvalidAreaCodeError
from idn_area_map.providers.base import BoundaryNotFoundError, ProviderError
from idn_area_map.providers.boundary_source import BoundarySource

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

logger = logging.getLogger("idn_area_map.function_app")

# One week; area boundaries change rarely.
IMAGE_CACHE_CONTROL = "public, max-age=604800, immutable"


@functools.lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Load application configuration once per worker."""
    return AppConfig.from_env()


def _json_response(payload: dict[str, object], status_code: int) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(payload, separators=(",", ":")),
        status_code=status_code,
        mimetype="application/json",
    )


# ---------------------------------------------------------------------------
# HTTP: OpenGraph image
# ---------------------------------------------------------------------------


def og_image_response(
    code: str,
    config: AppConfig,
    *,
    client: httpx.Client | None = None,
    correlation_id: str = "",
) -> func.HttpResponse:
    """Render the share image for *code* as an HTTP response."""
    try:
        image = render_area_image(code, config, client=client, correlation_id=correlation_id)
    except InvalidAreaCodeError as exc:
        return _json_response({"statusCode": 400, "message": exc.message}, 400)
    except FallbackImageUnavailableError as exc:
        logger.error(
            "OpenGraph image unavailable | code=%s | correlation_id=%s | error=%s",
            code,
            correlation_id,
            exc,
        )
        return _json_response({"statusCode": 503, **exc.to_error_dict()}, 503)

    return func.HttpResponse(
        body=image.content,
        status_code=200,
        mimetype=image.content_type,
        headers={"Cache-Control": IMAGE_CACHE_CONTROL, "X-Map-Source": image.source},
    )


@app.function_name("og_image")
@app.route(route="og-image/{code}", methods=["GET"])
def og_image(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """Return the PNG share image for an area code."""
    return og_image_response(
        req.route_params.get("code", ""),
        get_config(),
        correlation_id=context.invocation_id,
    )


# ---------------------------------------------------------------------------
# HTTP: Boundary GeoJSON
# ---------------------------------------------------------------------------


def boundary_response(
    area: str,
    code: str,
    config: AppConfig,
    *,
    client: httpx.Client | None = None,
    correlation_id: str = "",
) -> func.HttpResponse:
    """Look up the boundary of one area as an HTTP response."""
    try:
        params = BoundaryParams(area=area, code=code)
    except PayloadValidationError as exc:
        return _json_response(
            {
                "statusCode": 400,
                "message": "Bad Request",
                "error": json.loads(exc.json(include_url=False)),
            },
            400,
        )

    source = BoundarySource(
        config.boundary_source_url,
        timeout_s=config.mapbox.timeout_s,
        client=client,
    )

    try:
        feature = source.get_boundary(params.area, params.code)
    except BoundaryNotFoundError as exc:
        return _json_response({"statusCode": 404, "message": exc.message}, 404)
    except ProviderError as exc:
        exc.with_correlation_id(correlation_id)
        logger.error(
            "Boundary fetch failed | area=%s | code=%s | correlation_id=%s | error=%s",
            params.area.value,
            params.code,
            correlation_id,
            exc,
        )
        return _json_response({"statusCode": 502, **exc.to_error_dict()}, 502)

    return _json_response({"statusCode": 200, "data": feature.to_geojson()}, 200)


@app.function_name("area_boundary")
@app.route(route="boundary/{area}/{code}", methods=["GET"])
def area_boundary(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """Return the GeoJSON boundary of an area."""
    return boundary_response(
        req.route_params.get("area", ""),
        req.route_params.get("code", ""),
        get_config(),
        correlation_id=context.invocation_id,
    )
