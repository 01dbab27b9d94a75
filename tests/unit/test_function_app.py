"""Tests for the HTTP response handlers behind the Azure Functions routes."""

from __future__ import annotations

import json
from typing import Any

import httpx

from function_app import boundary_response, og_image_response
from idn_area_map.core.config import AppConfig


def _client(handler: Any) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _failing_client(status_code: int = 500) -> httpx.Client:
    return _client(lambda request: httpx.Response(status_code))


class TestOgImageResponse:
    """og-image/{code} route handler."""

    def test_png(self, app_config: AppConfig, square_feature_geojson: dict[str, Any]) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "data.example":
                return httpx.Response(200, json=square_feature_geojson)
            return httpx.Response(200, content=b"png")

        response = og_image_response("31", app_config, client=_client(handler))

        assert response.status_code == 200
        assert response.mimetype == "image/png"
        assert response.get_body() == b"png"
        assert response.headers["X-Map-Source"] == "mapbox"
        assert "max-age=604800" in response.headers["Cache-Control"]

    def test_invalid_code(self, app_config: AppConfig) -> None:
        response = og_image_response("not-a-code", app_config, client=_failing_client())
        assert response.status_code == 400
        assert json.loads(response.get_body())["statusCode"] == 400

    def test_nothing_to_serve(self, app_config: AppConfig) -> None:
        response = og_image_response("31", app_config, client=_failing_client())
        body = json.loads(response.get_body())
        assert response.status_code == 503
        assert body["code"] == "FALLBACK_IMAGE_UNAVAILABLE"
        assert "correlation_id" not in body

    def test_error_body_carries_invocation_id(self, app_config: AppConfig) -> None:
        response = og_image_response(
            "31", app_config, client=_failing_client(), correlation_id="inv-123"
        )
        body = json.loads(response.get_body())
        assert response.status_code == 503
        assert body["correlation_id"] == "inv-123"


class TestBoundaryResponse:
    """boundary/{area}/{code} route handler."""

    def test_found(self, app_config: AppConfig, square_feature_geojson: dict[str, Any]) -> None:
        client = _client(lambda request: httpx.Response(200, json=square_feature_geojson))
        response = boundary_response("province", "31", app_config, client=client)
        body = json.loads(response.get_body())
        assert response.status_code == 200
        assert response.mimetype == "application/json"
        assert body["data"]["geometry"]["type"] == "Polygon"

    def test_invalid_params(self, app_config: AppConfig) -> None:
        response = boundary_response("province", "1101", app_config, client=_failing_client())
        body = json.loads(response.get_body())
        assert response.status_code == 400
        assert body["message"] == "Bad Request"
        assert body["error"]

    def test_unknown_area(self, app_config: AppConfig) -> None:
        response = boundary_response("country", "11", app_config, client=_failing_client())
        assert response.status_code == 400

    def test_not_found(self, app_config: AppConfig) -> None:
        response = boundary_response("regency", "9999", app_config, client=_failing_client(404))
        assert response.status_code == 404
        assert json.loads(response.get_body())["statusCode"] == 404

    def test_upstream_failure(self, app_config: AppConfig) -> None:
        response = boundary_response(
            "regency", "9603", app_config, client=_failing_client(502), correlation_id="inv-9"
        )
        body = json.loads(response.get_body())
        assert response.status_code == 502
        assert body["code"] == "BOUNDARY_SOURCE_FAILED"
        assert body["correlation_id"] == "inv-9"
