"""
Integration Tests for API Contracts
===================================

HTTP contract tests for the screenshot service through the FastAPI test
client. Playwright is mocked; everything above it runs for real.
"""

import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from fastapi import status
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from htmlshot.api.main import create_app
from htmlshot.models.schemas import PNGResult

from tests.utils.helpers import TEST_API_KEY, VALID_DOCUMENT


pytestmark = pytest.mark.integration


@pytest.fixture
def client(app_settings):
    """Create test client."""
    return TestClient(create_app())


class TestBasicAPIEndpoints:
    """Test informational endpoints."""

    def test_root_endpoint(self, client):
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["name"] == "HTML Screenshot API"
        assert data["endpoints"]["screenshot"] == "POST /api/screenshot"

    def test_health_check_endpoint(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"

    def test_screenshot_get_returns_status(self, client):
        response = client.get("/api/screenshot")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "HTML & CSS Screenshot Generator API is running"
        assert data["status"] == "healthy"
        assert "timestamp" in data

    def test_request_id_header(self, client):
        response = client.get("/health")
        assert response.headers["X-Request-ID"]


class TestScreenshotEndpoint:
    """Test POST /api/screenshot."""

    def test_markup_renders_png(self, client, mock_playwright):
        response = client.post(
            "/api/screenshot", json={"code": VALID_DOCUMENT, "apiKey": TEST_API_KEY}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"] == "image/png"
        assert response.content == mock_playwright.page.screenshot.return_value
        assert int(response.headers["content-length"]) == len(response.content)
        assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
        mock_playwright.browser.close.assert_awaited_once()

    def test_fragment_is_wrapped_and_rendered(self, client, mock_playwright):
        response = client.post(
            "/api/screenshot", json={"code": "<h1>Hi</h1>", "apiKey": TEST_API_KEY}
        )

        assert response.status_code == status.HTTP_200_OK
        loaded = mock_playwright.page.set_content.await_args.args[0]
        assert loaded.startswith("<!DOCTYPE html>")
        assert "<h1>Hi</h1>" in loaded

    def test_url_capture(self, client, mock_playwright):
        response = client.post(
            "/api/capture",
            json={"url": "https://example.com", "apiKey": TEST_API_KEY, "device": "mobile"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["cache-control"] == "public, max-age=3600"
        mock_playwright.page.goto.assert_awaited_once()
        context_kwargs = mock_playwright.browser.new_context.await_args.kwargs
        assert context_kwargs["viewport"] == {"width": 375, "height": 667}
        assert context_kwargs["is_mobile"] is True

    @pytest.mark.parametrize(
        "body",
        [
            {"code": VALID_DOCUMENT},
            {"code": VALID_DOCUMENT, "apiKey": "wrong"},
            {"code": VALID_DOCUMENT, "apiKey": 1234},
            {"apiKey": ""},
            {"url": "not a url", "device": 7, "apiKey": None},
        ],
    )
    def test_bad_credential_is_forbidden(self, client, mock_playwright, body):
        response = client.post("/api/screenshot", json=body)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"message": "Invalid API Key"}
        mock_playwright.async_playwright.assert_not_called()

    def test_non_json_body_is_forbidden(self, client):
        response = client.post(
            "/api/screenshot", content=b"code=<p>x</p>", headers={"Content-Type": "text/plain"}
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.parametrize("code", [None, "", "   ", "\n\t"])
    def test_blank_markup_is_rejected(self, client, mock_playwright, code):
        response = client.post("/api/screenshot", json={"code": code, "apiKey": TEST_API_KEY})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "URL or HTML/CSS code is required"
        mock_playwright.async_playwright.assert_not_called()

    def test_invalid_url_is_rejected(self, client, mock_playwright):
        response = client.post(
            "/api/screenshot", json={"url": "not a url", "apiKey": TEST_API_KEY}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Invalid URL format"
        mock_playwright.async_playwright.assert_not_called()

    def test_wrong_field_type_is_rejected(self, client):
        response = client.post("/api/screenshot", json={"code": 42, "apiKey": TEST_API_KEY})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["message"] == "Invalid request body"
        assert data["details"][0].startswith("code:")

    def test_unknown_device_and_quality_fall_back(self, client, mock_playwright):
        response = client.post(
            "/api/screenshot",
            json={
                "code": VALID_DOCUMENT,
                "apiKey": TEST_API_KEY,
                "device": "smartwatch",
                "quality": "ultra",
            },
        )

        assert response.status_code == status.HTTP_200_OK
        context_kwargs = mock_playwright.browser.new_context.await_args.kwargs
        assert context_kwargs["viewport"] == {"width": 1920, "height": 1080}
        assert context_kwargs["device_scale_factor"] == 2.0

    def test_url_timeout_is_content_load_error(self, client, mock_playwright):
        mock_playwright.page.goto.side_effect = PlaywrightTimeoutError(
            "Timeout 30000ms exceeded."
        )

        response = client.post(
            "/api/screenshot", json={"url": "https://10.255.255.1/", "apiKey": TEST_API_KEY}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["message"] == "Failed to load the website"
        assert "Timeout 30000ms exceeded" in data["error"]
        mock_playwright.context.close.assert_awaited_once()
        mock_playwright.browser.close.assert_awaited_once()
        mock_playwright.driver.stop.assert_awaited_once()

    def test_launch_failure_is_internal_error(self, client, mock_playwright):
        mock_playwright.driver.chromium.launch.side_effect = Exception("Executable doesn't exist")

        response = client.post(
            "/api/screenshot", json={"code": VALID_DOCUMENT, "apiKey": TEST_API_KEY}
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        data = response.json()
        assert data["message"] == "Failed to launch browser"
        assert data["error"] == "Executable doesn't exist"
        mock_playwright.driver.stop.assert_awaited_once()

    def test_internal_error_detail_hidden_outside_debug(self, client, app_settings, monkeypatch):
        monkeypatch.setattr(app_settings, "debug", False)

        with patch(
            "htmlshot.api.routes.screenshot.render_screenshot",
            AsyncMock(side_effect=ValueError("secret internals")),
        ):
            response = client.post(
                "/api/screenshot", json={"code": VALID_DOCUMENT, "apiKey": TEST_API_KEY}
            )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"message": "Failed to generate screenshot"}

    def test_unexpected_error_keeps_cors_headers(self, client, app_settings, monkeypatch):
        monkeypatch.setattr(app_settings, "debug", False)

        with patch(
            "htmlshot.api.routes.screenshot.resolve_content",
            side_effect=RuntimeError("unexpected"),
        ):
            response = client.post(
                "/api/screenshot",
                json={"code": VALID_DOCUMENT, "apiKey": TEST_API_KEY},
                headers={"Origin": "https://app.example.com"},
            )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"message": "Failed to generate screenshot"}
        assert response.headers["access-control-allow-origin"] == "*"

    def test_strict_lint_rejects_bad_css(self, client, app_settings, monkeypatch):
        monkeypatch.setattr(app_settings, "strict_markup_validation", True)

        response = client.post(
            "/api/screenshot",
            json={"code": "<style>h1 { color: red;</style><h1>x</h1>", "apiKey": TEST_API_KEY},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["message"] == "Code validation failed"
        assert data["error"] == "HTML/CSS syntax errors detected"
        assert data["details"] == ["CSS syntax error in style block 1: Mismatched braces"]

    def test_rendered_result_is_returned_with_content_length(self, client):
        data = b"\x89PNG fake"
        png = PNGResult(png_data=data, width=1, height=1, file_size=len(data))

        with patch(
            "htmlshot.api.routes.screenshot.render_screenshot", AsyncMock(return_value=png)
        ):
            response = client.post(
                "/api/screenshot", json={"code": VALID_DOCUMENT, "apiKey": TEST_API_KEY}
            )

        assert response.status_code == status.HTTP_200_OK
        assert response.content == data
        assert response.headers["content-length"] == str(len(data))


class TestMethodsAndCORS:
    """Test method handling and CORS headers."""

    @pytest.mark.parametrize("method", ["put", "delete", "patch"])
    def test_unsupported_method(self, client, method):
        response = client.request(method.upper(), "/api/screenshot")

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.json() == {"message": "Method not allowed"}

    def test_plain_options_request(self, client):
        response = client.options("/api/screenshot")

        assert response.status_code == status.HTTP_200_OK
        assert response.content == b""

    def test_cors_preflight(self, client):
        response = client.options(
            "/api/screenshot",
            headers={
                "Origin": "https://app.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]
        assert response.headers["access-control-max-age"] == "86400"

    def test_cors_on_simple_request(self, client):
        response = client.get("/api/screenshot", headers={"Origin": "https://app.example.com"})
        assert response.headers["access-control-allow-origin"] == "*"

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Not found"}


class TestValidateEndpoint:
    """Test POST /api/validate."""

    def test_valid_document(self, client):
        response = client.post("/api/validate", json={"code": VALID_DOCUMENT})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"valid": True, "errors": []}

    def test_fragment_reports_findings(self, client):
        response = client.post("/api/validate", json={"code": "<p>x</p>"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["valid"] is False
        assert "Missing DOCTYPE declaration" in data["errors"]

    def test_blank_code_is_rejected(self, client):
        response = client.post("/api/validate", json={"code": "  "})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "HTML/CSS code is required"

    def test_missing_code_is_rejected(self, client):
        response = client.post("/api/validate", json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Invalid request body"
