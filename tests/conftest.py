"""
Test Configuration
==================

Pytest configuration with fixtures shared by unit and integration tests.
Forces the testing environment and a known API key before the package is
imported, and provides a mocked Playwright driver.
"""

import os
from types import SimpleNamespace
from typing import Callable, Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

os.environ["HTMLSHOT_ENVIRONMENT"] = "testing"
os.environ["HTMLSHOT_API_KEY"] = "test-api-key"
os.environ["HTMLSHOT_DEBUG"] = "true"
os.environ["HTMLSHOT_LOG_LEVEL"] = "DEBUG"

from htmlshot.config.settings import Settings, get_settings  # noqa: E402

from tests.utils.helpers import TEST_API_KEY, make_png as build_png  # noqa: E402


@pytest.fixture
def test_settings() -> Settings:
    """Settings for the generator with the settle pauses disabled."""
    return Settings(
        environment="testing",
        api_key=TEST_API_KEY,
        url_settle_ms=0,
        markup_settle_ms=0,
    )


@pytest.fixture
def app_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[Settings, None, None]:
    """The global settings used by the routes; attribute changes are undone."""
    settings = get_settings()
    monkeypatch.setattr(settings, "url_settle_ms", 0)
    monkeypatch.setattr(settings, "markup_settle_ms", 0)
    yield settings


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    """Factory producing real PNG bytes."""
    return build_png


@pytest.fixture
def mock_playwright(make_png: Callable[..., bytes]) -> Generator[SimpleNamespace, None, None]:
    """Patch async_playwright with a driver/browser/context/page mock chain."""
    page = MagicMock()
    page.goto = AsyncMock()
    page.set_content = AsyncMock()
    page.wait_for_timeout = AsyncMock()
    page.screenshot = AsyncMock(return_value=make_png())

    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock()

    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    driver = MagicMock()
    driver.chromium.launch = AsyncMock(return_value=browser)
    driver.stop = AsyncMock()

    with patch("htmlshot.core.rendering.png_generator.async_playwright") as mock_async_playwright:
        mock_async_playwright.return_value.start = AsyncMock(return_value=driver)
        yield SimpleNamespace(
            async_playwright=mock_async_playwright,
            driver=driver,
            browser=browser,
            context=context,
            page=page,
        )
