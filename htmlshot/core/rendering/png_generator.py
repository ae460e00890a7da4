"""
PNG Generator
=============

Playwright-based PNG screenshot generation from URLs and HTML content.
Each render owns its browser instance for the duration of the request.
"""

from typing import Optional, Dict, Any, AsyncGenerator, Iterator
from contextlib import asynccontextmanager, contextmanager
import io

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Error as PlaywrightError,
)
from PIL import Image

from htmlshot.config.logging import get_logger
from htmlshot.config.settings import Settings, get_settings
from htmlshot.core.errors import ContentLoadError, InternalError, RenderError
from htmlshot.core.rendering.presets import resolve_quality, resolve_viewport
from htmlshot.models.schemas import (
    ContentSource,
    PNGResult,
    QualityProfile,
    RenderRequest,
    ViewportProfile,
)

logger = get_logger(__name__)


@contextmanager
def open_screenshot(png_bytes: bytes) -> Iterator[Image.Image]:
    """
    Open browser-produced PNG bytes without the decompression bomb limit.

    Full-page captures of long documents exceed Pillow's pixel limit.
    """
    max_pixels = Image.MAX_IMAGE_PIXELS
    Image.MAX_IMAGE_PIXELS = None
    try:
        with Image.open(io.BytesIO(png_bytes)) as image:
            yield image
    finally:
        Image.MAX_IMAGE_PIXELS = max_pixels


class PlaywrightPNGGenerator:
    """Playwright-based PNG generator with a dedicated browser per render."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.logger: Any = logger.bind(generator="playwright")

    @asynccontextmanager
    async def launch_browser(self) -> AsyncGenerator[Browser, None]:
        """
        Launch a Chromium instance and release it on exit.

        The browser is closed and the Playwright driver stopped on every
        exit path.

        Raises:
            InternalError: If the driver or browser cannot be started
        """
        playwright = None
        try:
            playwright = await async_playwright().start()
            browser = await playwright.chromium.launch(
                headless=self.settings.playwright_headless,
                args=self.settings.chromium_args,
            )
        except Exception as e:
            self.logger.error("Browser launch failed", error=str(e))
            if playwright is not None:
                await playwright.stop()
            raise InternalError("Failed to launch browser", error=str(e))

        self.logger.debug("Browser launched")
        try:
            yield browser
        finally:
            try:
                await browser.close()
            finally:
                await playwright.stop()
            self.logger.debug("Browser released")

    async def generate_png(
        self,
        source: ContentSource,
        viewport: ViewportProfile,
        quality: QualityProfile,
    ) -> PNGResult:
        """
        Capture a full-page PNG of the given content.

        Args:
            source: URL or HTML document to load
            viewport: Browser viewport configuration
            quality: Compression settings

        Returns:
            PNGResult containing PNG data and metadata

        Raises:
            ContentLoadError: If the content fails to load or times out
            InternalError: If the browser or capture fails
        """
        self.logger.info(
            "Generating PNG",
            source=source.kind,
            width=viewport.width,
            height=viewport.height,
            pixel_density=viewport.pixel_density,
        )

        try:
            async with self.launch_browser() as browser:
                context = await self._create_browser_context(browser, viewport)
                try:
                    page = await context.new_page()
                    await self._load_content(page, source)
                    screenshot_bytes = await page.screenshot(
                        type="png", full_page=True, omit_background=False
                    )
                finally:
                    await context.close()
        except RenderError:
            raise
        except Exception as e:
            self.logger.error("PNG generation error", error=str(e))
            raise InternalError("Failed to generate screenshot", error=str(e))

        if quality.png_quality < 100:
            screenshot_bytes = self._compress_png(screenshot_bytes, quality)

        width, height = self._image_size(screenshot_bytes)
        result = PNGResult(
            png_data=screenshot_bytes,
            width=width,
            height=height,
            file_size=len(screenshot_bytes),
            metadata={
                "generator": "playwright",
                "source": source.kind,
                "png_quality": quality.png_quality,
                "pixel_density": viewport.pixel_density,
            },
        )

        self.logger.info("PNG generation completed", file_size=result.file_size)
        return result

    async def _create_browser_context(
        self, browser: Browser, viewport: ViewportProfile
    ) -> BrowserContext:
        """Create browser context with the resolved viewport."""
        context_options: Dict[str, Any] = {
            "viewport": {"width": viewport.width, "height": viewport.height},
            "device_scale_factor": viewport.pixel_density,
            "is_mobile": viewport.is_touch_device,
            "has_touch": viewport.is_touch_device,
            "user_agent": self.settings.user_agent,
        }
        return await browser.new_context(**context_options)

    async def _load_content(self, page: Page, source: ContentSource) -> None:
        """
        Load the content and let CSS transitions settle.

        Raises:
            ContentLoadError: On navigation failure or timeout
        """
        try:
            if source.kind == "url":
                await page.goto(
                    source.value, wait_until="networkidle", timeout=self.settings.url_timeout_ms
                )
                settle_ms = self.settings.url_settle_ms
            else:
                await page.set_content(
                    source.value,
                    wait_until="networkidle",
                    timeout=self.settings.markup_timeout_ms,
                )
                settle_ms = self.settings.markup_settle_ms

            if settle_ms:
                await page.wait_for_timeout(settle_ms)
        except PlaywrightError as e:
            self.logger.warning("Content failed to load", source=source.kind, error=e.message)
            if source.kind == "url":
                raise ContentLoadError("Failed to load the website", error=e.message)
            raise ContentLoadError("Invalid HTML content or timeout", error=e.message)

    def _compress_png(self, png_bytes: bytes, quality: QualityProfile) -> bytes:
        """
        Reduce the palette in proportion to the quality level.

        Args:
            png_bytes: Original PNG bytes
            quality: Quality profile with png_quality below 100

        Returns:
            Re-encoded PNG bytes, or the original bytes if re-encoding fails
        """
        colors = max(2, min(256, round(256 * quality.png_quality / 100)))
        try:
            with open_screenshot(png_bytes) as image:
                if image.mode not in ("RGB", "RGBA"):
                    image = image.convert("RGBA" if "A" in image.getbands() else "RGB")

                if image.mode == "RGBA":
                    image = image.quantize(colors=colors, method=Image.Quantize.FASTOCTREE)
                else:
                    image = image.quantize(colors=colors)

                output = io.BytesIO()
                image.save(output, format="PNG", optimize=True)
            compressed = output.getvalue()

            self.logger.debug(
                "PNG compression completed",
                original_size=len(png_bytes),
                compressed_size=len(compressed),
                colors=colors,
            )
            return compressed

        except Exception as e:
            self.logger.warning("PNG compression failed, using original", error=str(e))
            return png_bytes

    def _image_size(self, png_bytes: bytes) -> tuple[int, int]:
        """Read pixel dimensions from PNG bytes."""
        with open_screenshot(png_bytes) as image:
            return image.size


async def render_screenshot(
    request: RenderRequest, source: ContentSource, settings: Optional[Settings] = None
) -> PNGResult:
    """
    Render a request's content to PNG with its device and quality presets.

    Args:
        request: Validated render request
        source: Content resolved from the request
        settings: Optional settings override

    Returns:
        PNGResult containing PNG data and metadata
    """
    viewport = resolve_viewport(request.device, request.quality)
    quality = resolve_quality(request.quality)

    generator = PlaywrightPNGGenerator(settings)
    result = await generator.generate_png(source, viewport, quality)
    result.metadata.update({"device": request.device.value, "quality": request.quality.value})
    return result
