"""
Test Helpers
============

Constants and small helpers shared across unit and integration tests.
"""

import io

from PIL import Image


TEST_API_KEY = "test-api-key"

VALID_DOCUMENT = "<!DOCTYPE html><html><head></head><body><h1>Hi</h1></body></html>"


def make_png(width: int = 64, height: int = 48, mode: str = "RGB", color=(200, 40, 40)) -> bytes:
    """Produce real PNG bytes of the given size."""
    image = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
