"""
HTML Screenshot API
===================

An HTTP service that renders raw HTML/CSS or a live URL in headless Chromium
and returns a PNG screenshot.

This package provides:
- FastAPI endpoint for screenshot generation
- Browser automation with Playwright
- Device and quality presets for viewport emulation
- Best-effort HTML/CSS lint for submitted markup
"""

__version__ = "1.0.0"
__author__ = "HTML Screenshot API Team"
