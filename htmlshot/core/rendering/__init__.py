"""
Rendering Engine
================

Content preparation and PNG generation.

Components:
- presets: Device and quality lookup tables
- content: URL validation, fragment wrapping and markup lint
- png_generator: Playwright-based screenshot capture
"""
