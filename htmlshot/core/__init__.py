"""
Core Business Logic
===================

Screenshot rendering pipeline and error taxonomy.

Components:
- errors: Typed failures mapped to HTTP status codes
- rendering: Presets, content preparation and Playwright PNG generation
"""
