"""
Test Suite
==========

Test suite matching the htmlshot/ package structure.

Test Categories:
- unit: Unit tests for individual components, Playwright mocked out
- integration: HTTP contract tests through the FastAPI test client
"""
