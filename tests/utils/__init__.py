"""
Test Utilities
==============

Shared constants and helpers for the test suite.
"""
