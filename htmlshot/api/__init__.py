"""
FastAPI Application
==================

REST API for HTML/URL to PNG conversion.

Components:
- main: Application setup, middleware and exception handlers
- auth: Credential validation
- routes: Screenshot and health endpoints
"""
