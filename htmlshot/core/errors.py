"""
Render Errors
=============

Typed failures raised by the screenshot pipeline. Each class carries the
HTTP status it is reported with.
"""

from typing import List, Optional


class RenderError(Exception):
    """Base class for failures reported to the caller."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error: Optional[str] = None,
        details: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error = error
        self.details = details


class AuthorizationError(RenderError):
    """Credential did not match the configured secret."""

    status_code = 403


class ValidationError(RenderError):
    """Missing or malformed input."""

    status_code = 400


class ContentLoadError(RenderError):
    """Navigation or content load failed or timed out."""

    status_code = 400


class InternalError(RenderError):
    """Unexpected failure, e.g. the browser could not be launched."""

    status_code = 500
