"""
Authentication Utilities
=======================

Shared-secret validation for the screenshot endpoint. The secret travels in
the JSON body as ``apiKey``.
"""

import hmac
from typing import Any

from htmlshot.config.settings import get_settings
from htmlshot.core.errors import AuthorizationError


def validate_api_key(api_key: Any) -> str:
    """
    Validate the caller's credential.

    Args:
        api_key: Value of the apiKey field, of any JSON type

    Returns:
        API key if valid

    Raises:
        AuthorizationError: If the key is missing or does not match
    """
    settings = get_settings()

    if not isinstance(api_key, str) or not api_key:
        raise AuthorizationError("Invalid API Key")

    if not hmac.compare_digest(api_key.encode(), settings.api_key.encode()):
        raise AuthorizationError("Invalid API Key")

    return api_key
