"""
Content Preparation
===================

Turns a render request into the content the browser loads: URL validation,
fragment wrapping and a best-effort HTML/CSS lint.
"""

import re
from typing import List, Optional
from urllib.parse import urlsplit

from htmlshot.config.logging import get_logger
from htmlshot.config.settings import Settings, get_settings
from htmlshot.core.errors import ValidationError
from htmlshot.models.schemas import ContentSource, RenderRequest

logger = get_logger(__name__)

ALLOWED_URL_SCHEMES = {"http", "https"}

DOCUMENT_TEMPLATE = (
    '<!DOCTYPE html>\n<html>\n<head>\n<meta charset="utf-8">\n</head>\n'
    "<body>\n{body}\n</body>\n</html>"
)

_OPEN_TAG_RE = re.compile(r"<[^/!][^>]*>")
_CLOSE_TAG_RE = re.compile(r"</[^>]*>")
_STYLE_BLOCK_RE = re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)
_STYLE_TAG_RE = re.compile(r"</?style[^>]*>", re.IGNORECASE)

# Allowed difference between opening and closing tag counts; void elements
# (<br>, <img>, <meta>) have no closing tag.
TAG_IMBALANCE_TOLERANCE = 5


def validate_target_url(url: str) -> str:
    """
    Check that a URL is absolute, http(s) and has a host.

    Args:
        url: URL supplied by the caller

    Returns:
        The stripped URL

    Raises:
        ValidationError: If the URL is malformed
    """
    candidate = url.strip()
    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname
        parts.port  # raises ValueError for a non-numeric port
    except ValueError as e:
        raise ValidationError("Invalid URL format", error=str(e))

    if parts.scheme.lower() not in ALLOWED_URL_SCHEMES or not hostname:
        raise ValidationError(
            "Invalid URL format", error="URL must be an absolute http or https URL"
        )
    return candidate


def wrap_fragment(markup: str) -> str:
    """Wrap a fragment in a minimal HTML document, or add a missing DOCTYPE."""
    lowered = markup.lower()
    if "<html" not in lowered:
        return DOCUMENT_TEMPLATE.format(body=markup)
    if "<!doctype" not in lowered:
        return "<!DOCTYPE html>\n" + markup
    return markup


def lint_markup(code: str) -> List[str]:
    """
    Run heuristic HTML/CSS checks.

    Counts tags and braces only; markup is never parsed, so findings may be
    false positives.

    Args:
        code: HTML document

    Returns:
        Human-readable findings, empty when nothing was flagged
    """
    errors: List[str] = []
    lowered = code.lower()

    if "<!doctype" not in lowered:
        errors.append("Missing DOCTYPE declaration")
    if "<html" not in lowered:
        errors.append("Missing <html> tag")
    if "</html>" not in lowered:
        errors.append("Missing closing </html> tag")
    if "<head" not in lowered:
        errors.append("Missing <head> section")
    if "<body" not in lowered:
        errors.append("Missing <body> section")

    open_tags = _OPEN_TAG_RE.findall(code)
    close_tags = _CLOSE_TAG_RE.findall(code)
    if abs(len(open_tags) - len(close_tags)) > TAG_IMBALANCE_TOLERANCE:
        errors.append("Possible unclosed HTML tags detected")

    for index, block in enumerate(_STYLE_BLOCK_RE.findall(code), start=1):
        css = _STYLE_TAG_RE.sub("", block)
        if css.count("{") != css.count("}"):
            errors.append(f"CSS syntax error in style block {index}: Mismatched braces")

    if "<<" in code or ">>" in code:
        errors.append("Invalid HTML syntax: Double angle brackets detected")

    return errors


def resolve_content(request: RenderRequest, settings: Optional[Settings] = None) -> ContentSource:
    """
    Decide what the browser should load for a request.

    A non-blank URL takes precedence over markup.

    Raises:
        ValidationError: If neither content is usable, the URL is malformed or
            strict lint rejects the markup
    """
    settings = settings or get_settings()

    if request.url and request.url.strip():
        return ContentSource(kind="url", value=validate_target_url(request.url))

    if not request.code or not request.code.strip():
        raise ValidationError("URL or HTML/CSS code is required")

    markup = wrap_fragment(request.code) if settings.auto_wrap_fragments else request.code

    findings = lint_markup(markup)
    if findings:
        if settings.strict_markup_validation:
            raise ValidationError(
                "Code validation failed",
                error="HTML/CSS syntax errors detected",
                details=findings,
            )
        logger.warning("Markup lint reported findings", findings=findings)

    return ContentSource(kind="markup", value=markup)
