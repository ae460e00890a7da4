"""
Screenshot Routes
=================

FastAPI routes for screenshot generation and markup lint.
"""

import time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Request, Response
from pydantic import ValidationError as PydanticValidationError

from htmlshot.api.auth import validate_api_key
from htmlshot.config.logging import get_logger
from htmlshot.config.settings import get_settings
from htmlshot.core.errors import InternalError, RenderError, ValidationError
from htmlshot.core.rendering.content import lint_markup, resolve_content
from htmlshot.core.rendering.png_generator import render_screenshot
from htmlshot.models.schemas import (
    ErrorResponse,
    HealthStatus,
    MarkupValidationRequest,
    MarkupValidationResponse,
    RenderRequest,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Screenshots"])

ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid input or content failed to load"},
    403: {"model": ErrorResponse, "description": "Invalid API key"},
    500: {"model": ErrorResponse, "description": "Screenshot generation failed"},
}


async def read_json_payload(request: Request) -> Dict[str, Any]:
    """Read the request body as a JSON object, or an empty dict if it is not one."""
    try:
        payload = await request.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def format_validation_errors(exc: PydanticValidationError) -> List[str]:
    """Flatten pydantic errors into "field: message" strings."""
    return [
        f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
        for err in exc.errors()
    ]


@router.post(
    "/screenshot",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}, **ERROR_RESPONSES},
)
@router.post(
    "/capture",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}, **ERROR_RESPONSES},
)
async def create_screenshot(request: Request) -> Response:
    """
    Render HTML/CSS or a URL to PNG.

    The body is a JSON object with ``apiKey`` and either ``url`` or ``code``,
    plus optional ``device`` and ``quality``. The key is checked before any
    other field.
    """
    request_id = getattr(request.state, "request_id", None)
    try:
        return await capture_screenshot(request, request_id)
    except RenderError:
        raise
    except Exception as e:
        # Every failure leaves this route as a RenderError
        logger.error("Screenshot generation error", error=str(e), request_id=request_id)
        raise InternalError("Failed to generate screenshot", error=str(e))


async def capture_screenshot(request: Request, request_id: Optional[str]) -> Response:
    """Authenticate, validate and render one screenshot request."""
    start_time = time.perf_counter()
    settings = get_settings()

    payload = await read_json_payload(request)
    validate_api_key(payload.get("apiKey"))

    try:
        render_request = RenderRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError("Invalid request body", details=format_validation_errors(e))

    source = resolve_content(render_request, settings)

    logger.info(
        "Screenshot requested",
        source=source.kind,
        device=render_request.device.value,
        quality=render_request.quality.value,
        request_id=request_id,
    )

    result = await render_screenshot(render_request, source, settings)

    if source.kind == "url":
        cache_control = f"public, max-age={settings.url_cache_max_age}"
    else:
        cache_control = "no-cache, no-store, must-revalidate"

    logger.info(
        "Screenshot completed",
        file_size=result.file_size,
        width=result.width,
        height=result.height,
        processing_time=round(time.perf_counter() - start_time, 3),
        request_id=request_id,
    )

    return Response(
        content=result.png_data,
        media_type="image/png",
        headers={
            "Content-Length": str(len(result.png_data)),
            "Cache-Control": cache_control,
        },
    )


@router.get("/screenshot", response_model=HealthStatus)
async def screenshot_status() -> HealthStatus:
    """Report that the screenshot endpoint is up."""
    return HealthStatus(
        message="HTML & CSS Screenshot Generator API is running",
        status="healthy",
        version=get_settings().app_version,
    )


@router.options("/screenshot")
@router.options("/capture")
async def screenshot_preflight() -> Response:
    """Answer preflight requests that bypass the CORS middleware."""
    return Response(status_code=200)


@router.post("/validate", response_model=MarkupValidationResponse, responses=ERROR_RESPONSES)
async def validate_markup(request: MarkupValidationRequest) -> MarkupValidationResponse:
    """
    Lint HTML/CSS without rendering.

    Findings are heuristic; a document with findings may still render fine.
    """
    if not request.code.strip():
        raise ValidationError("HTML/CSS code is required")

    errors = lint_markup(request.code)
    logger.info("Markup lint completed", content_length=len(request.code), findings=len(errors))
    return MarkupValidationResponse(valid=not errors, errors=errors)
