"""
FastAPI Application
==================

Main FastAPI application serving the screenshot endpoint.
Wires middleware, routers and the error-to-JSON exception handlers.
"""

from contextlib import asynccontextmanager
import uuid
from typing import AsyncGenerator, Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from htmlshot.config.settings import get_settings
from htmlshot.config.logging import get_logger
from htmlshot.core.errors import InternalError, RenderError
from htmlshot.api.routes.health import router as health_router
from htmlshot.api.routes.screenshot import router as screenshot_router
from htmlshot.models.schemas import ErrorResponse

logger = get_logger(__name__)

HTTP_ERROR_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting FastAPI application", environment=settings.environment)
    try:
        yield
    finally:
        logger.info("Shutting down FastAPI application")


def error_response(status_code: int, body: ErrorResponse, **headers: str) -> JSONResponse:
    """Serialize an ErrorResponse, omitting unset optional fields."""
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers or None,
    )


# Create FastAPI app
settings = get_settings()
app = FastAPI(
    title=settings.app_name,
    description="Render HTML/CSS or a URL in headless Chromium and return a PNG screenshot",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.enable_docs else None,
    redoc_url="/redoc" if settings.enable_docs else None,
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=86400,
)

app.include_router(health_router)
app.include_router(screenshot_router)


# Request ID middleware
@app.middleware("http")
async def add_request_id(request: Request, call_next: Any) -> Any:
    """Add request ID to all requests."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    return response


# Exception handlers
@app.exception_handler(RenderError)
async def render_error_handler(request: Request, exc: RenderError) -> JSONResponse:
    """Convert pipeline failures into the JSON error shape."""
    error = exc.error
    if isinstance(exc, InternalError) and not get_settings().debug:
        error = None

    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request failed",
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        message=exc.message,
        error=exc.error,
        request_id=getattr(request.state, "request_id", None),
    )

    return error_response(
        exc.status_code, ErrorResponse(message=exc.message, error=error, details=exc.details)
    )


@app.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Routing errors (404, 405) in the JSON error shape."""
    message = HTTP_ERROR_MESSAGES.get(exc.status_code, str(exc.detail))

    logger.warning(
        "HTTP exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        request_id=getattr(request.state, "request_id", None),
    )

    return error_response(exc.status_code, ErrorResponse(message=message), **(exc.headers or {}))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Body validation failures are reported as 400."""
    details = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    ]
    return error_response(400, ErrorResponse(message="Invalid request body", details=details))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """General exception handler for unexpected errors."""
    logger.error(
        "Unhandled exception",
        exception=str(exc),
        request_id=getattr(request.state, "request_id", None),
        exc_info=True,
    )

    return error_response(
        500,
        ErrorResponse(
            message="Failed to generate screenshot",
            error=str(exc) if get_settings().debug else None,
        ),
    )


# Root endpoint
@app.get("/", tags=["General"])
async def root() -> dict[str, Any]:
    """
    Root endpoint with basic API information.
    """
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Render HTML/CSS or a URL to a PNG screenshot",
        "docs_url": "/docs" if settings.enable_docs else None,
        "health_check": "/health",
        "endpoints": {
            "screenshot": "POST /api/screenshot",
            "capture": "POST /api/capture",
            "validate": "POST /api/validate",
            "status": "GET /api/screenshot",
        },
    }


# Development server runner
def run_development_server() -> None:
    """Run development server with auto-reload."""
    uvicorn.run(
        "htmlshot.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


def create_app() -> FastAPI:
    """
    Application factory function for creating FastAPI app instance.
    Used by integration tests and external deployment scripts.

    Returns:
        FastAPI application instance
    """
    return app


if __name__ == "__main__":
    run_development_server()
