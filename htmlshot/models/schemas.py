"""
Pydantic Models and Schemas
===========================

Request/response models and the profiles the renderer is configured with.
"""

from typing import Optional, List, Dict, Any, Literal
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Enums
class DeviceType(str, Enum):
    """Emulated device classes."""

    DESKTOP = "desktop"
    TABLET = "tablet"
    MOBILE = "mobile"


class QualityLevel(str, Enum):
    """Output quality levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Rendering Models
class ViewportProfile(BaseModel):
    """Browser viewport derived from the requested device and quality."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0, description="Viewport width in CSS pixels")
    height: int = Field(..., gt=0, description="Viewport height in CSS pixels")
    pixel_density: float = Field(..., gt=0, description="Device scale factor")
    is_touch_device: bool = Field(False, description="Emulate a mobile touch device")


class QualityProfile(BaseModel):
    """Rasterization settings for a quality level."""

    model_config = ConfigDict(frozen=True)

    png_quality: int = Field(..., ge=0, le=100, description="PNG quality (0-100)")
    pixel_density: float = Field(..., gt=0, description="Device scale factor")


class ContentSource(BaseModel):
    """Resolved content of a render request."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["url", "markup"] = Field(..., description="Content kind")
    value: str = Field(..., description="Absolute URL or HTML document")


class PNGResult(BaseModel):
    """Result of PNG generation."""

    png_data: bytes = Field(..., description="PNG binary data", exclude=True)
    width: int = Field(..., description="Image width in pixels")
    height: int = Field(..., description="Image height in pixels")
    file_size: int = Field(..., description="File size in bytes")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Generation metadata")


# API Request/Response Models
class RenderRequest(BaseModel):
    """Request model for screenshot generation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: Optional[str] = Field(None, description="Page to capture")
    code: Optional[str] = Field(None, description="HTML/CSS markup to render")
    api_key: str = Field("", alias="apiKey", description="Shared secret")
    device: DeviceType = Field(DeviceType.DESKTOP, description="Emulated device")
    quality: QualityLevel = Field(QualityLevel.HIGH, description="Output quality")

    @field_validator("device", mode="before")
    @classmethod
    def fallback_device(cls, v: Any) -> DeviceType:
        """Unknown devices fall back to desktop."""
        if isinstance(v, str):
            v = v.strip().lower()
        try:
            return DeviceType(v)
        except (ValueError, TypeError):
            return DeviceType.DESKTOP

    @field_validator("quality", mode="before")
    @classmethod
    def fallback_quality(cls, v: Any) -> QualityLevel:
        """Unknown quality levels fall back to high."""
        if isinstance(v, str):
            v = v.strip().lower()
        try:
            return QualityLevel(v)
        except (ValueError, TypeError):
            return QualityLevel.HIGH


class MarkupValidationRequest(BaseModel):
    """Request model for markup lint."""

    code: str = Field(..., description="HTML/CSS markup to check")


class MarkupValidationResponse(BaseModel):
    """Response model for markup lint."""

    valid: bool = Field(..., description="Whether no findings were reported")
    errors: List[str] = Field(default_factory=list, description="Lint findings")


# Health Check Models
class HealthStatus(BaseModel):
    """Health check status."""

    message: str = Field(..., description="Service banner")
    status: Literal["healthy", "unhealthy"] = Field(..., description="Overall status")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Check timestamp"
    )
    version: str = Field(..., description="Application version")


# Error Models
class ErrorResponse(BaseModel):
    """Standard error response model."""

    message: str = Field(..., description="Error message")
    error: Optional[str] = Field(None, description="Underlying diagnostic")
    details: Optional[List[str]] = Field(None, description="Additional error details")
