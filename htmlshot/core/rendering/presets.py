"""
Rendering Presets
=================

Static device and quality tables. The viewport's scale factor follows the
quality level so that "low" stays cheap on every device.
"""

from typing import Dict

from htmlshot.models.schemas import DeviceType, QualityLevel, QualityProfile, ViewportProfile


DEVICE_PRESETS: Dict[DeviceType, ViewportProfile] = {
    DeviceType.DESKTOP: ViewportProfile(
        width=1920, height=1080, pixel_density=1.0, is_touch_device=False
    ),
    DeviceType.TABLET: ViewportProfile(
        width=768, height=1024, pixel_density=2.0, is_touch_device=True
    ),
    DeviceType.MOBILE: ViewportProfile(
        width=375, height=667, pixel_density=2.0, is_touch_device=True
    ),
}

QUALITY_PRESETS: Dict[QualityLevel, QualityProfile] = {
    QualityLevel.HIGH: QualityProfile(png_quality=100, pixel_density=2.0),
    QualityLevel.MEDIUM: QualityProfile(png_quality=80, pixel_density=1.5),
    QualityLevel.LOW: QualityProfile(png_quality=60, pixel_density=1.0),
}


def resolve_quality(quality: QualityLevel) -> QualityProfile:
    """Look up the quality profile, falling back to high."""
    return QUALITY_PRESETS.get(quality, QUALITY_PRESETS[QualityLevel.HIGH])


def resolve_viewport(device: DeviceType, quality: QualityLevel) -> ViewportProfile:
    """
    Build the viewport for a device/quality pair.

    Args:
        device: Requested device, unknown values use desktop
        quality: Requested quality, its pixel density overrides the device's

    Returns:
        ViewportProfile to configure the browser context with
    """
    base = DEVICE_PRESETS.get(device, DEVICE_PRESETS[DeviceType.DESKTOP])
    return base.model_copy(update={"pixel_density": resolve_quality(quality).pixel_density})
