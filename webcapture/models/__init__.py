"""Capture data models package."""

from .capture import (
    CaptureType,
    CaptureEvent,
    ResolvedViewport,
    CaptureOptions,
    CaptureResult,
    CaptureProgress,
    IN_MEMORY_TYPES,
    SCREENSHOT_TYPES,
    SUPPORTED_TYPE_ORDER,
)

__all__ = [
    # Enums
    'CaptureType',
    'CaptureEvent',

    # Models
    'ResolvedViewport',
    'CaptureOptions',
    'CaptureResult',
    'CaptureProgress',

    # Constants
    'IN_MEMORY_TYPES',
    'SCREENSHOT_TYPES',
    'SUPPORTED_TYPE_ORDER',
]
