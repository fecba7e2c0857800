"""Webpage capture: render URLs and HTML as PNG, JPEG, PDF, HTML, base64 or bytes."""

__version__ = "1.0.0"

from .capture import WebpageCapture, CaptureEngineConfig, create_capture_engine
from .exceptions import (
    WebCaptureError,
    ConfigurationError,
    UnsupportedOutputTypeError,
    UnsupportedViewportError,
    OutputDirectoryError,
    CaptureFailedError,
    InvalidViewportError,
    NavigationError,
    ElementNotFoundError,
    SessionClosedError,
)
from .models import (
    CaptureType,
    CaptureEvent,
    CaptureOptions,
    CaptureResult,
    CaptureProgress,
    ResolvedViewport,
)

__all__ = [
    '__version__',
    'WebpageCapture',
    'CaptureEngineConfig',
    'create_capture_engine',
    'WebCaptureError',
    'ConfigurationError',
    'UnsupportedOutputTypeError',
    'UnsupportedViewportError',
    'OutputDirectoryError',
    'CaptureFailedError',
    'InvalidViewportError',
    'NavigationError',
    'ElementNotFoundError',
    'SessionClosedError',
    'CaptureType',
    'CaptureEvent',
    'CaptureOptions',
    'CaptureResult',
    'CaptureProgress',
    'ResolvedViewport',
]
