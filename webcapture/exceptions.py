"""Exceptions raised by the webpage capture engine.

Configuration errors are raised synchronously before any browser work starts.
Capture failures are recorded on the result of the source that produced them.
Session errors mean the browser can no longer be used and always propagate.
"""

from typing import Any, Dict, Optional


class WebCaptureError(Exception):
    """Base error for the capture engine."""

    def __init__(
        self,
        message: str = "Capture error",
        error_code: str = "capture_error",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(WebCaptureError, ValueError):
    """Raised when capture options or engine settings are invalid."""

    def __init__(
        self,
        message: str = "Invalid configuration",
        error_code: str = "configuration_error",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, error_code=error_code, details=details)


class UnsupportedOutputTypeError(ConfigurationError):
    """Raised when an output type is not one of the supported kinds."""

    def __init__(self, output_type: str, supported: Optional[list] = None):
        supported = supported or []
        super().__init__(
            message=(
                f"The output type {output_type} is not supported, "
                f"must be one of [{','.join(supported)}]"
            ),
            error_code="unsupported_output_type",
            details={"type": output_type, "supported": supported}
        )


class UnsupportedViewportError(ConfigurationError):
    """Raised when the engine default viewport cannot be resolved."""

    def __init__(self, viewport: Any):
        super().__init__(
            message=f'Viewport "{viewport}" is not supported.',
            error_code="unsupported_viewport",
            details={"viewport": viewport}
        )


class OutputDirectoryError(ConfigurationError):
    """Raised when the output directory cannot be created or written."""

    def __init__(self, path: Any, reason: str):
        super().__init__(
            message=f"Output directory {path} is not usable: {reason}",
            error_code="output_directory_error",
            details={"path": str(path), "reason": reason}
        )


class CaptureFailedError(WebCaptureError):
    """Base for failures scoped to a single source."""

    def __init__(
        self,
        message: str = "Capture failed",
        error_code: str = "capture_failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, error_code=error_code, details=details)


class InvalidViewportError(CaptureFailedError):
    """Raised when a per-capture viewport or category cannot be resolved."""

    def __init__(self, viewport: Any, reason: Optional[str] = None):
        message = f'Invalid viewport "{viewport}"'
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            error_code="invalid_viewport",
            details={"viewport": viewport}
        )


class NavigationError(CaptureFailedError):
    """Raised when the main document responds with a non-success status."""

    def __init__(self, url: str, status: int, status_text: str = ""):
        super().__init__(
            message=f"Navigation to {url} failed with status {status} {status_text}".rstrip(),
            error_code="navigation_failed",
            details={"url": url, "status": status}
        )


class ElementNotFoundError(CaptureFailedError):
    """Raised when the capture selector matches no element."""

    def __init__(self, selector: str):
        super().__init__(
            message=f'No element matches selector "{selector}"',
            error_code="element_not_found",
            details={"selector": selector}
        )


class SessionClosedError(WebCaptureError):
    """Raised when the browser session is used outside of its ready state."""

    def __init__(self, message: str = "Browser session is closed"):
        super().__init__(message=message, error_code="session_closed")
