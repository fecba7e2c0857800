"""Browser capture engine for webpage capture.

This package renders URLs and HTML strings with Playwright and writes them as
images, PDFs or HTML documents, or returns them as base64 text or raw bytes.

Main Components:
- Browser Session: Browser launch, page ownership and device emulation
- Page Session: Loading sources, injecting resources and rendering outputs
- Capture Engine: Option validation, batch processing and progress events
- Settings: Layered configuration from files, environment and CLI flags

Usage:
    from webcapture.capture import WebpageCapture

    async with WebpageCapture() as capture:
        results = await capture.capture("https://example.com")
"""

__all__ = [
    # Main components
    "WebpageCapture",
    "CaptureEngineConfig",
    "BrowserSession",
    "BrowserConfig",
    "BrowserEngineType",
    "SessionState",
    "PageSession",
    "PageSessionConfig",
    "WaitStrategy",
    "DEFAULT_VIEWPORT",

    # Settings
    "CaptureSettings",
    "SettingsLoader",
    "load_settings",
    "print_settings",

    # Convenience functions
    "create_capture_engine",
]

from .browser_factory import (
    DEFAULT_VIEWPORT,
    BrowserConfig,
    BrowserEngineType,
    BrowserSession,
    SessionState,
)

from .page_session import (
    PageSession,
    PageSessionConfig,
    WaitStrategy,
)

from .engine import (
    CaptureEngineConfig,
    WebpageCapture,
    create_capture_engine,
)

from .config import (
    CaptureSettings,
    SettingsLoader,
    load_settings,
    print_settings,
)
