"""Browser session management for Playwright.

This module provides the BrowserSession class that owns the browser lifecycle:
launching the engine, opening the single page captures are rendered on,
applying viewports and device emulation, and teardown. Device emulation
settings other than the viewport size are fixed per browser context, so
switching to a different device profile replaces the context and page.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)

from ..exceptions import SessionClosedError
from ..models.capture import ResolvedViewport

logger = logging.getLogger(__name__)


DEFAULT_VIEWPORT = ResolvedViewport(
    width=1280,
    height=800,
    device_scale_factor=2,
    is_mobile=False,
    has_touch=False,
    is_landscape=False,
)


class BrowserEngineType:
    """Supported browser engine types."""
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"

    ALL = (CHROMIUM, FIREFOX, WEBKIT)


class SessionState(str, Enum):
    """Lifecycle states of a browser session."""
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    CLOSED = "closed"


class BrowserConfig:
    """Configuration for browser launch and page setup."""

    def __init__(
        self,
        engine: str = BrowserEngineType.CHROMIUM,
        headless: bool = True,
        slow_mo: int = 0,
        launch_args: Optional[List[str]] = None,
        viewport: Optional[ResolvedViewport] = None,
        extra_headers: Optional[Dict[str, str]] = None,
        navigation_timeout_ms: Optional[int] = None,
        ignore_https_errors: bool = False,
        **kwargs
    ):
        """Initialize browser configuration.

        Args:
            engine: Browser engine to use (chromium, firefox, webkit)
            headless: Run browser in headless mode
            slow_mo: Slow down operations by specified milliseconds
            launch_args: Additional command line arguments for the browser
            viewport: Default viewport applied when the page is opened
            extra_headers: Additional HTTP headers for all requests
            navigation_timeout_ms: Default navigation timeout for the page
            ignore_https_errors: Ignore SSL/TLS certificate errors
        """
        self.engine = engine
        self.headless = headless
        self.slow_mo = slow_mo
        self.launch_args = launch_args or []
        self.viewport = viewport or DEFAULT_VIEWPORT
        self.extra_headers = extra_headers or {}
        self.navigation_timeout_ms = navigation_timeout_ms
        self.ignore_https_errors = ignore_https_errors
        self.extra_options = kwargs

    def to_browser_options(self) -> Dict[str, Any]:
        """Convert to Playwright browser launch options."""
        options = {
            'headless': self.headless,
            'slow_mo': self.slow_mo,
        }

        if self.launch_args:
            options['args'] = list(self.launch_args)

        options.update(self.extra_options)

        return options

    def to_context_options(self, viewport: Optional[ResolvedViewport] = None) -> Dict[str, Any]:
        """Convert to Playwright browser context options for a viewport."""
        options = (viewport or self.viewport).to_context_options()

        if self.extra_headers:
            options['extra_http_headers'] = dict(self.extra_headers)

        if self.ignore_https_errors:
            options['ignore_https_errors'] = True

        return options


class BrowserSession:
    """One launched browser and the single page captures are rendered on."""

    def __init__(self, config: Optional[BrowserConfig] = None):
        """Initialize browser session.

        Args:
            config: Browser configuration object
        """
        self.config = config or BrowserConfig()
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._profile: Optional[tuple] = None
        self._state = SessionState.UNINITIALIZED
        self.capture_count = 0

    async def start(self) -> None:
        """Start Playwright, launch the browser and open the default page."""
        if self._state == SessionState.READY:
            logger.warning("Browser session already started")
            return

        if self._state == SessionState.CLOSED:
            raise SessionClosedError("Browser session was closed and cannot be restarted")

        logger.info(f"Starting browser session with engine: {self.config.engine}")

        try:
            self.playwright = await async_playwright().start()

            if self.config.engine == BrowserEngineType.FIREFOX:
                browser_type = self.playwright.firefox
            elif self.config.engine == BrowserEngineType.WEBKIT:
                browser_type = self.playwright.webkit
            else:
                browser_type = self.playwright.chromium

            self.browser = await browser_type.launch(**self.config.to_browser_options())
            await self._open_page(self.config.viewport)

            self._state = SessionState.READY
            logger.info(f"Browser launched successfully (headless={self.config.headless})")

        except Exception as e:
            logger.error(f"Failed to start browser: {e}")
            await self._teardown()
            raise

    async def close(self) -> None:
        """Close the browser; the session cannot be used afterwards."""
        if self._state == SessionState.CLOSED:
            return

        logger.info("Closing browser session")
        await self._teardown()
        self._state = SessionState.CLOSED

    async def _teardown(self) -> None:
        try:
            if self.context:
                await self.context.close()

            if self.browser:
                await self.browser.close()

            if self.playwright:
                await self.playwright.stop()

        except Exception as e:
            logger.error(f"Error stopping browser session: {e}")

        finally:
            self.context = None
            self.browser = None
            self.playwright = None
            self._page = None
            self._profile = None

    async def _open_page(self, viewport: ResolvedViewport) -> Page:
        """Replace the current context with one emulating the viewport."""
        if not self.browser:
            raise SessionClosedError("Browser is not running")

        if self.context:
            await self.context.close()
            self.context = None
            self._page = None
            self._profile = None

        self.context = await self.browser.new_context(**self.config.to_context_options(viewport))
        page = await self.context.new_page()

        if self.config.navigation_timeout_ms:
            page.set_default_navigation_timeout(self.config.navigation_timeout_ms)

        self._page = page
        self._profile = viewport.emulation_profile
        logger.debug(f"Opened page with viewport {viewport.width}x{viewport.height} ({viewport.name or 'custom'})")
        return page

    async def apply_viewport(self, viewport: ResolvedViewport) -> Page:
        """Apply a viewport to the active page.

        Only the size is changed when the emulation profile matches the current
        context; a different profile (device, scale factor, touch, user agent)
        opens a new context.

        Returns:
            The page to render on
        """
        page = self.page

        if viewport.emulation_profile == self._profile:
            await page.set_viewport_size(viewport.size)
            return page

        return await self._open_page(viewport)

    def increment_capture_count(self) -> int:
        """Advance the session capture counter."""
        self.capture_count += 1
        return self.capture_count

    @property
    def page(self) -> Page:
        """Get the active page.

        Raises:
            SessionClosedError: If the session is not ready
        """
        if self._state != SessionState.READY or self._page is None:
            raise SessionClosedError(f"Browser session is not ready (state={self._state.value})")
        return self._page

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        """Check if the browser process is still connected."""
        if self.browser is None:
            return False
        try:
            return self.browser.is_connected()
        except Exception:
            return False

    def __repr__(self) -> str:
        """String representation of browser session."""
        return (
            f"BrowserSession(engine={self.config.engine}, "
            f"headless={self.config.headless}, "
            f"state={self._state.value}, "
            f"captures={self.capture_count})"
        )
