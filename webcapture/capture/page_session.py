"""Page rendering for a single capture.

This module provides the PageSession class that loads a source into the
browser session's page (navigating to URLs or injecting literal HTML),
applies viewports, injects styles and scripts, waits for configured
conditions and finally produces the requested output.
"""

import base64
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..exceptions import ElementNotFoundError, NavigationError
from ..models.capture import CaptureOptions, CaptureType, ResolvedViewport
from ..utils.sources import prepare_resource_options
from ..utils.validators import is_valid_html, is_valid_url
from .browser_factory import BrowserSession

logger = logging.getLogger(__name__)


class WaitStrategy:
    """Available load events for navigation and content injection."""
    LOAD = "load"
    DOMCONTENTLOADED = "domcontentloaded"
    NETWORKIDLE = "networkidle"
    COMMIT = "commit"

    ALL = (LOAD, DOMCONTENTLOADED, NETWORKIDLE, COMMIT)

    # Puppeteer spellings accepted for compatibility
    ALIASES = {
        "networkidle0": NETWORKIDLE,
        "networkidle2": NETWORKIDLE,
    }

    @classmethod
    def normalize(cls, value: Optional[str]) -> str:
        """Normalize a wait condition to a Playwright load event.

        Raises:
            ValueError: If the value is not a known load event
        """
        if not value:
            return cls.LOAD

        normalized = value.strip().lower()
        normalized = cls.ALIASES.get(normalized, normalized)
        if normalized not in cls.ALL:
            raise ValueError(f"wait_until must be one of: {', '.join(cls.ALL)}")
        return normalized


class PageSessionConfig:
    """Configuration for page rendering."""

    def __init__(
        self,
        wait_until: str = WaitStrategy.LOAD,
        wait_timeout_ms: Optional[int] = 30000,
        pdf_format: str = "A4",
    ):
        """Initialize page session configuration.

        Args:
            wait_until: Default load event to wait for when loading a source
            wait_timeout_ms: Timeout for selector waits after loading
            pdf_format: Default paper format for PDF output
        """
        self.wait_until = WaitStrategy.normalize(wait_until)
        self.wait_timeout_ms = wait_timeout_ms
        self.pdf_format = pdf_format


class PageSession:
    """Loads sources into the session page and renders outputs."""

    def __init__(self, browser_session: BrowserSession, config: Optional[PageSessionConfig] = None):
        """Initialize page session.

        Args:
            browser_session: Session owning the page to render on
            config: Page session configuration
        """
        self.browser_session = browser_session
        self.config = config or PageSessionConfig()

    async def load(
        self,
        source: str,
        options: CaptureOptions,
        viewport: Optional[ResolvedViewport] = None
    ) -> None:
        """Prepare the page for a capture.

        Args:
            source: URL or literal HTML to load
            options: Capture options
            viewport: Viewport to apply, or None to keep the current one
        """
        if viewport is not None:
            await self.browser_session.apply_viewport(viewport)

        page = self.browser_session.page
        wait_until = WaitStrategy.normalize(options.wait_until or self.config.wait_until)

        if is_valid_html(source) and not is_valid_url(source):
            await page.set_content(source, wait_until=wait_until)
            logger.debug(f"Injected HTML content ({len(source)} chars)")
        else:
            response = await page.goto(source, wait_until=wait_until)
            if response is not None and not response.ok:
                raise NavigationError(source, response.status, response.status_text)
            logger.debug(f"Navigation completed: {source}")

        for style in options.styles:
            await page.add_style_tag(**prepare_resource_options(style))

        for script in options.scripts:
            await page.add_script_tag(**prepare_resource_options(script))

        await self._wait_for_condition(options.wait_for)

    async def _wait_for_condition(self, condition: Optional[Union[float, str]]) -> None:
        """Sleep for a number of milliseconds or wait for a selector."""
        if condition is None or condition == "":
            return

        page = self.browser_session.page

        if isinstance(condition, (int, float)):
            await page.wait_for_timeout(condition)
        else:
            await page.wait_for_selector(condition, timeout=self.config.wait_timeout_ms)

        logger.debug(f"Wait condition satisfied: {condition}")

    async def _select_target(self, selector: Optional[str]):
        """Resolve the element to capture, or the whole page."""
        page = self.browser_session.page

        if not selector:
            return page

        element = await page.query_selector(selector)
        if element is None:
            raise ElementNotFoundError(selector)
        return element

    async def render(self, options: CaptureOptions, output_path: Optional[Path] = None) -> Any:
        """Produce the output for the loaded page.

        Args:
            options: Capture options
            output_path: Destination for file outputs

        Returns:
            The output path as a string for file outputs, base64 text or raw bytes
        """
        page = self.browser_session.page
        target = await self._select_target(options.selector)
        extra = self._target_options(options.options, target is page)

        if options.type == CaptureType.BUFFER:
            return await target.screenshot(**extra)

        if options.type == CaptureType.BASE64:
            raw = await target.screenshot(**{**extra, 'type': 'png'})
            return base64.b64encode(raw).decode('ascii')

        if output_path is None:
            raise ValueError(f"An output path is required for {options.type.value} output")

        if options.type == CaptureType.HTML:
            content = await page.content()
            output_path.write_text(content, encoding='utf-8')

        elif options.type == CaptureType.PDF:
            pdf_options = {'format': self.config.pdf_format, **options.options}
            await page.pdf(**{**pdf_options, 'path': str(output_path)})

        elif options.type in (CaptureType.PNG, CaptureType.JPEG):
            await target.screenshot(**{'type': options.type.value, **extra, 'path': str(output_path)})

        else:
            raise ValueError(f"Invalid type option value: {options.type}")

        logger.debug(f"Output saved: {output_path}")
        return str(output_path)

    @staticmethod
    def _target_options(options: Dict[str, Any], is_page: bool) -> Dict[str, Any]:
        # Element screenshots are clipped to the element and take no full_page flag
        extra = dict(options)
        if not is_page:
            extra.pop('full_page', None)
        return extra
