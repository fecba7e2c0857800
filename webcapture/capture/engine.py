"""Main capture engine that coordinates the browser session and page rendering.

This module provides the WebpageCapture class: it validates options, starts
the browser session lazily, prepares sources and renders each one, once per
resolved viewport, strictly in sequence on the session's single page.
Failures are recorded per source so one bad input never aborts a batch.
"""

import logging
import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from ..exceptions import OutputDirectoryError, SessionClosedError, UnsupportedViewportError
from ..models.capture import (
    CaptureEvent,
    CaptureOptions,
    CaptureProgress,
    CaptureResult,
    CaptureType,
    ResolvedViewport,
)
from ..utils.output_path import build_output_path
from ..utils.sources import prepare_sources
from ..utils.viewports import expand_viewports, resolve_viewport
from .browser_factory import (
    DEFAULT_VIEWPORT,
    BrowserConfig,
    BrowserEngineType,
    BrowserSession,
    SessionState,
)
from .page_session import PageSession, PageSessionConfig, WaitStrategy

logger = logging.getLogger(__name__)

Listener = Callable[[CaptureProgress], None]
OptionsInput = Optional[Union[CaptureOptions, Dict[str, Any]]]


class CaptureEngineConfig:
    """Configuration for the capture engine."""

    def __init__(
        self,
        debug: bool = False,
        output_dir: Optional[Union[str, Path]] = None,
        launch_args: Optional[List[str]] = None,
        timeout_ms: Optional[int] = 30000,
        viewport: Any = None,
        headers: Optional[Dict[str, str]] = None,
        wait_until: str = WaitStrategy.LOAD,
        browser_engine: str = BrowserEngineType.CHROMIUM,
        **kwargs
    ):
        """Initialize capture engine configuration.

        Args:
            debug: Run the browser headful and slowed down
            output_dir: Directory for generated output files (defaults to cwd)
            launch_args: Additional arguments passed to the browser
            timeout_ms: Default navigation and wait timeout
            viewport: Default viewport spec for the session
            headers: Extra HTTP headers sent with every request
            wait_until: Default load event to wait for
            browser_engine: Browser engine to launch
        """
        self.debug = debug
        self.output_dir = Path(output_dir) if output_dir else Path.cwd()
        self.launch_args = launch_args or []
        self.timeout_ms = timeout_ms
        self.viewport = viewport
        self.headers = headers or {}
        self.wait_until = wait_until
        self.browser_engine = browser_engine

        # Store extra launch options
        self.extra_config = kwargs

    def create_browser_config(self, viewport: Optional[ResolvedViewport] = None) -> BrowserConfig:
        """Create browser config for the session."""
        return BrowserConfig(
            engine=self.browser_engine,
            headless=not self.debug,
            slow_mo=1000 if self.debug else 0,
            launch_args=self.launch_args,
            viewport=viewport or DEFAULT_VIEWPORT,
            extra_headers=self.headers,
            navigation_timeout_ms=self.timeout_ms,
            **self.extra_config
        )

    def create_page_session_config(self, **overrides) -> PageSessionConfig:
        """Create page session config with defaults and overrides.

        Args:
            **overrides: Configuration overrides

        Returns:
            PageSessionConfig instance
        """
        config_params = {
            'wait_until': self.wait_until,
            'wait_timeout_ms': self.timeout_ms,
        }

        config_params.update(overrides)

        return PageSessionConfig(**config_params)


class WebpageCapture:
    """Captures URLs and HTML strings as images, PDFs, HTML or encoded data."""

    def __init__(self, config: Optional[CaptureEngineConfig] = None):
        """Initialize capture engine.

        Args:
            config: Engine configuration (uses defaults if None)

        Raises:
            UnsupportedViewportError: If the default viewport cannot be resolved
            OutputDirectoryError: If the output directory is not writable
        """
        self.config = config or CaptureEngineConfig()

        viewport = DEFAULT_VIEWPORT
        if self.config.viewport is not None:
            viewport = resolve_viewport(self.config.viewport)
            if not isinstance(viewport, ResolvedViewport):
                raise UnsupportedViewportError(self.config.viewport)

        self.output_dir = self._ensure_output_dir(self.config.output_dir)

        self.browser_session = BrowserSession(self.config.create_browser_config(viewport))
        self.page_session = PageSession(self.browser_session, self.config.create_page_session_config())
        self._listeners: Dict[CaptureEvent, List[Listener]] = {event: [] for event in CaptureEvent}

    @staticmethod
    def _ensure_output_dir(output_dir: Path) -> Path:
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(output_dir, str(e)) from e

        if not os.access(output_dir, os.W_OK):
            raise OutputDirectoryError(output_dir, "directory is not writable")

        return output_dir.resolve()

    def on(self, event: Union[CaptureEvent, str], listener: Listener) -> None:
        """Register a listener for a capture event.

        Args:
            event: Event to listen for, e.g. ``"capture:start"``
            listener: Function called with a CaptureProgress payload
        """
        self._listeners[CaptureEvent(event)].append(listener)

    def off(self, event: Union[CaptureEvent, str], listener: Listener) -> None:
        """Remove a previously registered listener."""
        listeners = self._listeners[CaptureEvent(event)]
        if listener in listeners:
            listeners.remove(listener)

    def _emit(self, event: CaptureEvent, payload: CaptureProgress) -> None:
        for listener in list(self._listeners[event]):
            try:
                listener(payload)
            except Exception as e:
                logger.error(f"Error in {event.value} listener: {e}")

    async def prepare(self) -> None:
        """Launch the browser and open the default page."""
        await self.browser_session.start()

    async def close(self) -> "WebpageCapture":
        """Close the browser session."""
        await self.browser_session.close()
        return self

    async def __aenter__(self) -> "WebpageCapture":
        await self.prepare()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _build_options(self, options: OptionsInput, overrides: Dict[str, Any]) -> CaptureOptions:
        if isinstance(options, CaptureOptions):
            data = options.model_dump(exclude_unset=True)
        else:
            data = dict(options or {})
        data.update(overrides)

        # Validate before anything else so unsupported types fail fast
        data['type'] = CaptureType.parse(data.get('type', CaptureType.PNG))
        return CaptureOptions.model_validate(data)

    @staticmethod
    def _coerce_sources(sources: Optional[Union[str, Iterable[str]]]) -> List[str]:
        if not sources:
            return []
        if isinstance(sources, str):
            return [sources]
        return [source for source in sources if source]

    async def capture(
        self,
        sources: Optional[Union[str, Iterable[str]]] = None,
        options: OptionsInput = None,
        **overrides
    ) -> List[CaptureResult]:
        """Capture one or more sources.

        Args:
            sources: A source or list of sources (URLs, HTML strings, file paths)
            options: CaptureOptions or a mapping of option values
            **overrides: Individual option values, applied over ``options``

        Returns:
            One CaptureResult per prepared source, in input order

        Raises:
            UnsupportedOutputTypeError: If the output type is not supported
            SessionClosedError: If the session was closed or the browser disconnected
        """
        capture_options = self._build_options(options, overrides)

        source_list = self._coerce_sources(sources)
        if not source_list:
            return []

        if self.browser_session.state == SessionState.UNINITIALIZED:
            await self.prepare()
        elif self.browser_session.state == SessionState.CLOSED:
            raise SessionClosedError("Cannot capture with a closed browser session")

        prepared = prepare_sources(source_list)
        total = len(prepared)
        logger.info(f"Capturing {total} sources as {capture_options.type.value}")

        results = []
        for current, source in enumerate(prepared, start=1):
            progress = {'total': total, 'current': current, 'remaining': total - current}
            self._emit(CaptureEvent.START, CaptureProgress(input=source, **progress))

            start_time = time.perf_counter()
            output = None
            error = None

            try:
                output = await self._run(source, capture_options)
            except SessionClosedError:
                raise
            except Exception as e:
                if not self.browser_session.is_connected:
                    logger.error(f"Browser disconnected while capturing {source}: {e}")
                    raise
                error = str(e)
                logger.warning(f"Capture failed for {source}: {error}")
                self._emit(CaptureEvent.ERROR, CaptureProgress(input=source, error=error, **progress))

            duration = (time.perf_counter() - start_time) * 1000
            result = CaptureResult(input=source, output=output, duration=duration, error=error)

            self._emit(CaptureEvent.END, CaptureProgress(
                input=source,
                output=output,
                duration=duration,
                error=error,
                **progress
            ))

            self.browser_session.increment_capture_count()
            results.append(result)

        logger.info(f"Batch capture completed: {len(results)} results")
        return results

    async def _run(self, source: str, options: CaptureOptions) -> Any:
        """Render a source for every resolved viewport."""
        viewports = expand_viewports(options.viewport, options.viewport_category)

        if not viewports:
            return await self._render(source, options, None)

        outputs = []
        for viewport in viewports:
            outputs.append(await self._render(source, options, viewport))

        return outputs[0] if len(outputs) == 1 else outputs

    async def _render(
        self,
        source: str,
        options: CaptureOptions,
        viewport: Optional[ResolvedViewport]
    ) -> Any:
        await self.page_session.load(source, options, viewport)

        output_path = None
        if not options.type.is_in_memory:
            output_path = self.get_output_path(source, options, viewport)
            output_path.parent.mkdir(parents=True, exist_ok=True)

        return await self.page_session.render(options, output_path)

    def get_output_path(
        self,
        source: str,
        options: CaptureOptions,
        viewport: Optional[ResolvedViewport] = None
    ) -> Path:
        """Compute where the output for a source and viewport is written."""
        return build_output_path(
            input=source,
            type=options.type,
            output_dir=self.output_dir,
            counter=self.browser_session.capture_count,
            name=options.name,
            viewport_name=viewport.name if viewport is not None else None,
        )

    async def base64(self, source: str, options: OptionsInput = None, **overrides) -> Optional[CaptureResult]:
        """Capture a single source as base64 encoded PNG text."""
        results = await self.capture(source, options, **{**overrides, 'type': CaptureType.BASE64})
        return results[0] if results else None

    async def buffer(self, source: str, options: OptionsInput = None, **overrides) -> Optional[CaptureResult]:
        """Capture a single source as raw screenshot bytes."""
        results = await self.capture(source, options, **{**overrides, 'type': CaptureType.BUFFER})
        return results[0] if results else None

    async def file(
        self,
        source: str,
        output: Union[str, Path],
        options: OptionsInput = None,
        **overrides
    ) -> Optional[CaptureResult]:
        """Capture a single source to an explicit file.

        The output type is taken from the file extension, defaulting to png.
        """
        extension = Path(output).suffix[1:]
        results = await self.capture(source, options, **{
            **overrides,
            'type': extension or CaptureType.PNG,
            'name': str(output),
        })
        return results[0] if results else None

    @property
    def capture_count(self) -> int:
        return self.browser_session.capture_count

    def __repr__(self) -> str:
        """String representation of capture engine."""
        return (
            f"WebpageCapture(state={self.browser_session.state.value}, "
            f"output_dir={self.output_dir}, "
            f"captures={self.capture_count})"
        )


def create_capture_engine(
    debug: bool = False,
    output_dir: Optional[Union[str, Path]] = None,
    **kwargs
) -> WebpageCapture:
    """Create capture engine with common configuration.

    Args:
        debug: Run the browser headful and slowed down
        output_dir: Directory for output files
        **kwargs: Additional CaptureEngineConfig options

    Returns:
        Configured WebpageCapture instance
    """
    return WebpageCapture(CaptureEngineConfig(debug=debug, output_dir=output_dir, **kwargs))
