"""Unit tests for capture engine."""

import pytest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from webcapture.capture.browser_factory import SessionState
from webcapture.capture.engine import (
    CaptureEngineConfig,
    WebpageCapture,
    create_capture_engine,
)
from webcapture.exceptions import (
    OutputDirectoryError,
    SessionClosedError,
    UnsupportedOutputTypeError,
    UnsupportedViewportError,
)
from webcapture.models.capture import CaptureEvent, CaptureOptions, CaptureType


class TestCaptureEngineConfig:
    """Tests for CaptureEngineConfig class."""

    def test_default_config(self, tmp_path, monkeypatch):
        """Test default configuration values."""
        monkeypatch.chdir(tmp_path)
        config = CaptureEngineConfig()

        assert config.debug is False
        assert config.output_dir == tmp_path
        assert config.timeout_ms == 30000
        assert config.wait_until == "load"
        assert config.launch_args == []

    def test_debug_browser_config(self, tmp_path):
        """Debug mode runs headful and slowed down."""
        browser_config = CaptureEngineConfig(debug=True, output_dir=tmp_path).create_browser_config()

        assert browser_config.headless is False
        assert browser_config.slow_mo == 1000

    def test_browser_config(self, tmp_path):
        config = CaptureEngineConfig(
            output_dir=tmp_path,
            launch_args=['--no-sandbox'],
            headers={'X-Test': '1'},
            timeout_ms=5000
        )

        browser_config = config.create_browser_config()

        assert browser_config.headless is True
        assert browser_config.slow_mo == 0
        assert browser_config.launch_args == ['--no-sandbox']
        assert browser_config.extra_headers == {'X-Test': '1'}
        assert browser_config.navigation_timeout_ms == 5000

    def test_create_page_session_config(self, tmp_path):
        """Test creating page session config."""
        config = CaptureEngineConfig(output_dir=tmp_path, wait_until="networkidle2", timeout_ms=1000)

        session_config = config.create_page_session_config()
        assert session_config.wait_until == "networkidle"
        assert session_config.wait_timeout_ms == 1000

        session_config = config.create_page_session_config(wait_timeout_ms=60000)
        assert session_config.wait_timeout_ms == 60000


class TestWebpageCaptureConstruction:
    """Tests for engine construction."""

    def test_creates_output_dir(self, tmp_path):
        output_dir = tmp_path / "nested" / "out"

        engine = create_capture_engine(output_dir=output_dir)

        assert output_dir.is_dir()
        assert engine.output_dir == output_dir.resolve()
        assert engine.browser_session.state == SessionState.UNINITIALIZED

    def test_default_viewport_from_device(self, tmp_path):
        engine = create_capture_engine(output_dir=tmp_path, viewport="iPhone X")

        assert engine.browser_session.config.viewport.name == "iphone-x"

    def test_invalid_default_viewport(self, tmp_path):
        with pytest.raises(UnsupportedViewportError) as exc_info:
            create_capture_engine(output_dir=tmp_path, viewport="nokia-n9000")

        assert str(exc_info.value) == 'Viewport "nokia-n9000" is not supported.'

    def test_list_default_viewport_rejected(self, tmp_path):
        with pytest.raises(UnsupportedViewportError):
            create_capture_engine(output_dir=tmp_path, viewport=["iphone-x", "ipad"])

    def test_output_dir_is_a_file(self, tmp_path):
        blocker = tmp_path / "file.txt"
        blocker.write_text("x", encoding="utf-8")

        with pytest.raises(OutputDirectoryError):
            create_capture_engine(output_dir=blocker / "out")


class TestWebpageCapture:
    """Tests for WebpageCapture capture flow."""

    @pytest.fixture
    def mock_page_session(self):
        """Page session double returning a value per output type."""
        session = AsyncMock()

        async def render(options, output_path=None):
            if options.type == CaptureType.BUFFER:
                return b"bytes"
            if options.type == CaptureType.BASE64:
                return "Ynl0ZXM="
            return str(output_path)

        session.render = AsyncMock(side_effect=render)
        return session

    @pytest.fixture
    def engine(self, tmp_path, mock_browser_session, mock_page_session):
        """Create capture engine with patched sessions."""
        with patch('webcapture.capture.engine.BrowserSession', return_value=mock_browser_session), \
             patch('webcapture.capture.engine.PageSession', return_value=mock_page_session):
            yield WebpageCapture(CaptureEngineConfig(output_dir=tmp_path))

    @pytest.mark.asyncio
    async def test_lazy_start(self, engine, mock_browser_session):
        results = await engine.capture("https://example.com")

        mock_browser_session.start.assert_called_once()
        assert len(results) == 1
        assert results[0].succeeded

    @pytest.mark.asyncio
    async def test_empty_sources_do_not_launch(self, engine, mock_browser_session):
        assert await engine.capture([]) == []
        assert await engine.capture(None) == []
        assert await engine.capture("") == []

        mock_browser_session.start.assert_not_called()

    @pytest.mark.asyncio
    async def test_unsupported_type_fails_fast(self, engine, mock_browser_session):
        with pytest.raises(UnsupportedOutputTypeError) as exc_info:
            await engine.capture("https://example.com", type="gif")

        assert "must be one of [pdf,png,jpeg,html,base64,buffer]" in str(exc_info.value)
        mock_browser_session.start.assert_not_called()

    @pytest.mark.asyncio
    async def test_unsupported_type_with_empty_sources(self, engine):
        with pytest.raises(UnsupportedOutputTypeError):
            await engine.capture([], {'type': 'bmp'})

    @pytest.mark.asyncio
    async def test_results_follow_input_order(self, engine, tmp_path):
        sources = ["https://a.example", "<p>two</p>", "https://a.example", "https://c.example"]

        results = await engine.capture(sources, type="pdf")

        assert [result.input for result in results] == ["https://a.example", "<p>two</p>", "https://c.example"]
        assert results[0].output.startswith(str(tmp_path.resolve()))
        assert Path(results[0].output).name.startswith("a.example-")
        assert Path(results[1].output).name.startswith("0001-")
        assert all(result.output.endswith(".pdf") for result in results)
        assert all(result.duration >= 0 for result in results)

    @pytest.mark.asyncio
    async def test_capture_counter_advances(self, engine, mock_browser_session):
        await engine.capture(["https://a.example", "https://b.example"])
        await engine.capture("https://c.example")

        assert mock_browser_session.capture_count == 3
        assert engine.capture_count == 3

    @pytest.mark.asyncio
    async def test_per_source_errors_are_recorded(self, engine, mock_page_session):
        mock_page_session.load.side_effect = [None, Exception("net::ERR_NAME_NOT_RESOLVED"), None]

        results = await engine.capture(["https://a.example", "https://bad.example", "https://c.example"])

        assert [result.succeeded for result in results] == [True, False, True]
        assert results[1].error == "net::ERR_NAME_NOT_RESOLVED"
        assert results[1].output is None

    @pytest.mark.asyncio
    async def test_invalid_viewport_is_a_per_source_error(self, engine, mock_page_session):
        results = await engine.capture(["https://a.example", "https://b.example"], viewport="nokia-n9000")

        assert len(results) == 2
        assert all('Invalid viewport "nokia-n9000"' in result.error for result in results)
        mock_page_session.load.assert_not_called()

    @pytest.mark.asyncio
    async def test_multiple_viewports_return_list(self, engine, mock_page_session):
        results = await engine.capture("https://example.com", viewport=["iphone-x", "1024x768"])

        output = results[0].output
        assert isinstance(output, list) and len(output) == 2
        assert "iphone-x" in Path(output[0]).name
        viewports = [call.args[2] for call in mock_page_session.load.call_args_list]
        assert [viewport.name for viewport in viewports] == ["iphone-x", None]

    @pytest.mark.asyncio
    async def test_single_viewport_returns_scalar(self, engine):
        results = await engine.capture("https://example.com", viewport="iphone-x")

        assert isinstance(results[0].output, str)

    @pytest.mark.asyncio
    async def test_category_renders_each_device(self, engine, mock_page_session):
        results = await engine.capture("https://example.com", viewport_category="desktop")

        assert len(results[0].output) == mock_page_session.render.call_count
        assert mock_page_session.render.call_count >= 3

    @pytest.mark.asyncio
    async def test_empty_category_uses_default_viewport(self, engine, mock_page_session):
        results = await engine.capture("https://example.com", viewport_category="no-such-device")

        assert results[0].succeeded
        assert mock_page_session.load.call_args.args[2] is None

    @pytest.mark.asyncio
    async def test_closed_session_raises(self, engine):
        await engine.close()

        with pytest.raises(SessionClosedError):
            await engine.capture("https://example.com")

    @pytest.mark.asyncio
    async def test_session_closed_mid_batch_propagates(self, engine, mock_page_session):
        mock_page_session.load.side_effect = SessionClosedError()

        with pytest.raises(SessionClosedError):
            await engine.capture(["https://a.example", "https://b.example"])

    @pytest.mark.asyncio
    async def test_disconnected_browser_propagates(self, engine, mock_browser_session, mock_page_session):
        mock_browser_session.is_connected = False
        mock_page_session.load.side_effect = Exception("Target closed")

        with pytest.raises(Exception, match="Target closed"):
            await engine.capture("https://a.example")

    @pytest.mark.asyncio
    async def test_events(self, engine, mock_page_session):
        events = []
        engine.on("capture:start", lambda progress: events.append(("start", progress.current, progress.remaining)))
        engine.on(CaptureEvent.END, lambda progress: events.append(("end", progress.current, progress.error)))
        engine.on(CaptureEvent.ERROR, lambda progress: events.append(("error", progress.current, progress.error)))
        mock_page_session.load.side_effect = [None, Exception("boom")]

        await engine.capture(["https://a.example", "https://b.example"])

        assert events == [
            ("start", 1, 1),
            ("end", 1, None),
            ("start", 2, 0),
            ("error", 2, "boom"),
            ("end", 2, "boom"),
        ]

    @pytest.mark.asyncio
    async def test_listener_errors_do_not_abort(self, engine):
        def broken(progress):
            raise RuntimeError("listener failed")

        engine.on(CaptureEvent.START, broken)

        results = await engine.capture("https://example.com")

        assert results[0].succeeded

    @pytest.mark.asyncio
    async def test_off_removes_listener(self, engine):
        listener = MagicMock()
        engine.on(CaptureEvent.END, listener)
        engine.off(CaptureEvent.END, listener)

        await engine.capture("https://example.com")

        listener.assert_not_called()

    @pytest.mark.asyncio
    async def test_base64_helper(self, engine):
        result = await engine.base64("https://example.com")

        assert result.output == "Ynl0ZXM="

    @pytest.mark.asyncio
    async def test_buffer_helper(self, engine):
        result = await engine.buffer("<p>hi</p>")

        assert result.output == b"bytes"

    @pytest.mark.asyncio
    async def test_file_helper_infers_type(self, engine, mock_page_session, tmp_path):
        target = tmp_path / "reports" / "home.jpg"

        result = await engine.file("https://example.com", str(target))

        options = mock_page_session.render.call_args.args[0]
        assert options.type == CaptureType.JPEG
        assert result.output == str(target.resolve())
        assert target.parent.is_dir()

    @pytest.mark.asyncio
    async def test_file_helper_defaults_to_png(self, engine, tmp_path):
        result = await engine.file("https://example.com", str(tmp_path / "home"))

        assert result.output == str((tmp_path / "home.png").resolve())

    @pytest.mark.asyncio
    async def test_options_object_and_overrides(self, engine, mock_page_session):
        options = CaptureOptions(type="pdf", selector="#main")

        await engine.capture("https://example.com", options, type="html")

        used = mock_page_session.render.call_args.args[0]
        assert used.type == CaptureType.HTML
        assert used.selector == "#main"

    @pytest.mark.asyncio
    async def test_async_context_manager(self, engine, mock_browser_session):
        async with engine as capture:
            assert capture is engine
            assert mock_browser_session.state == SessionState.READY

        assert mock_browser_session.state == SessionState.CLOSED
