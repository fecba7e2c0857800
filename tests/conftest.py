"""Shared test fixtures and configuration for webpage capture tests."""

import pytest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock
import sys

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from webcapture.capture.browser_factory import SessionState


SAMPLE_HTML = "<!DOCTYPE html><html><body><h1 id='title'>Hello</h1><p class='lead'>World</p></body></html>"


@pytest.fixture
def sample_html():
    """Small HTML document for rendering tests."""
    return SAMPLE_HTML


@pytest.fixture
def mock_page():
    """Playwright page double with screenshot and content support."""
    page = AsyncMock()
    page.screenshot.return_value = b"\x89PNG-bytes"
    page.content.return_value = SAMPLE_HTML
    page.pdf.return_value = b"%PDF-1.4"

    response = MagicMock()
    response.ok = True
    response.status = 200
    response.status_text = "OK"
    page.goto.return_value = response

    element = AsyncMock()
    element.screenshot.return_value = b"element-bytes"
    page.query_selector.return_value = element

    # Synchronous in Playwright
    page.set_default_navigation_timeout = MagicMock()
    return page


@pytest.fixture
def mock_browser_session(mock_page):
    """Browser session double that tracks state and the capture counter."""
    session = MagicMock()
    session.state = SessionState.UNINITIALIZED
    session.is_connected = True
    session.capture_count = 0
    session.page = mock_page

    async def start():
        session.state = SessionState.READY

    async def close():
        session.state = SessionState.CLOSED

    def increment_capture_count():
        session.capture_count += 1
        return session.capture_count

    session.start = AsyncMock(side_effect=start)
    session.close = AsyncMock(side_effect=close)
    session.apply_viewport = AsyncMock(return_value=mock_page)
    session.increment_capture_count = MagicMock(side_effect=increment_capture_count)
    return session


@pytest.fixture
def temp_list_file(tmp_path):
    """Temporary .txt file listing capture targets."""
    list_file = tmp_path / "targets.txt"
    list_file.write_text(
        "https://example.com\n"
        "\n"
        "   https://example.org/about   \n"
        "https://example.com\n",
        encoding="utf-8"
    )
    return list_file
