"""Tests for the Playwright page session error mapping."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from uicontext.analysis import LiveAnalyzer
from uicontext.automation import PageAutomationError, PageTimeoutError
from uicontext.automation.browser import PlaywrightPageSession
from uicontext.config import Breakpoint, CorrelatorConfig

CLOSED_MESSAGE = "Target page, context or browser has been closed"


class ScriptedPage:
    """Stands in for a Playwright page and fails on configured calls."""

    def __init__(self, *, resize_fails_at: int | None = None, idle_error: Exception | None = None) -> None:
        self.resize_fails_at = resize_fails_at
        self.idle_error = idle_error
        self.closed = False

    async def set_viewport_size(self, size: dict[str, int]) -> None:
        if size["width"] == self.resize_fails_at:
            raise PlaywrightError(CLOSED_MESSAGE)

    async def goto(self, url: str) -> None:
        return None

    async def wait_for_load_state(self, state: str) -> None:
        if self.idle_error is not None:
            raise self.idle_error

    async def wait_for_selector(self, selector: str, state: str) -> None:
        return None

    async def evaluate(self, script: str, descriptor: dict[str, Any]) -> list[dict[str, Any]]:
        return [
            {
                "selector": "#save",
                "text": "Save",
                "bounds": {"x": 0, "y": 0, "width": 120, "height": 48},
                "tagName": "button",
                "className": "",
                "id": "save",
                "attributes": {},
                "styles": {},
            }
        ]

    async def close(self) -> None:
        self.closed = True


class ScriptedSession(PlaywrightPageSession):
    def __init__(self, page: ScriptedPage) -> None:
        super().__init__()
        self.scripted_page = page

    async def open(self) -> None:
        self._page = self.scripted_page  # type: ignore[assignment]

    async def close(self) -> None:
        if self._page is not None:
            await self._page.close()
        self._page = None


def test_set_viewport_wraps_playwright_errors() -> None:
    session = ScriptedSession(ScriptedPage(resize_fails_at=800))

    async def run() -> None:
        async with session:
            await session.set_viewport(800, 600)

    with pytest.raises(PageAutomationError, match="800x600") as excinfo:
        asyncio.run(run())
    assert isinstance(excinfo.value.__cause__, PlaywrightError)


def test_wait_for_network_idle_maps_timeouts_and_other_errors() -> None:
    timeout_session = ScriptedSession(ScriptedPage(idle_error=PlaywrightTimeoutError("Timeout 100ms")))
    crashed_session = ScriptedSession(ScriptedPage(idle_error=PlaywrightError("Page crashed")))

    async def wait(session: ScriptedSession) -> None:
        async with session:
            await session.wait_for_network_idle()

    with pytest.raises(PageTimeoutError):
        asyncio.run(wait(timeout_session))
    with pytest.raises(PageAutomationError, match="Page crashed"):
        asyncio.run(wait(crashed_session))


def test_closed_page_during_one_breakpoint_is_recorded() -> None:
    page = ScriptedPage(resize_fails_at=768)
    config = CorrelatorConfig(
        breakpoints=[Breakpoint("desktop", 1200, 800), Breakpoint("tablet", 768, 1024)]
    )
    analyzer = LiveAnalyzer(config, session_factory=lambda _config: ScriptedSession(page))

    result = analyzer.analyze_sync("http://localhost:3000")

    assert [(c.name, c.ok) for c in result.breakpoints] == [("desktop", True), ("tablet", False)]
    assert CLOSED_MESSAGE in (result.breakpoints[1].error or "")
    assert result.summary.total_elements == 1
    assert page.closed is True
