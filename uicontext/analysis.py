"""Live page analysis: capture breakpoints, extract elements, correlate."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, AsyncContextManager, Callable, Dict, List, Optional

from .automation import (
    ElementQuery,
    PageAutomationError,
    PageQuery,
    extract_elements,
    selectors_for_focus,
)
from .config import Breakpoint, CorrelatorConfig
from .correlator import CorrelationReport, VisualCodeCorrelator
from .logging import get_logger
from .models import ProjectIndex, VisualElement
from .stores import IndexStore

SessionFactory = Callable[[CorrelatorConfig], AsyncContextManager[PageQuery]]


@dataclass
class BreakpointCapture:
    """Outcome of loading the page at one viewport size."""

    name: str
    width: int
    height: int
    element_count: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "elementCount": self.element_count,
            "error": self.error,
        }


@dataclass
class AnalysisResult:
    url: str
    timestamp: datetime
    project_path: Optional[str]
    report: CorrelationReport
    breakpoints: List[BreakpointCapture] = field(default_factory=list)

    @property
    def correlations(self):
        return self.report.correlations

    @property
    def summary(self):
        return self.report.summary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "timestamp": self.timestamp.isoformat(),
            "projectPath": self.project_path,
            "focus": self.report.focus,
            "correlations": [correlation.to_dict() for correlation in self.report.correlations],
            "summary": self.report.summary.to_dict(),
            "breakpoints": [capture.to_dict() for capture in self.breakpoints],
        }


def playwright_session(config: CorrelatorConfig) -> AsyncContextManager[PageQuery]:
    from .automation.browser import PlaywrightPageSession

    first = config.breakpoints[0] if config.breakpoints else Breakpoint("desktop", 1200, 800)
    return PlaywrightPageSession(
        browser=config.browser,
        headless=config.headless,
        timeout_ms=config.timeout_ms,
        viewport=(first.width, first.height),
    )


class LiveAnalyzer:
    """Drives one page session through every breakpoint and correlates the result.

    A failed breakpoint is recorded and skipped. Only failures to start the
    page session itself propagate.
    """

    def __init__(
        self,
        config: Optional[CorrelatorConfig] = None,
        *,
        session_factory: SessionFactory = playwright_session,
        correlator: Optional[VisualCodeCorrelator] = None,
    ) -> None:
        self.config = config or CorrelatorConfig()
        self.session_factory = session_factory
        self.correlator = correlator or VisualCodeCorrelator()
        self.logger = get_logger("analysis")

    async def analyze(
        self,
        url: str,
        project_path: Path | str | None = None,
        *,
        focus: Optional[str] = None,
        selector: Optional[str] = None,
    ) -> AnalysisResult:
        focus = focus or self.config.focus
        selectors_for_focus(focus)
        query = ElementQuery(focus=focus)
        index = self._load_index(project_path)

        async with self.session_factory(self.config) as page:
            captures = [
                await self._capture(page, url, breakpoint, query, selector)
                for breakpoint in self.config.breakpoints
            ]
            elements = await self._final_elements(page, query)

        report = self.correlator.correlate(elements, index, focus=focus)
        self.logger.info(
            "Correlated %d elements (%d matched)",
            report.summary.total_elements,
            report.summary.matched_components,
        )
        return AnalysisResult(
            url=url,
            timestamp=datetime.now(UTC),
            project_path=str(project_path) if project_path is not None else None,
            report=report,
            breakpoints=captures,
        )

    def analyze_sync(
        self,
        url: str,
        project_path: Path | str | None = None,
        *,
        focus: Optional[str] = None,
        selector: Optional[str] = None,
    ) -> AnalysisResult:
        return asyncio.run(self.analyze(url, project_path, focus=focus, selector=selector))

    def _load_index(self, project_path: Path | str | None) -> Optional[ProjectIndex]:
        if project_path is None:
            return None
        index = IndexStore(project_path).load()
        if index is None:
            self.logger.warning(
                "No index found at %s. Visual elements won't be correlated with source code.",
                project_path,
            )
        else:
            self.logger.info("Loaded project index with %d components", len(index.components))
        return index

    async def _capture(
        self,
        page: PageQuery,
        url: str,
        breakpoint: Breakpoint,
        query: ElementQuery,
        selector: Optional[str],
    ) -> BreakpointCapture:
        capture = BreakpointCapture(name=breakpoint.name, width=breakpoint.width, height=breakpoint.height)
        try:
            await page.set_viewport(breakpoint.width, breakpoint.height)
            await page.navigate(url)
            await page.wait_for_network_idle()
            if selector:
                await page.wait_for_selector(selector)
            capture.element_count = len(await extract_elements(page, query))
        except PageAutomationError as exc:
            capture.error = str(exc)
            self.logger.warning("Capture at %s failed: %s", breakpoint.name, exc)
        else:
            self.logger.info(
                "Captured %s (%dx%d): %d elements",
                breakpoint.name,
                breakpoint.width,
                breakpoint.height,
                capture.element_count,
            )
        return capture

    async def _final_elements(self, page: PageQuery, query: ElementQuery) -> List[VisualElement]:
        try:
            return await extract_elements(page, query)
        except PageAutomationError as exc:
            self.logger.warning("Element extraction failed: %s", exc)
            return []


__all__ = ["AnalysisResult", "BreakpointCapture", "LiveAnalyzer", "SessionFactory", "playwright_session"]
