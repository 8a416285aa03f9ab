"""Playwright implementation of the page query boundary."""

from __future__ import annotations

from typing import Any, Dict, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..logging import get_logger
from .base import ElementNotVisibleError, PageAutomationError, PageTimeoutError

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")

_CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]

# Consumes the descriptor produced by ElementQuery.to_descriptor().
_EXTRACT_ELEMENTS_SCRIPT = """
(descriptor) => {
  const uniqueSelector = (el) => {
    if (el.id) return `#${el.id}`;
    let selector = el.tagName.toLowerCase();
    const className = typeof el.className === 'string' ? el.className : '';
    const classes = className.split(' ').filter((c) => c.length > 0);
    if (classes.length > 0) selector += '.' + classes.join('.');
    const siblings = Array.from(el.parentElement ? el.parentElement.children : []);
    const position = siblings.indexOf(el);
    if (position > 0) selector += `:nth-child(${position + 1})`;
    return selector;
  };

  const elements = [];
  for (const selector of descriptor.selectors) {
    document.querySelectorAll(selector).forEach((el) => {
      const rect = el.getBoundingClientRect();
      const styles = window.getComputedStyle(el);
      if (rect.width === 0 || rect.height === 0 || styles.display === 'none') return;
      elements.push({
        selector: uniqueSelector(el),
        text: (el.textContent || '').trim().substring(0, descriptor.maxTextLength),
        bounds: {
          x: Math.round(rect.x),
          y: Math.round(rect.y),
          width: Math.round(rect.width),
          height: Math.round(rect.height),
        },
        tagName: el.tagName.toLowerCase(),
        className: typeof el.className === 'string' ? el.className : '',
        id: el.id || '',
        attributes: {
          role: el.getAttribute('role'),
          ariaLabel: el.getAttribute('aria-label'),
          type: el.getAttribute('type'),
          placeholder: el.getAttribute('placeholder'),
        },
        styles: {
          position: styles.position,
          display: styles.display,
          backgroundColor: styles.backgroundColor,
          color: styles.color,
          fontSize: styles.fontSize,
          fontWeight: styles.fontWeight,
          padding: styles.padding,
          margin: styles.margin,
          border: styles.border,
          borderRadius: styles.borderRadius,
        },
      });
    });
  }
  return elements;
}
"""


class PlaywrightPageSession:
    """Owns one browser, context and page for the lifetime of an ``async with`` block.

    Every resource opened in ``__aenter__`` is released in ``__aexit__``,
    including when the block raises.
    """

    def __init__(
        self,
        *,
        browser: str = "chromium",
        headless: bool = True,
        timeout_ms: int = 30000,
        viewport: tuple[int, int] = (1200, 800),
    ) -> None:
        if browser not in SUPPORTED_BROWSERS:
            raise ValueError(
                f"Unsupported browser '{browser}' (expected one of {', '.join(SUPPORTED_BROWSERS)})"
            )
        self.browser_name = browser
        self.headless = headless
        self.timeout_ms = timeout_ms
        self.viewport = viewport
        self.logger = get_logger("automation")
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> "PlaywrightPageSession":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        try:
            self._playwright = await async_playwright().start()
            launcher = getattr(self._playwright, self.browser_name)
            self._browser = await launcher.launch(
                headless=self.headless,
                timeout=self.timeout_ms,
                args=_CHROMIUM_ARGS if self.browser_name == "chromium" else None,
            )
            width, height = self.viewport
            self._context = await self._browser.new_context(
                viewport={"width": width, "height": height},
                ignore_https_errors=True,
            )
            self._context.set_default_timeout(self.timeout_ms)
            self._context.set_default_navigation_timeout(self.timeout_ms)
            self._page = await self._context.new_page()
        except PlaywrightError as exc:
            await self.close()
            raise PageAutomationError(f"Failed to start {self.browser_name}: {exc}") from exc
        self.logger.debug("Opened %s page session", self.browser_name)

    async def close(self) -> None:
        page, context, browser, playwright = self._page, self._context, self._browser, self._playwright
        self._page = self._context = self._browser = self._playwright = None
        try:
            if page is not None:
                await page.close()
            if context is not None:
                await context.close()
            if browser is not None:
                await browser.close()
        except PlaywrightError as exc:
            self.logger.warning("Error while closing browser session: %s", exc)
        finally:
            if playwright is not None:
                await playwright.stop()

    @property
    def page(self) -> Page:
        if self._page is None:
            raise PageAutomationError("Page session is not open")
        return self._page

    async def navigate(self, url: str) -> None:
        try:
            await self.page.goto(url)
        except PlaywrightTimeoutError as exc:
            raise PageTimeoutError(f"Navigation to {url} timed out after {self.timeout_ms}ms") from exc
        except PlaywrightError as exc:
            raise PageAutomationError(f"Navigation to {url} failed: {exc}") from exc

    async def set_viewport(self, width: int, height: int) -> None:
        try:
            await self.page.set_viewport_size({"width": width, "height": height})
        except PlaywrightError as exc:
            raise PageAutomationError(f"Resizing viewport to {width}x{height} failed: {exc}") from exc

    async def wait_for_network_idle(self) -> None:
        try:
            await self.page.wait_for_load_state("networkidle")
        except PlaywrightTimeoutError as exc:
            raise PageTimeoutError(f"Network did not become idle within {self.timeout_ms}ms") from exc
        except PlaywrightError as exc:
            raise PageAutomationError(f"Waiting for network idle failed: {exc}") from exc

    async def wait_for_selector(self, selector: str) -> None:
        try:
            await self.page.wait_for_selector(selector, state="visible")
        except PlaywrightTimeoutError as exc:
            raise ElementNotVisibleError(selector, self.timeout_ms) from exc

    async def evaluate(self, descriptor: Dict[str, Any]) -> Any:
        kind = descriptor.get("kind")
        if kind != "extract_elements":
            raise PageAutomationError(f"Unsupported page query '{kind}'")
        try:
            return await self.page.evaluate(_EXTRACT_ELEMENTS_SCRIPT, descriptor)
        except PlaywrightTimeoutError as exc:
            raise PageTimeoutError(f"Element extraction timed out after {self.timeout_ms}ms") from exc
        except PlaywrightError as exc:
            raise PageAutomationError(f"Element extraction failed: {exc}") from exc


__all__ = ["PlaywrightPageSession", "SUPPORTED_BROWSERS"]
