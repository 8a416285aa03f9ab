"""Request/response boundary between analysis code and a live page."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Tuple

from ..config import FOCUS_CHOICES
from ..models import VisualElement

BUTTON_SELECTORS = ('button', '[role="button"]', 'input[type="submit"]', 'input[type="button"]')
INPUT_SELECTORS = ("input", "textarea", "select")
CARD_SELECTORS = (".card", '[class*="card"]', '[data-testid*="card"]')
LANDMARK_SELECTORS = ("nav", "header", "main", "section", "article", "[onclick]", "a[href]")

_SELECTORS_BY_FOCUS: Dict[str, Tuple[str, ...]] = {
    "button": BUTTON_SELECTORS,
    "input": INPUT_SELECTORS,
    "card": CARD_SELECTORS,
    "all": BUTTON_SELECTORS + INPUT_SELECTORS + CARD_SELECTORS + LANDMARK_SELECTORS,
}


class PageAutomationError(RuntimeError):
    """Raised when the page automation resource cannot be used."""


class PageTimeoutError(PageAutomationError):
    """Navigation or network readiness did not finish in time."""


class ElementNotVisibleError(PageAutomationError):
    """A selector did not become visible in time."""

    def __init__(self, selector: str, timeout_ms: int) -> None:
        self.selector = selector
        self.timeout_ms = timeout_ms
        super().__init__(f"Element '{selector}' was not visible after {timeout_ms}ms")


def selectors_for_focus(focus: str) -> Tuple[str, ...]:
    try:
        return _SELECTORS_BY_FOCUS[focus]
    except KeyError:
        raise ValueError(
            f"Unknown focus '{focus}' (expected one of {', '.join(FOCUS_CHOICES)})"
        ) from None


@dataclass(frozen=True)
class ElementQuery:
    """Serialisable description of which elements to read from the page."""

    focus: str = "all"
    max_text_length: int = 100

    def to_descriptor(self) -> Dict[str, Any]:
        return {
            "kind": "extract_elements",
            "focus": self.focus,
            "selectors": list(selectors_for_focus(self.focus)),
            "maxTextLength": self.max_text_length,
        }


class PageQuery(Protocol):
    """Operations analysis code may request from a live page.

    Implementations raise ``PageTimeoutError`` when navigation or network
    readiness exceeds their timeout and ``ElementNotVisibleError`` when a
    selector wait does.
    """

    async def navigate(self, url: str) -> None: ...

    async def set_viewport(self, width: int, height: int) -> None: ...

    async def wait_for_network_idle(self) -> None: ...

    async def wait_for_selector(self, selector: str) -> None: ...

    async def evaluate(self, descriptor: Dict[str, Any]) -> Any: ...


async def extract_elements(page: PageQuery, query: ElementQuery) -> List[VisualElement]:
    """Run the element query on ``page`` and decode its response."""
    payload = await page.evaluate(query.to_descriptor())
    if not isinstance(payload, list):
        raise PageAutomationError("Element extraction returned an unexpected payload")
    return [VisualElement.from_dict(item) for item in payload if isinstance(item, dict)]


__all__ = [
    "ElementNotVisibleError",
    "ElementQuery",
    "PageAutomationError",
    "PageQuery",
    "PageTimeoutError",
    "extract_elements",
    "selectors_for_focus",
]
