"""Page automation boundary and its Playwright implementation."""

from .base import (
    ElementNotVisibleError,
    ElementQuery,
    PageAutomationError,
    PageQuery,
    PageTimeoutError,
    extract_elements,
    selectors_for_focus,
)

__all__ = [
    "ElementNotVisibleError",
    "ElementQuery",
    "PageAutomationError",
    "PageQuery",
    "PageTimeoutError",
    "extract_elements",
    "selectors_for_focus",
]
