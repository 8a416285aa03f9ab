"""Markdown reports for uicontext results."""

from .renderer import ReportRenderer

__all__ = ["ReportRenderer"]
