"""Markdown rendering of search, insight and correlation results."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from ..analysis import AnalysisResult
from ..correlator import CorrelationReport
from ..insights import ProjectInsights
from ..models import ComponentRecord
from ..search import SearchResult, SimilarityResult


class ReportRenderer:
    """Renders results through the bundled ``*.md.j2`` templates.

    A ``templates_dir`` is searched before the bundled directory, so projects
    can override individual templates by file name.
    """

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.env = self._create_env(templates_dir)
        self.env.filters["fixed"] = _fixed

    def search(self, query_text: Optional[str], results: Sequence[SearchResult]) -> str:
        return self._render("search.md.j2", query=query_text, results=list(results))

    def similar(self, target: ComponentRecord, mode: str, results: Sequence[SimilarityResult]) -> str:
        return self._render("similar.md.j2", target=target, mode=mode, results=list(results))

    def insights(self, insights: ProjectInsights) -> str:
        return self._render("insights.md.j2", insights=insights)

    def correlation(
        self,
        report: CorrelationReport,
        *,
        url: Optional[str] = None,
        analysis: Optional[AnalysisResult] = None,
    ) -> str:
        return self._render(
            "correlation.md.j2",
            report=report,
            url=url or (analysis.url if analysis else None),
            analysis=analysis,
        )

    def _render(self, name: str, **context: object) -> str:
        return self.env.get_template(name).render(**context).rstrip() + "\n"

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        loader = FileSystemLoader(directories)
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def _fixed(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}"


__all__ = ["ReportRenderer"]
