"""Tests for the Markdown report templates."""

from __future__ import annotations

from pathlib import Path

from uicontext.correlator import VisualCodeCorrelator
from uicontext.insights import build_insights
from uicontext.models import Bounds, ProjectIndex, VisualElement
from uicontext.reporting import ReportRenderer
from uicontext.search import IndexSearchEngine, SearchQuery


def test_search_report_lists_ranked_components(sample_index: ProjectIndex) -> None:
    results = IndexSearchEngine(sample_index).search(SearchQuery(text="Button"))

    markdown = ReportRenderer().search("Button", results)

    assert markdown.startswith("# Component Search Results")
    assert "**Query**: Button" in markdown
    assert "## 1. Button (score 12)" in markdown
    assert "## 2. Home (score 2)" in markdown
    assert "`label: string`, `onClick?: () => void`, `disabled?: boolean`" in markdown
    assert "Match in `name`: **Button**" in markdown


def test_search_report_without_results() -> None:
    markdown = ReportRenderer().search("nothing", [])

    assert "No components matched." in markdown


def test_similar_report(sample_index: ProjectIndex) -> None:
    engine = IndexSearchEngine(sample_index)
    target = engine.resolve("Button")

    markdown = ReportRenderer().similar(target, "usage", engine.find_similar(target.id, "usage"))

    assert "# Components Similar to Button" in markdown
    assert "1. **Card** (100% similar)" in markdown


def test_insights_report(sample_index: ProjectIndex) -> None:
    markdown = ReportRenderer().insights(build_insights(sample_index))

    assert "**Framework**: react" in markdown
    assert "**Average Props per Component**: 1.0" in markdown
    assert "- **styled**: 2 components" in markdown
    assert "- **Components with Props**: 2/5" in markdown


def test_correlation_report(sample_index: ProjectIndex) -> None:
    element = VisualElement(
        selector="button.btn", bounds=Bounds(width=30, height=30), tag_name="button"
    )
    report = VisualCodeCorrelator().correlate([element], sample_index, focus="button")

    markdown = ReportRenderer().correlation(report, url="http://localhost:3000")

    assert "**URL**: http://localhost:3000" in markdown
    assert "- **Matched Components**: 1" in markdown
    assert "- **Component**: Button (`src/components/Button.tsx`)" in markdown
    assert "- **Confidence**: 90%" in markdown
    assert "- **Issue**: Touch target too small: 30x30px (minimum 44x44px)" in markdown
    assert "```tsx" in markdown


def test_templates_dir_overrides_bundled_template(tmp_path: Path) -> None:
    (tmp_path / "search.md.j2").write_text("custom {{ results|length }}\n", encoding="utf-8")

    assert ReportRenderer(tmp_path).search("x", []) == "custom 0\n"
