"""Matches live page elements to indexed source components."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .logging import get_logger
from .models import ComponentRecord, Correlation, CorrelationSummary, ProjectIndex, VisualElement
from .search import IndexSearchEngine, SearchQuery

NO_INDEX_REASON = "No project index available"
NO_MATCH_REASON = "No matching component found"

MIN_TOUCH_TARGET = 44
MIN_FONT_SIZE = 14
MAX_PROPS = 8

_INPUT_TAGS = {"input", "textarea", "select"}
_GENERIC_CONTAINER_TAGS = {"div", "span"}
_FONT_SIZE_PATTERN = re.compile(r"^\s*([+-]?\d+)")


@dataclass
class CorrelationReport:
    """Correlations for one analysis pass plus their summary."""

    correlations: List[Correlation]
    summary: CorrelationSummary
    focus: str = "all"
    index_available: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "focus": self.focus,
            "indexAvailable": self.index_available,
            "correlations": [correlation.to_dict() for correlation in self.correlations],
            "summary": self.summary.to_dict(),
        }


@dataclass
class _Candidate:
    component: Optional[ComponentRecord] = None
    confidence: float = 0.0
    reason: str = ""


@dataclass
class VisualCodeCorrelator:
    """Runs the text, element-type and CSS-class strategies for each element.

    Each later strategy only runs while the current match is weak and only
    replaces it when its raw search score beats the current confidence scaled
    back up by that strategy's divisor.
    """

    logger: Any = field(default_factory=lambda: get_logger("correlator"))

    def correlate(
        self,
        elements: Sequence[VisualElement],
        index: Optional[ProjectIndex],
        *,
        focus: str = "all",
    ) -> CorrelationReport:
        engine = IndexSearchEngine(index) if index is not None else None
        if engine is None:
            self.logger.warning("No project index supplied; elements will not be correlated")

        correlations = [self.correlate_element(element, engine) for element in elements]
        return CorrelationReport(
            correlations=correlations,
            summary=summarize(correlations),
            focus=focus,
            index_available=engine is not None,
        )

    def correlate_element(
        self, element: VisualElement, engine: Optional[IndexSearchEngine]
    ) -> Correlation:
        if engine is None:
            correlation = Correlation(visual_element=element, match_reason=NO_INDEX_REASON)
        else:
            candidate = find_best_match(element, engine)
            correlation = Correlation(
                visual_element=element,
                source_component=candidate.component,
                confidence=candidate.confidence if candidate.component else 0.0,
                match_reason=candidate.reason if candidate.component else NO_MATCH_REASON,
                code_snippet=extract_code_snippet(candidate.component) if candidate.component else None,
            )
            if candidate.component is not None:
                self.logger.debug(
                    "Matched %s to %s (%.2f)", element.selector, candidate.component.name, candidate.confidence
                )

        correlation.responsive_issues = detect_issues(element)
        correlation.recommendations = recommend(element, correlation.source_component)
        return correlation


def find_best_match(element: VisualElement, engine: IndexSearchEngine) -> _Candidate:
    best = _Candidate()

    if element.text and len(element.text) > 2:
        results = engine.search(SearchQuery(text=element.text, component_type="any"))
        if results:
            top = results[0]
            best = _Candidate(
                component=top.component,
                confidence=min(top.relevance_score / 20, 0.8),
                reason=f"Matched by text content: '{element.text}'",
            )

    if best.component is None or best.confidence < 0.5:
        query = build_type_query(element)
        results = engine.search(query)
        if results and results[0].relevance_score > 5:
            top = results[0]
            if best.component is None or top.relevance_score > best.confidence * 20:
                best = _Candidate(
                    component=top.component,
                    confidence=min(top.relevance_score / 15, 0.9),
                    reason=f"Matched by element type and props: {query.text}",
                )

    if (best.component is None or best.confidence < 0.6) and element.class_name:
        for token in element.class_name.split():
            if len(token) <= 2:
                continue
            results = engine.search(SearchQuery(text=token, component_type="any"))
            if results and results[0].relevance_score > 3:
                top = results[0]
                if best.component is None or top.relevance_score > best.confidence * 15:
                    best = _Candidate(
                        component=top.component,
                        confidence=min(top.relevance_score / 12, 0.7),
                        reason=f"Matched by CSS class: '{token}'",
                    )

    return best


def build_type_query(element: VisualElement) -> SearchQuery:
    """Translate an element's tag, role or class into a component search."""
    if element.tag_name == "button" or element.attributes.get("role") == "button":
        return SearchQuery(text="button", tags=["interactive"])
    if element.tag_name in _INPUT_TAGS:
        return SearchQuery(text="input", tags=["interactive"])
    if "card" in element.class_name:
        return SearchQuery(text="card", tags=["container"])
    if element.tag_name == "nav":
        return SearchQuery(text="navigation")
    return SearchQuery()


def extract_code_snippet(component: ComponentRecord) -> str:
    """Return the lines around the first return statement, or the file head."""
    lines = component.source_text.split("\n")
    for position, line in enumerate(lines):
        if "return" in line:
            start = max(0, position - 2)
            end = min(len(lines), position + 15)
            return "\n".join(lines[start:end])
    return "\n".join(lines[:20])


def detect_issues(element: VisualElement) -> List[str]:
    issues: List[str] = []
    width, height = element.bounds.width, element.bounds.height
    if width < MIN_TOUCH_TARGET or height < MIN_TOUCH_TARGET:
        issues.append(
            f"Touch target too small: {width:g}x{height:g}px "
            f"(minimum {MIN_TOUCH_TARGET}x{MIN_TOUCH_TARGET}px)"
        )

    font_size = parse_font_size(element.styles.get("fontSize"))
    if font_size and font_size < MIN_FONT_SIZE:
        issues.append(f"Font size too small: {font_size}px (minimum {MIN_FONT_SIZE}px for mobile)")

    color = element.styles.get("color")
    background = element.styles.get("backgroundColor")
    if color and background and color == background:
        issues.append("Potential color contrast issue")

    return issues


def recommend(element: VisualElement, component: Optional[ComponentRecord]) -> List[str]:
    recommendations: List[str] = []
    if element.bounds.width < MIN_TOUCH_TARGET or element.bounds.height < MIN_TOUCH_TARGET:
        recommendations.append(
            "Increase padding or min-height/min-width to meet 44px touch target minimum"
        )
    if not element.attributes.get("ariaLabel") and not element.text:
        recommendations.append("Add aria-label for better accessibility")
    if component is not None and len(component.props) > MAX_PROPS:
        recommendations.append(
            "Consider breaking down this component - it has many props and might be too complex"
        )
    if element.tag_name in _GENERIC_CONTAINER_TAGS and element.attributes.get("role") == "button":
        recommendations.append(
            "Consider using a semantic button element instead of a role-annotated container"
        )
    return recommendations


def summarize(correlations: Sequence[Correlation]) -> CorrelationSummary:
    matched = sum(1 for correlation in correlations if correlation.source_component is not None)
    return CorrelationSummary(
        total_elements=len(correlations),
        matched_components=matched,
        unmatched_elements=len(correlations) - matched,
        critical_issues=sum(len(correlation.responsive_issues) for correlation in correlations),
    )


def parse_font_size(value: Optional[str]) -> Optional[int]:
    """Integer pixel value at the start of a CSS font-size, if any."""
    if not value:
        return None
    match = _FONT_SIZE_PATTERN.match(value)
    return int(match.group(1)) if match else None


__all__ = [
    "CorrelationReport",
    "NO_INDEX_REASON",
    "NO_MATCH_REASON",
    "VisualCodeCorrelator",
    "build_type_query",
    "detect_issues",
    "extract_code_snippet",
    "find_best_match",
    "parse_font_size",
    "recommend",
    "summarize",
]
