"""Relevance and similarity search over a loaded project index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .models import ComponentRecord, ProjectIndex

SIMILARITY_MODES = ("semantic", "visual", "usage")
COMPONENT_TYPES = ("functional", "class", "any")

_SIMILARITY_THRESHOLD = 0.1
_SNIPPET_RADIUS = 50


class ComponentNotFoundError(RuntimeError):
    """Raised when a component id or name does not exist in the index."""

    def __init__(self, reference: str, available: Sequence[str]) -> None:
        self.reference = reference
        self.available = list(available)
        names = ", ".join(self.available) if self.available else "none"
        super().__init__(f'Component "{reference}" was not found. Available components: {names}')


@dataclass
class SearchQuery:
    """Text, tag and filter criteria for a component search."""

    text: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    framework: Optional[str] = None
    component_type: Optional[str] = None
    has_props: Optional[bool] = None
    has_side_effects: Optional[bool] = None
    used_in: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "SearchQuery":
        return cls(
            text=payload.get("text"),
            tags=list(payload.get("tags") or []),
            framework=payload.get("framework"),
            component_type=payload.get("componentType"),
            has_props=payload.get("hasProps"),
            has_side_effects=payload.get("hasSideEffects"),
            used_in=list(payload.get("usedIn") or []),
        )


@dataclass
class SearchMatch:
    """Highlighted occurrence of the query text in one component field."""

    field: str
    snippet: str
    highlight_start: int
    highlight_end: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "snippet": self.snippet,
            "highlightStart": self.highlight_start,
            "highlightEnd": self.highlight_end,
        }


@dataclass
class SearchResult:
    component: ComponentRecord
    relevance_score: int
    matches: List[SearchMatch] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "component": self.component.to_dict(),
            "relevanceScore": self.relevance_score,
            "matches": [match.to_dict() for match in self.matches],
        }


@dataclass
class SimilarityResult:
    component: ComponentRecord
    similarity_score: float
    similarity_type: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "component": self.component.to_dict(),
            "similarityScore": self.similarity_score,
            "similarityType": self.similarity_type,
        }


class IndexSearchEngine:
    """Answers text, tag and similarity queries against one project index.

    The engine never mutates the index, so a single instance can serve
    concurrent read-only queries.
    """

    def __init__(self, index: ProjectIndex) -> None:
        self.index = index

    def search(self, query: SearchQuery) -> List[SearchResult]:
        """Return components with a positive score, best first.

        Ties keep the order components have in the index.
        """
        results: List[SearchResult] = []
        for component in self.index.components:
            score = relevance_score(component, query)
            if score > 0:
                results.append(
                    SearchResult(
                        component=component,
                        relevance_score=score,
                        matches=find_matches(component, query.text),
                    )
                )
        return sorted(results, key=lambda result: result.relevance_score, reverse=True)

    def find_similar(
        self, component_id: str, mode: str = "semantic", limit: int = 5
    ) -> List[SimilarityResult]:
        """Return components similar to ``component_id``; unknown ids yield []."""
        if mode not in SIMILARITY_MODES:
            raise ValueError(f"Unknown similarity mode '{mode}' (expected one of {', '.join(SIMILARITY_MODES)})")
        target = self.get(component_id)
        if target is None:
            return []

        similarities: List[SimilarityResult] = []
        for component in self.index.components:
            if component.id == component_id:
                continue
            score = similarity(target, component, mode)
            if score > _SIMILARITY_THRESHOLD:
                similarities.append(
                    SimilarityResult(component=component, similarity_score=score, similarity_type=mode)
                )
        similarities.sort(key=lambda result: result.similarity_score, reverse=True)
        return similarities[: max(0, limit)]

    def usage_graph(self) -> Dict[str, List[str]]:
        """Map component ids to the contexts that use them."""
        graph: Dict[str, List[str]] = {
            component.id: list(component.used_in) for component in self.index.components
        }
        for page in self.index.pages:
            for name in page.components:
                component = self._by_name(name)
                if component is None:
                    continue
                contexts = graph.setdefault(component.id, [])
                if page.id not in contexts:
                    contexts.append(page.id)
        return graph

    def components_by_tag(self, tag: str) -> List[ComponentRecord]:
        return [component for component in self.index.components if tag in component.tags]

    def get(self, component_id: str) -> Optional[ComponentRecord]:
        for component in self.index.components:
            if component.id == component_id:
                return component
        return None

    def resolve(self, reference: str) -> ComponentRecord:
        """Look a component up by id, then by name."""
        component = self.get(reference) or self._by_name(reference)
        if component is None:
            raise ComponentNotFoundError(reference, [c.name for c in self.index.components])
        return component

    def _by_name(self, name: str) -> Optional[ComponentRecord]:
        for component in self.index.components:
            if component.name == name:
                return component
        return None


def relevance_score(component: ComponentRecord, query: SearchQuery) -> int:
    """Additive heuristic score of ``component`` for ``query``, floored at zero."""
    score = 0

    if query.text:
        # Name matching ignores case; description and source match verbatim.
        text = query.text
        lowered = text.lower()
        if lowered in component.name.lower():
            score += 10
        if text in component.description:
            score += 5
        if text in component.source_text:
            score += 2
        for prop in component.props:
            if lowered in prop.name.lower() or lowered in prop.type.lower():
                score += 3

    if query.tags:
        score += 4 * sum(1 for tag in component.tags if tag in query.tags)

    if query.component_type and query.component_type != "any":
        if query.component_type == "functional" and is_functional(component):
            score += 2
        elif query.component_type == "class" and is_class(component):
            score += 2
        else:
            score -= 5

    if query.has_props is not None:
        score += 2 if query.has_props == bool(component.props) else -3

    if query.has_side_effects is not None:
        has_side_effects = "side-effects" in component.tags
        score += 2 if query.has_side_effects == has_side_effects else -3

    if query.used_in:
        score += 3 * sum(1 for context in component.used_in if context in query.used_in)

    return max(0, score)


def is_functional(component: ComponentRecord) -> bool:
    source = component.source_text
    return "function " in source or "const " in source or "=>" in source


def is_class(component: ComponentRecord) -> bool:
    source = component.source_text
    return "class " in source or "extends" in source


def find_matches(component: ComponentRecord, text: Optional[str]) -> List[SearchMatch]:
    """Return a context window around the first hit in each searchable field."""
    if not text:
        return []
    matches: List[SearchMatch] = []
    fields = (
        ("name", component.name, True),
        ("description", component.description, False),
        ("sourceText", component.source_text, False),
    )
    for name, content, ignore_case in fields:
        haystack = content.lower() if ignore_case else content
        needle = text.lower() if ignore_case else text
        position = haystack.find(needle)
        if position == -1:
            continue
        start = max(0, position - _SNIPPET_RADIUS)
        end = min(len(content), position + len(needle) + _SNIPPET_RADIUS)
        matches.append(
            SearchMatch(
                field=name,
                snippet=content[start:end],
                highlight_start=position - start,
                highlight_end=position - start + len(needle),
            )
        )
    return matches


def similarity(first: ComponentRecord, second: ComponentRecord, mode: str) -> float:
    if mode == "semantic":
        return semantic_similarity(first, second)
    if mode == "usage":
        return usage_similarity(first, second)
    if mode == "visual":
        return visual_similarity(first, second)
    raise ValueError(f"Unknown similarity mode '{mode}'")


def semantic_similarity(first: ComponentRecord, second: ComponentRecord) -> float:
    score = 0.2 * len(set(first.tags) & set(second.tags))
    score += 0.15 * len({p.type for p in first.props} & {p.type for p in second.props})
    score += 0.1 * len(set(first.imports) & set(second.imports))
    score += 0.3 * string_similarity(first.name, second.name)
    return min(1.0, score)


def usage_similarity(first: ComponentRecord, second: ComponentRecord) -> float:
    union = set(first.used_in) | set(second.used_in)
    if not union:
        return 0.0
    return len(set(first.used_in) & set(second.used_in)) / len(union)


def visual_similarity(first: ComponentRecord, second: ComponentRecord) -> float:
    keys = set(first.styles) | set(second.styles)
    if not keys:
        return 0.0
    same = sum(1 for key in keys if first.styles.get(key) == second.styles.get(key))
    return same / len(keys)


def string_similarity(first: str, second: str) -> float:
    """Normalised Levenshtein similarity in [0, 1]."""
    longest = max(len(first), len(second))
    if longest == 0:
        return 1.0
    return (longest - levenshtein_distance(first, second)) / longest


def levenshtein_distance(first: str, second: str) -> int:
    if len(first) < len(second):
        first, second = second, first
    previous = list(range(len(second) + 1))
    for i, left in enumerate(first, start=1):
        current = [i]
        for j, right in enumerate(second, start=1):
            cost = 0 if left == right else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


__all__ = [
    "COMPONENT_TYPES",
    "ComponentNotFoundError",
    "IndexSearchEngine",
    "SIMILARITY_MODES",
    "SearchMatch",
    "SearchQuery",
    "SearchResult",
    "SimilarityResult",
    "find_matches",
    "levenshtein_distance",
    "relevance_score",
    "similarity",
    "string_similarity",
]
