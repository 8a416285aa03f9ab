"""Aggregate statistics over an indexed project."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .models import ComponentRecord, ProjectIndex
from .search import IndexSearchEngine

TOP_TAG_LIMIT = 10


@dataclass
class ComplexityStats:
    average_props: float = 0.0
    max_props: int = 0
    min_props: int = 0
    most_complex: Optional[str] = None
    simplest: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "averageProps": self.average_props,
            "maxProps": self.max_props,
            "minProps": self.min_props,
            "mostComplex": self.most_complex,
            "simplest": self.simplest,
        }


@dataclass
class UsageStats:
    average_usage: float = 0.0
    max_usage: int = 0
    total_relationships: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "averageUsage": self.average_usage,
            "maxUsage": self.max_usage,
            "totalRelationships": self.total_relationships,
        }


@dataclass
class HealthMetrics:
    total: int = 0
    with_props: int = 0
    interactive: int = 0
    stateful: int = 0
    with_side_effects: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "withProps": self.with_props,
            "interactive": self.interactive,
            "stateful": self.stateful,
            "withSideEffects": self.with_side_effects,
        }


@dataclass
class ProjectInsights:
    """Overview, complexity, tag, usage and health figures for one index."""

    framework: str
    last_indexed: Optional[str]
    components_count: int
    pages_count: int
    top_tags: List[Tuple[str, int]] = field(default_factory=list)
    complexity: ComplexityStats = field(default_factory=ComplexityStats)
    usage: UsageStats = field(default_factory=UsageStats)
    health: HealthMetrics = field(default_factory=HealthMetrics)
    components: List[ComponentRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "framework": self.framework,
            "lastIndexed": self.last_indexed,
            "componentsCount": self.components_count,
            "pagesCount": self.pages_count,
            "topTags": [{"tag": tag, "count": count} for tag, count in self.top_tags],
            "complexity": self.complexity.to_dict(),
            "usage": self.usage.to_dict(),
            "health": self.health.to_dict(),
        }


def build_insights(index: ProjectIndex) -> ProjectInsights:
    components = index.components
    metadata = index.metadata
    return ProjectInsights(
        framework=metadata.framework,
        last_indexed=metadata.last_indexed.isoformat() if metadata.last_indexed else None,
        components_count=metadata.components_count,
        pages_count=metadata.pages_count,
        top_tags=tag_distribution(components)[:TOP_TAG_LIMIT],
        complexity=_complexity(components),
        usage=_usage(IndexSearchEngine(index).usage_graph()),
        health=HealthMetrics(
            total=len(components),
            with_props=sum(1 for c in components if c.props),
            interactive=sum(1 for c in components if "interactive" in c.tags),
            stateful=sum(1 for c in components if "stateful" in c.tags),
            with_side_effects=sum(1 for c in components if "side-effects" in c.tags),
        ),
        components=list(components),
    )


def tag_distribution(components: List[ComponentRecord]) -> List[Tuple[str, int]]:
    """Tag counts, most frequent first; ties keep first-seen order."""
    counts: Counter[str] = Counter()
    for component in components:
        counts.update(component.tags)
    return counts.most_common()


def _complexity(components: List[ComponentRecord]) -> ComplexityStats:
    if not components:
        return ComplexityStats()
    counts = [len(component.props) for component in components]
    most_complex = components[counts.index(max(counts))]
    simplest = components[counts.index(min(counts))]
    return ComplexityStats(
        average_props=sum(counts) / len(counts),
        max_props=max(counts),
        min_props=min(counts),
        most_complex=most_complex.name,
        simplest=simplest.name,
    )


def _usage(graph: Dict[str, List[str]]) -> UsageStats:
    if not graph:
        return UsageStats()
    counts = [len(contexts) for contexts in graph.values()]
    return UsageStats(
        average_usage=sum(counts) / len(counts),
        max_usage=max(counts),
        total_relationships=sum(counts),
    )


__all__ = [
    "ComplexityStats",
    "HealthMetrics",
    "ProjectInsights",
    "UsageStats",
    "build_insights",
    "tag_distribution",
]
