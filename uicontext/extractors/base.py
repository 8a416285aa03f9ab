"""Base classes for textual feature extractors."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

from ..models import PropDefinition


@dataclass
class SourceFeatures:
    """Features recovered from one component source file."""

    imports: List[str] = field(default_factory=list)
    props: List[PropDefinition] = field(default_factory=list)
    description: str = ""
    tags: List[str] = field(default_factory=list)


class FeatureExtractor(ABC):
    """Contract for turning component source text into indexable features."""

    name: str = "base"

    @abstractmethod
    def extract(self, source: str, *, component_name: str, file_path: str) -> SourceFeatures:
        """Return imports, props, description and tags for a component file."""

    @abstractmethod
    def used_components(self, source: str) -> List[str]:
        """Return the component names a page renders, deduplicated in first-use order."""
