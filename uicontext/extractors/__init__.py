"""Feature extractor implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable

from .base import FeatureExtractor, SourceFeatures
from .regex import RegexFeatureExtractor
from .tree_sitter import TREE_SITTER_AVAILABLE, TreeSitterFeatureExtractor

_ENTRY_POINT_GROUP = "uicontext.extractors"

_BUILTIN_FACTORIES: Dict[str, Callable[[], FeatureExtractor]] = {
    "regex": RegexFeatureExtractor,
    "tree-sitter": TreeSitterFeatureExtractor,
}


def create_extractor(name: str = "regex") -> FeatureExtractor:
    """Instantiate the extractor registered under ``name``.

    Built-in extractors win over entry points registered by other packages
    under the ``uicontext.extractors`` group.
    """
    key = name.lower()
    factory = _BUILTIN_FACTORIES.get(key)
    if factory is None:
        for entry in _iter_entry_points():
            if entry.name.lower() == key:
                try:
                    loaded = entry.load()
                except Exception as exc:  # pragma: no cover
                    raise RuntimeError(f"Failed to load extractor entry point '{name}': {exc}") from exc
                return _coerce_extractor(loaded)
        available = ", ".join(sorted(_BUILTIN_FACTORIES))
        raise ValueError(f"Unknown feature extractor '{name}' (available: {available})")

    instance = factory()
    if not isinstance(instance, FeatureExtractor):
        raise TypeError(f"Extractor factory for '{name}' did not return a FeatureExtractor instance")
    return instance


def _coerce_extractor(obj: object) -> FeatureExtractor:
    if isinstance(obj, FeatureExtractor):
        return obj
    if isinstance(obj, type) and issubclass(obj, FeatureExtractor):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, FeatureExtractor):
            return instance
    raise TypeError("Extractor entry point must be a FeatureExtractor subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "FeatureExtractor",
    "RegexFeatureExtractor",
    "SourceFeatures",
    "TREE_SITTER_AVAILABLE",
    "TreeSitterFeatureExtractor",
    "create_extractor",
]
