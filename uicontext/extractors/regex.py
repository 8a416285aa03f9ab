"""Keyword and regular-expression based feature extraction."""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

from ..models import PropDefinition
from .base import FeatureExtractor, SourceFeatures

_IMPORT_PATTERN = re.compile(r"import\s+.*?from\s+['\"`]([^'\"`]+)['\"`]")
_PROPS_BLOCK_PATTERN = re.compile(
    r"(?:interface\s+\w*Props\s*|type\s+\w*Props\s*=\s*)\{([^}]+)\}"
)
_PROP_LINE_PATTERN = re.compile(r"(\w+)(\?)?:\s*([^;]+)")
_DESTRUCTURED_PARAMS_PATTERN = re.compile(r"\(\s*\{([^}]*)\}")
_DEFAULT_VALUE_PATTERN = re.compile(r"(\w+)\s*=\s*([^,\n]+)")
_DOC_BLOCK_PATTERN = re.compile(r"/\*\*\s*\n\s*\*\s*([^\n]+)")
_DOC_INLINE_PATTERN = re.compile(r"/\*\*\s*([^*\n][^\n]*?)\s*\*/")
_COMPONENT_USAGE_PATTERN = re.compile(r"<([A-Z]\w*)")

TAG_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("stateful", ("useState",)),
    ("side-effects", ("useEffect",)),
    ("container", ("props.children",)),
    ("interactive", ("onClick", "onPress")),
    ("styled", ("styled", "className")),
)


class RegexFeatureExtractor(FeatureExtractor):
    """Best-effort extraction that scans source text without parsing it."""

    name = "regex"

    def extract(self, source: str, *, component_name: str, file_path: str) -> SourceFeatures:
        return SourceFeatures(
            imports=self.extract_imports(source),
            props=self.extract_props(source),
            description=extract_description(source, component_name),
            tags=extract_tags(source),
        )

    def extract_imports(self, source: str) -> List[str]:
        return [match.group(1) for match in _IMPORT_PATTERN.finditer(source)]

    def extract_props(self, source: str) -> List[PropDefinition]:
        match = _PROPS_BLOCK_PATTERN.search(source)
        if not match:
            return []

        defaults = destructured_defaults(source)
        props: List[PropDefinition] = []
        for raw_line in match.group(1).split("\n"):
            line = raw_line.strip()
            if not line:
                continue
            prop_match = _PROP_LINE_PATTERN.search(line)
            if not prop_match:
                continue
            name = prop_match.group(1)
            props.append(
                PropDefinition(
                    name=name,
                    type=prop_match.group(3).strip().rstrip(",").strip(),
                    required=prop_match.group(2) is None,
                    default_value=defaults.get(name),
                )
            )
        return props

    def used_components(self, source: str) -> List[str]:
        names = (match.group(1) for match in _COMPONENT_USAGE_PATTERN.finditer(source))
        return list(dict.fromkeys(names))


def extract_description(source: str, component_name: str) -> str:
    """Return the first doc-comment line, or a generated default."""
    match = _DOC_BLOCK_PATTERN.search(source) or _DOC_INLINE_PATTERN.search(source)
    if match:
        description = match.group(1).strip()
        if description.endswith("*/"):
            description = description[:-2].rstrip()
        if description:
            return description
    return f"{component_name} component"


def extract_tags(source: str) -> List[str]:
    """Return semantic tags for every keyword group present in the source."""
    return [tag for tag, keywords in TAG_KEYWORDS if any(keyword in source for keyword in keywords)]


def destructured_defaults(source: str) -> Dict[str, str]:
    """Map prop names to the default values of the first destructured parameter list."""
    match = _DESTRUCTURED_PARAMS_PATTERN.search(source)
    if not match:
        return {}
    defaults: Dict[str, str] = {}
    for default_match in _DEFAULT_VALUE_PATTERN.finditer(match.group(1)):
        defaults.setdefault(default_match.group(1), default_match.group(2).strip())
    return defaults


__all__ = [
    "RegexFeatureExtractor",
    "TAG_KEYWORDS",
    "destructured_defaults",
    "extract_description",
    "extract_tags",
]
