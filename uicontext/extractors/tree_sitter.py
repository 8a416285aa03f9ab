"""Tree-sitter powered feature extractor for TypeScript and JSX sources."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, Iterator, List, Optional

from ..models import PropDefinition
from .base import SourceFeatures
from .regex import (
    RegexFeatureExtractor,
    destructured_defaults,
    extract_description,
    extract_tags,
)

try:  # pragma: no cover - optional dependency
    import tree_sitter_typescript
    from tree_sitter import Language, Node, Parser

    TREE_SITTER_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    tree_sitter_typescript = None  # type: ignore[assignment]
    Language = Node = Parser = None  # type: ignore[assignment,misc]
    TREE_SITTER_AVAILABLE = False


_GRAMMAR_BY_SUFFIX = {
    ".tsx": "tsx",
    ".jsx": "tsx",
    ".ts": "typescript",
    ".js": "tsx",
}


class TreeSitterFeatureExtractor(RegexFeatureExtractor):
    """Reads imports and props from a syntax tree instead of raw text.

    Files without a TypeScript grammar (for example ``.vue`` single file
    components) are handled by the regex extractor this class extends.
    Descriptions and tags stay keyword based so both extractors agree on them.
    """

    name = "tree-sitter"

    def __init__(self) -> None:
        if not TREE_SITTER_AVAILABLE:
            raise RuntimeError(
                "The tree-sitter extractor needs `tree-sitter` and `tree-sitter-typescript`. "
                "Install them with `pip install uicontext[tree-sitter]`."
            )
        self._parsers: Dict[str, Parser] = {}

    def extract(self, source: str, *, component_name: str, file_path: str) -> SourceFeatures:
        parser = self._parser_for(file_path)
        if parser is None:
            return super().extract(source, component_name=component_name, file_path=file_path)

        source_bytes = source.encode("utf-8")
        root = parser.parse(source_bytes).root_node
        return SourceFeatures(
            imports=self._collect_imports(root, source_bytes),
            props=self._collect_props(root, source_bytes, destructured_defaults(source)),
            description=extract_description(source, component_name),
            tags=extract_tags(source),
        )

    def _parser_for(self, file_path: str) -> Optional[Parser]:
        grammar = _GRAMMAR_BY_SUFFIX.get(PurePosixPath(file_path).suffix.lower())
        if grammar is None:
            return None
        parser = self._parsers.get(grammar)
        if parser is None:
            if grammar == "tsx":
                language = Language(tree_sitter_typescript.language_tsx())
            else:
                language = Language(tree_sitter_typescript.language_typescript())
            parser = Parser(language)
            self._parsers[grammar] = parser
        return parser

    def _collect_imports(self, root: Node, source_bytes: bytes) -> List[str]:
        imports: List[str] = []
        for node in _walk(root):
            if node.type != "import_statement":
                continue
            if not any(child.type == "import_clause" for child in node.children):
                continue
            module = node.child_by_field_name("source")
            if module is not None:
                imports.append(_node_text(module, source_bytes).strip("'\"`"))
        return imports

    def _collect_props(
        self, root: Node, source_bytes: bytes, defaults: Dict[str, str]
    ) -> List[PropDefinition]:
        for node in _walk(root):
            if node.type not in {"interface_declaration", "type_alias_declaration"}:
                continue
            name_node = node.child_by_field_name("name")
            if name_node is None or not _node_text(name_node, source_bytes).endswith("Props"):
                continue
            body = node.child_by_field_name("body") or node.child_by_field_name("value")
            if body is None:
                continue
            return [
                prop
                for prop in (
                    self._prop_from_signature(member, source_bytes, defaults)
                    for member in body.named_children
                    if member.type == "property_signature"
                )
                if prop is not None
            ]
        return []

    @staticmethod
    def _prop_from_signature(
        member: Node, source_bytes: bytes, defaults: Dict[str, str]
    ) -> Optional[PropDefinition]:
        name_node = member.child_by_field_name("name")
        if name_node is None:
            return None
        type_node = member.child_by_field_name("type")
        type_text = _node_text(type_node, source_bytes).lstrip(":").strip() if type_node else "any"
        optional = any(child.type == "?" for child in member.children)
        name = _node_text(name_node, source_bytes)
        return PropDefinition(
            name=name,
            type=type_text,
            required=not optional,
            default_value=defaults.get(name),
        )


def _walk(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


__all__ = ["TreeSitterFeatureExtractor", "TREE_SITTER_AVAILABLE"]
