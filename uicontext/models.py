"""Core data models shared across uicontext components."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

FRAMEWORKS = ("react", "vue", "angular", "unknown")


@dataclass
class PropDefinition:
    """A single component property recovered from source text."""

    name: str
    type: str
    required: bool
    default_value: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "type": self.type, "required": self.required}
        if self.default_value is not None:
            data["defaultValue"] = self.default_value
        return data

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PropDefinition":
        default = payload.get("defaultValue")
        return cls(
            name=str(payload["name"]),
            type=str(payload.get("type", "")),
            required=bool(payload.get("required", False)),
            default_value=str(default) if default is not None else None,
        )


@dataclass
class ComponentRecord:
    """Indexed representation of one source file treated as a UI component."""

    id: str
    name: str
    file_path: str
    source_text: str
    props: List[PropDefinition] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    used_in: List[str] = field(default_factory=list)
    description: str = ""
    last_modified: Optional[datetime] = None
    styles: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "filePath": self.file_path,
            "sourceText": self.source_text,
            "props": [prop.to_dict() for prop in self.props],
            "imports": list(self.imports),
            "tags": list(self.tags),
            "usedIn": list(self.used_in),
            "description": self.description,
            "lastModified": _format_datetime(self.last_modified),
            "styles": dict(self.styles),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ComponentRecord":
        return cls(
            id=str(payload["id"]),
            name=str(payload["name"]),
            file_path=str(payload.get("filePath", "")),
            source_text=str(payload.get("sourceText", "")),
            props=[PropDefinition.from_dict(item) for item in payload.get("props") or []],
            imports=[str(item) for item in payload.get("imports") or []],
            tags=[str(item) for item in payload.get("tags") or []],
            used_in=[str(item) for item in payload.get("usedIn") or []],
            description=str(payload.get("description", "")),
            last_modified=_parse_datetime(payload.get("lastModified")),
            styles={str(key): str(value) for key, value in (payload.get("styles") or {}).items()},
        )


@dataclass
class PageRecord:
    """A route-level file and the components it renders."""

    id: str
    name: str
    route: str
    file_path: str
    components: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "route": self.route,
            "filePath": self.file_path,
            "components": list(self.components),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PageRecord":
        return cls(
            id=str(payload["id"]),
            name=str(payload["name"]),
            route=str(payload.get("route", "/")),
            file_path=str(payload.get("filePath", "")),
            components=[str(item) for item in payload.get("components") or []],
        )


@dataclass
class IndexMetadata:
    """Summary fields describing one indexing run."""

    project_path: str
    framework: str = "unknown"
    last_indexed: Optional[datetime] = None
    components_count: int = 0
    pages_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectPath": self.project_path,
            "framework": self.framework,
            "lastIndexed": _format_datetime(self.last_indexed),
            "componentsCount": self.components_count,
            "pagesCount": self.pages_count,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "IndexMetadata":
        framework = str(payload.get("framework", "unknown"))
        return cls(
            project_path=str(payload.get("projectPath", "")),
            framework=framework if framework in FRAMEWORKS else "unknown",
            last_indexed=_parse_datetime(payload.get("lastIndexed")),
            components_count=int(payload.get("componentsCount", 0)),
            pages_count=int(payload.get("pagesCount", 0)),
        )


@dataclass
class ProjectIndex:
    """The full persisted indexing result for one codebase."""

    metadata: IndexMetadata
    components: List[ComponentRecord] = field(default_factory=list)
    pages: List[PageRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "components": [component.to_dict() for component in self.components],
            "pages": [page.to_dict() for page in self.pages],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ProjectIndex":
        return cls(
            metadata=IndexMetadata.from_dict(payload.get("metadata") or {}),
            components=[ComponentRecord.from_dict(item) for item in payload.get("components") or []],
            pages=[PageRecord.from_dict(item) for item in payload.get("pages") or []],
        )


@dataclass
class Bounds:
    """Bounding box of a rendered element in CSS pixels."""

    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass
class VisualElement:
    """An element observed on a live page, as reported by page automation."""

    selector: str
    text: str = ""
    bounds: Bounds = field(default_factory=Bounds)
    tag_name: str = ""
    class_name: str = ""
    id: str = ""
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)
    styles: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selector": self.selector,
            "text": self.text,
            "bounds": self.bounds.to_dict(),
            "tagName": self.tag_name,
            "className": self.class_name,
            "id": self.id,
            "attributes": dict(self.attributes),
            "styles": dict(self.styles),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "VisualElement":
        raw_bounds = payload.get("bounds") or {}
        bounds = Bounds(
            x=_as_number(raw_bounds.get("x")),
            y=_as_number(raw_bounds.get("y")),
            width=_as_number(raw_bounds.get("width")),
            height=_as_number(raw_bounds.get("height")),
        )
        attributes = {
            str(key): (str(value) if value is not None else None)
            for key, value in (payload.get("attributes") or {}).items()
        }
        styles = {
            str(key): str(value)
            for key, value in (payload.get("styles") or {}).items()
            if value is not None
        }
        return cls(
            selector=str(payload.get("selector", "")),
            text=str(payload.get("text") or ""),
            bounds=bounds,
            tag_name=str(payload.get("tagName") or "").lower(),
            class_name=str(payload.get("className") or ""),
            id=str(payload.get("id") or ""),
            attributes=attributes,
            styles=styles,
        )


@dataclass
class Correlation:
    """Pairing of one visual element with zero or one indexed component."""

    visual_element: VisualElement
    source_component: Optional[ComponentRecord] = None
    confidence: float = 0.0
    match_reason: str = ""
    code_snippet: Optional[str] = None
    responsive_issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "visualElement": self.visual_element.to_dict(),
            "sourceComponent": self.source_component.to_dict() if self.source_component else None,
            "confidence": self.confidence,
            "matchReason": self.match_reason,
            "codeSnippet": self.code_snippet,
            "responsiveIssues": list(self.responsive_issues),
            "recommendations": list(self.recommendations),
        }


@dataclass
class CorrelationSummary:
    """Aggregate counts over one correlation run."""

    total_elements: int
    matched_components: int
    unmatched_elements: int
    critical_issues: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalElements": self.total_elements,
            "matchedComponents": self.matched_components,
            "unmatchedElements": self.unmatched_elements,
            "criticalIssues": self.critical_issues,
        }


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _as_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
