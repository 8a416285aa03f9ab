"""Project walking and component index building."""

from __future__ import annotations

import json
import os
import re
from datetime import UTC, datetime
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from .config import ConfigError, IndexerConfig, load_config
from .extractors import FeatureExtractor, create_extractor
from .logging import get_logger
from .models import ComponentRecord, IndexMetadata, PageRecord, ProjectIndex
from .stores import IndexStore

_EXCLUDED_DIRS = {"node_modules"}

_COMPONENT_SUFFIX_PATTERN = re.compile(r"\.(tsx?|jsx?|vue)$")
_EXTENSION_PATTERN = re.compile(r"\.[^.]+$")

# Checked in order; the first dependency found decides the framework.
_FRAMEWORK_DEPENDENCIES = (
    ("react", "react"),
    ("vue", "vue"),
    ("@angular/core", "angular"),
)


class ProjectIndexer:
    """Walks a front-end project and builds its component index."""

    def __init__(
        self,
        root: Path | str,
        *,
        config: IndexerConfig | None = None,
        extractor: FeatureExtractor | None = None,
        store: IndexStore | None = None,
    ) -> None:
        self.root = Path(root).expanduser().resolve()
        self.logger = get_logger("indexer")
        self.config = config or self._load_config()
        self.extractor = extractor or create_extractor(self.config.extractor)
        self.store = store or IndexStore(self.root)

    def index_project(self) -> ProjectIndex:
        """Build the index for the project and persist it."""
        index = self.build()
        self.store.save(index)
        return index

    def build(self) -> ProjectIndex:
        """Return a fresh index without writing it to disk."""
        if not self.root.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {self.root}")
        self.logger.info("Starting project indexing for %s", self.root)

        framework = self.detect_framework()
        components = self.discover_components()
        pages = self.discover_pages()
        _link_pages(components, pages)

        index = ProjectIndex(
            metadata=IndexMetadata(
                project_path=str(self.root),
                framework=framework,
                last_indexed=datetime.now(UTC),
                components_count=len(components),
                pages_count=len(pages),
            ),
            components=components,
            pages=pages,
        )
        self.logger.info(
            "Indexing complete: %d components and %d pages", len(components), len(pages)
        )
        return index

    def detect_framework(self) -> str:
        manifest_path = self.root / "package.json"
        try:
            data = json.loads(manifest_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            self.logger.warning("Could not read package.json, proceeding with unknown framework")
            return "unknown"
        if not isinstance(data, dict):
            return "unknown"

        declared: set[str] = set()
        for key in ("dependencies", "devDependencies"):
            deps = data.get(key)
            if isinstance(deps, dict):
                declared.update(deps.keys())

        framework = "unknown"
        for dependency, name in _FRAMEWORK_DEPENDENCIES:
            if dependency in declared:
                framework = name
                break
        self.logger.info("Detected framework: %s", framework)
        return framework

    def discover_components(self) -> List[ComponentRecord]:
        components: List[ComponentRecord] = []
        for path in self._iter_candidates(self.root / self.config.source_dir):
            try:
                components.append(self._analyze_component(path))
            except Exception as exc:
                self.logger.warning("Failed to analyze component %s: %s", path, exc)
        self.logger.debug("Discovered %d components", len(components))
        return components

    def discover_pages(self) -> List[PageRecord]:
        pages: List[PageRecord] = []
        for path in self._iter_candidates(self.root / self.config.pages_dir):
            try:
                pages.append(self._analyze_page(path))
            except Exception as exc:
                self.logger.warning("Failed to analyze page %s: %s", path, exc)
        self.logger.debug("Discovered %d pages", len(pages))
        return pages

    # ------------------------------------------------------------------
    # Internal helpers

    def _load_config(self) -> IndexerConfig:
        try:
            return load_config(self.root).indexer
        except ConfigError as exc:
            self.logger.warning("Ignoring invalid configuration: %s", exc)
            return IndexerConfig()

    def _iter_candidates(self, directory: Path) -> Iterator[Path]:
        extensions = tuple(self.config.extensions)
        for path in _iter_files(directory, self.root, self.config.exclude_paths):
            if is_component_file(path.name, extensions):
                yield path

    def _analyze_component(self, path: Path) -> ComponentRecord:
        source = path.read_text(encoding="utf-8")
        stat_result = path.stat()
        rel_path = path.relative_to(self.root).as_posix()
        name = component_name(path.name)
        features = self.extractor.extract(source, component_name=name, file_path=rel_path)
        return ComponentRecord(
            id=component_id(rel_path),
            name=name,
            file_path=rel_path,
            source_text=source,
            props=features.props,
            imports=features.imports,
            tags=features.tags,
            used_in=[],
            description=features.description,
            last_modified=datetime.fromtimestamp(stat_result.st_mtime, UTC),
        )

    def _analyze_page(self, path: Path) -> PageRecord:
        source = path.read_text(encoding="utf-8")
        rel_path = path.relative_to(self.root).as_posix()
        name = component_name(path.name)
        return PageRecord(
            id=component_id(rel_path),
            name=name,
            route=route_for(name),
            file_path=rel_path,
            components=self.extractor.used_components(source),
        )


def is_component_file(file_name: str, extensions: Sequence[str] | None = None) -> bool:
    """Return True for files whose extension and naming look like a component."""
    allowed = tuple(extensions) if extensions else (".tsx", ".jsx", ".vue", ".ts", ".js")
    if not file_name.endswith(allowed):
        return False
    return file_name[:1].isupper() or "component" in file_name.lower()


def component_id(relative_path: str) -> str:
    """Derive a stable identifier from a path relative to the project root."""
    flattened = re.sub(r"[/\\]", "_", relative_path)
    return _EXTENSION_PATTERN.sub("", flattened)


def component_name(file_name: str) -> str:
    return _COMPONENT_SUFFIX_PATTERN.sub("", file_name)


def route_for(page_name: str) -> str:
    lowered = page_name.lower()
    if lowered in {"index", "home"}:
        return "/"
    return f"/{lowered}"


def _iter_files(directory: Path, root: Path, exclude_paths: Sequence[str]) -> Iterator[Path]:
    # os.walk skips directories it cannot list, which leaves those subtrees empty.
    for dirpath, dirnames, filenames in os.walk(directory):
        current_dir = Path(dirpath)
        dirnames[:] = sorted(
            name
            for name in dirnames
            if not name.startswith(".")
            and name not in _EXCLUDED_DIRS
            and not _is_excluded(_relative(current_dir / name, root), exclude_paths, is_dir=True)
        )
        for filename in sorted(filenames):
            path = current_dir / filename
            if _is_excluded(_relative(path, root), exclude_paths, is_dir=False):
                continue
            yield path


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _is_excluded(rel_path: str, patterns: Sequence[str], *, is_dir: bool) -> bool:
    for raw in patterns:
        pattern = raw.strip()
        if not pattern:
            continue
        if pattern.endswith("/"):
            if not is_dir:
                prefix = pattern.rstrip("/")
                if rel_path.startswith(f"{prefix}/"):
                    return True
                continue
            pattern = pattern.rstrip("/")
        if "/" in pattern:
            if fnmatchcase(rel_path, pattern.lstrip("/")):
                return True
        elif any(fnmatchcase(part, pattern) for part in rel_path.split("/")):
            return True
    return False


def _link_pages(components: List[ComponentRecord], pages: List[PageRecord]) -> None:
    by_name: Dict[str, ComponentRecord] = {}
    for component in components:
        by_name.setdefault(component.name, component)
    for page in pages:
        for name in page.components:
            target: Optional[ComponentRecord] = by_name.get(name)
            if target is not None and page.id not in target.used_in:
                target.used_in.append(page.id)


__all__ = [
    "ProjectIndexer",
    "component_id",
    "component_name",
    "is_component_file",
    "route_for",
]
