"""Configuration loading for uicontext (.uicontext.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".uicontext.yml"

DEFAULT_EXTENSIONS = (".tsx", ".jsx", ".vue", ".ts", ".js")

FOCUS_CHOICES = ("button", "input", "card", "all")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class Breakpoint:
    """Named viewport used for responsive captures."""

    name: str
    width: int
    height: int


def _default_breakpoints() -> List[Breakpoint]:
    return [
        Breakpoint(name="desktop", width=1200, height=800),
        Breakpoint(name="tablet", width=768, height=1024),
        Breakpoint(name="mobile", width=375, height=667),
    ]


@dataclass
class IndexerConfig:
    """Component discovery settings."""

    source_dir: str = "src"
    pages_dir: str = "src/pages"
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude_paths: List[str] = field(default_factory=list)
    extractor: str = "regex"


@dataclass
class CorrelatorConfig:
    """Live analysis settings for the page automation session."""

    focus: str = "all"
    timeout_ms: int = 30000
    headless: bool = True
    browser: str = "chromium"
    breakpoints: List[Breakpoint] = field(default_factory=_default_breakpoints)


@dataclass
class UIContextConfig:
    """Represents the settings defined in .uicontext.yml."""

    root: Path
    indexer: IndexerConfig = field(default_factory=IndexerConfig)
    correlator: CorrelatorConfig = field(default_factory=CorrelatorConfig)


def load_config(config_path: Path) -> UIContextConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return UIContextConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    indexer = IndexerConfig()
    indexer_data = _as_dict(data.get("indexer"))
    if indexer_data:
        indexer.source_dir = _as_str(indexer_data.get("source_dir")) or indexer.source_dir
        indexer.pages_dir = _as_str(indexer_data.get("pages_dir")) or indexer.pages_dir
        extensions = _as_str_list(indexer_data.get("extensions"))
        if extensions:
            indexer.extensions = [_normalise_extension(ext) for ext in extensions]
        indexer.exclude_paths = _as_str_list(indexer_data.get("exclude_paths"))
        indexer.extractor = _as_str(indexer_data.get("extractor")) or indexer.extractor

    correlator = CorrelatorConfig()
    correlator_data = _as_dict(data.get("correlator"))
    if correlator_data:
        focus = _as_str(correlator_data.get("focus"))
        if focus is not None:
            if focus not in FOCUS_CHOICES:
                raise ConfigError(
                    f"correlator.focus must be one of {', '.join(FOCUS_CHOICES)}, got '{focus}'"
                )
            correlator.focus = focus
        timeout = _as_int(correlator_data.get("timeout_ms"))
        if timeout is not None:
            correlator.timeout_ms = timeout
        headless = _as_bool(correlator_data.get("headless"))
        if headless is not None:
            correlator.headless = headless
        correlator.browser = _as_str(correlator_data.get("browser")) or correlator.browser
        breakpoints = _parse_breakpoints(correlator_data.get("breakpoints"))
        if breakpoints:
            correlator.breakpoints = breakpoints

    return UIContextConfig(root=root, indexer=indexer, correlator=correlator)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.suffix in {".yml", ".yaml"} and not config_path.is_dir():
        return config_path.resolve()
    return (config_path / CONFIG_FILENAME).resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_breakpoints(value: Any) -> List[Breakpoint]:
    breakpoints: List[Breakpoint] = []
    for name, raw in _as_dict(value).items():
        size = _as_dict(raw)
        width = _as_int(size.get("width"))
        height = _as_int(size.get("height"))
        if width is None or height is None or width <= 0 or height <= 0:
            raise ConfigError(f"Breakpoint '{name}' needs positive width and height")
        breakpoints.append(Breakpoint(name=str(name), width=width, height=height))
    return breakpoints


def _normalise_extension(value: str) -> str:
    value = value.strip().lower()
    return value if value.startswith(".") else f".{value}"


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
