"""Persistence for the project index artifact."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from ..logging import get_logger
from ..models import ProjectIndex

INDEX_FILENAME = ".ui-context-index.json"


class NotIndexedError(RuntimeError):
    """Raised when a project has no readable index artifact."""

    def __init__(self, project_path: Path) -> None:
        self.project_path = project_path
        super().__init__(
            f"No index found at {project_path}. Run `uicontext index {project_path}` first."
        )


class IndexStore:
    """Reads and writes the single JSON index stored at the project root."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).expanduser().resolve()
        self.logger = get_logger("store")

    @property
    def path(self) -> Path:
        return self.root / INDEX_FILENAME

    def save(self, index: ProjectIndex) -> Path:
        """Overwrite the artifact with ``index`` and return its path."""
        self.path.write_text(json.dumps(index.to_dict(), indent=2), encoding="utf-8")
        self.logger.info("Index saved to %s", self.path)
        return self.path

    def load(self) -> Optional[ProjectIndex]:
        """Return the stored index, or None when it is missing or unreadable."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            self.logger.warning("Ignoring unreadable index at %s: %s", self.path, exc)
            return None
        if not isinstance(data, dict):
            return None
        try:
            return ProjectIndex.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            self.logger.warning("Ignoring malformed index at %s: %s", self.path, exc)
            return None

    def require(self) -> ProjectIndex:
        """Return the stored index or raise NotIndexedError."""
        index = self.load()
        if index is None:
            raise NotIndexedError(self.root)
        return index


__all__ = ["INDEX_FILENAME", "IndexStore", "NotIndexedError"]
