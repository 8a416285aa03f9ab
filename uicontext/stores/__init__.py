"""Persistent stores used by uicontext."""

from .index_store import INDEX_FILENAME, IndexStore, NotIndexedError

__all__ = ["INDEX_FILENAME", "IndexStore", "NotIndexedError"]
