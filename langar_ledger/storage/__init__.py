"""Mini README: Whole-document JSON persistence for the ledger stores.

``backends`` holds the file and in-memory storage locations, ``document``
the lock-guarded transaction wrapper and ``tree`` the nested-map helpers
shared by the attendance, donation and expense ledgers.
"""

from .backends import DocumentBackend, InMemoryBackend, JsonFileBackend
from .document import JsonDocument
from .tree import ensure_path, lookup_path, unwrap_legacy

__all__ = [
    "DocumentBackend",
    "InMemoryBackend",
    "JsonDocument",
    "JsonFileBackend",
    "ensure_path",
    "lookup_path",
    "unwrap_legacy",
]
