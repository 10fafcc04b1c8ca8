"""Durable JSON-backed session log and active-slot storage."""

from .config import StorageError, StoreConfig
from .documents import DocumentReadError, JsonDocument
from .lock import exclusive_lock
from .store import SessionStore

__all__ = [
    "DocumentReadError",
    "JsonDocument",
    "SessionStore",
    "StorageError",
    "StoreConfig",
    "exclusive_lock",
]
