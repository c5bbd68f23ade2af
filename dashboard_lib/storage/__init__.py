"""Storage abstraction package for the dashboard."""

from typing import Optional

from .base import StorageBackend
from .config import StoreConfig
from .errors import ErrorKind, ParseError, QuotaExceededError, StoreResult
from .expiring_store import ExpiringStore
from .file_backend import JsonFileStorage
from .memory_backend import MemoryStorage


def create_storage(backend: str = "memory", file_path: Optional[str] = None, quota: Optional[int] = None) -> StorageBackend:
    """Build a raw string backend by name ('memory' or 'file')."""
    if backend == "memory":
        return MemoryStorage(quota=quota)
    if backend == "file":
        if not file_path:
            raise ValueError("file backend requires a file_path")
        return JsonFileStorage(file_path, quota=quota)
    raise ValueError(f"unknown storage backend: {backend}")


__all__ = [
    "StorageBackend",
    "MemoryStorage",
    "JsonFileStorage",
    "ExpiringStore",
    "StoreConfig",
    "StoreResult",
    "ErrorKind",
    "ParseError",
    "QuotaExceededError",
    "create_storage",
]
