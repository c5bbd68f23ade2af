"""Simple memory-backed storage backend

This backend keeps strings in a dict and optionally enforces a byte quota,
mimicking a browser local storage area that refuses writes once full.
"""
from threading import RLock
from typing import Dict, Iterable, Optional

from .base import StorageBackend
from .errors import QuotaExceededError


class MemoryStorage(StorageBackend):
    def __init__(self, quota: Optional[int] = None):
        self._lock = RLock()
        self._store: Dict[str, str] = {}
        self.quota = quota

    def save(self, key: str, value: str) -> None:
        with self._lock:
            if self.quota is not None:
                required = self._size_without(key) + len(key) + len(value)
                if required > self.quota:
                    raise QuotaExceededError(key, required, self.quota)
            self._store[key] = value

    def load(self, key: str) -> str:
        with self._lock:
            return self._store[key]

    def delete(self, key: str) -> None:
        with self._lock:
            del self._store[key]

    def list_keys(self) -> Iterable[str]:
        with self._lock:
            return list(self._store.keys())

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._store

    def total_size(self) -> int:
        with self._lock:
            return sum(len(k) + len(v) for k, v in self._store.items())

    def _size_without(self, key: str) -> int:
        return sum(len(k) + len(v) for k, v in self._store.items() if k != key)

    def configure(self, **options) -> None:
        if "quota" in options:
            self.quota = options["quota"]

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
