"""Storage backend interface definitions.

Defines the StorageBackend abstract class wrapped by the expiring store.
A backend is a flat, synchronous, string-keyed map of strings, the same
shape as a browser's local storage.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterable


class StorageBackend(ABC):
    """Abstract string key/value backend.

    Implementations must be thread-safe if used concurrently.
    """

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        """Store `value` under `key`, replacing any previous value.

        Should raise `QuotaExceededError` when the write does not fit.
        """

    @abstractmethod
    def load(self, key: str) -> str:
        """Return the string stored under `key`.

        Should raise `KeyError` if the key does not exist.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete the stored value. Raise `KeyError` if not found."""

    @abstractmethod
    def list_keys(self) -> Iterable[str]:
        """Return an iterable of every key in the backend."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Return True if `key` exists."""

    def total_size(self) -> int:
        """Sum of all key lengths and value lengths in the backend."""
        total = 0
        for key in list(self.list_keys()):
            try:
                total += len(key) + len(self.load(key))
            except KeyError:
                continue
        return total

    def configure(self, **options) -> None:
        return
