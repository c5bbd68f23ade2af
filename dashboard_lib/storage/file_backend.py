"""Storage backend that keeps the whole key/value map in one JSON file.

Every write rewrites the file atomically by writing to a temporary file
and renaming it over the target. The map is cached in memory after the
first read so reads never touch the disk.
"""
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from threading import RLock
from typing import Dict, Iterable, Optional

from .base import StorageBackend
from .errors import QuotaExceededError

logger = logging.getLogger(__name__)


class JsonFileStorage(StorageBackend):
    """Backend persisting a flat string map to `file_path`.

    Parameters
    - file_path: JSON file holding the map. Created on first write.
    - quota: optional byte budget; writes that would exceed it raise
      `QuotaExceededError` without touching the file.
    """

    def __init__(self, file_path: str | Path, quota: Optional[int] = None) -> None:
        self.file_path = Path(file_path)
        if not self.file_path.parent.exists():
            os.makedirs(self.file_path.parent, exist_ok=True)
        self.quota = quota
        self._lock = RLock()
        self._cache: Optional[Dict[str, str]] = None

    def _data(self) -> Dict[str, str]:
        if self._cache is not None:
            return self._cache
        data: Dict[str, str] = {}
        if self.file_path.exists():
            try:
                with open(self.file_path, "r", encoding="utf-8") as f:
                    raw = json.load(f)
                if isinstance(raw, dict):
                    data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
                else:
                    logger.warning("Ignoring %s: expected a JSON object", self.file_path)
            except (OSError, ValueError) as e:
                logger.error("Failed to read storage file %s: %s", self.file_path, e)
        logger.debug("JsonFileStorage loaded %d keys from %s", len(data), self.file_path)
        self._cache = data
        return data

    def _flush(self, data: Dict[str, str]) -> None:
        tmp = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(self.file_path)

    def save(self, key: str, value: str) -> None:
        with self._lock:
            data = self._data()
            if self.quota is not None:
                required = sum(len(k) + len(v) for k, v in data.items() if k != key) + len(key) + len(value)
                if required > self.quota:
                    raise QuotaExceededError(key, required, self.quota)
            updated = dict(data)
            updated[key] = value
            self._flush(updated)
            self._cache = updated

    def load(self, key: str) -> str:
        with self._lock:
            return self._data()[key]

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._data()
            if key not in data:
                raise KeyError(key)
            updated = {k: v for k, v in data.items() if k != key}
            self._flush(updated)
            self._cache = updated

    def list_keys(self) -> Iterable[str]:
        with self._lock:
            return list(self._data().keys())

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._data()

    def total_size(self) -> int:
        with self._lock:
            return sum(len(k) + len(v) for k, v in self._data().items())

    def configure(self, **options) -> None:
        fp = options.get("file_path") or options.get("path")
        if fp:
            with self._lock:
                self.file_path = Path(fp)
                if not self.file_path.parent.exists():
                    os.makedirs(self.file_path.parent, exist_ok=True)
                self._cache = None
        if "quota" in options:
            self.quota = options["quota"]
