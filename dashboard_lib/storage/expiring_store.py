"""Keyed expiring store over a string key/value backend.

Each value is persisted as a JSON wrapper carrying creation and expiry
timestamps. The store keeps the backend under a byte budget: when a write
would overflow it, expired and corrupt entries are swept first, then the
oldest entries are evicted, and only then does the write give up.

No public method raises. Failures are logged and reduced to a default
value, a boolean, or a `StoreResult` carrying an `ErrorKind`.
"""
from __future__ import annotations
import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .interfaces import NotifierProtocol, StorageProtocol
from .config import StoreConfig
from .errors import ErrorKind, ParseError, QuotaExceededError, StoreResult
from .serializer import EntrySerializer, JSONEntrySerializer, StoredEntry

logger = logging.getLogger(__name__)

STORAGE_FULL_MESSAGE = "Insufficient storage space: unable to save some data. Consider freeing up space."


def _now_ms() -> int:
    return int(time.time() * 1000)


class ExpiringStore:
    def __init__(
        self,
        backend: StorageProtocol,
        config: Optional[StoreConfig] = None,
        notifier: Optional[NotifierProtocol] = None,
        clock: Optional[Callable[[], int]] = None,
        serializer: Optional[EntrySerializer] = None,
    ) -> None:
        self.backend = backend
        self.config = config or StoreConfig()
        self.notifier = notifier
        self._clock = clock or _now_ms
        self.serializer = serializer or JSONEntrySerializer()

    def _now(self) -> int:
        return int(self._clock())

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def try_get(self, key: str, default: Any = None) -> StoreResult:
        """Look up `key`.

        Returns a successful result holding the stored value, or a failed
        result holding `default`. A plain miss and an expired entry carry no
        error kind; corrupt entries report PARSE_ERROR and backend failures
        BACKEND_UNAVAILABLE.
        """
        try:
            raw = self.backend.load(key)
        except KeyError:
            return StoreResult(ok=False, value=default)
        except Exception as e:
            logger.error("Failed to read %s: %s", key, e)
            return StoreResult.failure(ErrorKind.BACKEND_UNAVAILABLE, default)

        try:
            entry = self.serializer.load(raw)
        except ParseError as e:
            logger.error("Ignoring corrupt entry %s: %s", key, e)
            return StoreResult.failure(ErrorKind.PARSE_ERROR, default)

        if entry.is_expired(self._now()):
            logger.debug("Entry %s expired at %d; removing", key, entry.expires)
            self.remove(key)
            return StoreResult(ok=False, value=default)
        return StoreResult.success(entry.value)

    def get(self, key: str, default: Any = None) -> Any:
        return self.try_get(key, default).value

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def is_valid_key(self, key: str) -> bool:
        if not isinstance(key, str):
            return False
        if key.startswith(self.config.app_prefix):
            return True
        return not any(key.startswith(prefix) for prefix in self.config.reserved_prefixes)

    def try_set(self, key: str, value: Any, expiration_days: Optional[float] = None) -> StoreResult:
        if not self.is_valid_key(key):
            logger.error("Refusing to write reserved or invalid key %r", key)
            return StoreResult.failure(ErrorKind.INVALID_KEY)

        days = self.config.default_expiration_days if expiration_days is None else expiration_days
        try:
            entry = StoredEntry.create(value, self._now(), days)
            payload = self.serializer.dump(entry)
        except (TypeError, ValueError, OverflowError) as e:
            logger.error("Cannot serialize %s (expiration_days=%r): %s", key, days, e)
            return StoreResult.failure(ErrorKind.PARSE_ERROR)

        try:
            if self._fits(key, payload) and self._write(key, payload):
                return StoreResult.success(True)
            return self._handle_storage_full(key, payload)
        except Exception as e:
            logger.error("Failed to save %s: %s", key, e)
            return StoreResult.failure(ErrorKind.BACKEND_UNAVAILABLE)

    def set(self, key: str, value: Any, expiration_days: Optional[float] = None) -> bool:
        return self.try_set(key, value, expiration_days).ok

    def remove(self, key: str) -> None:
        try:
            self.backend.delete(key)
        except KeyError:
            pass
        except Exception as e:
            logger.error("Failed to remove %s: %s", key, e)

    def clear(self, except_keys: Iterable[str] = ()) -> None:
        keep = set(except_keys)
        try:
            for key in list(self.backend.list_keys()):
                if key not in keep:
                    self.remove(key)
        except Exception as e:
            logger.error("Failed to clear storage: %s", e)

    # ------------------------------------------------------------------
    # Capacity management
    # ------------------------------------------------------------------
    def storage_size(self) -> int:
        try:
            return self.backend.total_size()
        except Exception as e:
            logger.error("Failed to compute storage size: %s", e)
            return 0

    def _stored_length(self, key: str) -> int:
        try:
            return len(key) + len(self.backend.load(key))
        except KeyError:
            return 0

    def _fits(self, key: str, payload: str) -> bool:
        # An overwrite replaces the existing value, so it does not count twice.
        projected = self.backend.total_size() - self._stored_length(key) + len(key) + len(payload)
        return projected <= self.config.storage_limit

    def _write(self, key: str, payload: str) -> bool:
        try:
            self.backend.save(key, payload)
            return True
        except QuotaExceededError as e:
            logger.warning("Backend refused write: %s", e)
            return False

    def _handle_storage_full(self, key: str, payload: str) -> StoreResult:
        logger.warning("Storage nearly full; trying to free space for %s", key)
        strategies: Tuple[Callable[[], List[str]], ...] = (
            self.remove_expired_entries,
            self.remove_oldest_entries,
        )
        for strategy in strategies:
            removed = strategy()
            logger.debug("%s removed %d entries", strategy.__name__, len(removed))
            if self._fits(key, payload) and self._write(key, payload):
                return StoreResult.success(True)
            logger.warning("Freeing space with %s was not enough for %s", strategy.__name__, key)

        self._notify_storage_full(key)
        return StoreResult.failure(ErrorKind.QUOTA_EXCEEDED)

    def remove_expired_entries(self) -> List[str]:
        """Delete expired and unparseable entries; return the removed keys."""
        now = self._now()
        removed: List[str] = []
        for key in list(self.backend.list_keys()):
            try:
                raw = self.backend.load(key)
            except KeyError:
                continue
            try:
                expired = self.serializer.load(raw).is_expired(now)
            except ParseError:
                expired = True
            if expired:
                self.remove(key)
                removed.append(key)
        return removed

    def remove_oldest_entries(self, limit: Optional[int] = None) -> List[str]:
        """Delete the `limit` entries with the smallest `created` timestamp."""
        limit = self.config.eviction_batch_size if limit is None else limit
        candidates: List[Tuple[int, str]] = []
        for key in list(self.backend.list_keys()):
            try:
                candidates.append((self.serializer.load(self.backend.load(key)).created, key))
            except (KeyError, ParseError):
                continue
        candidates.sort(key=lambda c: c[0])
        removed = [key for _, key in candidates[:limit]]
        for key in removed:
            self.remove(key)
        return removed

    def _notify_storage_full(self, key: str) -> None:
        logger.error("Storage full: could not save %s", key)
        if self.notifier is None:
            return
        try:
            self.notifier.notify(STORAGE_FULL_MESSAGE, key)
        except Exception:
            logger.exception("Storage-full notification failed for %s", key)

    # ------------------------------------------------------------------
    # Backup
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        """Snapshot every backend key mapped to its `get` value."""
        try:
            keys = list(self.backend.list_keys())
        except Exception as e:
            logger.error("Failed to list keys for export: %s", e)
            return {}
        return {key: self.get(key) for key in keys}

    def import_data(self, data: Mapping[str, Any], overwrite: bool = False) -> Dict[str, bool]:
        """Write each item of `data` with the default expiration.

        Existing keys are left alone unless `overwrite` is set. Returns a
        mapping of the attempted keys to their write outcome.
        """
        results: Dict[str, bool] = {}
        if not isinstance(data, Mapping):
            logger.error("Import data must be a mapping, got %s", type(data).__name__)
            return results
        for key, value in data.items():
            try:
                present = self.backend.exists(key)
            except Exception as e:
                logger.error("Failed to check %s during import: %s", key, e)
                results[key] = False
                continue
            if overwrite or not present:
                results[key] = self.set(key, value)
        return results
