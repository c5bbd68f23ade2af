"""Notification sinks for warnings raised by the storage layer.

`NotificationCenter` keeps dismissible notifications that expire on their
own after a fixed delay; the UI layer polls `active()` to render them.
`LoggingNotifier` only writes the warning to the log.
"""
from __future__ import annotations
import itertools
import logging
import time
from dataclasses import dataclass
from threading import RLock
from typing import Callable, Dict, List, Optional

from dashboard_lib.storage.config import DEFAULT_NOTIFICATION_TIMEOUT

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    id: int
    message: str
    key: Optional[str]
    created_at: float
    timeout: float

    def is_dismissed_at(self, now: float) -> bool:
        return now - self.created_at >= self.timeout

    def to_dict(self) -> dict:
        return {"id": self.id, "message": self.message, "key": self.key}


class NotificationCenter:
    def __init__(self, timeout: float = DEFAULT_NOTIFICATION_TIMEOUT, clock: Optional[Callable[[], float]] = None) -> None:
        self.timeout = timeout
        self._clock = clock or time.monotonic
        self._lock = RLock()
        self._ids = itertools.count(1)
        self._items: Dict[int, Notification] = {}

    def notify(self, message: str, key: Optional[str] = None) -> None:
        with self._lock:
            n = Notification(next(self._ids), message, key, self._clock(), self.timeout)
            self._items[n.id] = n
        logger.warning("%s%s", message, f" (key: {key})" if key else "")

    def active(self) -> List[Notification]:
        """Return notifications not yet dismissed, pruning the auto-dismissed ones."""
        now = self._clock()
        with self._lock:
            for nid in [nid for nid, n in self._items.items() if n.is_dismissed_at(now)]:
                del self._items[nid]
            return sorted(self._items.values(), key=lambda n: n.id)

    def dismiss(self, notification_id: int) -> bool:
        with self._lock:
            return self._items.pop(notification_id, None) is not None


class LoggingNotifier:
    def __init__(self, level: int = logging.WARNING) -> None:
        self.level = level

    def notify(self, message: str, key: Optional[str] = None) -> None:
        if key:
            logger.log(self.level, "%s (key: %s)", message, key)
        else:
            logger.log(self.level, "%s", message)
