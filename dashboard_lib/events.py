"""Minimal publish/subscribe bus wiring the dashboard modules together."""
import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]

FAVORITES_UPDATED = "favorites:updated"
THEME_CHANGED = "theme:changed"
RECENT_UPDATED = "recent:updated"
CONFIG_CHANGED = "config:changed"
CONFIG_ERROR = "config:error"
LAYOUTS_UPDATED = "layouts:updated"


class EventBus:
    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def on(self, event_name: str, callback: Listener) -> None:
        self._listeners.setdefault(event_name, []).append(callback)

    def off(self, event_name: str, callback: Listener) -> bool:
        callbacks = self._listeners.get(event_name, [])
        if callback in callbacks:
            callbacks.remove(callback)
            return True
        return False

    def emit(self, event_name: str, data: Any = None) -> None:
        # Iterate over a copy so listeners may unsubscribe while handling.
        for callback in list(self._listeners.get(event_name, [])):
            try:
                callback(data)
            except Exception:
                logger.exception("Listener for %s failed", event_name)

    def listener_count(self, event_name: str) -> int:
        return len(self._listeners.get(event_name, []))
