"""User configuration layered over built-in defaults.

The stored document only needs to hold what the user changed: on load it
is deep-merged into a copy of `DEFAULT_USER_CONFIG`. Section and key names
keep the camelCase spelling the browser dashboard writes, so both sides
read the same `mserv_user_config` entry.
"""
from __future__ import annotations

import copy
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from dashboard_lib.events import EventBus, CONFIG_CHANGED, CONFIG_ERROR
from dashboard_lib.preferences.theme import THEME_CYCLE
from dashboard_lib.storage import ExpiringStore

logger = logging.getLogger(__name__)

USER_CONFIG_KEY = "mserv_user_config"
MAX_HISTORY = 50
# Never written back to storage.
UNSAVED_SECTIONS = ("advanced",)

LANGUAGES = ("fr", "en", "es")
FONT_SIZES = {"small": "0.8rem", "medium": "1rem", "large": "1.2rem", "xlarge": "1.4rem"}

DEFAULT_USER_CONFIG: Dict[str, Dict[str, Any]] = {
    "general": {
        "appName": "mserv.wtf Dashboard",
        "version": "2.1.0",
        "language": "en",
        "timezone": "auto",
    },
    "interface": {
        "theme": "system",
        "compactMode": False,
        "animations": True,
        "fontSize": "medium",
        "highContrast": False,
    },
    "privacy": {
        "telemetry": True,
        "errorReporting": True,
        "dataCollection": False,
    },
    "services": {
        "defaultCategory": "all",
        "maxFavorites": 10,
        "showNewBadge": True,
    },
    "performance": {
        "renderOptimization": True,
        "lazyLoading": True,
        "cacheStrategy": "balanced",
    },
    "notifications": {
        "enabled": True,
        "soundEnabled": True,
        "serviceStatusAlerts": True,
        "updateAlerts": True,
    },
    "advanced": {
        "experimentalFeatures": False,
        "developerMode": False,
        "customCSS": "",
    },
}


def deep_merge(target: Dict[str, Any], source: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge `source` into `target` in place; nested mappings merge recursively."""
    for key, value in source.items():
        if isinstance(value, Mapping):
            if not isinstance(target.get(key), dict):
                target[key] = {}
            deep_merge(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
    return target


def font_size_value(size: str) -> str:
    return FONT_SIZES.get(size, FONT_SIZES["medium"])


Validator = Callable[[str, Any], Tuple[bool, str]]


def validate_general(key: str, value: Any) -> Tuple[bool, str]:
    if key == "language":
        return value in LANGUAGES, "Unsupported language"
    return True, ""


def validate_interface(key: str, value: Any) -> Tuple[bool, str]:
    if key == "theme":
        return value in THEME_CYCLE, "Invalid theme"
    if key == "fontSize":
        return value in tuple(FONT_SIZES), "Invalid font size"
    return True, ""


VALIDATORS: Dict[str, Validator] = {
    "general": validate_general,
    "interface": validate_interface,
}


@dataclass
class ConfigChange:
    timestamp: int
    section: str
    key: str
    value: Any

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "section": self.section, "key": self.key, "value": self.value}


class UserConfigManager:
    """Holds the active user configuration and persists edits to it.

    `update()` validates the value for its section, records the change in a
    bounded newest-first history, saves, and emits `config:changed` with the
    `{section, key, value}` of the change. Validation and save failures are
    reported as `config:error` events rather than raised.
    """

    def __init__(
        self,
        store: ExpiringStore,
        events: Optional[EventBus] = None,
        defaults: Optional[Mapping[str, Any]] = None,
        validators: Optional[Mapping[str, Validator]] = None,
        storage_key: str = USER_CONFIG_KEY,
        max_history: int = MAX_HISTORY,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.store = store
        self.events = events
        self.defaults = copy.deepcopy(dict(defaults if defaults is not None else DEFAULT_USER_CONFIG))
        self.validators = dict(VALIDATORS if validators is None else validators)
        self.storage_key = storage_key
        self.max_history = max_history
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._active: Dict[str, Any] = copy.deepcopy(self.defaults)
        self._history: List[ConfigChange] = []

    @property
    def config(self) -> Dict[str, Any]:
        return copy.deepcopy(self._active)

    @property
    def history(self) -> List[ConfigChange]:
        return list(self._history)

    def _emit(self, event_name: str, data: Any) -> None:
        if self.events is not None:
            self.events.emit(event_name, data)

    def load(self) -> Dict[str, Any]:
        stored = self.store.get(self.storage_key)
        user: Mapping[str, Any] = {}
        if isinstance(stored, dict):
            user = stored
        elif stored is not None:
            logger.warning("Ignoring malformed user configuration: %r", stored)
            self._emit(CONFIG_ERROR, {"type": "load", "message": "Stored configuration is not a mapping"})
        self._active = deep_merge(copy.deepcopy(self.defaults), user)
        self._emit(CONFIG_CHANGED, self.config)
        return self.config

    def get(self, section: str, key: Optional[str] = None, default: Any = None) -> Any:
        values = self._active.get(section)
        if key is None:
            return copy.deepcopy(values) if values is not None else default
        if not isinstance(values, dict):
            return default
        return copy.deepcopy(values.get(key, default))

    def update(self, section: str, key: str, value: Any) -> bool:
        """Set `section.key` to `value`; raise KeyError for an unknown section."""
        if not isinstance(self._active.get(section), dict):
            raise KeyError(f"invalid configuration section: {section}")

        validator = self.validators.get(section)
        if validator is not None:
            valid, message = validator(key, value)
            if not valid:
                logger.warning("Rejected %s.%s=%r: %s", section, key, value, message)
                self._emit(CONFIG_ERROR, {"type": "validation", "message": message})
                return False

        self._active[section][key] = copy.deepcopy(value)
        self._history.insert(0, ConfigChange(self._clock(), section, key, copy.deepcopy(value)))
        del self._history[self.max_history:]
        self.save()
        self._emit(CONFIG_CHANGED, {"section": section, "key": key, "value": value})
        return True

    def save(self) -> bool:
        to_save = {k: v for k, v in self._active.items() if k not in UNSAVED_SECTIONS}
        ok = self.store.set(self.storage_key, to_save)
        if not ok:
            logger.error("Failed to persist user configuration")
            self._emit(CONFIG_ERROR, {"type": "save", "message": "Could not save the configuration"})
        return ok

    def font_size(self) -> str:
        return font_size_value(self._active.get("interface", {}).get("fontSize", "medium"))
