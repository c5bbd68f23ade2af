"""Theme preference: light, dark, or follow the system setting."""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Set

from dashboard_lib.events import EventBus, THEME_CHANGED
from dashboard_lib.storage import ExpiringStore

logger = logging.getLogger(__name__)

THEME_KEY = "mserv_theme_preference"
DEFAULT_THEME = "dark"
THEME_CYCLE = ("light", "dark", "system")

THEMES: Dict[str, Dict[str, str]] = {
    "light": {
        "bg-primary": "#f5f5f7",
        "bg-secondary": "#ffffff",
        "bg-tertiary": "#f0f0f2",
        "text-primary": "#1d1d1f",
        "text-secondary": "#333333",
        "accent-color": "#7371fc",
    },
    "dark": {
        "bg-primary": "#121212",
        "bg-secondary": "#1a1a1a",
        "bg-tertiary": "#232323",
        "text-primary": "#ffffff",
        "text-secondary": "#e0e0e0",
        "accent-color": "#7371fc",
    },
}

ThemeListener = Callable[[str], None]


class ThemeManager:
    def __init__(
        self,
        store: ExpiringStore,
        events: Optional[EventBus] = None,
        default_theme: str = DEFAULT_THEME,
        prefers_dark: Optional[Callable[[], bool]] = None,
        themes: Optional[Dict[str, Dict[str, str]]] = None,
        storage_key: str = THEME_KEY,
    ) -> None:
        self.store = store
        self.events = events
        self.default_theme = default_theme
        self.prefers_dark = prefers_dark or (lambda: True)
        self.themes = themes or THEMES
        self.storage_key = storage_key
        self._listeners: Set[ThemeListener] = set()

    def get_current_theme(self) -> str:
        theme = self.store.get(self.storage_key, self.default_theme)
        if theme not in THEME_CYCLE:
            logger.warning("Ignoring unknown stored theme %r", theme)
            return self.default_theme
        return theme

    def resolve(self, theme: str) -> str:
        if theme == "system":
            return "dark" if self.prefers_dark() else "light"
        return theme

    def css_variables(self, theme: str) -> Dict[str, str]:
        palette = self.themes.get(self.resolve(theme), {})
        return {f"--{name}": value for name, value in palette.items()}

    def apply_theme(self, theme: str) -> Dict[str, str]:
        """Persist `theme` and return the CSS variables of its resolved palette.

        The stored preference keeps `system` as chosen; listeners receive
        the resolved `light`/`dark` name.
        """
        if theme not in THEME_CYCLE:
            raise ValueError(f"unknown theme: {theme}")
        resolved = self.resolve(theme)
        if not self.store.set(self.storage_key, theme):
            logger.error("Failed to persist theme preference %s", theme)
        self._notify_listeners(resolved)
        if self.events is not None:
            self.events.emit(THEME_CHANGED, {"theme": theme, "resolved": resolved})
        return self.css_variables(theme)

    def toggle_theme(self) -> str:
        current = self.get_current_theme()
        nxt = THEME_CYCLE[(THEME_CYCLE.index(current) + 1) % len(THEME_CYCLE)]
        self.apply_theme(nxt)
        return nxt

    def reset(self) -> None:
        self.store.remove(self.storage_key)

    def add_theme_listener(self, listener: ThemeListener) -> None:
        self._listeners.add(listener)

    def remove_theme_listener(self, listener: ThemeListener) -> None:
        self._listeners.discard(listener)

    def _notify_listeners(self, theme: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(theme)
            except Exception:
                logger.exception("Theme listener failed")
