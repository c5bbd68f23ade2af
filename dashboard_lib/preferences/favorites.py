"""Favorites list persisted through the expiring store."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from dashboard_lib.catalog import CatalogService
from dashboard_lib.events import EventBus, FAVORITES_UPDATED
from dashboard_lib.storage import ExpiringStore

logger = logging.getLogger(__name__)

FAVORITES_KEY = "mserv_favorites"
MAX_FAVORITES = 10
DEFAULT_FAVORITES = ("jellyfin", "portainer", "radarr", "sonarr", "vaultwarden")


class FavoritesManager:
    """Keeps the ordered list of favorite service ids.

    Ids unknown to the catalog are dropped on load, the list never grows
    beyond `max_favorites`, and every change is persisted and announced on
    the event bus as `favorites:updated`.
    """

    def __init__(
        self,
        store: ExpiringStore,
        catalog: CatalogService,
        events: Optional[EventBus] = None,
        max_favorites: int = MAX_FAVORITES,
        default_favorites: Sequence[str] = DEFAULT_FAVORITES,
        storage_key: str = FAVORITES_KEY,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.events = events
        self.max_favorites = max_favorites
        self.default_favorites = list(default_favorites)
        self.storage_key = storage_key
        self._favorites: List[str] = []

    @property
    def favorites(self) -> List[str]:
        return list(self._favorites)

    def is_valid_favorite(self, service_id: str) -> bool:
        return self.catalog.get_service_by_id(service_id) is not None

    def load(self) -> List[str]:
        stored = self.store.get(self.storage_key)
        if isinstance(stored, list):
            candidates = [sid for sid in stored if isinstance(sid, str)]
        else:
            if stored is not None:
                logger.warning("Ignoring malformed favorites entry: %r", stored)
            candidates = self.default_favorites

        valid: List[str] = []
        for sid in candidates:
            if self.is_valid_favorite(sid) and sid not in valid:
                valid.append(sid)
        if len(valid) > self.max_favorites:
            logger.warning("Trimming favorites to the first %d entries", self.max_favorites)
            valid = valid[: self.max_favorites]
        self._favorites = valid
        self.save()
        return self.favorites

    def save(self) -> bool:
        ok = self.store.set(self.storage_key, self._favorites)
        if not ok:
            logger.error("Failed to persist favorites")
        if self.events is not None:
            self.events.emit(FAVORITES_UPDATED, self.favorites)
        return ok

    def add(self, service_id: str) -> bool:
        if service_id in self._favorites:
            return True
        if not self.is_valid_favorite(service_id):
            logger.warning("Cannot favorite unknown service %s", service_id)
            return False
        if len(self._favorites) >= self.max_favorites:
            logger.warning("Limit of %d favorites reached", self.max_favorites)
            return False
        self._favorites.append(service_id)
        self.save()
        return True

    def remove(self, service_id: str) -> bool:
        if service_id not in self._favorites:
            return False
        self._favorites = [sid for sid in self._favorites if sid != service_id]
        self.save()
        return True

    def toggle(self, service_id: str) -> bool:
        """Flip membership of `service_id`; return whether it is now a favorite."""
        if service_id in self._favorites:
            self.remove(service_id)
            return False
        return self.add(service_id)

    def services(self) -> list:
        return [s for s in (self.catalog.get_service_by_id(sid) for sid in self._favorites) if s is not None]
