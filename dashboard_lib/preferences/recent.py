"""Most recently opened services, newest first."""
from __future__ import annotations

import logging
from typing import List, Optional

from dashboard_lib.catalog import CatalogService, Service
from dashboard_lib.events import EventBus, RECENT_UPDATED
from dashboard_lib.storage import ExpiringStore

logger = logging.getLogger(__name__)

RECENT_KEY = "mserv_recent_services"
MAX_RECENT_SERVICES = 5


class RecentServices:
    def __init__(
        self,
        store: ExpiringStore,
        catalog: CatalogService,
        events: Optional[EventBus] = None,
        max_recent: int = MAX_RECENT_SERVICES,
        storage_key: str = RECENT_KEY,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.events = events
        self.max_recent = max_recent
        self.storage_key = storage_key

    def ids(self) -> List[str]:
        stored = self.store.get(self.storage_key, [])
        if not isinstance(stored, list):
            return []
        return [sid for sid in stored if isinstance(sid, str)]

    def record(self, service_id: str) -> List[str]:
        if self.catalog.get_service_by_id(service_id) is None:
            logger.debug("Not recording unknown service %s", service_id)
            return self.ids()
        recent = [service_id] + [sid for sid in self.ids() if sid != service_id]
        recent = recent[: self.max_recent]
        self.store.set(self.storage_key, recent)
        if self.events is not None:
            self.events.emit(RECENT_UPDATED, list(recent))
        return recent

    def services(self) -> List[Service]:
        return [s for s in (self.catalog.get_service_by_id(sid) for sid in self.ids()) if s is not None]

    def clear(self) -> None:
        self.store.remove(self.storage_key)
