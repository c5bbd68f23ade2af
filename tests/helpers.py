from typing import Any, List, Optional, Tuple
from starlette.testclient import TestClient

from dashboard_lib.catalog import CatalogService
from dashboard_lib.services.container import ServiceContainer

T0 = 1_700_000_000_000


class FakeClock:
    """Millisecond clock the tests advance by hand."""

    def __init__(self, start: int = T0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingNotifier:
    def __init__(self):
        self.calls: List[Tuple[str, Optional[str]]] = []

    def notify(self, message: str, key: Optional[str] = None) -> None:
        self.calls.append((message, key))


class BrokenBackend:
    """Backend whose every operation fails as if storage were unavailable."""

    def save(self, key, value):
        raise RuntimeError("storage disabled")

    def load(self, key):
        raise RuntimeError("storage disabled")

    def delete(self, key):
        raise RuntimeError("storage disabled")

    def list_keys(self):
        raise RuntimeError("storage disabled")

    def exists(self, key):
        raise RuntimeError("storage disabled")

    def total_size(self):
        raise RuntimeError("storage disabled")

    def configure(self, **options):
        pass


def make_catalog() -> CatalogService:
    return CatalogService.from_dict({
        'categories': [
            {'id': 'media', 'name': 'Media', 'services': ['jellyfin', 'navidrome']},
            {'id': 'monitoring', 'name': 'Monitoring'},
        ],
        'services': [
            {'id': 'jellyfin', 'name': 'Jellyfin', 'description': 'Media server', 'category': 'media', 'url': 'https://jellyfin.example'},
            {'id': 'navidrome', 'name': 'Navidrome', 'description': 'Music streaming server', 'category': 'media', 'url': 'https://music.example'},
            {'id': 'portainer', 'name': 'Portainer', 'description': 'Docker management', 'category': 'monitoring', 'url': 'https://portainer.example'},
            {'id': 'dozzle', 'name': 'Dozzle', 'description': 'Container log viewer', 'category': 'monitoring', 'url': 'https://logs.example'},
            {'id': 'radarr', 'name': 'Radarr', 'description': 'Movie management', 'category': 'management', 'url': 'https://radarr.example'},
        ],
    })


def register_service_on_client(client: TestClient, name: str, instance: Any) -> None:
    """Register a service instance into the app's DI container for tests.

    Usage in tests:
        from tests.helpers import register_service_on_client
        register_service_on_client(client, 'catalog_service', make_catalog())
    """
    container = getattr(client.app.state, 'container', None)
    if container is None:
        container = ServiceContainer()
        client.app.state.container = container

    container.register_singleton(name, instance)
