from typing import Protocol, Iterable, Optional, runtime_checkable


@runtime_checkable
class StorageProtocol(Protocol):
    """Storage backend protocol mirroring `dashboard_lib.storage.StorageBackend`.

    Implementations should follow the semantics documented on the abstract
    base class in `dashboard_lib.storage.base` (KeyError for missing keys,
    QuotaExceededError when full, thread-safety where required).
    """

    def save(self, key: str, value: str) -> None: ...

    def load(self, key: str) -> str: ...

    def delete(self, key: str) -> None: ...

    def list_keys(self) -> Iterable[str]: ...

    def exists(self, key: str) -> bool: ...

    def total_size(self) -> int: ...

    def configure(self, **options) -> None: ...


@runtime_checkable
class NotifierProtocol(Protocol):
    """Sink for human-readable warnings raised by the store."""

    def notify(self, message: str, key: Optional[str] = None) -> None: ...
