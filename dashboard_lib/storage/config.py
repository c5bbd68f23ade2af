from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Tuple

DEFAULT_STORAGE_LIMIT = 5 * 1024 * 1024
DEFAULT_APP_PREFIX = "mserv_"
DEFAULT_RESERVED_PREFIXES: Tuple[str, ...] = ("mserv_", "dashboard_")
DEFAULT_EXPIRATION_DAYS = 30
DEFAULT_EVICTION_BATCH_SIZE = 5
DEFAULT_NOTIFICATION_TIMEOUT = 5.0


@dataclass
class StoreConfig:
    """Tunables for an `ExpiringStore` instance."""

    storage_limit: int = DEFAULT_STORAGE_LIMIT
    app_prefix: str = DEFAULT_APP_PREFIX
    reserved_prefixes: Tuple[str, ...] = field(default_factory=lambda: DEFAULT_RESERVED_PREFIXES)
    default_expiration_days: float = DEFAULT_EXPIRATION_DAYS
    eviction_batch_size: int = DEFAULT_EVICTION_BATCH_SIZE
    notification_timeout: float = DEFAULT_NOTIFICATION_TIMEOUT

    def __post_init__(self) -> None:
        self.reserved_prefixes = tuple(self.reserved_prefixes)
        if self.storage_limit <= 0:
            raise ValueError("storage_limit must be positive")
        if self.eviction_batch_size < 0:
            raise ValueError("eviction_batch_size must not be negative")
        if self.default_expiration_days < 0:
            raise ValueError("default_expiration_days must not be negative")
        if self.notification_timeout < 0:
            raise ValueError("notification_timeout must not be negative")

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "StoreConfig":
        data = data or {}
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        if "reserved_prefixes" in known:
            known["reserved_prefixes"] = tuple(known["reserved_prefixes"] or ())
        return cls(**known)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["reserved_prefixes"] = list(self.reserved_prefixes)
        return d
