"""Dashboard configuration and its YAML persistence."""
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List
import logging
import os

import yaml

from dashboard_lib.preferences.favorites import DEFAULT_FAVORITES, MAX_FAVORITES
from dashboard_lib.preferences.theme import DEFAULT_THEME
from dashboard_lib.storage.config import StoreConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("data/config/dashboard.yml")


@dataclass
class FavoritesConfig:
    max_favorites: int = MAX_FAVORITES
    default_favorites: List[str] = field(default_factory=lambda: list(DEFAULT_FAVORITES))


@dataclass
class DashboardConfig:
    app_name: str = "mserv.wtf Dashboard"
    version: str = "2.1.0"
    log_level: str = "WARNING"
    services_file: str = "data/config/services.yml"
    storage_file: str = "data/storage.json"
    www_dir: str = "www"
    default_theme: str = DEFAULT_THEME
    store: StoreConfig = field(default_factory=StoreConfig)
    favorites: FavoritesConfig = field(default_factory=FavoritesConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DashboardConfig":
        if not isinstance(data, dict):
            raise ValueError("invalid config format: expected mapping")
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__ and k not in ("store", "favorites")}
        fav = data.get("favorites") or {}
        return cls(
            **known,
            store=StoreConfig.from_dict(data.get("store")),
            favorites=FavoritesConfig(
                max_favorites=int(fav.get("max_favorites", MAX_FAVORITES)),
                default_favorites=list(fav.get("default_favorites", DEFAULT_FAVORITES)),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["store"] = self.store.to_dict()
        return d


class YamlConfigStore:
    """Serialize/deserialize DashboardConfig to a YAML file.

    Writes are atomic: the YAML text goes to a temporary file which is then
    renamed over the target.
    """

    def __init__(self, path: str | Path = DEFAULT_CONFIG_PATH):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, cfg: DashboardConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = yaml.safe_dump(cfg.to_dict(), sort_keys=False)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(self.path)

    def load(self) -> DashboardConfig:
        """Load the config; raise KeyError if missing, ValueError if malformed."""
        if not self.path.exists():
            raise KeyError(str(self.path))
        with self.path.open("r", encoding="utf-8") as f:
            try:
                data: Any = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError("invalid config format: parse error") from e
        if data is None:
            data = {}
        return DashboardConfig.from_dict(data)

    def load_or_default(self) -> DashboardConfig:
        try:
            return self.load()
        except KeyError:
            logger.info("No configuration at %s; using defaults", self.path)
            return DashboardConfig()
