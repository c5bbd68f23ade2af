from .config import DashboardConfig, FavoritesConfig, YamlConfigStore, DEFAULT_CONFIG_PATH

__all__ = ["DashboardConfig", "FavoritesConfig", "YamlConfigStore", "DEFAULT_CONFIG_PATH"]
