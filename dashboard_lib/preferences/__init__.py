from .favorites import FavoritesManager
from .layouts import Layout, LayoutManager, LayoutSection
from .recent import RecentServices
from .theme import ThemeManager
from .user_config import UserConfigManager

__all__ = [
    "FavoritesManager",
    "Layout",
    "LayoutManager",
    "LayoutSection",
    "RecentServices",
    "ThemeManager",
    "UserConfigManager",
]
