from .config import settings, get_settings, Settings
from .cache import TTLCache, AppCaches

__all__ = ["settings", "get_settings", "Settings", "TTLCache", "AppCaches"]
