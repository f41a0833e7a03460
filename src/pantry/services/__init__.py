"""Service layer helpers (settings, storage)."""

from .settings import Settings, SettingsStore
from .storage import ItemListStore, JsonFileStorage, MemoryStorage, StorageBackend

__all__ = [
    "Settings",
    "SettingsStore",
    "ItemListStore",
    "JsonFileStorage",
    "MemoryStorage",
    "StorageBackend",
]
