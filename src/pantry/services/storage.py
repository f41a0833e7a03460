"""Key-value storage backends and the item list store adapter."""

from __future__ import annotations

from abc import ABC, abstractmethod
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

from ..errors import CorruptDataError
from ..utils.file_io import read_text_if_exists, write_text_atomic
from .settings import DEFAULT_STORAGE_KEY, default_storage_path

__all__ = [
    "StorageBackend",
    "MemoryStorage",
    "JsonFileStorage",
    "ItemListStore",
]

LOGGER = logging.getLogger(__name__)


class StorageBackend(ABC):
    """Interface for a durable string key-value store."""

    name: str = "unknown"

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the value stored under ``key`` or ``None`` when absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``. Removing an absent key is a no-op."""

    def has_item(self, key: str) -> bool:
        return self.get_item(key) is not None


class MemoryStorage(StorageBackend):
    """Volatile backend used by tests and headless sessions."""

    name = "memory"

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStorage(StorageBackend):
    """Backend persisting all keys in a single JSON object on disk.

    Every write rewrites the whole file through a temporary sibling so a
    crash never leaves a half-written payload behind.
    """

    name = "json-file"

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path).expanduser() if path else default_storage_path()

    @property
    def path(self) -> Path:
        """Return the file backing this storage."""

        return self._path

    def get_item(self, key: str) -> str | None:
        value = self._read_payload().get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise CorruptDataError(
                message=f"Storage key {key!r} does not hold a string value",
                details={"path": str(self._path), "key": key},
            )
        return value

    def set_item(self, key: str, value: str) -> None:
        payload = self._read_payload()
        payload[key] = value
        self._write_payload(payload)

    def remove_item(self, key: str) -> None:
        payload = self._read_payload()
        if key not in payload:
            return
        del payload[key]
        self._write_payload(payload)

    def _read_payload(self) -> Dict[str, Any]:
        try:
            text = read_text_if_exists(self._path)
        except UnicodeDecodeError as exc:
            LOGGER.warning("Storage file %s is not UTF-8 text: %s", self._path, exc)
            raise CorruptDataError(
                message="Storage file is not UTF-8 text",
                details={"path": str(self._path), "reason": str(exc)},
            ) from exc
        if text is None:
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            LOGGER.warning("Storage file %s is not valid JSON: %s", self._path, exc)
            raise CorruptDataError(
                message="Storage file is not valid JSON",
                details={"path": str(self._path), "reason": str(exc)},
            ) from exc
        if not isinstance(data, Mapping):
            LOGGER.warning("Storage file %s does not contain an object", self._path)
            raise CorruptDataError(
                message="Storage file does not contain a key-value object",
                details={"path": str(self._path)},
            )
        return dict(data)

    def _write_payload(self, payload: Mapping[str, Any]) -> None:
        write_text_atomic(
            self._path, json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)
        )


class ItemListStore:
    """Persistence adapter for the item list stored under one key."""

    def __init__(self, backend: StorageBackend, *, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._backend = backend
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    def read_list(self) -> list[str] | None:
        """Return the stored list, or ``None`` when no record exists.

        Raises:
            CorruptDataError: If the record is not a JSON array of strings.
        """

        raw = self._backend.get_item(self._key)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptDataError(
                message="Stored item list is not valid JSON",
                details={"key": self._key, "reason": str(exc)},
            ) from exc
        if not isinstance(data, list):
            raise CorruptDataError(
                message="Stored item list is not an array",
                details={"key": self._key, "type": type(data).__name__},
            )
        invalid = [index for index, entry in enumerate(data) if not isinstance(entry, str)]
        if invalid:
            raise CorruptDataError(
                message="Stored item list contains non-string entries",
                details={"key": self._key, "indexes": invalid},
            )
        return list(data)

    def write_list(self, items: Iterable[str]) -> None:
        """Replace the stored record with ``items``."""

        payload = list(items)
        self._backend.set_item(self._key, json.dumps(payload, ensure_ascii=False))
        LOGGER.debug("ItemListStore.write_list: key=%s, count=%d", self._key, len(payload))

    def delete_list(self) -> None:
        """Remove the record entirely."""

        self._backend.remove_item(self._key)
        LOGGER.debug("ItemListStore.delete_list: key=%s", self._key)

    def exists(self) -> bool:
        return self._backend.has_item(self._key)
