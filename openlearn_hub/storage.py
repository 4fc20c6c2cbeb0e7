"""Persistent string key/value stores backing the client-side cache."""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the underlying store cannot be read or written."""


class StorageQuotaExceeded(StorageError):
    """Raised when a write would push the store past its size quota."""


class KeyValueStorage(ABC):
    """Minimal local-storage style interface: string keys, string values."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...

    @abstractmethod
    def keys(self) -> List[str]:
        ...


class MemoryStorage(KeyValueStorage):
    """Process-local store with an optional byte quota."""

    def __init__(self, quota_bytes: Optional[int] = None) -> None:
        self._items: Dict[str, str] = {}
        self._quota_bytes = quota_bytes
        self._lock = threading.RLock()

    def _size_with(self, key: str, value: str) -> int:
        total = 0
        for existing_key, existing_value in self._items.items():
            if existing_key == key:
                continue
            total += len(existing_key) + len(existing_value)
        return total + len(key) + len(value)

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            if self._quota_bytes is not None and self._size_with(key, value) > self._quota_bytes:
                raise StorageQuotaExceeded(f"Writing '{key}' exceeds the {self._quota_bytes} byte quota.")
            self._items[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._items)


class JsonFileStorage(KeyValueStorage):
    """Store persisted as a single JSON object on disk."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def _load_unlocked(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except ValueError:
            logger.warning("Discarding unreadable storage file %s", self._path)
            return {}
        except OSError as exc:
            raise StorageError(f"Could not read {self._path}: {exc}") from exc
        if not isinstance(raw, dict):
            logger.warning("Storage file %s does not contain an object; ignoring it", self._path)
            return {}
        return {str(key): value for key, value in raw.items() if isinstance(value, str)}

    def _write_unlocked(self, items: Dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("w", encoding="utf-8") as handle:
                json.dump(items, handle, indent=2)
        except OSError as exc:
            raise StorageError(f"Could not write {self._path}: {exc}") from exc

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load_unlocked().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self._load_unlocked()
            items[key] = value
            self._write_unlocked(items)

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self._load_unlocked()
            if key not in items:
                return
            del items[key]
            self._write_unlocked(items)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._load_unlocked())


__all__ = [
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "StorageError",
    "StorageQuotaExceeded",
]
