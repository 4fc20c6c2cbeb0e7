"""Expiring cache for curriculum payloads on top of a key/value store."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel

from ..storage import KeyValueStorage, StorageError
from ..telemetry import record_cache_lookup

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "ohl_cache_"
DEFAULT_TTL_MS = 10 * 60 * 1000

CURRICULUM_NAMESPACE = "curriculum"
USER_CURRICULA_NAMESPACE = "user_curricula"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _require_part(value: str, label: str) -> str:
    normalized = str(value).strip()
    if not normalized:
        raise ValueError(f"Cache key {label} cannot be empty.")
    return normalized


@dataclass(frozen=True)
class CacheKey:
    namespace: str
    identifier: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "namespace", _require_part(self.namespace, "namespace"))
        object.__setattr__(self, "identifier", _require_part(self.identifier, "identifier"))

    def __str__(self) -> str:
        return f"{self.namespace}_{self.identifier}"


def curriculum_key(curriculum_id: str) -> CacheKey:
    return CacheKey(CURRICULUM_NAMESPACE, curriculum_id)


def user_curricula_key(user_id: str) -> CacheKey:
    return CacheKey(USER_CURRICULA_NAMESPACE, user_id)


def _jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(data, (list, tuple)):
        return [_jsonable(item) for item in data]
    return data


class TTLCache:
    """Read-through cache whose entries expire ``ttl_ms`` after being saved.

    Entries are stored as ``{"data": ..., "timestamp": epoch_ms}`` JSON under
    ``<prefix><namespace>_<identifier>``. Expired or unreadable entries are
    purged on read. Writes are full overwrites; the last writer wins.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        prefix: str = DEFAULT_PREFIX,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._storage = storage
        self._prefix = prefix
        self._ttl_ms = ttl_ms
        self._clock = clock or _now_ms

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    def storage_key(self, key: Union[CacheKey, str]) -> str:
        return f"{self._prefix}{key}"

    def save(self, key: Union[CacheKey, str], data: Any) -> None:
        try:
            serialized = json.dumps({"data": _jsonable(data), "timestamp": self._clock()})
            self._storage.set_item(self.storage_key(key), serialized)
        except (StorageError, TypeError, ValueError) as exc:
            logger.warning("Failed to save %s to cache: %s", key, exc)

    def get(self, key: Union[CacheKey, str]) -> Optional[Any]:
        storage_key = self.storage_key(key)
        try:
            raw = self._storage.get_item(storage_key)
        except StorageError as exc:
            logger.warning("Failed to read %s from cache: %s", key, exc)
            return None
        if raw is None:
            record_cache_lookup("miss", key)
            return None

        try:
            entry = json.loads(raw)
            timestamp = entry["timestamp"]
            data = entry["data"]
            age = self._clock() - int(timestamp)
        except (ValueError, TypeError, KeyError):
            logger.debug("Dropping unreadable cache entry %s", storage_key)
            self._remove(storage_key)
            record_cache_lookup("miss", key)
            return None

        if age > self._ttl_ms:
            self._remove(storage_key)
            record_cache_lookup("expired", key)
            return None

        record_cache_lookup("hit", key)
        return data

    def invalidate(self, key: Union[CacheKey, str]) -> None:
        self._remove(self.storage_key(key))

    def clear(self) -> None:
        try:
            keys = [key for key in self._storage.keys() if key.startswith(self._prefix)]
        except StorageError as exc:
            logger.warning("Failed to list cache entries: %s", exc)
            return
        for key in keys:
            self._remove(key)

    def _remove(self, storage_key: str) -> None:
        try:
            self._storage.remove_item(storage_key)
        except StorageError as exc:
            logger.warning("Failed to invalidate cache entry %s: %s", storage_key, exc)


__all__ = [
    "CURRICULUM_NAMESPACE",
    "CacheKey",
    "DEFAULT_PREFIX",
    "DEFAULT_TTL_MS",
    "TTLCache",
    "USER_CURRICULA_NAMESPACE",
    "curriculum_key",
    "user_curricula_key",
]
