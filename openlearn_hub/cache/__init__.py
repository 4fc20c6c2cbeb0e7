"""Client-side caches for curriculum payloads."""

from ..config import Settings
from ..storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from .ttl_cache import CacheKey, TTLCache, curriculum_key, user_curricula_key


def build_cache(settings: Settings) -> TTLCache:
    storage: KeyValueStorage
    if settings.cache_path:
        storage = JsonFileStorage(settings.cache_path)
    else:
        storage = MemoryStorage()
    return TTLCache(storage, prefix=settings.cache_prefix, ttl_ms=settings.cache_ttl_ms)


__all__ = ["CacheKey", "TTLCache", "build_cache", "curriculum_key", "user_curricula_key"]
