"""Multi-tier caching: factory, manager, and backend implementations."""

from __future__ import annotations

from ragcore.cache.manager import CacheManager
from ragcore.cache.memoize import memoize
from ragcore.cache.memory import MemoryCache
from ragcore.cache.models import CacheCategory, CacheEntry, CacheStats, CacheWriteResult, WarmUpEntry
from ragcore.cache.protocols import IRemoteCache
from ragcore.core.config import AppSettings, CacheConfig

__all__ = [
    "create_cache_manager",
    "CacheCategory",
    "CacheEntry",
    "CacheManager",
    "CacheStats",
    "CacheWriteResult",
    "IRemoteCache",
    "MemoryCache",
    "WarmUpEntry",
    "memoize",
]


def create_cache_manager(settings: AppSettings | CacheConfig | None = None) -> CacheManager:
    """Create a cache manager from settings.

    Args:
        settings: An ``AppSettings`` or ``CacheConfig`` instance. If None,
            returns a memory-only manager with defaults.
    """
    if settings is None:
        config = CacheConfig()
    elif isinstance(settings, AppSettings):
        config = settings.cache
    else:
        config = settings

    remote: IRemoteCache | None = None
    if config.redis_enabled and config.redis_url:
        from ragcore.cache.redis import RedisCache

        remote = RedisCache(url=config.redis_url, key_prefix=config.key_prefix)

    return CacheManager(config, remote=remote)
