"""Build a cache store from :class:`~cacheaside.models.CacheStoreConfig`."""

from __future__ import annotations

from cacheaside.cache.base import CacheStore
from cacheaside.models import CacheBackend, CacheStoreConfig


def create_store(config: CacheStoreConfig) -> CacheStore:
    """Instantiate the backend selected by ``config.backend``.

    The disk backend falls back to :func:`~cacheaside.config.get_cache_dir`
    when no directory is configured.
    """
    if config.backend == CacheBackend.MEMORY:
        from cacheaside.cache.memory import MemoryCacheStore

        return MemoryCacheStore(key_prefix=config.key_prefix)

    if config.backend == CacheBackend.DISK:
        from cacheaside.cache.disk import DiskCacheStore

        directory = config.directory
        if directory is None:
            from cacheaside.config import get_cache_dir

            directory = get_cache_dir()
        return DiskCacheStore(directory, key_prefix=config.key_prefix)

    from cacheaside.cache.redis_store import RedisCacheStore

    return RedisCacheStore(config.redis_url(), key_prefix=config.key_prefix)
