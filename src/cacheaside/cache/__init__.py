"""Cache-store backends for cacheaside.

Every backend implements :class:`CacheStore`: string keys, opaque string
values, and a TTL set at write time. :func:`create_store` selects a backend
from the ``cache_store`` section of
:class:`~cacheaside.models.ClientConfig`.

Backends:
    :class:`RedisCacheStore` -- shared Redis server (default).
    :class:`DiskCacheStore` -- local directory via :mod:`diskcache`.
    :class:`MemoryCacheStore` -- in-process dict.
"""

from cacheaside.cache.base import CacheStore
from cacheaside.cache.disk import DiskCacheStore
from cacheaside.cache.factory import create_store
from cacheaside.cache.memory import MemoryCacheStore
from cacheaside.cache.redis_store import RedisCacheStore

__all__ = [
    "CacheStore",
    "DiskCacheStore",
    "MemoryCacheStore",
    "RedisCacheStore",
    "create_store",
]
