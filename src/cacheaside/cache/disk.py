"""Disk-backed cache store built on :mod:`diskcache`.

Entries live in a :class:`diskcache.Cache` directory on the local filesystem
and expire after the TTL given at write time. ``diskcache`` is a blocking
library, so every call runs in a worker thread via :func:`asyncio.to_thread`
to keep the event loop free.

Suited to CLI use and single-host deployments; use
:class:`~cacheaside.cache.redis_store.RedisCacheStore` when several
processes or hosts must share entries.
"""

from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path
from typing import Any, Optional

import diskcache

from cacheaside.cache.base import CacheStore
from cacheaside.exceptions import CacheStoreError


class DiskCacheStore(CacheStore):
    """Cache store persisting entries in a local directory.

    Args:
        directory: Root directory for the cache. A ``responses/``
            subdirectory is created inside it.
        key_prefix: Namespace prepended to every key.

    Example::

        store = DiskCacheStore("/tmp/api-cache")
        await store.set_with_expiry("GET:/users:{}", '[{"id": 1}]', 300)
        hit = await store.get("GET:/users:{}")
    """

    def __init__(self, directory: str | Path, key_prefix: str = "") -> None:
        super().__init__(key_prefix)
        self._directory = Path(directory) / "responses"
        self._cache: Optional[diskcache.Cache] = diskcache.Cache(str(self._directory))

    @property
    def directory(self) -> Path:
        return self._directory

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        self._check_ttl(ttl_seconds)
        await self._call("set", self._full_key(key), value, expire=ttl_seconds)

    async def get(self, key: str) -> Optional[str]:
        return await self._call("get", self._full_key(key))

    async def delete(self, key: str) -> None:
        await self._call("delete", self._full_key(key))

    async def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache`."""
        if self._cache is not None:
            self._cache.close()
            self._cache = None

    async def _call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        if self._cache is None:
            raise CacheStoreError(f"Disk cache at {self._directory} is closed")
        method = getattr(self._cache, name)
        try:
            return await asyncio.to_thread(method, *args, **kwargs)
        except (OSError, sqlite3.Error, diskcache.Timeout) as exc:
            raise CacheStoreError(f"Disk cache {name} failed: {exc}") from exc
