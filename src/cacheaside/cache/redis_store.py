"""Redis-backed cache store for distributed deployments.

Uses the asyncio client from the ``redis`` package. Values are stored with
``SETEX`` so Redis expires them on its own; the pipeline never deletes
response entries.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from cacheaside.cache.base import CacheStore
from cacheaside.exceptions import CacheStoreError

logger = logging.getLogger(__name__)


class RedisCacheStore(CacheStore):
    """Cache store talking to a Redis server.

    Args:
        url: Redis connection URL, e.g. ``redis://localhost:6379/0``.
        key_prefix: Namespace prepended to every key.
        client: Pre-built ``redis.asyncio.Redis`` client. When given, the
            store does not own it and :meth:`close` leaves it open.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        key_prefix: str = "",
        client: Optional[Any] = None,
    ) -> None:
        super().__init__(key_prefix)
        self._owns_client = client is None
        if client is None:
            client = aioredis.Redis.from_url(url, decode_responses=True)
        self._client = client

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        self._check_ttl(ttl_seconds)
        try:
            await self._client.setex(self._full_key(key), ttl_seconds, value)
        except RedisError as exc:
            raise CacheStoreError(f"Redis SETEX failed for {key!r}: {exc}") from exc

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self._client.get(self._full_key(key))
            if isinstance(value, bytes):
                value = value.decode("utf-8")
        except RedisError as exc:
            raise CacheStoreError(f"Redis GET failed for {key!r}: {exc}") from exc
        except UnicodeDecodeError as exc:
            # decode_responses=True raises this from inside the client as well
            raise CacheStoreError(f"Redis value for {key!r} is not UTF-8: {exc}") from exc
        return value

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(self._full_key(key))
        except RedisError as exc:
            raise CacheStoreError(f"Redis DEL failed for {key!r}: {exc}") from exc

    async def close(self) -> None:
        """Close the Redis connection pool if this store created it."""
        if not self._owns_client:
            return
        try:
            await self._client.aclose()
        except RedisError as exc:
            logger.warning("Error closing Redis connection: %s", exc)
