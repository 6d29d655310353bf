"""In-process cache store with expiry, for tests and single-process use."""

from __future__ import annotations

import time
from typing import Callable, Optional

from cacheaside.cache.base import CacheStore


class MemoryCacheStore(CacheStore):
    """Dict-backed store. Expired entries are dropped lazily on read.

    Args:
        key_prefix: Namespace prepended to every key.
        clock: Monotonic clock returning seconds; replaceable in tests.
    """

    def __init__(
        self,
        key_prefix: str = "",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(key_prefix)
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        self._check_ttl(ttl_seconds)
        self._entries[self._full_key(key)] = (value, self._clock() + ttl_seconds)

    async def get(self, key: str) -> Optional[str]:
        full_key = self._full_key(key)
        entry = self._entries.get(full_key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[full_key]
            return None
        return value

    async def delete(self, key: str) -> None:
        self._entries.pop(self._full_key(key), None)

    async def close(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for _, expires_at in self._entries.values() if expires_at > now)
