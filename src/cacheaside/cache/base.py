"""Abstract cache-store interface consumed by the request pipeline.

A cache store maps string keys to opaque string values with a per-entry
time-to-live. Serialisation is the caller's job; stores never inspect
values. Implementations raise :class:`~cacheaside.exceptions.CacheStoreError`
for backend failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from cacheaside.exceptions import ConfigurationError


class CacheStore(ABC):
    """Base class for key-value stores with expiry.

    Args:
        key_prefix: Namespace prepended to every key before it reaches the
            backend.
    """

    def __init__(self, key_prefix: str = "") -> None:
        self._key_prefix = key_prefix

    @property
    def key_prefix(self) -> str:
        return self._key_prefix

    @abstractmethod
    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store *value* under *key* for *ttl_seconds* seconds."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the value stored under *key*, or ``None`` if absent or expired."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove *key*. Missing keys are ignored."""

    async def close(self) -> None:
        """Release backend resources."""

    def _full_key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    @staticmethod
    def _check_ttl(ttl_seconds: int) -> None:
        if isinstance(ttl_seconds, bool) or not isinstance(ttl_seconds, int) or ttl_seconds < 1:
            raise ConfigurationError(
                f"ttl_seconds must be a positive integer, got {ttl_seconds!r}"
            )
