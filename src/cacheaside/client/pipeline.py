"""Cache-aside request pipeline.

:class:`CachingClient` sits between application code and two injected
collaborators: an :class:`~cacheaside.client.transport.HttpTransport` and a
:class:`~cacheaside.cache.CacheStore`.

For ``GET`` with ``use_cache=True`` the flow is:

1. derive the cache key from method, URL and options;
2. on a store hit, decode and return the cached body with no network call;
3. otherwise call the transport through the
   :class:`~cacheaside.retry.RetryExecutor`;
4. on success, write the JSON-encoded body to the store with the default
   TTL and return it.

Every other verb goes straight through the retry executor and never touches
the store. A failed request never writes to the store.

Cache read failures are logged and treated as misses. Cache write failures
are logged and the network body is still returned, unless
``strict_cache_writes`` is set.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from cacheaside.cache import CacheStore, create_store
from cacheaside.client.transport import HttpTransport, HttpxTransport
from cacheaside.exceptions import CacheStoreError, ConfigurationError
from cacheaside.keys import derive_key
from cacheaside.models import ClientConfig, RequestOptions
from cacheaside.retry import RetryExecutor

logger = logging.getLogger(__name__)

Options = RequestOptions | dict[str, Any] | None

_MISS = object()


class CachingClient:
    """HTTP client with retry and optional response caching for GET.

    Args:
        transport: HTTP transport used for every network call.
        store: Cache store for GET responses and the ``*_data`` helpers.
        retry: Retry executor wrapping each transport call. Defaults to
            3 attempts, 1 second apart.
        cache_ttl: TTL in seconds for cached responses and the default for
            :meth:`set_data`.
        strict_cache_writes: Raise :class:`CacheStoreError` when writing a
            response to the store fails instead of logging it.

    Example::

        async with CachingClient.from_config(ClientConfig(base_url=url)) as client:
            users = await client.get("/users", {"params": {"page": 1}}, use_cache=True)
    """

    def __init__(
        self,
        transport: HttpTransport,
        store: CacheStore,
        retry: Optional[RetryExecutor] = None,
        cache_ttl: int = 300,
        strict_cache_writes: bool = False,
    ) -> None:
        if isinstance(cache_ttl, bool) or not isinstance(cache_ttl, int) or cache_ttl < 1:
            raise ConfigurationError(f"cache_ttl must be a positive integer, got {cache_ttl!r}")
        self._transport = transport
        self._store = store
        self._retry = retry or RetryExecutor()
        self._cache_ttl = cache_ttl
        self._strict_cache_writes = strict_cache_writes
        self._owns_collaborators = False

    @classmethod
    def from_config(cls, config: ClientConfig) -> CachingClient:
        """Build a client, its transport and its store from *config*.

        The returned client owns both collaborators and closes them in
        :meth:`close`.
        """
        transport = HttpxTransport(
            base_url=config.base_url,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
        )
        client = cls(
            transport=transport,
            store=create_store(config.cache_store),
            retry=RetryExecutor.from_policy(config.retry_policy()),
            cache_ttl=config.cache_ttl,
            strict_cache_writes=config.strict_cache_writes,
        )
        client._owns_collaborators = True
        return client

    @property
    def cache_ttl(self) -> int:
        return self._cache_ttl

    @property
    def store(self) -> CacheStore:
        return self._store

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> CachingClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the transport and store if this client created them."""
        if not self._owns_collaborators:
            return
        try:
            await self._transport.aclose()
        finally:
            await self._store.close()

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def derive_key(self, method: str, url: str, options: Options = None) -> str:
        """Return the cache key used for ``method url`` with *options*."""
        return derive_key(method, url, options)

    async def get(self, url: str, options: Options = None, use_cache: bool = False) -> Any:
        """Send a GET request, reading and populating the cache when asked.

        Args:
            url: Absolute URL or path relative to the transport's base URL.
            options: Headers, params and other request options.
            use_cache: Consult the store before the network and store the
                body after a successful request. ``False`` leaves the store
                untouched.

        Returns:
            The response body (decoded JSON, text, or ``None``).
        """
        request_options = RequestOptions.coerce(options)
        cache_key = derive_key("GET", url, request_options)

        if use_cache:
            cached = await self._read_cache(cache_key)
            if cached is not _MISS:
                logger.debug("Cache hit for %s", cache_key)
                return cached
            logger.debug("Cache miss for %s", cache_key)

        body = await self._send("GET", url, request_options)

        if use_cache:
            await self._write_cache(cache_key, body)

        return body

    async def post(self, url: str, data: Any = None, options: Options = None) -> Any:
        """Send a POST request. Never cached."""
        return await self.request("POST", url, options, data)

    async def put(self, url: str, data: Any = None, options: Options = None) -> Any:
        """Send a PUT request. Never cached."""
        return await self.request("PUT", url, options, data)

    async def patch(self, url: str, data: Any = None, options: Options = None) -> Any:
        """Send a PATCH request. Never cached."""
        return await self.request("PATCH", url, options, data)

    async def delete(self, url: str, options: Options = None) -> Any:
        """Send a DELETE request. Never cached."""
        return await self.request("DELETE", url, options)

    async def request(
        self,
        method: str,
        url: str,
        options: Options = None,
        data: Any = None,
    ) -> Any:
        """Send any request through the retry executor, bypassing the cache.

        Returns:
            The response body.
        """
        return await self._send(method.upper(), url, RequestOptions.coerce(options), data)

    # ------------------------------------------------------------------ #
    # General-purpose cache API
    # ------------------------------------------------------------------ #

    async def set_data(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """JSON-encode *value* and store it under *key*.

        Args:
            key: Store key.
            value: Any JSON-serialisable value.
            ttl: Seconds to keep the value; defaults to ``cache_ttl``.

        Raises:
            CacheStoreError: If *value* cannot be encoded or the store fails.
        """
        payload = _encode(value)
        await self._store.set_with_expiry(key, payload, self._cache_ttl if ttl is None else ttl)

    async def get_data(self, key: str) -> Any:
        """Return the decoded value stored under *key*, or ``None``."""
        payload = await self._store.get(key)
        if payload is None:
            return None
        return _decode(payload)

    async def delete_data(self, key: str) -> None:
        """Remove *key* from the store."""
        await self._store.delete(key)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _send(
        self,
        method: str,
        url: str,
        options: RequestOptions,
        data: Any = None,
    ) -> Any:
        response = await self._retry.execute(
            lambda: self._transport.request(method, url, options, data)
        )
        return response.body

    async def _read_cache(self, cache_key: str) -> Any:
        """Return the cached body, or ``_MISS`` on a miss or unusable entry."""
        try:
            payload = await self._store.get(cache_key)
        except CacheStoreError as exc:
            logger.warning("Cache read failed for %s, treating as miss: %s", cache_key, exc)
            return _MISS
        if payload is None:
            return _MISS
        try:
            return _decode(payload)
        except CacheStoreError as exc:
            logger.warning("Ignoring unreadable cache entry %s: %s", cache_key, exc)
            return _MISS

    async def _write_cache(self, cache_key: str, body: Any) -> None:
        try:
            await self._store.set_with_expiry(cache_key, _encode(body), self._cache_ttl)
        except CacheStoreError as exc:
            if self._strict_cache_writes:
                raise
            logger.warning("Cache write failed for %s: %s", cache_key, exc)
            return
        logger.debug("Cached %s for %ss", cache_key, self._cache_ttl)


def _encode(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise CacheStoreError(f"Value is not JSON-serialisable: {exc}") from exc


def _decode(payload: str) -> Any:
    try:
        return json.loads(payload)
    except ValueError as exc:
        raise CacheStoreError(f"Cached value is not valid JSON: {exc}") from exc
