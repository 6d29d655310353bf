"""cacheaside -- an async HTTP client with bounded retries and cache-aside GET caching.

Requests go through a fixed-attempt retry wrapper; GET responses can be
memoised in Redis (or on disk, or in memory) under a key derived from the
method, URL and request options.

Typical use::

    from cacheaside import CachingClient, ClientConfig

    async with CachingClient.from_config(ClientConfig(cache_ttl=600)) as client:
        users = await client.get("https://api.example.com/users", use_cache=True)

Modules:
    app: Typer CLI entry point.
    client: The caching pipeline and its HTTP transport.
    cache: Cache-store backends.
    retry: The retry executor.
    keys: Cache-key derivation.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration loading.
    exceptions: Exception hierarchy with exit-code mapping.
"""

from cacheaside.client import CachingClient, HttpxTransport
from cacheaside.keys import derive_key
from cacheaside.models import CacheStoreConfig, ClientConfig, RequestOptions, RetryPolicy
from cacheaside.retry import RetryExecutor, is_transient

__version__ = "0.1.0"

__all__ = [
    "CacheStoreConfig",
    "CachingClient",
    "ClientConfig",
    "HttpxTransport",
    "RequestOptions",
    "RetryExecutor",
    "RetryPolicy",
    "derive_key",
    "is_transient",
    "__version__",
]
