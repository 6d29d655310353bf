"""HTTP client module for cacheaside.

Provides the cache-aside request pipeline and the transport it drives.

Classes:
    :class:`CachingClient` -- retrying client with optional GET caching.
    :class:`HttpxTransport` -- default transport backed by :class:`httpx.AsyncClient`.
    :class:`TransportResponse` -- decoded response returned by transports.

Example::

    from cacheaside.client import CachingClient
    from cacheaside.models import ClientConfig

    async with CachingClient.from_config(ClientConfig()) as client:
        body = await client.get("https://api.example.com/users", use_cache=True)
"""

from cacheaside.client.pipeline import CachingClient
from cacheaside.client.transport import HttpTransport, HttpxTransport, TransportResponse

__all__ = ["CachingClient", "HttpTransport", "HttpxTransport", "TransportResponse"]
