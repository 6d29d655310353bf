"""HTTP transport capability backed by :class:`httpx.AsyncClient`.

The pipeline talks to the network only through the :class:`HttpTransport`
protocol. :class:`HttpxTransport` is the default implementation: it sends
one request per call, decodes the body, and maps failures onto the
:mod:`cacheaside.exceptions` hierarchy so that the retry layer and callers
see the same error types regardless of the underlying client.

Retries are *not* done here; :class:`~cacheaside.retry.RetryExecutor`
wraps each call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import httpx

from cacheaside.client.response import extract_response_data
from cacheaside.exceptions import (
    AuthError,
    ClientError,
    ConnectionError_,
    HTTPStatusError,
    NotFoundError,
    ServerError,
)
from cacheaside.models import RequestOptions

logger = logging.getLogger(__name__)


@dataclass
class TransportResponse:
    """Decoded response returned by a transport."""

    status_code: int
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)


class HttpTransport(Protocol):
    """What the pipeline needs from an HTTP client."""

    async def request(
        self,
        method: str,
        url: str,
        options: RequestOptions,
        data: Any = None,
    ) -> TransportResponse: ...

    async def aclose(self) -> None: ...


class HttpxTransport:
    """Transport that sends requests through :class:`httpx.AsyncClient`.

    Args:
        base_url: Prefix for relative request URLs.
        timeout: Default timeout in seconds; a per-request
            ``options.timeout`` overrides it.
        verify_ssl: Verify TLS certificates.
        client: Pre-built :class:`httpx.AsyncClient`. When given, the
            transport does not own it and :meth:`aclose` leaves it open.

    Example::

        async with HttpxTransport("https://api.example.com") as transport:
            resp = await transport.request("GET", "/users", RequestOptions())
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        verify_ssl: bool = True,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(
                base_url=base_url,
                timeout=timeout,
                verify=verify_ssl,
                follow_redirects=True,
            )
        self._client = client

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        options: RequestOptions,
        data: Any = None,
    ) -> TransportResponse:
        """Send one request and return its decoded response.

        Args:
            method: HTTP method.
            url: Absolute URL, or a path relative to ``base_url``.
            options: Headers, query params, timeout and redirect settings.
                A ``cookies`` mapping is sent as a ``Cookie`` header; ``auth``
                (a ``[username, password]`` pair or a ``{"username": ...,
                "password": ...}`` mapping) enables basic auth.
            data: Request body. ``dict``/``list`` bodies are sent as JSON,
                ``str``/``bytes`` as raw content.

        Raises:
            ConnectionError_: On network and timeout errors.
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ClientError: On other 4xx statuses.
            ServerError: On 5xx statuses.
        """
        kwargs: dict[str, Any] = {
            "method": method.upper(),
            "url": url,
            "headers": options.headers,
            "params": options.params,
        }
        if options.timeout is not None:
            kwargs["timeout"] = options.timeout
        if options.follow_redirects is not None:
            kwargs["follow_redirects"] = options.follow_redirects
        _apply_extras(kwargs, options)
        if isinstance(data, (str, bytes)):
            kwargs["content"] = data
        elif data is not None:
            kwargs["json"] = data

        logger.debug("%s %s", kwargs["method"], url)
        try:
            response = await self._client.request(**kwargs)
        except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
            raise ConnectionError_(f"{kwargs['method']} {url} failed: {exc}") from exc

        body = extract_response_data(response)
        if response.status_code >= 400:
            raise _status_error(response.status_code, body)

        return TransportResponse(
            status_code=response.status_code,
            body=body,
            headers=dict(response.headers),
        )


def _apply_extras(kwargs: dict[str, Any], options: RequestOptions) -> None:
    """Add the option extras httpx understands; others only shape the cache key."""
    extras = options.model_extra or {}
    cookies = extras.get("cookies")
    if isinstance(cookies, dict) and cookies:
        headers = dict(kwargs["headers"])
        headers.setdefault("Cookie", "; ".join(f"{name}={value}" for name, value in cookies.items()))
        kwargs["headers"] = headers
    auth = extras.get("auth")
    if isinstance(auth, (list, tuple)) and len(auth) == 2:
        kwargs["auth"] = (str(auth[0]), str(auth[1]))
    elif isinstance(auth, dict) and "username" in auth:
        kwargs["auth"] = (str(auth["username"]), str(auth.get("password", "")))


def _status_error(status: int, body: Any) -> HTTPStatusError:
    """Build a typed exception for an error HTTP status code."""
    if isinstance(body, dict):
        msg = body.get("message") or body.get("error") or body.get("detail") or ""
    elif body is None:
        msg = ""
    else:
        msg = str(body)[:200]

    prefix = f"HTTP {status}"
    full_msg = f"{prefix}: {msg}" if msg else prefix

    if status in (401, 403):
        return AuthError(full_msg, status, body)
    if status == 404:
        return NotFoundError(full_msg, status, body)
    if status >= 500:
        return ServerError(full_msg, status, body)
    return ClientError(full_msg, status, body)
