"""Exception hierarchy for cacheaside.

All exceptions inherit from :class:`CacheAsideError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`cacheaside.exit_codes`.
The CLI entry point in :func:`cacheaside.app.main` catches ``CacheAsideError``
and exits with the appropriate code.

Subclass hierarchy::

    CacheAsideError (exit 1)
    +-- ConfigurationError      (exit 2)
    +-- TransportError          (exit 6)
    |   +-- ConnectionError_    (exit 6)
    |   +-- HTTPStatusError     (exit 5)
    |       +-- ClientError     (exit 5)
    |       |   +-- AuthError       (exit 3)
    |       |   +-- NotFoundError   (exit 4)
    |       +-- ServerError     (exit 5)
    +-- CacheStoreError         (exit 7)

The retry executor re-raises whatever the transport raised, so callers can
rely on catching these types directly around ``CachingClient`` calls.
"""

from __future__ import annotations

from typing import Any, Optional

from cacheaside.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CACHE_STORE_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_HTTP_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
)


class CacheAsideError(Exception):
    """Base exception for all cacheaside errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`cacheaside.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(CacheAsideError):
    """Raised for invalid retry counts, TTLs, or unreadable config files.

    Configuration errors surface at construction time and are never retried.
    """

    exit_code = EXIT_INVALID_USAGE


class TransportError(CacheAsideError):
    """Base class for failures raised by the HTTP transport."""

    exit_code = EXIT_CONNECTION_ERROR


class ConnectionError_(TransportError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class HTTPStatusError(TransportError):
    """Raised when the server answers with a 4xx or 5xx status.

    Args:
        message: Human-readable error description.
        status_code: The HTTP status code of the response.
        body: The decoded response body, if any.
    """

    exit_code = EXIT_HTTP_ERROR

    def __init__(self, message: str, status_code: int, body: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ClientError(HTTPStatusError):
    """Raised for HTTP 4xx responses not covered by a narrower subclass."""


class AuthError(ClientError):
    """Raised when the API returns HTTP 401 or 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(ClientError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(HTTPStatusError):
    """Raised when the API returns an HTTP 5xx server error."""


class CacheStoreError(CacheAsideError):
    """Raised when the cache store fails (connection lost, unreadable payload)."""

    exit_code = EXIT_CACHE_STORE_ERROR
