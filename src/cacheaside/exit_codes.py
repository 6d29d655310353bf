"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~cacheaside.exceptions.CacheAsideError` subclass.
Shell wrappers can inspect the exit code of the ``cacheaside`` command to
determine the failure class without parsing stderr.

Example::

    $ cacheaside get https://api.example.com/missing
    $ echo $?
    4   # EXIT_NOT_FOUND -- the server answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments or an invalid configuration value."""

EXIT_AUTH_FAILURE = 3
"""The remote API rejected the request with HTTP 401 or 403."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_HTTP_ERROR = 5
"""The remote API answered with another HTTP 4xx or 5xx status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_CACHE_STORE_ERROR = 7
"""The cache store could not be reached or returned unusable data."""
