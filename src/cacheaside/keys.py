"""Deterministic cache-key derivation for outbound requests.

A cache key joins the upper-cased HTTP method, the URL, and a canonical JSON
rendering of the request options with ``:``::

    GET:https://api.example.com/users:{"params":{"page":1}}

Options are rendered with sorted keys at every depth and compact separators,
so two option mappings that differ only in insertion order share a key, while
any difference in value produces a different key.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from cacheaside.models import RequestOptions

KEY_DELIMITER = ":"


def canonical_json(value: Any) -> str:
    """Serialise *value* to JSON with sorted keys and no insignificant whitespace.

    Values that JSON cannot represent natively are rendered with ``str``.
    """
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def derive_key(
    method: str,
    url: str,
    options: RequestOptions | dict[str, Any] | None = None,
    prefix: Optional[str] = None,
) -> str:
    """Build the cache key for a request.

    Args:
        method: HTTP method; compared case-insensitively.
        url: Request URL exactly as passed to the transport.
        options: Request options, as a model or a plain dict.
        prefix: Optional namespace prepended to the key.

    Returns:
        The cache key string.
    """
    serialized = RequestOptions.coerce(options).canonical()
    key = KEY_DELIMITER.join([method.upper(), url, serialized])
    if prefix:
        return f"{prefix}{key}"
    return key
