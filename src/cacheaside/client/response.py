"""Response body extraction and the CLI rendering bridge.

:func:`extract_response_data` turns an :class:`httpx.Response` into the body
value the pipeline returns and caches. :func:`format_body` routes such a body
through :meth:`~cacheaside.output.OutputManager.format_response` for the CLI.

See Also:
    :mod:`cacheaside.output` -- the output manager that renders data.
"""

from __future__ import annotations

from typing import Any

import httpx

from cacheaside.output import get_output


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first. If that fails (e.g. the
    response is HTML or plain text), returns the raw text. Returns ``None``
    for responses with no content.

    Args:
        response: The :class:`httpx.Response` to extract data from.

    Returns:
        A JSON-decoded object (``dict``, ``list``, etc.), a ``str`` of raw
        text, or ``None`` if the body is empty.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        pass

    return response.text


def format_body(body: Any) -> None:
    """Print a response body with the global output system.

    ``None`` bodies print nothing.
    """
    if body is not None:
        get_output().format_response(body)
