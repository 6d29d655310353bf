"""Request commands -- ``cacheaside get`` and ``cacheaside post``."""

from __future__ import annotations

from typing import Any, Optional

import typer

from cacheaside import commands
from cacheaside.client.response import format_body
from cacheaside.models import RequestOptions


def _options(params: Optional[list[str]], headers: Optional[list[str]]) -> RequestOptions:
    return RequestOptions(
        params=commands.parse_pairs(params, "=", "--query"),
        headers=commands.parse_pairs(headers, ":", "--header"),
    )


def get_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="Absolute URL or path relative to base_url."),
    query: Optional[list[str]] = typer.Option(
        None, "--query", "-q", help="Query parameter as NAME=VALUE (repeatable)."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Header as NAME:VALUE (repeatable)."
    ),
    use_cache: bool = typer.Option(
        False, "--cache/--no-cache", help="Serve from and populate the response cache."
    ),
) -> None:
    """Send a GET request and print the response body.

    Example::

        cacheaside get https://api.example.com/users -q page=2 --cache
    """
    config = commands.load_effective_config(ctx)
    options = _options(query, header)

    async def _go() -> Any:
        async with commands.build_client(config) as client:
            return await client.get(url, options, use_cache=use_cache)

    format_body(commands.run(_go()))


def post_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="Absolute URL or path relative to base_url."),
    data: Optional[str] = typer.Option(
        None, "--data", "-d", help="Request body; JSON is sent as JSON, anything else as text."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Header as NAME:VALUE (repeatable)."
    ),
) -> None:
    """Send a POST request and print the response body. Never cached.

    Example::

        cacheaside post https://api.example.com/items -d '{"name": "a"}'
    """
    config = commands.load_effective_config(ctx)
    options = _options(None, header)
    body = commands.parse_value(data)

    async def _go() -> Any:
        async with commands.build_client(config) as client:
            return await client.post(url, body, options)

    format_body(commands.run(_go()))
