"""Cache commands -- read, write, and delete store entries directly.

These drive the general-purpose ``get_data`` / ``set_data`` /
``delete_data`` API of :class:`~cacheaside.client.CachingClient`, plus
``cache key`` which prints the key a GET request would be cached under.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from cacheaside import commands
from cacheaside.client.response import format_body
from cacheaside.exit_codes import EXIT_NOT_FOUND
from cacheaside.keys import derive_key
from cacheaside.models import RequestOptions
from cacheaside.output import get_output, info, success


cache_app = typer.Typer(no_args_is_help=True)


@cache_app.command("get")
def cache_get(
    ctx: typer.Context,
    key: str = typer.Argument(help="Store key."),
) -> None:
    """Print the value stored under KEY. Exits 4 when the key is absent."""
    config = commands.load_effective_config(ctx)

    async def _go() -> Any:
        async with commands.build_client(config) as client:
            return await client.get_data(key)

    value = commands.run(_go())
    if value is None:
        info(f"No entry for '{key}'")
        raise typer.Exit(code=EXIT_NOT_FOUND)
    format_body(value)


@cache_app.command("set")
def cache_set(
    ctx: typer.Context,
    key: str = typer.Argument(help="Store key."),
    value: str = typer.Argument(help="Value; parsed as JSON when possible."),
    ttl: Optional[int] = typer.Option(
        None, "--ttl", min=1, help="Seconds to keep the entry (default: cache_ttl)."
    ),
) -> None:
    """Store VALUE under KEY."""
    config = commands.load_effective_config(ctx)
    parsed = commands.parse_value(value)

    async def _go() -> None:
        async with commands.build_client(config) as client:
            await client.set_data(key, parsed, ttl)

    commands.run(_go())
    success(f"Stored '{key}' for {ttl or config.cache_ttl}s")


@cache_app.command("delete")
def cache_delete(
    ctx: typer.Context,
    key: str = typer.Argument(help="Store key."),
) -> None:
    """Remove KEY from the store."""
    config = commands.load_effective_config(ctx)

    async def _go() -> None:
        async with commands.build_client(config) as client:
            await client.delete_data(key)

    commands.run(_go())
    success(f"Deleted '{key}'")


@cache_app.command("key")
def cache_key(
    url: str = typer.Argument(help="Request URL."),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method."),
    query: Optional[list[str]] = typer.Option(
        None, "--query", "-q", help="Query parameter as NAME=VALUE (repeatable)."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Header as NAME:VALUE (repeatable)."
    ),
) -> None:
    """Print the cache key for a request without sending it."""
    options = RequestOptions(
        params=commands.parse_pairs(query, "=", "--query"),
        headers=commands.parse_pairs(header, ":", "--header"),
    )
    get_output().print_data(derive_key(method, url, options))
