"""Built-in CLI commands for cacheaside.

Helpers shared by the command modules live here: building a client from the
resolved configuration, running a coroutine, and parsing repeated
``key=value`` options.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, Optional, TypeVar

import typer

from cacheaside.client import CachingClient
from cacheaside.config import resolve_config
from cacheaside.exceptions import CacheAsideError
from cacheaside.models import ClientConfig
from cacheaside.output import error

T = TypeVar("T")


def load_effective_config(ctx: typer.Context) -> ClientConfig:
    """Resolve configuration honouring the global ``--config`` flag."""
    obj = ctx.obj or {}
    try:
        return resolve_config(config_path=obj.get("config_path"))
    except CacheAsideError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc


def build_client(config: ClientConfig) -> CachingClient:
    """Create the client used by CLI commands."""
    return CachingClient.from_config(config)


def run(coro: Awaitable[T]) -> T:
    """Run *coro* to completion, turning library errors into CLI exits."""
    try:
        return asyncio.run(coro)
    except CacheAsideError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc


def parse_pairs(values: Optional[list[str]], separator: str, label: str) -> dict[str, str]:
    """Parse ``["a=1", "b=2"]`` style options into a dict.

    Raises:
        typer.BadParameter: If an item lacks *separator*.
    """
    pairs: dict[str, str] = {}
    for item in values or []:
        if separator not in item:
            raise typer.BadParameter(f"Expected NAME{separator}VALUE, got '{item}'", param_hint=label)
        name, value = item.split(separator, 1)
        pairs[name.strip()] = value.strip()
    return pairs


def parse_value(raw: Optional[str]) -> Any:  # noqa: ANN401
    """Parse *raw* as JSON if possible, returning the raw string on failure."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return raw
