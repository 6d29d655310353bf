"""Config commands -- view the effective configuration.

Provides ``cacheaside config show``, which prints the configuration after
files, environment variables and defaults have been merged by
:func:`~cacheaside.config.resolve_config`.
"""

from __future__ import annotations

import typer

from cacheaside import commands
from cacheaside.output import format_response, info


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration.

    Example::

        cacheaside config show
        cacheaside --json config show
    """
    from cacheaside.config import get_config_dir

    config = commands.load_effective_config(ctx)
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))
