"""Command-line interface for :mod:`pinewire`.

This module exposes the Typer application behind the ``pinewire`` console
script. Sub-command groups live in sibling modules; shared state is carried
in :class:`pinewire.cli.context.CLIContext`.

Example:
    >>> import typer
    >>> from pinewire.cli import create_app
    >>> app = create_app()
    >>> isinstance(app, typer.Typer)
    True
"""

from __future__ import annotations

import os
from pathlib import Path

import typer

from pinewire.cli.context import CLIContext, ClientFactory, require_context
from pinewire.cli.indexes import create_indexes_app
from pinewire.cli.vectors import (
    create_embed_app,
    create_records_app,
    create_vectors_app,
)
from pinewire.core.config import (
    DEFAULTS_RESOURCE_NAME,
    render_user_config,
    resolve_config_path,
)
from pinewire.core.logging import configure_logging, get_logger

_app_help = (
    "Thin client for the Pinecone vector database."
    "\n\n"
    "Use `pinewire init` to write a starter `pinewire.toml`; the API key is "
    "read from PINECONE_API_KEY."
)


def create_app(client_factory: ClientFactory | None = None) -> "typer.Typer":
    """Return the Typer application powering the ``pinewire`` CLI.

    Args:
        client_factory: Optional hook building a client from settings. Tests
            use it to inject a client backed by a mock transport.
    """

    app = typer.Typer(
        help=_app_help,
        no_args_is_help=True,
        rich_markup_mode="rich",
    )

    app.add_typer(create_indexes_app(), name="indexes")
    app.add_typer(create_vectors_app(), name="vectors")
    app.add_typer(create_embed_app(), name="embed")
    app.add_typer(create_records_app(), name="records")

    @app.callback()
    def main_callback(
        ctx: typer.Context,
        config: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help=(
                "Path to pinewire.toml (defaults to PINEWIRE_CONFIG or "
                "./pinewire.toml)."
            ),
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            "-l",
            help="Override the logging level (DEBUG/INFO/WARNING/ERROR).",
        ),
    ) -> None:
        # Console-only baseline until settings are loaded.
        configure_logging()
        context = CLIContext(
            config_path=resolve_config_path(config, environ=os.environ),
            log_level=log_level,
        )
        if client_factory is not None:
            context.client_factory = client_factory
        ctx.obj = context
        ctx.call_on_close(context.close)

    @app.command(
        "init",
        help="Write a starter pinewire.toml configuration file.",
    )
    def init_command(
        ctx: typer.Context,
        environment: str | None = typer.Option(
            None,
            "--environment",
            "-e",
            help="Pinecone environment recorded in the file.",
        ),
        force: bool = typer.Option(
            False,
            "--force",
            help="Overwrite an existing configuration file.",
        ),
    ) -> None:
        context = require_context(ctx)
        path = context.config_path
        if path.exists() and not force:
            typer.secho(
                f"Config already exists at {path}; pass --force to overwrite.",
                fg=typer.colors.YELLOW,
            )
            raise typer.Exit(code=1)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(
                render_user_config(environment=environment),
                encoding="utf-8",
            )
        except OSError as exc:
            typer.secho(f"Failed to write config: {exc}", fg=typer.colors.RED)
            raise typer.Exit(code=1) from exc

        get_logger(__name__, command="init").info(
            "init-complete",
            path=str(path),
            environment=environment,
        )
        typer.secho("Config written", fg=typer.colors.GREEN, bold=True)
        typer.echo(f"  config: {path}")
        typer.echo(f"  defaults: packaged resource ({DEFAULTS_RESOURCE_NAME})")
        typer.echo("  api key: set PINECONE_API_KEY in the environment")

    return app


__all__ = ["create_app"]
