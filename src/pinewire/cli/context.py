"""Shared state and helpers for ``pinewire`` commands."""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, TypeVar

import typer

from pinewire.client import PineconeClient, PineconeClientError
from pinewire.core.config import (
    ClientSettings,
    load_settings,
    read_user_config,
    settings_from_env,
)
from pinewire.core.logging import Logger, configure_logging, get_logger

__all__ = [
    "CLIContext",
    "ClientFactory",
    "emit_json",
    "read_json_input",
    "require_context",
    "run_action",
]

ClientFactory = Callable[[ClientSettings], PineconeClient]

T = TypeVar("T")


def _default_factory(settings: ClientSettings) -> PineconeClient:
    return PineconeClient.from_settings(settings)


@dataclass(slots=True)
class CLIContext:
    """Options collected by the root callback.

    The client is built on first use so commands such as ``init`` work
    without credentials.
    """

    config_path: Path
    log_level: str | None = None
    client_factory: ClientFactory = _default_factory
    logger: Logger = field(default_factory=lambda: get_logger(__name__, command="cli"))
    _settings: ClientSettings | None = None
    _client: PineconeClient | None = None

    def settings(self) -> ClientSettings:
        if self._settings is None:
            overrides = {"log_level": self.log_level} if self.log_level else None
            self._settings = load_settings(
                user_config=read_user_config(self.config_path),
                env_config=settings_from_env(os.environ),
                cli_overrides=overrides,
            )
            configure_logging(
                level=self._settings.log_level,
                log_dir=self._settings.log_dir,
            )
        return self._settings

    def client(self) -> PineconeClient:
        if self._client is None:
            self._client = self.client_factory(self.settings())
        return self._client

    def close(self) -> None:
        """Release the client built for this invocation, if any."""

        if self._client is not None:
            self._client.close()
            self._client = None


def require_context(ctx: typer.Context) -> CLIContext:
    context = ctx.find_object(CLIContext)
    if context is None:
        typer.secho(
            "Internal error: pinewire context not initialized.",
            fg=typer.colors.RED,
        )
        raise typer.Exit(code=1)
    return context


def run_action(
    context: CLIContext,
    action: str,
    func: Callable[[PineconeClient], T],
) -> T:
    """Run ``func`` with the context client, reporting failures uniformly."""

    try:
        return func(context.client())
    except (PineconeClientError, ValueError) as exc:
        typer.secho(f"Pinecone {action} failed: {exc}", fg=typer.colors.RED, err=True)
        context.logger.error(
            "cli-command-failed",
            action=action,
            error_type=exc.__class__.__name__,
        )
        raise typer.Exit(code=1) from exc


def emit_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False))


def read_json_input(path: Path) -> Any:
    """Load JSON from ``path``; ``-`` reads standard input."""

    try:
        if str(path) == "-":
            text = sys.stdin.read()
        else:
            text = path.read_text(encoding="utf-8")
        return json.loads(text)
    except (OSError, json.JSONDecodeError) as exc:
        typer.secho(
            f"Could not read JSON from {path}: {exc}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1) from exc
