"""Typer command group for index lifecycle operations."""

from __future__ import annotations

import typer

from pinewire.cli.context import emit_json, require_context, run_action
from pinewire.client.models import DeletionProtection, IndexCreateRequest
from pinewire.client.workflows import resolve_host


def create_indexes_app() -> typer.Typer:
    """Return the ``pinewire indexes`` command group."""

    app = typer.Typer(
        name="indexes",
        help="List, inspect, create and delete Pinecone indexes.",
        no_args_is_help=True,
    )

    @app.command("list", help="List indexes visible to the API key.")
    def list_command(ctx: typer.Context) -> None:
        context = require_context(ctx)
        indexes = run_action(context, "list indexes", lambda c: c.list_indexes())
        emit_json(indexes)

    @app.command("show", help="Show metadata for one index.")
    def show_command(
        ctx: typer.Context,
        name: str = typer.Argument(..., help="Index name."),
        strict: bool = typer.Option(
            False,
            "--strict",
            help="Fail unless the service answers with HTTP 200.",
        ),
    ) -> None:
        context = require_context(ctx)
        if strict:
            details = run_action(context, "view index", lambda c: c.view_index(name))
        else:
            details = run_action(context, "get index", lambda c: c.get_index(name))
        emit_json(details)

    @app.command("create", help="Create a serverless index.")
    def create_command(
        ctx: typer.Context,
        name: str = typer.Argument(..., help="Index name."),
        dimension: int = typer.Option(..., "--dimension", "-d", min=1),
        metric: str = typer.Option("cosine", "--metric", "-m"),
        cloud: str = typer.Option("aws", "--cloud"),
        region: str = typer.Option("us-east-1", "--region"),
        deletion_protection: DeletionProtection = typer.Option(
            DeletionProtection.DISABLED,
            "--deletion-protection",
            case_sensitive=False,
        ),
    ) -> None:
        context = require_context(ctx)

        def _create(client) -> None:
            request = IndexCreateRequest(
                name=name,
                dimension=dimension,
                metric=metric,
                cloud=cloud,
                region=region,
                deletion_protection=deletion_protection,
            )
            client.create_index(request)

        run_action(context, "create index", _create)
        typer.secho(f"Index {name!r} creation requested", fg=typer.colors.GREEN)

    @app.command("delete", help="Delete an index.")
    def delete_command(
        ctx: typer.Context,
        name: str = typer.Argument(..., help="Index name."),
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
    ) -> None:
        context = require_context(ctx)
        if not yes:
            typer.confirm(f"Delete index {name!r}?", abort=True)
        run_action(context, "delete index", lambda c: c.delete_index(name))
        typer.secho(f"Index {name!r} deleted", fg=typer.colors.GREEN)

    @app.command("stats", help="Show per-namespace vector counts.")
    def stats_command(
        ctx: typer.Context,
        name: str = typer.Argument(..., help="Index name."),
        host: str | None = typer.Option(
            None,
            "--host",
            help="Data-plane host; looked up from the index name when omitted.",
        ),
    ) -> None:
        context = require_context(ctx)
        stats = run_action(
            context,
            "describe index stats",
            lambda c: c.describe_index_stats(host or resolve_host(c, name)),
        )
        emit_json(stats)

    return app


__all__ = ["create_indexes_app"]
