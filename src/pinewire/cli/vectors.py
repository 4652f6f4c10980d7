"""Typer command groups for vectors, embeddings and records."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from pinewire.cli.context import (
    emit_json,
    read_json_input,
    require_context,
    run_action,
)
from pinewire.client.workflows import (
    parse_vectors,
    register_record,
    resolve_host,
    search_text,
)


def _parse_filter(raw: str | None) -> dict | None:
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(
            f"not valid JSON: {exc}", param_hint="--filter"
        ) from exc
    if not isinstance(value, dict):
        raise typer.BadParameter("must be a JSON object", param_hint="--filter")
    return value


def create_vectors_app() -> typer.Typer:
    """Return the ``pinewire vectors`` command group."""

    app = typer.Typer(
        name="vectors",
        help="Upsert and search vectors in an index.",
        no_args_is_help=True,
    )

    @app.command("upsert", help="Upsert a JSON array of vectors.")
    def upsert_command(
        ctx: typer.Context,
        index: str = typer.Argument(..., help="Index name."),
        file: Path = typer.Option(..., "--file", "-f", help="JSON file or '-'."),
        namespace: str = typer.Option("", "--namespace", "-n"),
    ) -> None:
        context = require_context(ctx)
        raw = read_json_input(file)

        def _upsert(client) -> int:
            vectors = parse_vectors(raw)
            client.upsert_vectors(resolve_host(client, index), vectors, namespace)
            return len(vectors)

        count = run_action(context, "upsert vectors", _upsert)
        typer.secho(f"Upserted {count} vector(s)", fg=typer.colors.GREEN)

    @app.command("search", help="Embed TEXT and return the nearest matches.")
    def search_command(
        ctx: typer.Context,
        index: str = typer.Argument(..., help="Index name."),
        text: str = typer.Argument(..., help="Free-text query."),
        namespace: str | None = typer.Option(
            None,
            "--namespace",
            "-n",
            help="Defaults to the first namespace of the index.",
        ),
        top_k: int = typer.Option(3, "--top-k", "-k", min=1),
        filter: str | None = typer.Option(
            None, "--filter", help="JSON metadata filter."
        ),
    ) -> None:
        context = require_context(ctx)
        metadata_filter = _parse_filter(filter)
        result = run_action(
            context,
            "search",
            lambda c: search_text(
                c,
                index,
                text,
                namespace=namespace,
                filter=metadata_filter,
                top_k=top_k,
            ),
        )
        emit_json(result)

    @app.command("query", help="Query through the environment-qualified endpoint.")
    def query_command(
        ctx: typer.Context,
        index: str = typer.Argument(..., help="Index name."),
        vector: str = typer.Option(..., "--vector", help="JSON array query vector."),
        top_k: int = typer.Option(10, "--top-k", "-k", min=1),
    ) -> None:
        context = require_context(ctx)
        try:
            values = json.loads(vector)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(
                f"not valid JSON: {exc}", param_hint="--vector"
            ) from exc
        if not isinstance(values, list):
            raise typer.BadParameter("must be a JSON array", param_hint="--vector")
        result = run_action(
            context,
            "query",
            lambda c: c.query_vectors(index, values, top_k=top_k),
        )
        emit_json(result)

    return app


def create_embed_app() -> typer.Typer:
    """Return the ``pinewire embed`` command group."""

    app = typer.Typer(
        name="embed",
        help="Create embeddings with the hosted inference models.",
        no_args_is_help=True,
    )

    @app.command("text", help="Print the query embedding for TEXT.")
    def text_command(
        ctx: typer.Context,
        text: str = typer.Argument(..., help="Text to embed."),
        model: str | None = typer.Option(None, "--model"),
    ) -> None:
        context = require_context(ctx)
        values = run_action(
            context,
            "embed",
            lambda c: c.create_embedding(text, model=model),
        )
        emit_json(values)

    @app.command("batch", help="Submit passages from a JSON array of {text}.")
    def batch_command(
        ctx: typer.Context,
        file: Path = typer.Option(..., "--file", "-f", help="JSON file or '-'."),
        model: str | None = typer.Option(None, "--model"),
    ) -> None:
        context = require_context(ctx)
        inputs = read_json_input(file)
        if not isinstance(inputs, list):
            raise typer.BadParameter("must contain a JSON array", param_hint="--file")
        handle = run_action(
            context,
            "embed batch",
            lambda c: c.create_vectors(inputs, model=model),
        )
        typer.echo(handle)

    return app


def create_records_app() -> typer.Typer:
    """Return the ``pinewire records`` command group."""

    app = typer.Typer(
        name="records",
        help="Store JSON records as embedded vectors.",
        no_args_is_help=True,
    )

    @app.command("register", help="Embed a JSON object and upsert it.")
    def register_command(
        ctx: typer.Context,
        index: str = typer.Argument(..., help="Index name."),
        file: Path = typer.Option(..., "--file", "-f", help="JSON file or '-'."),
        id_field: str = typer.Option(
            "id", "--id-field", help="Field holding the vector id."
        ),
        namespace: str = typer.Option("", "--namespace", "-n"),
    ) -> None:
        context = require_context(ctx)
        record = read_json_input(file)
        if not isinstance(record, dict):
            raise typer.BadParameter("must contain a JSON object", param_hint="--file")
        vector = run_action(
            context,
            "register record",
            lambda c: register_record(
                c,
                index,
                record,
                id_field=id_field,
                namespace=namespace,
            ),
        )
        typer.secho(f"Registered record {vector.id!r}", fg=typer.colors.GREEN)

    return app


__all__ = ["create_embed_app", "create_records_app", "create_vectors_app"]
