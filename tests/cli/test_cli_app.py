"""Integration tests for the Typer application exposed by :mod:`pinewire.cli`."""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path

import pytest
from typer.testing import CliRunner

from pinewire.cli import create_app
from pinewire.client import PineconeClient


@pytest.fixture()
def runner() -> CliRunner:
    """Return a Typer CLI runner for invoking the application."""

    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging_state():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


@pytest.fixture()
def env(tmp_path: Path) -> dict[str, str]:
    return {
        "PINECONE_API_KEY": "pk-cli-test",
        "PINECONE_ENVIRONMENT": "us-west1-gcp",
        "PINEWIRE_CONFIG": str(tmp_path / "pinewire.toml"),
    }


@pytest.fixture()
def app_with(transport):
    """Build the CLI app around a client using the recording transport."""

    def _factory(settings) -> PineconeClient:
        return PineconeClient.from_settings(settings, transport=transport)

    return create_app(client_factory=_factory)


def test_init_writes_config_without_api_key(
    runner: CliRunner,
    env: dict[str, str],
) -> None:
    app = create_app()
    result = runner.invoke(
        app,
        ["init", "--environment", "us-east-1-aws"],
        env=env,
        catch_exceptions=False,
    )

    assert result.exit_code == 0, result.output
    assert "Config written" in result.stdout

    config_path = Path(env["PINEWIRE_CONFIG"])
    config = tomllib.loads(config_path.read_text(encoding="utf-8"))
    assert config["environment"] == "us-east-1-aws"
    assert "pk-cli-test" not in config_path.read_text(encoding="utf-8")


def test_init_refuses_to_overwrite_without_force(
    runner: CliRunner,
    env: dict[str, str],
) -> None:
    config_path = Path(env["PINEWIRE_CONFIG"])
    config_path.write_text('environment = "keep"\n', encoding="utf-8")
    app = create_app()

    result = runner.invoke(app, ["init"], env=env)
    assert result.exit_code == 1
    assert config_path.read_text(encoding="utf-8") == 'environment = "keep"\n'

    result = runner.invoke(app, ["init", "--force"], env=env)
    assert result.exit_code == 0, result.output
    assert "environment = \"keep\"" not in config_path.read_text(encoding="utf-8")


def test_indexes_list_prints_json(
    runner: CliRunner,
    env: dict[str, str],
    app_with,
    transport,
) -> None:
    transport.queue(200, {"indexes": [{"name": "docs"}]})

    result = runner.invoke(app_with, ["indexes", "list"], env=env)

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [{"name": "docs"}]
    assert transport.last.headers["Api-Key"] == "pk-cli-test"


class _ClosingClient(PineconeClient):
    closed = 0

    def close(self) -> None:
        type(self).closed += 1
        super().close()


def test_client_is_closed_when_command_finishes(
    runner: CliRunner,
    env: dict[str, str],
    transport,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(_ClosingClient, "closed", 0)
    app = create_app(
        client_factory=lambda settings: _ClosingClient.from_settings(
            settings, transport=transport
        )
    )
    transport.queue(200, {"indexes": []})

    listed = runner.invoke(app, ["indexes", "list"], env=env)
    initialized = runner.invoke(app, ["init"], env=env)

    assert listed.exit_code == 0, listed.output
    assert initialized.exit_code == 0, initialized.output
    assert _ClosingClient.closed == 1


def test_indexes_create_reports_remote_failure(
    runner: CliRunner,
    env: dict[str, str],
    app_with,
    transport,
) -> None:
    transport.queue(409, {"error": "exists"})

    result = runner.invoke(
        app_with,
        ["indexes", "create", "docs", "--dimension", "8"],
        env=env,
    )

    assert result.exit_code == 1
    assert "create_index failed. Status code: 409" in result.output
    assert transport.last.json["dimension"] == 8
    assert transport.last.json["spec"] == {
        "serverless": {"cloud": "aws", "region": "us-east-1"}
    }


def test_indexes_delete_requires_confirmation(
    runner: CliRunner,
    env: dict[str, str],
    app_with,
    transport,
) -> None:
    result = runner.invoke(app_with, ["indexes", "delete", "docs"], env=env, input="n\n")

    assert result.exit_code == 1
    assert transport.requests == []

    transport.queue(202, None)
    result = runner.invoke(app_with, ["indexes", "delete", "docs", "--yes"], env=env)

    assert result.exit_code == 0, result.output
    assert transport.last.method == "DELETE"


def test_indexes_stats_resolves_host_by_name(
    runner: CliRunner,
    env: dict[str, str],
    app_with,
    transport,
) -> None:
    transport.queue(200, {"name": "docs", "host": "docs-abc.svc.pinecone.io"})
    transport.queue(200, {"stats": {"namespaces": {"ns1": {"vectorCount": 2}}}})

    result = runner.invoke(app_with, ["indexes", "stats", "docs"], env=env)

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["namespaces"] == {"ns1": {"vectorCount": 2}}
    assert transport.last.url == "https://docs-abc.svc.pinecone.io/describe_index_stats"


def test_vectors_upsert_reads_file(
    runner: CliRunner,
    env: dict[str, str],
    app_with,
    transport,
    tmp_path: Path,
) -> None:
    vectors_file = tmp_path / "vectors.json"
    vectors_file.write_text(
        json.dumps([{"id": "v1", "values": [0.1, 0.2]}]),
        encoding="utf-8",
    )
    transport.queue(200, {"name": "docs", "host": "docs-abc.svc.pinecone.io"})
    transport.queue(200, {"upsertedCount": 1})

    result = runner.invoke(
        app_with,
        ["vectors", "upsert", "docs", "--file", str(vectors_file), "-n", "ns1"],
        env=env,
    )

    assert result.exit_code == 0, result.output
    assert "Upserted 1 vector(s)" in result.stdout
    assert transport.last.json["namespace"] == "ns1"


def test_vectors_upsert_rejects_malformed_vectors(
    runner: CliRunner,
    env: dict[str, str],
    app_with,
    transport,
    tmp_path: Path,
) -> None:
    vectors_file = tmp_path / "vectors.json"
    vectors_file.write_text('{"id": "v1"}', encoding="utf-8")

    result = runner.invoke(
        app_with,
        ["vectors", "upsert", "docs", "--file", str(vectors_file)],
        env=env,
    )

    assert result.exit_code == 1
    assert "JSON array" in result.output
    assert transport.requests == []


def test_vectors_search_uses_first_namespace_and_filter(
    runner: CliRunner,
    env: dict[str, str],
    app_with,
    transport,
) -> None:
    transport.queue(200, {"data": [{"values": [0.1, 0.2]}]})
    transport.queue(200, {"name": "docs", "host": "docs-abc.svc.pinecone.io"})
    transport.queue(200, {"stats": {"namespaces": {"cars": {"vectorCount": 1}}}})
    transport.queue(200, {"matches": [{"id": "car-1", "score": 0.99}]})

    result = runner.invoke(
        app_with,
        ["vectors", "search", "docs", "red car", "--filter", '{"color": "red"}'],
        env=env,
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["matches"][0]["id"] == "car-1"
    query = transport.last.json
    assert query["namespace"] == "cars"
    assert query["filter"] == {"color": "red"}
    assert query["vector"] == [0.1, 0.2]


def test_vectors_query_uses_legacy_endpoint(
    runner: CliRunner,
    env: dict[str, str],
    app_with,
    transport,
) -> None:
    transport.queue(200, {"results": []})

    result = runner.invoke(
        app_with,
        ["vectors", "query", "docs", "--vector", "[0.5, 0.5]", "-k", "2"],
        env=env,
    )

    assert result.exit_code == 0, result.output
    assert transport.last.url == "https://us-west1-gcp.pinecone.io/vectors/query"
    assert transport.last.headers["Authorization"] == "Bearer pk-cli-test"


def test_embed_text_reports_malformed_response(
    runner: CliRunner,
    env: dict[str, str],
    app_with,
    transport,
) -> None:
    transport.queue(200, {"data": "not-a-list"})

    result = runner.invoke(app_with, ["embed", "text", "hello"], env=env)

    assert result.exit_code == 1
    assert "Pinecone embed failed" in result.output
    assert "data must be an array" in result.output


def test_embed_batch_prints_handle(
    runner: CliRunner,
    env: dict[str, str],
    app_with,
    transport,
    tmp_path: Path,
) -> None:
    inputs = tmp_path / "inputs.json"
    inputs.write_text(json.dumps([{"text": "one"}, {"text": "two"}]), encoding="utf-8")
    transport.queue(200, {"data": "batch-7"})

    result = runner.invoke(
        app_with,
        ["embed", "batch", "--file", str(inputs)],
        env=env,
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "batch-7"


def test_records_register_reads_stdin(
    runner: CliRunner,
    env: dict[str, str],
    app_with,
    transport,
) -> None:
    transport.queue(200, {"data": [{"values": [0.3, 0.4]}]})
    transport.queue(200, {"name": "cars", "host": "cars-abc.svc.pinecone.io"})
    transport.queue(200, {"upsertedCount": 1})

    result = runner.invoke(
        app_with,
        ["records", "register", "cars", "--file", "-", "--id-field", "plate"],
        env=env,
        input=json.dumps({"plate": "ABC-123", "owner": None}),
    )

    assert result.exit_code == 0, result.output
    assert "Registered record 'ABC-123'" in result.stdout
    assert transport.last.json["vectors"][0]["metadata"] == {
        "plate": "ABC-123",
        "owner": "",
    }


def test_missing_api_key_fails_cleanly(
    runner: CliRunner,
    env: dict[str, str],
    app_with,
    transport,
) -> None:
    env = {**env, "PINECONE_API_KEY": ""}

    result = runner.invoke(app_with, ["indexes", "list"], env=env)

    assert result.exit_code == 1
    assert "api_key" in result.output
    assert transport.requests == []
