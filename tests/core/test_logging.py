"""Tests for :mod:`pinewire.core.logging`."""

from __future__ import annotations

import gzip
import io
import json
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest
from rich.console import Console
from rich.logging import RichHandler

from pinewire.client import PineconeClient
from pinewire.core.logging import (
    REDACTED,
    configure_logging,
    get_logger,
    redact_credentials,
)


def _clear_root_handlers() -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Ensure each test runs with a clean logging configuration."""

    _clear_root_handlers()
    yield
    _clear_root_handlers()


def _build_console() -> Console:
    """Return a console that writes to an in-memory buffer for tests."""

    buffer = io.StringIO()
    return Console(file=buffer, width=120, record=True)


def _flush_root() -> None:
    for handler in logging.getLogger().handlers:
        handler.flush()


def test_configure_logging_installs_console_and_file_handlers(tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"

    configure_logging(level="debug", log_dir=log_dir, console=_build_console())

    root = logging.getLogger()
    rich_handlers = [h for h in root.handlers if isinstance(h, RichHandler)]
    file_handlers = [h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)]

    assert len(rich_handlers) == 1, "Expected a single Rich console handler"
    assert len(file_handlers) == 1, "Expected a rotating file handler"

    log_file = Path(file_handlers[0].baseFilename)
    assert log_file.name == "pinewire.log"

    logger = get_logger(__name__, component="pinecone-client")
    logger.info("pinecone-request", operation="list_indexes")
    _flush_root()

    payload = json.loads(log_file.read_text(encoding="utf-8").strip())

    assert payload["event"] == "pinecone-request"
    assert payload["component"] == "pinecone-client"
    assert payload["operation"] == "list_indexes"


def test_configure_logging_without_log_dir_omits_file_handler() -> None:
    configure_logging(level="info", console=_build_console())

    root = logging.getLogger()
    assert any(isinstance(h, RichHandler) for h in root.handlers)
    assert all(
        not isinstance(h, TimedRotatingFileHandler) for h in root.handlers
    ), "No file handler should be registered without a log directory"


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        configure_logging(level="invalid", console=_build_console())


def test_configure_logging_rotates_with_compression(tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"

    configure_logging(level="warning", log_dir=log_dir, console=_build_console())
    root = logging.getLogger()
    file_handler = next(
        h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)
    )

    logger = get_logger("rotate", task="rotation")
    logger.warning("pre-rotation", sample=True)
    _flush_root()

    file_handler.doRollover()

    gz_files = sorted(log_dir.glob("pinewire.log.*.gz"))
    assert gz_files, "Expected a compressed log archive after rollover"

    with gzip.open(gz_files[-1], "rt", encoding="utf-8") as fh:
        archived = fh.read()

    assert "pre-rotation" in archived
    assert "task" in archived


def test_client_request_logs_never_include_api_key(
    tmp_path: Path,
    credentials,
    transport,
) -> None:
    log_dir = tmp_path / "logs"
    configure_logging(level="debug", log_dir=log_dir, console=_build_console())

    client = PineconeClient(credentials, transport=transport)
    transport.queue(200, {"indexes": []})
    transport.queue(503, "unavailable")

    client.list_indexes()
    with pytest.raises(RuntimeError):
        client.delete_index("docs")
    _flush_root()

    lines = (log_dir / "pinewire.log").read_text(encoding="utf-8").splitlines()
    events = [json.loads(line) for line in lines]

    assert [event["event"] for event in events] == [
        "pinecone-request",
        "pinecone-request",
        "pinecone-request-failed",
    ]
    assert events[-1]["status_code"] == 503
    assert all(credentials.api_key not in line for line in lines)


def test_redact_credentials_masks_nested_keys_case_insensitively() -> None:
    event = redact_credentials(
        None,
        "info",
        {
            "event": "pinecone-request",
            "api_key": "pk-secret",
            "headers": {
                "Api-Key": "pk-secret",
                "authorization": "Bearer pk-secret",
                "Accept": "application/json",
            },
            "attempts": [{"X-Api-Key": "pk-secret", "status": 503}],
        },
    )

    assert event == {
        "event": "pinecone-request",
        "api_key": REDACTED,
        "headers": {
            "Api-Key": REDACTED,
            "authorization": REDACTED,
            "Accept": "application/json",
        },
        "attempts": [{"X-Api-Key": REDACTED, "status": 503}],
    }


def test_credentials_passed_to_a_logger_are_masked_in_both_sinks(
    tmp_path: Path,
) -> None:
    log_dir = tmp_path / "logs"
    console = _build_console()
    configure_logging(level="info", log_dir=log_dir, console=console)

    get_logger("leaky").warning(
        "debug-headers",
        headers={"Api-Key": "pk-secret", "Authorization": "Bearer pk-secret"},
        api_key="pk-secret",
    )
    _flush_root()

    written = (log_dir / "pinewire.log").read_text(encoding="utf-8")
    payload = json.loads(written.strip())

    assert "pk-secret" not in written
    assert payload["api_key"] == REDACTED
    assert payload["headers"] == {"Api-Key": REDACTED, "Authorization": REDACTED}
    assert "pk-secret" not in console.export_text()
