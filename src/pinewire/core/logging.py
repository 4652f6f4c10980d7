"""Structured logging for :mod:`pinewire`.

Events are structlog dictionaries routed through the standard library root
logger: a Rich console handler on stderr (stdout carries command output) and,
when a log directory is configured, a JSON file rotated nightly into gzip
archives.

Every event passes :func:`redact_credentials` before rendering, so an API key
handed to a logger by mistake is masked in both sinks.
"""

from __future__ import annotations

import gzip
import logging
from collections.abc import Mapping
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
import shutil
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
import structlog

Logger = structlog.stdlib.BoundLogger

LOG_FILENAME = "pinewire.log"
REDACTED = "***"

# Compared case-insensitively against event keys and nested mapping keys.
SENSITIVE_KEYS = frozenset(
    {"api-key", "api_key", "apikey", "authorization", "x-api-key"}
)

_ARCHIVE_DAYS = 7
_MAX_DEPTH = 4


def _scrub(value: Any, depth: int) -> Any:
    if depth > _MAX_DEPTH:
        return value
    if isinstance(value, Mapping):
        return {
            key: REDACTED
            if str(key).lower() in SENSITIVE_KEYS
            else _scrub(item, depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_scrub(item, depth + 1) for item in value]
    return value


def redact_credentials(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog processor masking credential-bearing keys.

    Example:
        >>> redact_credentials(None, "info", {
        ...     "event": "pinecone-request",
        ...     "headers": {"Api-Key": "pk-1", "Accept": "application/json"},
        ... })["headers"]
        {'Api-Key': '***', 'Accept': 'application/json'}
    """

    return _scrub(event_dict, 0)


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_credentials,
    ]


def _formatter(renderer: Any) -> structlog.stdlib.ProcessorFormatter:
    # Records from plain stdlib loggers such as httpx get the same chain.
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_shared_processors(),
    )


def _level_number(level: str) -> int:
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unsupported log level: {level!r}")
    return value


def _compress_archive(source: str, dest: str) -> None:
    with open(source, "rb") as src, gzip.open(dest, "wb") as target:
        shutil.copyfileobj(src, target)
    Path(source).unlink(missing_ok=True)


def _file_handler(directory: Path, level: int) -> TimedRotatingFileHandler:
    directory.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        directory / LOG_FILENAME,
        when="midnight",
        backupCount=_ARCHIVE_DAYS,
        utc=True,
        encoding="utf-8",
        delay=True,
    )
    handler.namer = lambda name: f"{name}.gz"
    handler.rotator = _compress_archive
    handler.setLevel(level)
    handler.setFormatter(
        _formatter(structlog.processors.JSONRenderer(sort_keys=True))
    )
    return handler


def _console_handler(level: int, console: Console | None) -> RichHandler:
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    handler.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=False)))
    return handler


def configure_logging(
    *,
    level: str = "WARNING",
    log_dir: str | Path | None = None,
    console: Console | None = None,
) -> None:
    """Install pinewire's handlers on the root logger.

    Safe to call repeatedly: the CLI first installs a console-only baseline and
    reconfigures once settings (level, ``log_dir``) are known.

    Raises:
        ValueError: If ``level`` is not a recognized log level name.
    """

    number = _level_number(level)

    structlog.reset_defaults()
    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = [_console_handler(number, console)]
    if log_dir is not None:
        directory = Path(log_dir).expanduser()
        handlers.append(_file_handler(directory, number))

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(number)


def get_logger(name: str | None = None, **initial_context: Any) -> Logger:
    """Return a structured logger bound to ``initial_context``."""

    return structlog.get_logger(name).bind(**initial_context)


__all__ = [
    "LOG_FILENAME",
    "Logger",
    "REDACTED",
    "SENSITIVE_KEYS",
    "configure_logging",
    "get_logger",
    "redact_credentials",
]
