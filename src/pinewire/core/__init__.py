"""Core utilities shared across :mod:`pinewire`.

Configuration loading and logging setup live here so the client package
stays free of process-level concerns.
"""

from __future__ import annotations

from .logging import configure_logging, get_logger
from .config import ClientSettings, load_settings

__all__ = [
    "ClientSettings",
    "configure_logging",
    "get_logger",
    "load_settings",
]
