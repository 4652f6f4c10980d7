"""Configuration models and loaders for :mod:`pinewire`."""

from __future__ import annotations

import os
from collections.abc import Mapping as MappingABC
from pathlib import Path
from typing import Any, Mapping

import tomllib
import tomlkit
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from pinewire.client.endpoints import DEFAULT_CONTROL_PLANE_URL
from pinewire.client.errors import ConfigurationError
from pinewire.resources import get_resource

__all__ = [
    "ClientSettings",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULTS_RESOURCE_NAME",
    "ENV_VARS",
    "load_packaged_defaults",
    "load_settings",
    "read_user_config",
    "render_user_config",
    "resolve_config_path",
    "settings_from_env",
]

DEFAULTS_RESOURCE_NAME = "pinewire.defaults.toml"
DEFAULT_CONFIG_FILENAME = "pinewire.toml"
CONFIG_ENV_VAR = "PINEWIRE_CONFIG"

# Environment variable -> settings field.
ENV_VARS: Mapping[str, str] = {
    "PINECONE_API_KEY": "api_key",
    "PINECONE_ENVIRONMENT": "environment",
    "PINEWIRE_CONTROL_PLANE_URL": "control_plane_url",
    "PINEWIRE_TIMEOUT": "timeout",
    "PINEWIRE_EMBEDDING_MODEL": "embedding_model",
    "PINEWIRE_LOG_LEVEL": "log_level",
    "PINEWIRE_LOG_DIR": "log_dir",
}


class ClientSettings(BaseModel):
    """Settings consumed once when a client is constructed."""

    api_key: SecretStr = Field(
        description="Pinecone API key injected into every request.",
    )
    environment: str = Field(
        description="Environment identifier used by legacy query endpoints.",
    )
    control_plane_url: str = Field(
        default=DEFAULT_CONTROL_PLANE_URL,
        description="Base URL for index lifecycle and inference calls.",
    )
    timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Per-request timeout in seconds.",
    )
    embedding_model: str = Field(
        default="multilingual-e5-large",
        description="Model used when callers do not name one.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level applied by the CLI.",
    )
    log_dir: Path | None = Field(
        default=None,
        description="Optional directory for rotating JSON log files.",
    )

    model_config = {
        "frozen": True,
        "str_strip_whitespace": True,
    }

    @field_validator("api_key")
    @classmethod
    def _require_api_key(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("api_key cannot be empty")
        return value

    @field_validator("environment", "control_plane_url", "embedding_model")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value:
            raise ValueError("value cannot be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


def load_packaged_defaults() -> dict[str, Any]:
    """Load the packaged defaults as a plain dictionary.

    Example:
        >>> load_packaged_defaults()["control_plane_url"]
        'https://api.pinecone.io'
    """

    resource = get_resource(DEFAULTS_RESOURCE_NAME)
    return tomllib.loads(resource.read_text(encoding="utf-8"))


def resolve_config_path(
    override: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Return the user config location.

    ``override`` wins, then ``$PINEWIRE_CONFIG``, then ``./pinewire.toml``.
    """

    if override is not None:
        return override.expanduser()
    env = os.environ if environ is None else environ
    raw = env.get(CONFIG_ENV_VAR)
    if raw:
        return Path(raw).expanduser()
    return Path.cwd() / DEFAULT_CONFIG_FILENAME


def read_user_config(path: Path) -> dict[str, Any]:
    """Parse ``path`` when it exists; a missing file is an empty layer."""

    if not path.exists():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML in {path}: {exc}") from exc


def settings_from_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect settings supplied through environment variables."""

    env = os.environ if environ is None else environ
    return {field: env[name] for name, field in ENV_VARS.items() if env.get(name)}


def load_settings(
    *,
    defaults: Mapping[str, Any] | None = None,
    user_config: Mapping[str, Any] | None = None,
    env_config: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> ClientSettings:
    """Merge the configuration layers and validate the result.

    Args:
        defaults: Packaged defaults; loaded from the package when omitted.
        user_config: Parsed user ``pinewire.toml`` content.
        env_config: Settings derived from environment variables.
        cli_overrides: Settings supplied via CLI flags.

    Raises:
        ConfigurationError: If credentials are missing or mistyped, or any
            other field fails validation.
    """

    stack: dict[str, Any] = dict(
        load_packaged_defaults() if defaults is None else defaults
    )
    for layer in (user_config, env_config, cli_overrides):
        if not layer:
            continue
        if not isinstance(layer, MappingABC):
            raise ConfigurationError(f"Unsupported configuration layer: {layer!r}")
        stack.update({key: value for key, value in layer.items() if value is not None})

    for required in ("api_key", "environment"):
        if required not in stack:
            raise ConfigurationError(
                f"Missing required setting {required!r}; set it in "
                f"{DEFAULT_CONFIG_FILENAME} or the environment.",
            )

    try:
        return ClientSettings(**stack)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigurationError(f"Invalid settings: {problems}") from exc


def render_user_config(
    *,
    environment: str | None = None,
    defaults: Mapping[str, Any] | None = None,
) -> str:
    """Render a commented ``pinewire.toml`` template.

    The API key is never written; the template points at the environment
    variable instead.
    """

    values = dict(load_packaged_defaults() if defaults is None else defaults)

    document = tomlkit.document()
    document.add(tomlkit.comment("Generated by pinewire init"))
    document.add(
        tomlkit.comment("Precedence: CLI flags > env vars > pinewire.toml > defaults")
    )
    document.add(tomlkit.comment("Keep the API key out of this file:"))
    document.add(tomlkit.comment("  export PINECONE_API_KEY=..."))
    document.add(tomlkit.nl())

    if environment:
        document["environment"] = environment
    else:
        document.add(tomlkit.comment('environment = "us-east-1-aws"'))

    for key in ("control_plane_url", "timeout", "embedding_model", "log_level"):
        if key in values:
            document[key] = values[key]

    return tomlkit.dumps(document)
