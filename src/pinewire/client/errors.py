"""Typed error hierarchy for the Pinecone client."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "PineconeClientError",
    "ConfigurationError",
    "TransportError",
    "MalformedResponse",
    "RemoteOperationFailed",
]


@dataclass(slots=True)
class PineconeClientError(RuntimeError):
    """Base error raised by the Pinecone client."""

    message: str
    operation: str | None = None
    status_code: int | None = None

    def __post_init__(self) -> None:
        RuntimeError.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class ConfigurationError(PineconeClientError):
    """Raised when credentials or settings are missing or mistyped."""


@dataclass(slots=True)
class TransportError(PineconeClientError):
    """Raised when the HTTP request could not be completed."""


@dataclass(slots=True)
class MalformedResponse(PineconeClientError):
    """Raised when a decoded body does not have the expected shape.

    ``field`` names the path that failed the check (``data[0].values``,
    ``indexes``...); ``body`` keeps the raw text for diagnostics.
    """

    field: str = "$"
    body: str | None = None


@dataclass(slots=True)
class RemoteOperationFailed(PineconeClientError):
    """Raised when the service answers with an unsuccessful status code."""

    body: str | None = None
