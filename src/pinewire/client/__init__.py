"""Pinecone REST client: transport, validation and typed operations."""

from __future__ import annotations

from .auth import Authenticator
from .endpoints import DEFAULT_CONTROL_PLANE_URL, Endpoints
from .errors import (
    ConfigurationError,
    MalformedResponse,
    PineconeClientError,
    RemoteOperationFailed,
    TransportError,
)
from .models import (
    Credentials,
    DeletionProtection,
    EmbeddingInput,
    EmbeddingRequest,
    IndexCreateRequest,
    IndexDescriptor,
    IndexStats,
    InputType,
    NamespaceSummary,
    SearchMatch,
    SearchResult,
    Vector,
)
from .service import PineconeClient
from .transport import HttpxTransport, Transport, TransportResponse

__all__ = [
    "Authenticator",
    "ConfigurationError",
    "Credentials",
    "DEFAULT_CONTROL_PLANE_URL",
    "DeletionProtection",
    "EmbeddingInput",
    "EmbeddingRequest",
    "Endpoints",
    "HttpxTransport",
    "IndexCreateRequest",
    "IndexDescriptor",
    "IndexStats",
    "InputType",
    "MalformedResponse",
    "NamespaceSummary",
    "PineconeClient",
    "PineconeClientError",
    "RemoteOperationFailed",
    "SearchMatch",
    "SearchResult",
    "Transport",
    "TransportError",
    "TransportResponse",
    "Vector",
]
