"""Client facade exposing every Pinecone operation on one handle."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Callable, Mapping

from pinewire.client.auth import Authenticator
from pinewire.client.embeddings import DEFAULT_EMBEDDING_MODEL, EmbeddingOperations
from pinewire.client.endpoints import Endpoints
from pinewire.client.indexes import IndexOperations
from pinewire.client.models import Credentials
from pinewire.client.transport import DEFAULT_TIMEOUT, HttpxTransport, Transport
from pinewire.client.vectors import VectorOperations
from pinewire.core.logging import Logger, get_logger

if TYPE_CHECKING:  # pragma: no cover - type checker imports only
    from pinewire.core.config import ClientSettings

__all__ = ["PineconeClient"]


class PineconeClient(IndexOperations, VectorOperations, EmbeddingOperations):
    """Single entry point for index, vector and embedding operations.

    Every call is one synchronous round trip through ``transport``. The
    client keeps no per-call state, so one instance can be shared across
    threads when the transport allows it.

    Example:
        >>> import httpx
        >>> transport = HttpxTransport(
        ...     client=httpx.Client(
        ...         transport=httpx.MockTransport(
        ...             lambda request: httpx.Response(200, json={"indexes": []})
        ...         )
        ...     )
        ... )
        >>> client = PineconeClient(
        ...     {"api_key": "k", "environment": "e"}, transport=transport
        ... )
        >>> client.list_indexes()
        []
    """

    def __init__(
        self,
        credentials: Credentials | Mapping[str, Any],
        *,
        transport: Transport | None = None,
        endpoints: Endpoints | None = None,
        embedding_model: str = DEFAULT_EMBEDDING_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        logger: Logger | None = None,
        now: Callable[[], float] = time.perf_counter,
    ) -> None:
        if not isinstance(credentials, Credentials):
            credentials = Credentials.from_mapping(credentials)
        self._auth = Authenticator(credentials)
        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport(timeout=timeout)
        self._endpoints = endpoints or Endpoints()
        self._embedding_model = embedding_model
        self._now = now
        self.logger = logger or get_logger(__name__, component="pinecone-client")

    def __repr__(self) -> str:
        return (
            f"PineconeClient(environment={self._auth.environment!r}, "
            f"control_plane_url={self._endpoints.control_plane_url!r})"
        )

    @classmethod
    def from_settings(
        cls,
        settings: "ClientSettings",
        *,
        transport: Transport | None = None,
        logger: Logger | None = None,
    ) -> "PineconeClient":
        """Build a client from validated :class:`ClientSettings`."""

        credentials = Credentials(
            api_key=settings.api_key.get_secret_value(),
            environment=settings.environment,
        )
        return cls(
            credentials,
            transport=transport,
            endpoints=Endpoints(control_plane_url=settings.control_plane_url),
            embedding_model=settings.embedding_model,
            timeout=settings.timeout,
            logger=logger,
        )

    @property
    def environment(self) -> str:
        return self._auth.environment

    def close(self) -> None:
        """Close the transport built by this client; injected ones stay open."""

        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            self._transport.close()

    def __enter__(self) -> "PineconeClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

