"""HTTP transport boundary used by :class:`pinewire.client.PineconeClient`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol, runtime_checkable

import httpx

from pinewire.client.errors import TransportError

__all__ = [
    "DEFAULT_TIMEOUT",
    "HttpxTransport",
    "Transport",
    "TransportResponse",
]

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Raw status code and body returned by a transport."""

    status_code: int
    body: bytes = b""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class Transport(Protocol):
    """Boundary contract for executing a single HTTP request."""

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        json: Any | None = None,
    ) -> TransportResponse:
        """Perform ``method`` against ``url`` and return the raw response.

        Implementations raise :class:`TransportError` when no usable response
        could be obtained, including invalid URLs and redirect loops. HTTP
        error statuses are returned, not raised.
        """


class HttpxTransport(Transport):
    """Synchronous transport backed by :class:`httpx.Client`.

    A client passed in by the caller stays owned by the caller; otherwise the
    transport builds one with ``timeout`` and closes it in :meth:`close`.
    """

    def __init__(
        self,
        *,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        json: Any | None = None,
    ) -> TransportResponse:
        try:
            response = self._client.request(
                method,
                url,
                headers=dict(headers),
                json=json,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(
                f"{method} {url} failed: {str(exc) or exc.__class__.__name__}",
            ) from exc
        return TransportResponse(
            status_code=response.status_code,
            body=response.content,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
