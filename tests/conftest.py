"""Shared pytest fixtures for client and CLI tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx
import pytest

from pinewire.client import (
    Credentials,
    HttpxTransport,
    PineconeClient,
    TransportResponse,
)


@dataclass(slots=True)
class RecordedRequest:
    method: str
    url: str
    headers: dict[str, str]
    json: Any | None


@dataclass(slots=True)
class RecordingTransport:
    """Transport double replaying scripted responses in order.

    Script entries are ``(status_code, body)`` pairs where ``body`` is bytes,
    text, ``None`` (empty body) or any JSON-serializable value.
    """

    script: list[tuple[int, Any]] = field(default_factory=list)
    requests: list[RecordedRequest] = field(default_factory=list)

    def queue(self, status_code: int, body: Any = None) -> "RecordingTransport":
        self.script.append((status_code, body))
        return self

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        json: Any | None = None,
    ) -> TransportResponse:
        self.requests.append(
            RecordedRequest(method=method, url=url, headers=dict(headers), json=json)
        )
        if not self.script:
            raise AssertionError(f"unexpected request: {method} {url}")
        status_code, body = self.script.pop(0)
        return TransportResponse(status_code=status_code, body=_encode(body))

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


def _encode(body: Any) -> bytes:
    if body is None:
        return b""
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body).encode("utf-8")


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(api_key="pk-test-123", environment="us-west1-gcp")


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def client(credentials: Credentials, transport: RecordingTransport) -> PineconeClient:
    """Client wired to the recording transport with a fixed clock."""

    return PineconeClient(credentials, transport=transport, now=lambda: 0.0)


@pytest.fixture
def mock_client_factory(
    credentials: Credentials,
) -> Callable[[Callable[[httpx.Request], httpx.Response]], PineconeClient]:
    """Return a builder for clients backed by :class:`httpx.MockTransport`."""

    def _build(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> PineconeClient:
        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        return PineconeClient(
            credentials,
            transport=HttpxTransport(client=http_client),
        )

    return _build
