"""Request plumbing shared by the index, vector and embedding operations."""

from __future__ import annotations

from collections.abc import Collection, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Callable

from pinewire.client.auth import Authenticator
from pinewire.client.endpoints import Endpoints
from pinewire.client.errors import (
    MalformedResponse,
    RemoteOperationFailed,
    TransportError,
)
from pinewire.client.transport import Transport
from pinewire.client.validation import ResponseValidator
from pinewire.core.logging import Logger

__all__ = ["OperationsBase"]


class OperationsBase:
    """Hold the collaborators every operation needs.

    None of the attributes change after construction; operation mixins only
    read them.
    """

    _transport: Transport
    _auth: Authenticator
    _endpoints: Endpoints
    _now: Callable[[], float]
    logger: Logger

    def _call(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        json: Any | None = None,
        accepted: Collection[int] | None = None,
    ) -> ResponseValidator:
        """Execute one round trip and return a validator for its response."""

        start = self._now()
        try:
            response = self._transport.request(
                method,
                url,
                headers=headers,
                json=json,
            )
        except TransportError as exc:
            exc.operation = operation
            self.logger.warning(
                "pinecone-request-failed",
                operation=operation,
                method=method,
                url=url,
                error_type="transport",
                error=exc.message,
            )
            raise

        self.logger.info(
            "pinecone-request",
            operation=operation,
            method=method,
            url=url,
            status_code=response.status_code,
            latency=self._now() - start,
        )

        validator = ResponseValidator(response, operation=operation)
        try:
            validator.check_status(accepted)
        except RemoteOperationFailed:
            self.logger.warning(
                "pinecone-request-failed",
                operation=operation,
                method=method,
                url=url,
                error_type="status",
                status_code=response.status_code,
            )
            raise
        return validator

    @contextmanager
    def _parsing(self, validator: ResponseValidator) -> Iterator[ResponseValidator]:
        """Log shape failures raised while extracting a result."""

        try:
            yield validator
        except MalformedResponse as exc:
            self.logger.warning(
                "pinecone-request-failed",
                operation=validator.operation,
                error_type="malformed",
                field=exc.field,
            )
            raise
