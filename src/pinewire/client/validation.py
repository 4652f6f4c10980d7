"""Decoding and shape checks applied to every Pinecone response."""

from __future__ import annotations

import json
import math
from collections.abc import Collection, Mapping
from typing import Any

from pinewire.client.errors import MalformedResponse, RemoteOperationFailed
from pinewire.client.transport import TransportResponse

__all__ = ["ResponseValidator", "join_path"]

_ROOT = "$"


def join_path(parent: str, key: str | int) -> str:
    """Return the dotted path for ``key`` below ``parent``.

    Example:
        >>> join_path("data", 0)
        'data[0]'
        >>> join_path("data[0]", "values")
        'data[0].values'
        >>> join_path("$", "indexes")
        'indexes'
    """

    if isinstance(key, int):
        return f"{parent}[{key}]"
    if parent == _ROOT:
        return key
    return f"{parent}.{key}"


class ResponseValidator:
    """Validate one response for ``operation``.

    Every failure is raised as :class:`MalformedResponse` carrying the raw
    body and the path that was expected, or :class:`RemoteOperationFailed`
    when the status code is rejected.
    """

    def __init__(self, response: TransportResponse, *, operation: str) -> None:
        self.response = response
        self.operation = operation

    def check_status(self, accepted: Collection[int] | None = None) -> None:
        """Reject statuses outside ``accepted`` (default: any 2xx)."""

        status = self.response.status_code
        ok = status in accepted if accepted is not None else self.response.is_success
        if not ok:
            raise RemoteOperationFailed(
                f"{self.operation} failed. Status code: {status}",
                operation=self.operation,
                status_code=status,
                body=self.response.text,
            )

    def decode(self, *, allow_absent: bool = False) -> Any:
        """Decode the JSON body.

        An empty body or a literal ``null`` counts as absent and returns
        ``None`` only when ``allow_absent`` is set.
        """

        text = self.response.text.strip()
        payload: Any = None
        if text:
            try:
                payload = json.loads(text)
            except json.JSONDecodeError as exc:
                raise self.fail(_ROOT, "body is not valid JSON") from exc
        if payload is None and not allow_absent:
            raise self.fail(_ROOT, "body is empty")
        return payload

    def fail(self, field: str, reason: str) -> MalformedResponse:
        return MalformedResponse(
            f"Invalid JSON response from Pinecone API ({self.operation}): "
            f"{field} {reason}.",
            operation=self.operation,
            status_code=self.response.status_code,
            field=field,
            body=self.response.text,
        )

    def mapping(self, value: Any, field: str = _ROOT) -> dict[str, Any]:
        if not isinstance(value, Mapping):
            raise self.fail(field, "must be an object")
        return dict(value)

    def sequence(self, value: Any, field: str) -> list[Any]:
        if not isinstance(value, list):
            raise self.fail(field, "must be an array")
        return value

    def string(self, value: Any, field: str) -> str:
        if not isinstance(value, str):
            raise self.fail(field, "must be a string")
        return value

    def numbers(self, value: Any, field: str) -> list[float]:
        items = self.sequence(value, field)
        result: list[float] = []
        for position, item in enumerate(items):
            if isinstance(item, bool) or not isinstance(item, (int, float)):
                raise self.fail(join_path(field, position), "must be a number")
            if not math.isfinite(item):
                raise self.fail(join_path(field, position), "must be finite")
            result.append(float(item))
        return result

    def member(
        self,
        container: Mapping[str, Any],
        key: str,
        parent: str = _ROOT,
    ) -> Any:
        """Return ``container[key]`` or raise naming the missing path."""

        if key not in container:
            raise self.fail(join_path(parent, key), "is missing")
        return container[key]

    def element(self, items: list[Any], position: int, parent: str) -> Any:
        if position >= len(items):
            raise self.fail(join_path(parent, position), "is missing")
        return items[position]
