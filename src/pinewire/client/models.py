"""Request and response shapes exchanged with the Pinecone API.

Request-side values are frozen dataclasses that validate on construction and
render their wire payload through ``to_payload``. Response-side shapes are
``TypedDict`` declarations: the client hands decoded JSON back as plain
mappings once the validator has checked the containers it relies on.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Mapping, NotRequired, Sequence, TypedDict

from pinewire.client.errors import ConfigurationError

__all__ = [
    "Credentials",
    "DeletionProtection",
    "EmbeddingInput",
    "EmbeddingRequest",
    "IndexCreateRequest",
    "IndexDescriptor",
    "IndexStats",
    "InputType",
    "NamespaceSummary",
    "SearchMatch",
    "SearchResult",
    "Vector",
]


def _normalize_string(value: Any, *, field: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string (got {type(value)!r})")
    result = value.strip()
    if not result:
        raise ValueError(f"{field} cannot be empty")
    return result


def _parse_positive_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer (got {value!r})")
    if isinstance(value, str):
        stripped = value.strip()
        try:
            value = int(stripped)
        except ValueError as exc:
            message = f"{field} must be an integer (got {stripped!r})"
            raise ValueError(message) from exc
    if not isinstance(value, int):
        raise ValueError(f"{field} must be an integer (got {value!r})")
    if value < 1:
        raise ValueError(f"{field} must be >= 1 (got {value})")
    return value


@dataclass(frozen=True, slots=True)
class Credentials:
    """API key and environment identifier bound to one client instance."""

    api_key: str = field(repr=False)
    environment: str

    def __post_init__(self) -> None:
        for name in ("api_key", "environment"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ConfigurationError(
                    f"Expected {name} to be a string, got "
                    f"{type(value).__name__}",
                )
            if not value.strip():
                raise ConfigurationError(f"{name} cannot be empty")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Credentials":
        """Build credentials from a mapping using snake or camel keys."""

        api_key = raw.get("api_key", raw.get("apiKey"))
        environment = raw.get("environment")
        if api_key is None:
            raise ConfigurationError("api_key is required")
        if environment is None:
            raise ConfigurationError("environment is required")
        return cls(api_key=api_key, environment=environment)


class DeletionProtection(StrEnum):
    ENABLED = "enabled"
    DISABLED = "disabled"


class InputType(StrEnum):
    """Embedding input roles understood by the inference endpoint."""

    QUERY = "query"
    PASSAGE = "passage"


@dataclass(frozen=True, slots=True)
class IndexCreateRequest:
    """Payload for creating a serverless index."""

    name: str
    dimension: int
    metric: str
    cloud: str
    region: str
    deletion_protection: DeletionProtection = DeletionProtection.DISABLED

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _normalize_string(self.name, field="name"))
        object.__setattr__(
            self,
            "dimension",
            _parse_positive_int(self.dimension, field="dimension"),
        )
        for name in ("metric", "cloud", "region"):
            value = _normalize_string(getattr(self, name), field=name)
            object.__setattr__(self, name, value)
        object.__setattr__(
            self,
            "deletion_protection",
            DeletionProtection(self.deletion_protection),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "dimension": self.dimension,
            "metric": self.metric,
            "spec": {
                "serverless": {
                    "cloud": self.cloud,
                    "region": self.region,
                },
            },
            "deletion_protection": self.deletion_protection.value,
        }


@dataclass(frozen=True, slots=True)
class Vector:
    """Single record upserted into a namespace.

    ``values`` length is checked by the service against the index dimension.
    """

    id: str
    values: tuple[float, ...]
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", _normalize_string(self.id, field="id"))
        values: list[float] = []
        for position, value in enumerate(self.values):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(
                    f"values[{position}] must be a number (got {value!r})"
                )
            if not math.isfinite(value):
                raise ValueError(
                    f"values[{position}] must be finite (got {value!r})"
                )
            values.append(float(value))
        object.__setattr__(self, "values", tuple(values))
        if not isinstance(self.metadata, Mapping):
            raise ValueError("metadata must be a mapping")
        object.__setattr__(self, "metadata", dict(self.metadata))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Vector":
        values = raw.get("values", ())
        if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
            raise ValueError("values must be a sequence of numbers")
        return cls(
            id=raw.get("id"),  # type: ignore[arg-type]
            values=tuple(values),
            metadata=raw.get("metadata") or {},
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "values": list(self.values),
            "metadata": dict(self.metadata),
        }


class EmbeddingInput(TypedDict):
    text: str


@dataclass(frozen=True, slots=True)
class EmbeddingRequest:
    """Body sent to the ``/embed`` inference endpoint."""

    inputs: tuple[EmbeddingInput, ...]
    model: str
    input_type: InputType
    truncate: str = "END"

    def __post_init__(self) -> None:
        object.__setattr__(self, "model", _normalize_string(self.model, field="model"))
        object.__setattr__(self, "input_type", InputType(self.input_type))
        object.__setattr__(self, "inputs", tuple(self.inputs))

    def to_payload(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "parameters": {
                "input_type": self.input_type.value,
                "truncate": self.truncate,
            },
            "inputs": [dict(item) for item in self.inputs],
        }


class IndexDescriptor(TypedDict, total=False):
    """Index metadata returned by the control plane.

    ``host`` is absent while the index is still being provisioned.
    """

    name: str
    host: str
    dimension: int
    metric: str
    spec: dict[str, Any]
    status: dict[str, Any]
    deletion_protection: str


class NamespaceSummary(TypedDict, total=False):
    vectorCount: int


class IndexStats(TypedDict):
    namespaces: dict[str, NamespaceSummary]
    dimension: NotRequired[int]
    indexFullness: NotRequired[float]
    totalVectorCount: NotRequired[int]


class SearchMatch(TypedDict):
    id: str
    score: float
    values: NotRequired[list[float]]
    metadata: NotRequired[dict[str, Any]]


class SearchResult(TypedDict):
    matches: list[SearchMatch]
    namespace: NotRequired[str]
