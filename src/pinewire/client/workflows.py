"""Multi-step helpers composed from :class:`PineconeClient` operations.

These cover what page handlers used to do by hand: resolve an index host by
name, pick a default namespace, search with free text and register a record
as an embedded vector.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

from pinewire.client.errors import MalformedResponse
from pinewire.client.models import SearchResult, Vector
from pinewire.client.service import PineconeClient

__all__ = [
    "first_namespace",
    "parse_vectors",
    "register_record",
    "resolve_host",
    "search_text",
]


def resolve_host(client: PineconeClient, index_name: str) -> str:
    """Return the data-plane host of ``index_name``.

    The host is fetched on every call; it is absent while the index is still
    provisioning.
    """

    index = client.get_index(index_name)
    host = index.get("host")
    if not isinstance(host, str) or not host.strip():
        raise MalformedResponse(
            f"Index {index_name!r} has no host yet; it may still be "
            "provisioning.",
            operation="get_index",
            field="host",
        )
    return host


def first_namespace(client: PineconeClient, host: str) -> str | None:
    """Return the first namespace reported for ``host``, if any."""

    stats = client.describe_index_stats(host)
    return next(iter(stats["namespaces"]), None)


def search_text(
    client: PineconeClient,
    index_name: str,
    text: str,
    *,
    namespace: str | None = None,
    filter: Mapping[str, Any] | None = None,
    top_k: int = 3,
) -> SearchResult:
    """Embed ``text`` and search ``index_name`` with the resulting vector.

    Without ``namespace`` the first namespace of the index is used, or the
    default (empty) namespace when the index has none.
    """

    embedding = client.create_embedding(text)
    host = resolve_host(client, index_name)
    if namespace is None:
        namespace = first_namespace(client, host) or ""
    return client.search_index(
        host,
        embedding,
        namespace,
        filter=filter,
        top_k=top_k,
    )


def _record_metadata(record: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key): "" if value is None else value for key, value in record.items()}


def register_record(
    client: PineconeClient,
    index_name: str,
    record: Mapping[str, Any],
    *,
    id_field: str,
    namespace: str,
) -> Vector:
    """Embed ``record`` and upsert it under ``record[id_field]``.

    Empty fields are blanked to ``""`` before embedding; the record itself is
    stored as the vector metadata. Re-registering the same id overwrites it.
    """

    metadata = _record_metadata(record)
    record_id = metadata.get(id_field)
    if not isinstance(record_id, str) or not record_id.strip():
        raise ValueError(f"record field {id_field!r} must be a non-empty string")

    embedding = client.create_embedding(json.dumps(metadata, ensure_ascii=False))
    host = resolve_host(client, index_name)
    vector = Vector(id=record_id, values=tuple(embedding), metadata=metadata)
    client.upsert_vectors(host, [vector], namespace)
    return vector


def parse_vectors(raw: str | bytes | Sequence[Any]) -> list[Vector]:
    """Validate bulk upsert input given as JSON text or decoded data.

    Raises:
        ValueError: If the payload is not an array of vector objects.
    """

    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Vectors must be valid JSON: {exc}") from exc
    else:
        data = raw

    if not isinstance(data, list):
        raise ValueError("Vectors must be a JSON array.")

    vectors: list[Vector] = []
    for position, item in enumerate(data):
        if not isinstance(item, Mapping):
            raise ValueError(f"vectors[{position}] must be an object")
        try:
            vectors.append(Vector.from_mapping(item))
        except ValueError as exc:
            raise ValueError(f"vectors[{position}]: {exc}") from exc
    return vectors
