"""Vector upsert and similarity search operations."""

from __future__ import annotations

from typing import Any, Mapping, Sequence, cast

from pinewire.client.auth import API_VERSION_2024_07, API_VERSION_2024_10
from pinewire.client.base import OperationsBase
from pinewire.client.models import SearchResult, Vector

__all__ = ["VectorOperations"]


def _vector_payload(vector: Vector | Mapping[str, Any]) -> dict[str, Any]:
    if not isinstance(vector, Vector):
        vector = Vector.from_mapping(vector)
    return vector.to_payload()


def _require_top_k(top_k: int) -> int:
    if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k < 1:
        raise ValueError(f"top_k must be a positive integer (got {top_k!r})")
    return top_k


class VectorOperations(OperationsBase):
    """Write and query vectors on an index's data-plane host."""

    def upsert_vectors(
        self,
        host: str,
        vectors: Sequence[Vector | Mapping[str, Any]],
        namespace: str,
    ) -> None:
        """Insert or overwrite ``vectors`` by id within ``namespace``.

        The batch is sent as one request; respecting the service's batch-size
        limit is up to the caller. Plain mappings are validated as
        :class:`Vector` first, so a record without an ``id`` or with
        non-numeric ``values`` raises ``ValueError`` before any request.
        """

        payload: list[dict[str, Any]] = []
        for position, vector in enumerate(vectors):
            try:
                payload.append(_vector_payload(vector))
            except ValueError as exc:
                raise ValueError(f"vectors[{position}]: {exc}") from exc

        self._call(
            "upsert_vectors",
            "POST",
            self._endpoints.data_plane(host, "vectors/upsert"),
            headers=self._auth.headers(
                api_version=API_VERSION_2024_07,
                json_body=True,
            ),
            json={
                "vectors": payload,
                "namespace": namespace,
            },
        )

    def search_index(
        self,
        host: str,
        query_embedding: Sequence[float],
        namespace: str,
        filter: Mapping[str, Any] | None = None,
        top_k: int = 3,
    ) -> SearchResult:
        """Return the ``top_k`` nearest matches with values and metadata."""

        payload: dict[str, Any] = {
            "namespace": namespace,
            "vector": [float(value) for value in query_embedding],
            "topK": _require_top_k(top_k),
            "includeValues": True,
            "includeMetadata": True,
        }
        if filter:
            payload["filter"] = dict(filter)

        validator = self._call(
            "search_index",
            "POST",
            self._endpoints.data_plane(host, "query"),
            headers=self._auth.headers(
                api_version=API_VERSION_2024_10,
                json_body=True,
            ),
            json=payload,
        )
        with self._parsing(validator) as check:
            body = check.mapping(check.decode())
            check.sequence(check.member(body, "matches"), "matches")
        return cast(SearchResult, body)

    def query_vectors(
        self,
        index_name: str,
        vector: Sequence[Any],
        top_k: int = 10,
    ) -> dict[str, Any]:
        """Query through the environment-qualified endpoint.

        Addressed by index name and the credentials' environment rather than
        by index host, and authenticated with a bearer token.
        """

        validator = self._call(
            "query_vectors",
            "POST",
            self._endpoints.legacy_query(self._auth.environment),
            headers=self._auth.bearer_headers(),
            json={
                "index": index_name,
                "query": list(vector),
                "topK": _require_top_k(top_k),
            },
        )
        with self._parsing(validator) as check:
            body = check.mapping(check.decode())
        return body
