"""Index lifecycle operations against the control plane."""

from __future__ import annotations

from typing import Any, Mapping, cast

from pinewire.client.auth import API_VERSION_2024_07, API_VERSION_2024_10
from pinewire.client.base import OperationsBase
from pinewire.client.models import IndexCreateRequest, IndexDescriptor, IndexStats
from pinewire.client.validation import join_path

__all__ = ["IndexOperations"]

_CREATED_STATUSES = frozenset({200, 201})
_VIEW_STATUSES = frozenset({200})


class IndexOperations(OperationsBase):
    """Create, list, inspect and delete indexes."""

    def list_indexes(self) -> list[IndexDescriptor]:
        """Return the ``indexes`` array of the control-plane listing."""

        validator = self._call(
            "list_indexes",
            "GET",
            self._endpoints.indexes(),
            headers=self._auth.headers(),
        )
        with self._parsing(validator) as check:
            body = check.mapping(check.decode())
            indexes = check.sequence(check.member(body, "indexes"), "indexes")
        return cast(list[IndexDescriptor], list(indexes))

    def get_index(self, name: str) -> IndexDescriptor:
        """Return metadata for ``name``; ``host`` may be absent while provisioning."""

        validator = self._call(
            "get_index",
            "GET",
            self._endpoints.index(name),
            headers=self._auth.headers(),
        )
        with self._parsing(validator) as check:
            body = check.mapping(check.decode())
        return cast(IndexDescriptor, body)

    def view_index(self, name: str) -> IndexDescriptor:
        """Return metadata for ``name`` requiring an explicit HTTP 200.

        An empty body is reported as an empty mapping.
        """

        validator = self._call(
            "view_index",
            "GET",
            self._endpoints.index(name),
            headers=self._auth.headers(api_version=API_VERSION_2024_07),
            accepted=_VIEW_STATUSES,
        )
        with self._parsing(validator) as check:
            payload = check.decode(allow_absent=True)
            body = {} if payload is None else check.mapping(payload)
        return cast(IndexDescriptor, body)

    def create_index(
        self,
        request: IndexCreateRequest | Mapping[str, Any],
    ) -> None:
        """Create a serverless index.

        Only HTTP 200/201 count as success. Creating an index whose name is
        already taken fails remotely and surfaces as
        :class:`~pinewire.client.errors.RemoteOperationFailed`.
        """

        if isinstance(request, IndexCreateRequest):
            payload = request.to_payload()
        else:
            payload = dict(request)
        self._call(
            "create_index",
            "POST",
            self._endpoints.indexes(),
            headers=self._auth.headers(
                api_version=API_VERSION_2024_07,
                json_body=True,
                accept_json=True,
            ),
            json=payload,
            accepted=_CREATED_STATUSES,
        )

    def delete_index(self, name: str) -> None:
        self._call(
            "delete_index",
            "DELETE",
            self._endpoints.index(name),
            headers=self._auth.headers(
                api_version=API_VERSION_2024_10,
                accept_json=True,
            ),
        )

    def describe_index_stats(self, host: str) -> IndexStats:
        """Return per-namespace vector counts for the index at ``host``.

        The body must carry a ``stats`` object whose ``namespaces`` member is
        itself an object; anything else raises
        :class:`~pinewire.client.errors.MalformedResponse`.
        """

        validator = self._call(
            "describe_index_stats",
            "POST",
            self._endpoints.data_plane(host, "describe_index_stats"),
            headers=self._auth.headers(
                api_version=API_VERSION_2024_10,
                json_body=True,
            ),
        )
        with self._parsing(validator) as check:
            body = check.mapping(check.decode())
            stats = check.mapping(check.member(body, "stats"), "stats")
            stats["namespaces"] = check.mapping(
                check.member(stats, "namespaces", "stats"),
                join_path("stats", "namespaces"),
            )
        return cast(IndexStats, stats)
