"""Header construction for authenticated Pinecone requests."""

from __future__ import annotations

from pinewire.client.models import Credentials

__all__ = [
    "API_VERSION_2024_07",
    "API_VERSION_2024_10",
    "Authenticator",
]

API_VERSION_2024_07 = "2024-07"
API_VERSION_2024_10 = "2024-10"

_JSON = "application/json"


class Authenticator:
    """Inject the API key held by ``credentials`` into outgoing headers.

    The credentials are read-only after construction so one authenticator can
    serve concurrent callers.
    """

    __slots__ = ("_credentials",)

    def __init__(self, credentials: Credentials) -> None:
        self._credentials = credentials

    def __repr__(self) -> str:
        return f"Authenticator(environment={self.environment!r})"

    @property
    def environment(self) -> str:
        return self._credentials.environment

    def headers(
        self,
        *,
        api_version: str | None = None,
        json_body: bool = False,
        accept_json: bool = False,
    ) -> dict[str, str]:
        """Return ``Api-Key`` headers plus the optional content negotiation."""

        headers = {"Api-Key": self._credentials.api_key}
        if accept_json:
            headers["Accept"] = _JSON
        if json_body:
            headers["Content-Type"] = _JSON
        if api_version is not None:
            headers["X-Pinecone-API-Version"] = api_version
        return headers

    def bearer_headers(self) -> dict[str, str]:
        """Return headers for the environment-qualified legacy endpoints."""

        return {
            "Authorization": f"Bearer {self._credentials.api_key}",
            "Content-Type": _JSON,
        }
