"""URL construction for control-plane, data-plane and inference endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

__all__ = ["DEFAULT_CONTROL_PLANE_URL", "Endpoints"]

DEFAULT_CONTROL_PLANE_URL = "https://api.pinecone.io"


def _require_segment(value: str, *, field: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{field} cannot be empty")
    return stripped


@dataclass(frozen=True, slots=True)
class Endpoints:
    """Resolve request URLs.

    Control-plane calls go to ``control_plane_url``; data-plane calls go to
    the per-index host assigned at provisioning time.

    Example:
        >>> endpoints = Endpoints()
        >>> endpoints.index("my index")
        'https://api.pinecone.io/indexes/my%20index'
        >>> endpoints.data_plane("idx-abc.svc.pinecone.io", "query")
        'https://idx-abc.svc.pinecone.io/query'
        >>> endpoints.legacy_query("us-west1-gcp")
        'https://us-west1-gcp.pinecone.io/vectors/query'
    """

    control_plane_url: str = DEFAULT_CONTROL_PLANE_URL

    def __post_init__(self) -> None:
        url = _require_segment(self.control_plane_url, field="control_plane_url")
        object.__setattr__(self, "control_plane_url", url.rstrip("/"))

    def indexes(self) -> str:
        return f"{self.control_plane_url}/indexes"

    def index(self, name: str) -> str:
        segment = quote(_require_segment(name, field="index name"), safe="")
        return f"{self.indexes()}/{segment}"

    def embed(self) -> str:
        return f"{self.control_plane_url}/embed"

    def data_plane(self, host: str, path: str) -> str:
        """Return ``https://{host}/{path}``; an explicit scheme is kept."""

        base = _require_segment(host, field="host").rstrip("/")
        if not base.startswith(("https://", "http://")):
            base = f"https://{base}"
        return f"{base}/{path.lstrip('/')}"

    def legacy_query(self, environment: str) -> str:
        env = _require_segment(environment, field="environment")
        return f"https://{env}.pinecone.io/vectors/query"
