"""Text embedding operations backed by the hosted inference endpoint."""

from __future__ import annotations

import unicodedata
from typing import Iterable, Mapping

from pinewire.client.auth import API_VERSION_2024_10
from pinewire.client.base import OperationsBase
from pinewire.client.models import EmbeddingInput, EmbeddingRequest, InputType
from pinewire.client.validation import ResponseValidator

__all__ = ["DEFAULT_EMBEDDING_MODEL", "EmbeddingOperations", "normalize_text"]

DEFAULT_EMBEDDING_MODEL = "multilingual-e5-large"


def normalize_text(text: str) -> str:
    """Return ``text`` as well-formed UTF-8 in NFC form.

    Lone surrogates (e.g. from undecodable file names) are replaced so the
    JSON encoder never sees an unencodable code point.

    Example:
        >>> normalize_text("cafe\\u0301")
        'café'
        >>> normalize_text("bad\\udcff")
        'bad?'
    """

    encoded = text.encode("utf-8", errors="replace")
    return unicodedata.normalize("NFC", encoded.decode("utf-8"))


class EmbeddingOperations(OperationsBase):
    """Convert text into embedding vectors."""

    _embedding_model: str = DEFAULT_EMBEDDING_MODEL

    def _embed(
        self,
        operation: str,
        request: EmbeddingRequest,
    ) -> ResponseValidator:
        return self._call(
            operation,
            "POST",
            self._endpoints.embed(),
            headers=self._auth.headers(
                api_version=API_VERSION_2024_10,
                json_body=True,
            ),
            json=request.to_payload(),
        )

    def create_embedding(
        self,
        text: str,
        model: str | None = None,
    ) -> list[float]:
        """Return the query embedding for ``text``.

        An entirely empty response body yields an empty list; a body that is
        present but lacks a numeric ``data[0].values`` raises
        :class:`~pinewire.client.errors.MalformedResponse`.
        """

        request = EmbeddingRequest(
            inputs=({"text": normalize_text(text)},),
            model=model or self._embedding_model,
            input_type=InputType.QUERY,
        )
        validator = self._embed("create_embedding", request)
        with self._parsing(validator) as check:
            payload = check.decode(allow_absent=True)
            if payload is None:
                return []
            body = check.mapping(payload)
            data = check.sequence(check.member(body, "data"), "data")
            first = check.mapping(check.element(data, 0, "data"), "data[0]")
            values = check.member(first, "values", "data[0]")
            return check.numbers(values, "data[0].values")

    def create_vectors(
        self,
        inputs: Iterable[EmbeddingInput | Mapping[str, str]],
        model: str | None = None,
    ) -> str:
        """Submit a batch of passages and return the service's ``data`` handle.

        Unlike :meth:`create_embedding`, the batch call answers with a string
        handle rather than inline vectors.
        """

        items: list[EmbeddingInput] = []
        for position, item in enumerate(inputs):
            text = item.get("text") if isinstance(item, Mapping) else None
            if not isinstance(text, str):
                raise ValueError(f"inputs[{position}].text must be a string")
            items.append({"text": normalize_text(text)})

        request = EmbeddingRequest(
            inputs=tuple(items),
            model=model or self._embedding_model,
            input_type=InputType.PASSAGE,
        )
        validator = self._embed("create_vectors", request)
        with self._parsing(validator) as check:
            body = check.mapping(check.decode())
            return check.string(check.member(body, "data"), "data")
