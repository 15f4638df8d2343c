"""Elasticsearch HTTP client."""

from __future__ import annotations

import itertools
from typing import Any, Mapping, Protocol, Sequence
from urllib.parse import quote

import requests

from ElasticFront.utils.log import log

DEFAULT_TIMEOUT = 30.0
NOT_FOUND = 404

HEADERS = {
    "User-Agent": "elastic-front/0.1",
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class SearchClient(Protocol):
    """Minimal transport interface the query layer talks to."""

    def search(self, index: str, body: Mapping[str, Any]) -> dict[str, Any]:
        """Run a ``_search`` request and return the decoded response."""
        raise NotImplementedError

    def count(self, index: str, body: Mapping[str, Any]) -> dict[str, Any]:
        """Run a ``_count`` request and return the decoded response."""
        raise NotImplementedError

    def get_source(
        self,
        index: str,
        document_id: str,
        *,
        ignore_not_found: bool = False,
    ) -> dict[str, Any] | None:
        """Fetch the stored source of one document.

        Returns None when the document is absent and ``ignore_not_found`` is set.
        """
        raise NotImplementedError


class ElasticApiClient:
    """Low-level HTTP client for the Elasticsearch REST API.

    Requests rotate over the configured hosts. No retries are made: any
    transport or HTTP error reaches the caller as the ``requests`` exception.
    """

    def __init__(
        self,
        hosts: Sequence[str],
        *,
        pem_path: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the client with a reusable HTTP session.

        Args:
            hosts: Engine base URLs, e.g. ``https://localhost:9200``.
            pem_path: CA bundle used to verify the engine certificate.
            timeout: Request timeout in seconds.

        Raises:
            ValueError: If no host is given.
        """
        normalized = [host.strip().rstrip("/") for host in hosts if host and host.strip()]
        if not normalized:
            raise ValueError("At least one Elasticsearch host is required")
        self.hosts: tuple[str, ...] = tuple(normalized)
        self.pem_path = pem_path
        self.timeout = timeout or DEFAULT_TIMEOUT
        self._next_host = itertools.cycle(self.hosts)
        self._session = requests.Session()
        self._session.headers.update(HEADERS)
        if pem_path:
            self._session.verify = pem_path

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> ElasticApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def search(self, index: str, body: Mapping[str, Any]) -> dict[str, Any]:
        """Run ``POST /{index}/_search``.

        Args:
            index: Index name.
            body: Compiled search body.

        Returns:
            Decoded JSON response.
        """
        response = self._request("POST", f"{_index_path(index)}/_search", body=body)
        response.raise_for_status()
        return _json_object(response)

    def count(self, index: str, body: Mapping[str, Any]) -> dict[str, Any]:
        """Run ``POST /{index}/_count``."""
        response = self._request("POST", f"{_index_path(index)}/_count", body=body)
        response.raise_for_status()
        return _json_object(response)

    def get_source(
        self,
        index: str,
        document_id: str,
        *,
        ignore_not_found: bool = False,
    ) -> dict[str, Any] | None:
        """Run ``GET /{index}/_source/{id}``.

        Args:
            index: Index name.
            document_id: Document ``_id``.
            ignore_not_found: Return None on 404 instead of raising.

        Returns:
            Stored document fields, or None for a tolerated 404.
        """
        response = self._request("GET", f"{_index_path(index)}/_source/{_quote(str(document_id))}")
        if response.status_code == NOT_FOUND and ignore_not_found:
            log.debug("Document not found: index=%s id=%s", index, document_id)
            return None
        response.raise_for_status()
        return _json_object(response)

    def _request(self, method: str, path: str, *, body: Mapping[str, Any] | None = None) -> requests.Response:
        """Send one request to the next host in rotation."""
        url = f"{next(self._next_host)}/{path}"
        log.debug("Elasticsearch request: %s %s body=%s", method, url, body)
        response = self._session.request(
            method,
            url,
            json=dict(body) if body is not None else None,
            timeout=self.timeout,
        )
        log.debug("Elasticsearch response: %s %s status=%d", method, url, response.status_code)
        return response


def _quote(segment: str, safe: str = "") -> str:
    return quote(segment, safe=safe)


def _json_object(response: requests.Response) -> dict[str, Any]:
    payload = response.json()
    if not isinstance(payload, dict):
        raise ValueError(f"Unexpected Elasticsearch response type: {type(payload).__name__}")
    return payload


def _index_path(index: str) -> str:
    # Commas and wildcards address several indices at once.
    return _quote(index, safe=",*")
