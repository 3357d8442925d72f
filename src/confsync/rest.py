"""HTTP access to the event, statistics and photo feeds.

Every request either yields decoded JSON or ``None``. Transport errors,
non-success statuses and undecodable bodies are logged and never raised,
so callers can degrade to empty results.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

USER_AGENT = "confsync/0.1 (conference feed client)"


class RestClient:
    """Thin JSON client around ``httpx.Client``."""

    def __init__(self, timeout: float = 30.0, client: httpx.Client | None = None):
        self._client = client or httpx.Client(
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self._client.close()

    def read_optional(self, url: str, params: dict[str, Any] | None = None) -> Any | None:
        """GET ``url`` and return its JSON body, or ``None`` on any failure."""
        return self._request("GET", url, params=params)

    def post_optional(self, url: str, json: Any, params: dict[str, Any] | None = None) -> Any | None:
        """POST ``json`` to ``url`` and return the JSON response, or ``None`` on any failure."""
        return self._request("POST", url, params=params, json=json)

    def read_bytes(self, url: str) -> bytes | None:
        """GET raw content, or ``None`` on any failure."""
        response = self._send("GET", url)
        return response.content if response is not None else None

    def _request(self, method: str, url: str, **kwargs) -> Any | None:
        response = self._send(method, url, **kwargs)
        if response is None:
            return None
        if not response.content:
            logger.warning("Empty response from %s %s", method, url)
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.warning("Undecodable JSON from %s %s: %s", method, url, e)
            return None

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response | None:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Request %s %s failed: %s", method, url, e)
            return None
        if not response.is_success:
            logger.warning("Request %s %s returned HTTP %s", method, url, response.status_code)
            return None
        return response
