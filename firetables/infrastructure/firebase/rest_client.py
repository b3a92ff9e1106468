"""Realtime Database REST transport (no firebase-admin).

Every node is addressed as ``<base_url>/<path>.json``. Requests carry a
bearer token from the shared TokenCache and use httpx.AsyncClient so they do
not block the event loop.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import httpx

from firetables.core.constants import DEFAULT_REQUEST_TIMEOUT_SECONDS, JSON_SUFFIX
from firetables.domain.exceptions import TransportException
from firetables.infrastructure.firebase.query_encoding import encode_query
from firetables.infrastructure.firebase.token_cache import TokenCache
from firetables.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def _normalize_path(path: str) -> str:
    return path.strip("/")


class RestTransport:
    """Thin async client for the Realtime Database REST API.

    Paths are slash-separated and never include the base URL or the .json
    suffix. Non-success responses raise TransportException; a missing node
    reads as None.
    """

    def __init__(
        self,
        base_url: str,
        token_cache: TokenCache,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._tokens = token_cache
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        """Return the REST URL of the node at ``path``."""
        path = _normalize_path(path)
        return f"{self._base_url}/{path}{JSON_SUFFIX}"

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def read(self, path: str) -> Any | None:
        """GET the node at ``path``; None if it does not exist."""
        return await self._request("GET", path)

    async def read_filtered(self, path: str, params: Mapping[str, Any]) -> Any | None:
        """GET the node at ``path`` with orderBy/equalTo/limit... query parameters."""
        return await self._request("GET", path, query=encode_query(params))

    async def write(self, path: str, value: Any) -> None:
        """PUT ``value`` at ``path``, replacing the node."""
        await self._request("PUT", path, body=value)

    async def append(self, path: str, value: Any) -> str:
        """POST ``value`` under ``path``; return the key generated by the database."""
        out = await self._request("POST", path, body=value)
        if not isinstance(out, dict) or not isinstance(out.get("name"), str):
            raise TransportException(
                "POST", _normalize_path(path), body=json.dumps(out),
                reason="response did not contain a generated key",
            )
        return out["name"]

    async def merge(self, path: str, value: Mapping[str, Any]) -> None:
        """PATCH ``value`` into the node at ``path`` without touching other children."""
        await self._request("PATCH", path, body=value)

    async def remove(self, path: str) -> None:
        """DELETE the node at ``path``."""
        await self._request("DELETE", path)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        query: str | None = None,
    ) -> Any | None:
        path = _normalize_path(path)
        url = self.url_for(path)
        if query:
            url = f"{url}?{query}"
        token = await self._tokens.get_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Cache-Control": "no-cache",
        }
        content: bytes | None = None
        if method in ("PUT", "POST", "PATCH"):
            headers["Content-Type"] = _JSON_CONTENT_TYPE
            content = json.dumps(body).encode("utf-8")
        try:
            resp = await self._http.request(method, url, headers=headers, content=content)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportException(method, path, reason=str(e)) from e
        logger.debug("%s %s -> %s", method, path, resp.status_code)

        if method == "GET" and resp.status_code == 404:
            return None
        if resp.status_code == 401:
            self._tokens.invalidate()
        if not resp.is_success:
            raise TransportException(method, path, status_code=resp.status_code, body=resp.text)
        raw = resp.content
        if not raw:
            return None
        try:
            return json.loads(raw.decode())
        except ValueError as e:
            raise TransportException(
                method, path, status_code=resp.status_code, body=resp.text,
                reason="response body is not JSON",
            ) from e
