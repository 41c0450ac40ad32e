from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx

from ..core.constants import DEFAULT_PROXY_PREFIX, DEFAULT_REQUEST_TIMEOUT
from ..core.exceptions import TransientNetworkError

logger = logging.getLogger(__name__)

# Connection-level headers and the ones httpx recomputes for the new request.
SKIPPED_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
        "host",
        "content-length",
        "accept-encoding",
    }
)


@dataclass(frozen=True)
class ProxyResponse:
    status: int
    payload: Any = None


class ProxyForwarder:
    """Relay a browser request to the backend under a path without the proxy prefix."""

    def __init__(
        self,
        base_url: str,
        *,
        prefix: str = DEFAULT_PROXY_PREFIX,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._prefix = "/" + prefix.strip("/")
        self._client = httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    @property
    def prefix(self) -> str:
        return self._prefix

    def close(self) -> None:
        self._client.close()

    def target_path(self, path: str) -> str:
        if path == self._prefix or path.startswith(self._prefix + "/"):
            path = path[len(self._prefix):]
        return "/" + path.lstrip("/")

    def forward(
        self,
        method: str,
        path: str,
        *,
        query: str = "",
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[bytes] = None,
    ) -> ProxyResponse:
        url = self.target_path(path)
        if query:
            url = f"{url}?{query}"

        out_headers = {k: v for k, v in (headers or {}).items() if k.lower() not in SKIPPED_HEADERS}
        if body and not any(k.lower() == "content-type" for k in out_headers):
            out_headers["Content-Type"] = "application/json"

        logger.info("proxy %s %s", method, url)
        try:
            response = self._client.request(method, url, headers=out_headers, content=body or None)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError) as e:
            # ValueError also covers header values httpx cannot encode.
            logger.error("proxy %s %s failed: %s", method, url, e)
            raise TransientNetworkError(str(e) or type(e).__name__) from e

        if not response.content:
            return ProxyResponse(response.status_code)
        try:
            payload = response.json()
        except ValueError:
            payload = {"text": response.text}
        return ProxyResponse(response.status_code, payload)
