from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import httpx

from ..core.constants import DEFAULT_REQUEST_TIMEOUT
from ..core.enums import Collection
from ..core.exceptions import TransientNetworkError
from .envelope import ApiResponse

logger = logging.getLogger(__name__)


class BackendClient(Protocol):
    """Remote REST backend as seen by the sync manager.

    Every failure (transport error, non-2xx, `success: false`, unreadable body)
    surfaces as TransientNetworkError.
    """

    def list(self, collection: Collection) -> list[dict]:
        raise NotImplementedError

    def create(self, collection: Collection, payload: dict) -> dict:
        raise NotImplementedError

    def update(self, collection: Collection, record_id: str, payload: dict) -> Optional[dict]:
        raise NotImplementedError

    def delete(self, collection: Collection, record_id: str) -> None:
        """Deleting an id the backend no longer has is not an error."""

        raise NotImplementedError

    def ping(self) -> bool:
        raise NotImplementedError


class HttpBackendClient(BackendClient):
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, *, json: Any = None, missing_ok: bool = False) -> ApiResponse:
        try:
            response = self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning("backend %s %s failed: %s", method, path, e)
            raise TransientNetworkError(f"{method} {path}: {e}") from e

        if missing_ok and response.status_code == 404:
            return ApiResponse(ok=True, status=404)

        body = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                raise TransientNetworkError(
                    f"{method} {path}: malformed response body", status=response.status_code
                ) from None

        envelope = ApiResponse.from_http(response.status_code, body)
        if not envelope.ok:
            raise TransientNetworkError(
                envelope.message or f"{method} {path}: backend answered {response.status_code}",
                status=response.status_code,
            )
        return envelope

    def list(self, collection: Collection) -> list[dict]:
        envelope = self._request("GET", f"/{collection.value}")
        if not isinstance(envelope.data, list):
            raise TransientNetworkError(f"GET /{collection.value}: expected a list", status=envelope.status)
        if not all(isinstance(item, dict) for item in envelope.data):
            raise TransientNetworkError(f"GET /{collection.value}: malformed record in list", status=envelope.status)
        return list(envelope.data)

    def create(self, collection: Collection, payload: dict) -> dict:
        envelope = self._request("POST", f"/{collection.value}", json=payload)
        data = envelope.data
        if not isinstance(data, dict) or data.get("id", data.get("_id")) is None:
            raise TransientNetworkError(f"POST /{collection.value}: no record in response", status=envelope.status)
        return data

    def update(self, collection: Collection, record_id: str, payload: dict) -> Optional[dict]:
        envelope = self._request("PUT", f"/{collection.value}/{record_id}", json=payload)
        return envelope.data if isinstance(envelope.data, dict) else None

    def delete(self, collection: Collection, record_id: str) -> None:
        self._request("DELETE", f"/{collection.value}/{record_id}", missing_ok=True)

    def ping(self) -> bool:
        # Any HTTP answer counts: only transport errors mean "disconnected".
        try:
            self._client.get("/")
        except httpx.HTTPError:
            return False
        return True
