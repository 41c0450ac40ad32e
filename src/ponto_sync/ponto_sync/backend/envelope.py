from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ApiResponse:
    """The one response shape the sync layer works with.

    The backend answers either `{success, data, message}` or a bare JSON
    document; both are folded into this envelope here so nothing upstream has
    to branch on the body shape.
    """

    ok: bool
    status: int
    data: Any = None
    message: Optional[str] = None

    @classmethod
    def from_http(cls, status: int, body: Any) -> "ApiResponse":
        status_ok = 200 <= status < 300
        if isinstance(body, dict) and "success" in body:
            return cls(
                ok=status_ok and bool(body.get("success")),
                status=status,
                data=body.get("data"),
                message=body.get("message") or body.get("error"),
            )
        message = None
        if not status_ok and isinstance(body, dict):
            message = body.get("message") or body.get("error")
        return cls(ok=status_ok, status=status, data=body, message=message)
