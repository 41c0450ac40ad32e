from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Mapping, Optional

from ..core.constants import LOCAL_ID_PREFIX


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee as cached on the client.

    The backend owns the record; `id` is the server id, or a `local-` placeholder
    while the create is still waiting in the pending-write queue.
    """

    id: str
    name: str
    pin: str
    department: Optional[str] = None

    @property
    def is_local(self) -> bool:
        return self.id.startswith(LOCAL_ID_PREFIX)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Employee":
        record_id = data.get("id", data.get("_id"))
        return cls(
            id=str(record_id) if record_id is not None else "",
            name=str(data.get("name") or ""),
            pin=str(data.get("pin") or ""),
            department=data.get("department") or None,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def to_payload(self) -> dict:
        """Body sent to the backend (the id travels in the URL, never in the body)."""
        payload = {"name": self.name, "pin": self.pin}
        if self.department:
            payload["department"] = self.department
        return payload

    def with_changes(self, **changes: Any) -> "Employee":
        return replace(self, **changes)
