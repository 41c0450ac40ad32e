from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Mapping

from ..core.constants import LOCAL_ID_PREFIX


@dataclass(frozen=True)
class PunchRecord:
    """Domain entity: one clock event.

    `name` is a snapshot of the employee name at punch time. It only changes
    when an employee update cascades to the punches that share its PIN.
    """

    id: str
    pin: str
    name: str
    date: str
    time: str
    kind: str

    @property
    def is_local(self) -> bool:
        return self.id.startswith(LOCAL_ID_PREFIX)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PunchRecord":
        record_id = data.get("id", data.get("_id"))
        return cls(
            id=str(record_id) if record_id is not None else "",
            pin=str(data.get("pin") or ""),
            name=str(data.get("name") or ""),
            date=str(data.get("date") or ""),
            time=str(data.get("time") or ""),
            kind=str(data.get("kind") or ""),
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def to_payload(self) -> dict:
        return {
            "pin": self.pin,
            "name": self.name,
            "date": self.date,
            "time": self.time,
            "kind": self.kind,
        }

    def with_changes(self, **changes: Any) -> "PunchRecord":
        return replace(self, **changes)
