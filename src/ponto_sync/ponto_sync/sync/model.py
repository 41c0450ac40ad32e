from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..core.constants import OFFLINE_MESSAGE
from ..core.enums import Collection, SyncStatus, WriteOperation


@dataclass(frozen=True)
class PendingWrite:
    """A write that could not reach the backend, waiting in the FIFO queue.

    For creates `payload` is the caller's original input and `local_id` is the
    placeholder given to the optimistic record. For updates and deletes
    `target_id` names the record (possibly a placeholder until its create has
    been replayed).
    """

    entry_id: str
    operation: WriteOperation
    collection: Collection
    payload: dict
    enqueued_at: str
    target_id: Optional[str] = None
    local_id: Optional[str] = None

    @classmethod
    def new(
        cls,
        operation: WriteOperation,
        collection: Collection,
        payload: Mapping[str, Any],
        *,
        target_id: Optional[str] = None,
        local_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "PendingWrite":
        return cls(
            entry_id=uuid.uuid4().hex,
            operation=operation,
            collection=collection,
            payload=dict(payload),
            enqueued_at=(now or datetime.now()).isoformat(timespec="seconds"),
            target_id=target_id,
            local_id=local_id,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PendingWrite":
        return cls(
            entry_id=str(data["entry_id"]),
            operation=WriteOperation(data["operation"]),
            collection=Collection(data["collection"]),
            payload=dict(data.get("payload") or {}),
            enqueued_at=str(data.get("enqueued_at") or ""),
            target_id=data.get("target_id"),
            local_id=data.get("local_id"),
        )

    def to_dict(self) -> dict:
        return {
            "entry_id": self.entry_id,
            "operation": self.operation.value,
            "collection": self.collection.value,
            "payload": dict(self.payload),
            "enqueued_at": self.enqueued_at,
            "target_id": self.target_id,
            "local_id": self.local_id,
        }


@dataclass(frozen=True)
class SyncResult:
    """Outcome of refresh(): always a defined state, never an exception."""

    status: SyncStatus
    employees: int
    punches: int
    message: Optional[str] = None
    replayed: int = 0

    @property
    def online(self) -> bool:
        return self.status == SyncStatus.ONLINE

    @classmethod
    def offline(cls, employees: int, punches: int) -> "SyncResult":
        return cls(SyncStatus.OFFLINE, employees, punches, OFFLINE_MESSAGE)


@dataclass
class ReplayReport:
    replayed: int = 0
    remaining: int = 0
    blocked: list[Collection] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def drained(self) -> bool:
        return self.remaining == 0
