from __future__ import annotations

from typing import Optional

import pytest

from src.ponto_sync.ponto_sync.core.enums import Collection
from src.ponto_sync.ponto_sync.core.exceptions import TransientNetworkError
from src.ponto_sync.ponto_sync.storage.memory_store import InMemoryStore
from src.ponto_sync.ponto_sync.sync.manager import SyncManager


class FakeBackend:
    """In-memory stand-in for the remote REST backend.

    `online=False` makes every call fail like an unreachable host. `fail_ops`,
    `fail_collections` and `fail_ids` make specific calls fail, and
    `fail_next(n)` fails the next n calls whatever they are.
    """

    def __init__(self):
        self.data: dict[Collection, dict[str, dict]] = {Collection.EMPLOYEES: {}, Collection.PUNCHES: {}}
        self.online = True
        self.fail_ops: set[str] = set()
        self.fail_collections: set[Collection] = set()
        self.fail_ids: set[str] = set()
        self.calls: list[tuple] = []
        self._failures_left = 0
        self._next_id = 100

    def seed(self, collection: Collection, records: list[dict]) -> None:
        for record in records:
            self.data[collection][record["id"]] = dict(record)

    def fail_next(self, n: int) -> None:
        self._failures_left = n

    def _check(self, op: str, collection: Collection, record_id: Optional[str] = None) -> None:
        if not self.online:
            raise TransientNetworkError("backend unreachable")
        if self._failures_left > 0:
            self._failures_left -= 1
            raise TransientNetworkError("backend hiccup")
        if op in self.fail_ops or collection in self.fail_collections or record_id in self.fail_ids:
            raise TransientNetworkError(f"{op} rejected", status=500)

    def list(self, collection: Collection) -> list[dict]:
        self._check("list", collection)
        self.calls.append(("list", collection.value))
        return [dict(r) for r in self.data[collection].values()]

    def create(self, collection: Collection, payload: dict) -> dict:
        self._check("create", collection)
        record_id = f"srv-{self._next_id}"
        self._next_id += 1
        record = {**payload, "id": record_id}
        self.data[collection][record_id] = record
        self.calls.append(("create", collection.value, record_id))
        return dict(record)

    def update(self, collection: Collection, record_id: str, payload: dict) -> Optional[dict]:
        self._check("update", collection, record_id)
        if record_id not in self.data[collection]:
            raise TransientNetworkError(f"{record_id} not found", status=404)
        self.data[collection][record_id].update(payload)
        self.calls.append(("update", collection.value, record_id))
        return dict(self.data[collection][record_id])

    def delete(self, collection: Collection, record_id: str) -> None:
        self._check("delete", collection, record_id)
        self.data[collection].pop(record_id, None)
        self.calls.append(("delete", collection.value, record_id))

    def ping(self) -> bool:
        return self.online


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def manager(backend, store, sleeps) -> SyncManager:
    return SyncManager(backend, store, sleep=sleeps.append)
