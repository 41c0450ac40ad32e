from __future__ import annotations

import json
import threading

import pytest

from src.ponto_sync.ponto_sync.storage.json_file_store import JsonFileStore
from src.ponto_sync.ponto_sync.storage.memory_store import InMemoryStore


@pytest.fixture(params=["memory", "file"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryStore()
    return JsonFileStore(tmp_path / "cache.json")


def test_missing_key_returns_default(any_store):
    assert any_store.get("employees") is None
    assert any_store.get("employees", []) == []


def test_set_then_get(any_store):
    any_store.set("employees", [{"id": "e1"}])

    assert any_store.get("employees") == [{"id": "e1"}]


def test_append_creates_and_extends_list(any_store):
    any_store.append("pending_writes", {"entry_id": "1"})
    any_store.append("pending_writes", {"entry_id": "2"})

    assert [e["entry_id"] for e in any_store.get("pending_writes")] == ["1", "2"]


def test_update_applies_mutation_atomically(any_store):
    any_store.set("counter", 1)

    result = any_store.update("counter", lambda v: v + 1)

    assert result == 2
    assert any_store.get("counter") == 2


def test_memory_store_hands_out_copies():
    store = InMemoryStore({"employees": [{"id": "e1"}]})

    store.get("employees").append({"id": "e2"})

    assert store.get("employees") == [{"id": "e1"}]


def test_file_store_persists_one_json_document(tmp_path):
    path = tmp_path / "nested" / "cache.json"
    JsonFileStore(path).set("employees", [{"id": "e1", "name": "Joao"}])

    assert json.loads(path.read_text(encoding="utf-8")) == {"employees": [{"id": "e1", "name": "Joao"}]}
    assert JsonFileStore(path).get("employees") == [{"id": "e1", "name": "Joao"}]
    assert [p.name for p in path.parent.iterdir()] == ["cache.json"]


def test_file_store_treats_corrupt_file_as_empty(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("{not json", encoding="utf-8")

    store = JsonFileStore(path)

    assert store.get("employees", []) == []
    store.set("employees", [])
    assert json.loads(path.read_text(encoding="utf-8")) == {"employees": []}


def _run_threads(count, target):
    threads = [threading.Thread(target=target, args=(n,)) for n in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()


def test_concurrent_appends_are_not_lost(any_store):
    threads, per_thread = 8, 25

    def worker(n):
        for i in range(per_thread):
            any_store.append("pending_writes", {"entry_id": f"{n}-{i}"})

    _run_threads(threads, worker)

    entries = any_store.get("pending_writes")
    assert len(entries) == threads * per_thread
    assert len({e["entry_id"] for e in entries}) == threads * per_thread


def test_concurrent_updates_are_serialized(any_store):
    any_store.set("counter", 0)

    def worker(n):
        for _ in range(20):
            any_store.update("counter", lambda v: v + 1)

    _run_threads(8, worker)

    assert any_store.get("counter") == 160
