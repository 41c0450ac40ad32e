from __future__ import annotations

import copy
import threading
from typing import Any, Callable

from .store import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Process-local store. Values are deep-copied in and out like a real backend would."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def append(self, key: str, item: Any) -> None:
        with self._lock:
            self._data.setdefault(key, []).append(copy.deepcopy(item))

    def update(self, key: str, mutate: Callable[[Any], Any], default: Any = None) -> Any:
        with self._lock:
            current = copy.deepcopy(self._data.get(key, default))
            new_value = mutate(current)
            self._data[key] = copy.deepcopy(new_value)
            return new_value
