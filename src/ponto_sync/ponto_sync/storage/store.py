from __future__ import annotations

from typing import Any, Callable, Protocol


class KeyValueStore(Protocol):
    """Persistence surface for the offline cache.

    Values are JSON-compatible (dicts, lists, strings, numbers). The sync
    layer depends on this interface only, so tests swap in InMemoryStore.
    """

    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def append(self, key: str, item: Any) -> None:
        """Append to the list stored under `key` as one atomic step."""

        raise NotImplementedError

    def update(self, key: str, mutate: Callable[[Any], Any], default: Any = None) -> Any:
        """Atomic read-modify-write: store and return `mutate(current)`."""

        raise NotImplementedError
