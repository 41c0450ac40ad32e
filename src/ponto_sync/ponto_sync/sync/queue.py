from __future__ import annotations

from ..core.constants import PENDING_WRITES_KEY
from ..core.enums import Collection
from ..storage.store import KeyValueStore
from .model import PendingWrite


class PendingWriteQueue:
    """FIFO of PendingWrite entries persisted in the key-value store.

    Every mutation is one atomic store operation (append one entry, remove one
    entry, retarget entries), so two writes triggered back to back cannot
    overwrite each other's queue state.
    """

    def __init__(self, store: KeyValueStore, *, key: str = PENDING_WRITES_KEY):
        self._store = store
        self._key = key

    def entries(self) -> list[PendingWrite]:
        return [PendingWrite.from_dict(item) for item in self._store.get(self._key, []) or []]

    def __len__(self) -> int:
        return len(self._store.get(self._key, []) or [])

    def has_pending(self, collection: Collection) -> bool:
        return any(e.collection == collection for e in self.entries())

    def append(self, entry: PendingWrite) -> None:
        self._store.append(self._key, entry.to_dict())

    def remove(self, entry_id: str) -> bool:
        removed = []

        def _drop(items):
            items = list(items or [])
            kept = [item for item in items if item.get("entry_id") != entry_id]
            removed.append(len(items) - len(kept))
            return kept

        self._store.update(self._key, _drop, default=[])
        return bool(removed and removed[0])

    def rewrite_target(self, local_id: str, server_id: str) -> int:
        """Point queued updates/deletes of a placeholder at the server id."""
        count = []

        def _rewrite(items):
            out = []
            n = 0
            for item in items or []:
                if item.get("target_id") == local_id:
                    item = {**item, "target_id": server_id}
                    n += 1
                out.append(item)
            count.append(n)
            return out

        self._store.update(self._key, _rewrite, default=[])
        return count[0] if count else 0
