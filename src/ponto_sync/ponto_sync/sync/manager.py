from __future__ import annotations

import logging
import threading
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

from ..backend.client import BackendClient
from ..common.datetime_utils import to_display_date, to_record_time
from ..common.validators import as_text, require_fields, require_known_fields, require_non_empty, require_pin
from ..core.constants import EMPLOYEES_CACHE_KEY, LOCAL_ID_PREFIX, MAX_PIN_LENGTH, PUNCHES_CACHE_KEY
from ..core.enums import Collection, PunchKind, SyncStatus, WriteOperation
from ..core.exceptions import CascadeError, ReplayError, TransientNetworkError, ValidationError
from ..employees.model import Employee
from ..punches.model import PunchRecord
from ..punches.ordering import default_order
from ..storage.store import KeyValueStore
from .model import PendingWrite, ReplayReport, SyncResult
from .queue import PendingWriteQueue
from .strategies.base import RetryStrategy
from .strategies.no_retry_strategy import NoRetryStrategy

logger = logging.getLogger(__name__)

Record = Union[Employee, PunchRecord]

_CACHE_KEYS = {
    Collection.EMPLOYEES: EMPLOYEES_CACHE_KEY,
    Collection.PUNCHES: PUNCHES_CACHE_KEY,
}
_RECORD_TYPES = {
    Collection.EMPLOYEES: Employee,
    Collection.PUNCHES: PunchRecord,
}

EMPLOYEE_FIELDS = ("name", "pin", "department")
PUNCH_FIELDS = ("pin", "name", "date", "time", "kind")


def new_local_id() -> str:
    return f"{LOCAL_ID_PREFIX}{uuid.uuid4().hex}"


class SyncManager:
    """Read model and write API over the remote backend, with offline fallback.

    Reads come from memory. `refresh()` reloads memory from the backend or,
    when the backend is unreachable, from the last cache snapshot. Writes go to
    the backend first; if that fails they are applied to memory and cache
    optimistically and queued for `replay_pending_writes()`.

    Only ValidationError reaches the caller; every backend failure degrades to
    the cache/queue path.
    """

    def __init__(
        self,
        backend: BackendClient,
        store: KeyValueStore,
        *,
        queue: Optional[PendingWriteQueue] = None,
        retry_strategy: Optional[RetryStrategy] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._backend = backend
        self._store = store
        self._queue = queue or PendingWriteQueue(store)
        self._retry = retry_strategy or NoRetryStrategy()
        self._sleep = sleep
        self._clock = clock

        self._state_lock = threading.RLock()
        self._replay_lock = threading.Lock()
        self._status = SyncStatus.OFFLINE
        self._last_cascade_errors: list[CascadeError] = []
        self._records: dict[Collection, list[Record]] = {}
        self._load_snapshot()

    # ------------------------------------------------------------------ reads

    @property
    def status(self) -> SyncStatus:
        return self._status

    @property
    def last_cascade_errors(self) -> list[CascadeError]:
        return list(self._last_cascade_errors)

    def employees(self) -> list[Employee]:
        with self._state_lock:
            return list(self._records[Collection.EMPLOYEES])

    def punch_records(self) -> list[PunchRecord]:
        with self._state_lock:
            return default_order(self._records[Collection.PUNCHES])

    def find_employee(self, employee_id: str) -> Optional[Employee]:
        return self._find(Collection.EMPLOYEES, employee_id)

    def find_employee_by_pin(self, pin: str) -> Optional[Employee]:
        for employee in self.employees():
            if employee.pin == pin:
                return employee
        return None

    def pending_writes(self) -> list[PendingWrite]:
        return self._queue.entries()

    # ------------------------------------------------------------------ refresh

    def refresh(self) -> SyncResult:
        """Reload both collections; fall back to the cache snapshot on any failure.

        A successful fetch while writes are still queued means the backend is
        reachable again: the queue is replayed first and the backend re-read,
        and whatever stays queued is laid back over the fetched view.
        """
        return self._refresh(replay=True)

    def _refresh(self, *, replay: bool) -> SyncResult:
        fetched = self._fetch_all()
        if fetched is None:
            return self._fall_back_to_cache()

        replayed = 0
        if replay and len(self._queue):
            logger.info("backend reachable with %d queued writes, replaying", len(self._queue))
            replayed = self.replay_pending_writes().replayed
            if replayed:
                fetched = self._fetch_all()
                if fetched is None:
                    return self._fall_back_to_cache()

        employees, punches = fetched
        with self._state_lock:
            self._records[Collection.EMPLOYEES] = self._overlay_pending(Collection.EMPLOYEES, employees)
            self._records[Collection.PUNCHES] = self._overlay_pending(Collection.PUNCHES, punches)
            self._persist(Collection.EMPLOYEES)
            self._persist(Collection.PUNCHES)
            self._status = SyncStatus.ONLINE
            result = SyncResult(
                SyncStatus.ONLINE,
                len(self._records[Collection.EMPLOYEES]),
                len(self._records[Collection.PUNCHES]),
                replayed=replayed,
            )

        logger.info("refreshed %d employees and %d punches", result.employees, result.punches)
        return result

    def _fetch_all(self) -> Optional[tuple[list[Employee], list[PunchRecord]]]:
        try:
            # Both fetches run concurrently and are joined before memory changes.
            with ThreadPoolExecutor(max_workers=2) as pool:
                employees_future = pool.submit(self._backend.list, Collection.EMPLOYEES)
                punches_future = pool.submit(self._backend.list, Collection.PUNCHES)
                raw_employees = employees_future.result()
                raw_punches = punches_future.result()
            return (
                [Employee.from_dict(item) for item in raw_employees],
                [PunchRecord.from_dict(item) for item in raw_punches],
            )
        except TransientNetworkError as e:
            logger.warning("refresh failed, %s", e)
        except Exception:
            logger.exception("unexpected error while refreshing")
        return None

    def _overlay_pending(self, collection: Collection, records: list[Record]) -> list[Record]:
        """Re-apply the writes still waiting in the queue on top of a fetched view."""
        record_type = _RECORD_TYPES[collection]
        out = list(records)
        for entry in self._queue.entries():
            if entry.collection != collection:
                continue
            if entry.operation == WriteOperation.CREATE:
                if entry.local_id and not any(r.id == entry.local_id for r in out):
                    out.append(record_type.from_dict({**entry.payload, "id": entry.local_id}))
            elif entry.operation == WriteOperation.UPDATE:
                out = [
                    record_type.from_dict({**r.to_dict(), **entry.payload}) if r.id == entry.target_id else r
                    for r in out
                ]
            else:
                out = [r for r in out if r.id != entry.target_id]
        return out

    def _fall_back_to_cache(self) -> SyncResult:
        with self._state_lock:
            self._load_snapshot()
            self._status = SyncStatus.OFFLINE
            result = SyncResult.offline(
                len(self._records[Collection.EMPLOYEES]),
                len(self._records[Collection.PUNCHES]),
            )
        logger.warning("%s (%d employees, %d punches)", result.message, result.employees, result.punches)
        return result

    def _load_snapshot(self) -> None:
        with self._state_lock:
            for collection, key in _CACHE_KEYS.items():
                record_type = _RECORD_TYPES[collection]
                self._records[collection] = [record_type.from_dict(item) for item in self._store.get(key, []) or []]

    def _persist(self, collection: Collection) -> None:
        self._store.set(_CACHE_KEYS[collection], [r.to_dict() for r in self._records[collection]])

    # ------------------------------------------------------------------ employees

    def create_employee(self, data: Mapping[str, Any]) -> Employee:
        fields = require_fields(data, ("name", "pin"))
        pin = require_pin(fields["pin"], max_length=MAX_PIN_LENGTH)
        self._ensure_pin_free(pin)

        payload = {"name": fields["name"], "pin": pin}
        department = as_text(data.get("department"))
        if department:
            payload["department"] = department
        return self._create(Collection.EMPLOYEES, payload)

    def update_employee(self, employee_id: str, patch: Mapping[str, Any]) -> Employee:
        require_known_fields(patch, EMPLOYEE_FIELDS)
        current = self._require(Collection.EMPLOYEES, employee_id)

        changes: dict[str, Any] = {}
        if "name" in patch:
            changes["name"] = require_non_empty(patch["name"], "name")
        if "pin" in patch:
            changes["pin"] = require_pin(patch["pin"], max_length=MAX_PIN_LENGTH)
            self._ensure_pin_free(changes["pin"], exclude_id=employee_id)
        if "department" in patch:
            changes["department"] = as_text(patch["department"]) or None

        updated = current.with_changes(**changes)
        applied_remotely = self._update(Collection.EMPLOYEES, updated)

        self._last_cascade_errors = []
        if updated.pin != current.pin or updated.name != current.name:
            self._last_cascade_errors = self._cascade(current, updated, try_remote=applied_remotely)
        return updated

    def delete_employee(self, employee_id: str) -> bool:
        return self._delete(Collection.EMPLOYEES, employee_id)

    def _ensure_pin_free(self, pin: str, *, exclude_id: Optional[str] = None) -> None:
        owner = self.find_employee_by_pin(pin)
        if owner and owner.id != exclude_id:
            raise ValidationError(f"PIN {pin} is already used by {owner.name}")

    def _cascade(self, before: Employee, after: Employee, *, try_remote: bool) -> list[CascadeError]:
        """Rewrite pin/name on every punch that carried the old pin.

        A punch that cannot be updated remotely is still rewritten locally and
        queued; the employee update is never rolled back.
        """
        with self._state_lock:
            affected = [p for p in self._records[Collection.PUNCHES] if p.pin == before.pin]

        errors: list[CascadeError] = []
        for punch in affected:
            updated = punch.with_changes(pin=after.pin, name=after.name)
            if self._update(Collection.PUNCHES, updated, try_remote=try_remote) or not try_remote:
                continue
            error = CascadeError(f"punch {punch.id} was not updated remotely and has been queued", punch_id=punch.id)
            logger.warning("cascade for employee %s: %s", after.id, error)
            errors.append(error)

        logger.info("cascaded employee %s to %d punches (%d partial failures)", after.id, len(affected), len(errors))
        return errors

    # ------------------------------------------------------------------ punches

    def create_punch(self, data: Mapping[str, Any]) -> PunchRecord:
        """Persist a punch as given.

        Whether the PIN belongs to a known employee is checked upstream by the
        kiosk, not here.
        """
        fields = require_fields(data, PUNCH_FIELDS)
        payload = {
            "pin": fields["pin"],
            "name": fields["name"],
            "date": to_display_date(fields["date"]),
            "time": to_record_time(fields["time"]),
            "kind": self._require_kind(fields["kind"]),
        }
        return self._create(Collection.PUNCHES, payload)

    def update_punch(self, punch_id: str, patch: Mapping[str, Any]) -> PunchRecord:
        require_known_fields(patch, PUNCH_FIELDS)
        current = self._require(Collection.PUNCHES, punch_id)

        changes: dict[str, Any] = {}
        for field in ("pin", "name"):
            if field in patch:
                changes[field] = require_non_empty(patch[field], field)
        if "date" in patch:
            changes["date"] = to_display_date(require_non_empty(patch["date"], "date"))
        if "time" in patch:
            changes["time"] = to_record_time(require_non_empty(patch["time"], "time"))
        if "kind" in patch:
            changes["kind"] = self._require_kind(patch["kind"])

        updated = current.with_changes(**changes)
        self._update(Collection.PUNCHES, updated)
        return updated

    def delete_punch(self, punch_id: str) -> bool:
        return self._delete(Collection.PUNCHES, punch_id)

    @staticmethod
    def _require_kind(value: Any) -> str:
        try:
            return PunchKind(as_text(value)).value
        except ValueError:
            allowed = ", ".join(k.value for k in PunchKind)
            raise ValidationError(f"Invalid punch kind {value!r} (expected one of: {allowed})") from None

    # ------------------------------------------------------------------ write paths

    def _find(self, collection: Collection, record_id: str) -> Optional[Record]:
        with self._state_lock:
            for record in self._records[collection]:
                if record.id == record_id:
                    return record
        return None

    def _require(self, collection: Collection, record_id: str) -> Record:
        record = self._find(collection, record_id)
        if record is None:
            raise ValidationError(f"Unknown {collection.value} id: {record_id}")
        return record

    def _write_through(self, collection: Collection, record_id: Optional[str] = None) -> bool:
        # Queued writes keep their order: nothing new jumps ahead of them, and a
        # placeholder id means the backend does not know the record yet.
        if record_id and record_id.startswith(LOCAL_ID_PREFIX):
            return False
        return not self._queue.has_pending(collection)

    def _enqueue(self, operation: WriteOperation, collection: Collection, payload: Mapping[str, Any], **ids) -> None:
        entry = PendingWrite.new(operation, collection, payload, now=self._clock(), **ids)
        self._queue.append(entry)
        logger.warning(
            "queued %s %s (target=%s, local=%s)",
            operation.value, collection.value, entry.target_id, entry.local_id,
        )

    def _create(self, collection: Collection, payload: dict) -> Record:
        record_type = _RECORD_TYPES[collection]
        if self._write_through(collection):
            try:
                created = self._backend.create(collection, payload)
            except TransientNetworkError as e:
                logger.warning("create %s failed, %s", collection.value, e)
            else:
                record = record_type.from_dict({**payload, **created})
                with self._state_lock:
                    self._records[collection].append(record)
                    self._persist(collection)
                return record

        record = record_type.from_dict({**payload, "id": new_local_id()})
        with self._state_lock:
            self._enqueue(WriteOperation.CREATE, collection, payload, local_id=record.id)
            self._records[collection].append(record)
            self._persist(collection)
        return record

    def _update(self, collection: Collection, record: Record, *, try_remote: bool = True) -> bool:
        """Apply `record` locally; return True when the backend accepted it too."""
        applied = False
        if try_remote and self._write_through(collection, record.id):
            try:
                self._backend.update(collection, record.id, record.to_payload())
                applied = True
            except TransientNetworkError as e:
                logger.warning("update %s/%s failed, %s", collection.value, record.id, e)

        with self._state_lock:
            if not applied:
                self._enqueue(WriteOperation.UPDATE, collection, record.to_payload(), target_id=record.id)
            self._records[collection] = [record if r.id == record.id else r for r in self._records[collection]]
            self._persist(collection)
        return applied

    def _delete(self, collection: Collection, record_id: str) -> bool:
        applied = False
        if self._write_through(collection, record_id):
            try:
                self._backend.delete(collection, record_id)
                applied = True
            except TransientNetworkError as e:
                logger.warning("delete %s/%s failed, %s", collection.value, record_id, e)

        with self._state_lock:
            if not applied:
                self._enqueue(WriteOperation.DELETE, collection, {}, target_id=record_id)
            self._records[collection] = [r for r in self._records[collection] if r.id != record_id]
            self._persist(collection)
        return applied

    # ------------------------------------------------------------------ replay

    def replay_pending_writes(self, strategy: Optional[RetryStrategy] = None) -> ReplayReport:
        """Drain the queue in FIFO order, one entry at a time.

        A failing entry stays queued and stops the drain for its collection;
        entries of the other collection keep going.
        """
        strategy = strategy or self._retry
        report = ReplayReport()
        blocked: set[Collection] = set()
        id_map: dict[str, str] = {}

        with self._replay_lock:
            for entry in self._queue.entries():
                if entry.collection in blocked:
                    continue
                try:
                    self._replay_entry(entry, strategy, id_map)
                except ReplayError as e:
                    logger.error("replay of %s halted at entry %s: %s", entry.collection.value, e.entry_id, e)
                    blocked.add(entry.collection)
                    report.errors.append(str(e))
                    continue
                self._queue.remove(entry.entry_id)
                report.replayed += 1

            report.remaining = len(self._queue)
            report.blocked = sorted(blocked, key=lambda c: c.value)

        if report.replayed or report.remaining:
            logger.info("replayed %d queued writes, %d remaining", report.replayed, report.remaining)
        return report

    def on_connectivity_restored(self) -> tuple[ReplayReport, SyncResult]:
        report = self.replay_pending_writes()
        return report, self._refresh(replay=False)

    def _replay_entry(self, entry: PendingWrite, strategy: RetryStrategy, id_map: dict[str, str]) -> None:
        delays = strategy.delays()
        while True:
            try:
                self._apply_remote(entry, id_map)
                return
            except TransientNetworkError as e:
                delay = next(delays, None)
                if delay is None:
                    raise ReplayError(
                        f"{entry.operation.value} {entry.collection.value} failed: {e}",
                        entry_id=entry.entry_id,
                    ) from e
                logger.info("retrying entry %s in %.1fs", entry.entry_id, delay)
                self._sleep(delay)

    def _apply_remote(self, entry: PendingWrite, id_map: dict[str, str]) -> None:
        target_id = id_map.get(entry.target_id, entry.target_id) if entry.target_id else None

        if entry.operation == WriteOperation.CREATE:
            created = self._backend.create(entry.collection, entry.payload)
            record = _RECORD_TYPES[entry.collection].from_dict({**entry.payload, **created})
            if entry.local_id:
                id_map[entry.local_id] = record.id
                self._reconcile(entry.collection, entry.local_id, record)
            return

        if entry.operation == WriteOperation.UPDATE:
            if target_id.startswith(LOCAL_ID_PREFIX):
                # Its create is no longer queued, so there is nothing on the backend to update.
                raise ReplayError(f"update of {target_id} has no reconciled server id", entry_id=entry.entry_id)
            self._backend.update(entry.collection, target_id, entry.payload)
            return

        if target_id.startswith(LOCAL_ID_PREFIX):
            logger.info("delete of never-created %s skipped", target_id)
            return
        self._backend.delete(entry.collection, target_id)
        with self._state_lock:
            self._records[entry.collection] = [r for r in self._records[entry.collection] if r.id != target_id]
            self._persist(entry.collection)

    def _reconcile(self, collection: Collection, local_id: str, record: Record) -> None:
        """Swap a placeholder id for the server id everywhere it is referenced."""
        with self._state_lock:
            records = self._records[collection]
            if any(r.id == local_id for r in records):
                # Keep the local field values: later queued edits were applied on top of them.
                self._records[collection] = [r.with_changes(id=record.id) if r.id == local_id else r for r in records]
            elif not self._delete_queued_for(local_id):
                records.append(record)
            self._persist(collection)
        rewritten = self._queue.rewrite_target(local_id, record.id)
        logger.info("reconciled %s -> %s (%d queued entries retargeted)", local_id, record.id, rewritten)

    def _delete_queued_for(self, record_id: str) -> bool:
        return any(
            e.operation == WriteOperation.DELETE and e.target_id == record_id
            for e in self._queue.entries()
        )
