from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Sequence

from ..common.datetime_utils import normalize_record_time, parse_record_date
from ..core.enums import SortDirection
from ..core.exceptions import ValidationError
from .model import PunchRecord

SORTABLE_FIELDS = ("date", "time", "name", "kind", "pin")


def date_key(record: PunchRecord) -> date:
    # Empty or unreadable dates sort as the oldest ones.
    return parse_record_date(record.date) or date.min


def default_order(records: Iterable[PunchRecord]) -> list[PunchRecord]:
    """Table order: date desc, time desc, then name asc, kind asc.

    Two stable passes: the secondary ascending keys first, then the primary
    descending keys, so ties on date/time keep the name/kind order.
    """
    out = sorted(records, key=lambda r: (r.name.casefold(), r.kind))
    out.sort(key=lambda r: (date_key(r), normalize_record_time(r.time)), reverse=True)
    return out


_FIELD_KEYS: dict[str, Callable[[PunchRecord], object]] = {
    "date": date_key,
    "time": lambda r: normalize_record_time(r.time),
    "name": lambda r: r.name.casefold(),
    "kind": lambda r: r.kind,
    "pin": lambda r: r.pin,
}


def sort_by_field(
    records: Sequence[PunchRecord],
    field: str,
    direction: SortDirection = SortDirection.ASC,
) -> list[PunchRecord]:
    """Sort triggered by clicking a column header."""
    key = _FIELD_KEYS.get(field)
    if key is None:
        raise ValidationError(f"Cannot sort by {field!r}")
    return sorted(records, key=key, reverse=SortDirection(direction) == SortDirection.DESC)


@dataclass(frozen=True)
class SortState:
    field: str = ""
    direction: SortDirection = SortDirection.ASC

    def toggle(self, field: str) -> "SortState":
        # Clicking the same header twice flips to descending; any other click starts ascending.
        if field == self.field and self.direction == SortDirection.ASC:
            return SortState(field, SortDirection.DESC)
        return SortState(field, SortDirection.ASC)

    def apply(self, records: Sequence[PunchRecord]) -> list[PunchRecord]:
        if not self.field:
            return default_order(records)
        return sort_by_field(records, self.field, self.direction)
