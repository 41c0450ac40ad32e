from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.exceptions import ValidationError
from .model import PunchRecord
from .ordering import date_key, default_order


@dataclass(frozen=True)
class RecordFilter:
    """Admin search form: inclusive date range plus name/PIN substrings."""

    start: Optional[date] = None
    end: Optional[date] = None
    name: str = ""
    pin: str = ""

    def matches(self, record: PunchRecord) -> bool:
        day = date_key(record)
        if self.start and day < self.start:
            return False
        if self.end and day > self.end:
            return False
        if self.name and self.name.casefold() not in record.name.casefold():
            return False
        if self.pin and self.pin not in record.pin:
            return False
        return True


def filter_records(records: Iterable[PunchRecord], record_filter: RecordFilter) -> list[PunchRecord]:
    return default_order(r for r in records if record_filter.matches(r))


@dataclass(frozen=True)
class Page:
    items: list[PunchRecord]
    page: int
    total_pages: int
    total: int


def paginate(records: Sequence[PunchRecord], page: int = 1, per_page: int = DEFAULT_PAGE_SIZE) -> Page:
    if per_page <= 0:
        raise ValidationError("per_page must be positive")
    total_pages = max(1, math.ceil(len(records) / per_page))
    page = min(max(1, int(page)), total_pages)
    start = (page - 1) * per_page
    return Page(
        items=list(records[start : start + per_page]),
        page=page,
        total_pages=total_pages,
        total=len(records),
    )
