from __future__ import annotations

import pytest

from src.ponto_sync.ponto_sync.core.enums import SortDirection
from src.ponto_sync.ponto_sync.core.exceptions import ValidationError
from src.ponto_sync.ponto_sync.punches.model import PunchRecord
from src.ponto_sync.ponto_sync.punches.ordering import SortState, default_order, sort_by_field


def punch(id, date, time="08:00:00", name="Ana", kind="clock-in", pin="1234"):
    return PunchRecord(id=id, pin=pin, name=name, date=date, time=time, kind=kind)


def ids(records):
    return [r.id for r in records]


def test_mixed_date_formats_compare_as_dates():
    records = [punch("old", "05/01/2025"), punch("new", "2025-01-06")]

    assert ids(default_order(records)) == ["new", "old"]


def test_time_is_compared_after_padding():
    records = [punch("a", "05/01/2025", "9:30"), punch("b", "05/01/2025", "10:00:00")]

    assert ids(default_order(records)) == ["b", "a"]


def test_ties_fall_back_to_name_then_kind():
    records = [
        punch("c", "05/01/2025", name="carla"),
        punch("a2", "05/01/2025", name="Ana", kind="clock-out"),
        punch("a1", "05/01/2025", name="Ana", kind="break-end"),
        punch("b", "05/01/2025", name="Bruno"),
    ]

    assert ids(default_order(records)) == ["a1", "a2", "b", "c"]


def test_unreadable_dates_sort_last():
    records = [punch("bad", "not a date"), punch("ok", "01/01/2020")]

    assert ids(default_order(records)) == ["ok", "bad"]


def test_sort_by_field_in_both_directions():
    records = [punch("a", "05/01/2025", pin="2"), punch("b", "05/01/2025", pin="1")]

    assert ids(sort_by_field(records, "pin")) == ["b", "a"]
    assert ids(sort_by_field(records, "pin", SortDirection.DESC)) == ["a", "b"]


def test_sort_by_unknown_field_is_rejected():
    with pytest.raises(ValidationError):
        sort_by_field([], "salary")


def test_sort_state_toggles_on_repeated_header_click():
    state = SortState().toggle("name")
    assert state == SortState("name", SortDirection.ASC)

    state = state.toggle("name")
    assert state.direction == SortDirection.DESC

    assert state.toggle("date") == SortState("date", SortDirection.ASC)


def test_sort_state_without_field_uses_default_order():
    records = [punch("old", "05/01/2025"), punch("new", "06/01/2025")]

    assert ids(SortState().apply(records)) == ["new", "old"]
