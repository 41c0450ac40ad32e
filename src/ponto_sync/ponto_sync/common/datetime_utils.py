from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError

DISPLAY_DATE_FORMAT = "%d/%m/%Y"
ISO_DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"


def parse_record_date(value: Optional[str]) -> Optional[date]:
    """Parse a punch date written either as DD/MM/YYYY or YYYY-MM-DD.

    Both formats show up interchangeably depending on which screen created
    the record. Returns None when the value is empty or unreadable.
    """
    if not value:
        return None
    value = value.strip()
    fmt = ISO_DATE_FORMAT if "-" in value else DISPLAY_DATE_FORMAT
    try:
        return datetime.strptime(value, fmt).date()
    except ValueError:
        return None


def normalize_record_time(value: Optional[str]) -> str:
    """Pad HH:MM / H:MM:SS style strings to HH:MM:SS so they compare as text."""
    if not value:
        return ""
    parts = value.strip().split(":")
    try:
        numbers = [int(p) for p in parts]
    except ValueError:
        return value.strip()
    while len(numbers) < 3:
        numbers.append(0)
    return "{:02d}:{:02d}:{:02d}".format(*numbers[:3])


def to_display_date(value: str) -> str:
    """Convert any accepted date input to the DD/MM/YYYY wire format."""
    parsed = parse_record_date(value)
    if parsed is None:
        raise ValidationError(f"Invalid date: {value!r}")
    return parsed.strftime(DISPLAY_DATE_FORMAT)


def to_record_time(value: str) -> str:
    normalized = normalize_record_time(value)
    try:
        datetime.strptime(normalized, TIME_FORMAT)
    except ValueError:
        raise ValidationError(f"Invalid time: {value!r}") from None
    return normalized


def format_punch_moment(moment: datetime) -> tuple[str, str]:
    return moment.strftime(DISPLAY_DATE_FORMAT), moment.strftime(TIME_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now()
