from __future__ import annotations

from enum import Enum


class PunchKind(str, Enum):
    """Kind of clock event registered at the kiosk."""

    CLOCK_IN = "clock-in"
    BREAK_START = "break-start"
    BREAK_END = "break-end"
    CLOCK_OUT = "clock-out"


class Collection(str, Enum):
    """Remote collections; the value doubles as the REST path segment."""

    EMPLOYEES = "employees"
    PUNCHES = "punches"


class WriteOperation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class SyncStatus(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"
