from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Mapping

from ..core.exceptions import ValidationError


def as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip()


def require_non_empty(value: Any, field_name: str) -> str:
    text = as_text(value)
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def require_fields(data: Mapping[str, Any], fields: Iterable[str]) -> dict[str, str]:
    """Check every field at once so the caller gets one specific message."""
    fields = tuple(fields)
    missing = [f for f in fields if not as_text(data.get(f))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    return {f: as_text(data[f]) for f in fields}


def require_known_fields(data: Mapping[str, Any], allowed: Iterable[str]) -> None:
    unknown = sorted(set(data) - set(allowed))
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(unknown)}")


def require_pin(value: Any, *, max_length: int) -> str:
    pin = require_non_empty(value, "PIN")
    if not pin.isdigit():
        raise ValidationError("PIN must contain only digits")
    if len(pin) > max_length:
        raise ValidationError(f"PIN must have at most {max_length} digits")
    return pin
