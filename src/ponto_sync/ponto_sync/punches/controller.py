from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..auth.decorators import admin_required
from ..common.datetime_utils import parse_record_date
from ..common.http import ok
from ..container import Container
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import SortDirection
from ..core.exceptions import ValidationError
from .filtering import RecordFilter, filter_records, paginate
from .ordering import sort_by_field


def _date_arg(name: str):
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    parsed = parse_record_date(raw)
    if parsed is None:
        raise ValidationError(f"Invalid {name} date: {raw!r}")
    return parsed


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer") from None


def _direction_arg() -> SortDirection:
    raw = (request.args.get("direction") or SortDirection.ASC.value).lower()
    try:
        return SortDirection(raw)
    except ValueError:
        raise ValidationError(f"Invalid sort direction: {raw!r}") from None


def register(app: Flask, container: Container) -> None:
    manager = container.sync_manager

    @app.route("/api/admin/punches", methods=["GET"], endpoint="list_punches")
    @admin_required
    def list_punches():
        record_filter = RecordFilter(
            start=_date_arg("start"),
            end=_date_arg("end"),
            name=(request.args.get("name") or "").strip(),
            pin=(request.args.get("pin") or "").strip(),
        )
        records = filter_records(manager.punch_records(), record_filter)

        sort_field: Optional[str] = (request.args.get("sort") or "").strip() or None
        if sort_field:
            records = sort_by_field(records, sort_field, _direction_arg())

        page = paginate(records, _int_arg("page", 1), _int_arg("per_page", DEFAULT_PAGE_SIZE))
        return ok(
            [r.to_dict() for r in page.items],
            page=page.page,
            total_pages=page.total_pages,
            total=page.total,
            sync_status=manager.status.value,
        )

    @app.route("/api/admin/punches", methods=["POST"], endpoint="create_punch")
    @admin_required
    def create_punch():
        record = manager.create_punch(request.get_json(silent=True) or {})
        return ok(record.to_dict(), status=201, queued=record.is_local)

    @app.route("/api/admin/punches/<punch_id>", methods=["PUT"], endpoint="update_punch")
    @admin_required
    def update_punch(punch_id: str):
        record = manager.update_punch(punch_id, request.get_json(silent=True) or {})
        return ok(record.to_dict())

    @app.route("/api/admin/punches/<punch_id>", methods=["DELETE"], endpoint="delete_punch")
    @admin_required
    def delete_punch(punch_id: str):
        applied = manager.delete_punch(punch_id)
        return ok({"id": punch_id}, queued=not applied)
