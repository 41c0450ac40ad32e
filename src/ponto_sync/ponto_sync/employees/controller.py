from __future__ import annotations

from flask import Flask, request

from ..auth.decorators import admin_required
from ..common.http import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    manager = container.sync_manager

    @app.route("/api/admin/employees", methods=["GET"], endpoint="list_employees")
    @admin_required
    def list_employees():
        employees = manager.employees()
        return ok([e.to_dict() for e in employees], sync_status=manager.status.value)

    @app.route("/api/admin/employees", methods=["POST"], endpoint="create_employee")
    @admin_required
    def create_employee():
        employee = manager.create_employee(request.get_json(silent=True) or {})
        return ok(employee.to_dict(), status=201, queued=employee.is_local)

    @app.route("/api/admin/employees/<employee_id>", methods=["PUT"], endpoint="update_employee")
    @admin_required
    def update_employee(employee_id: str):
        employee = manager.update_employee(employee_id, request.get_json(silent=True) or {})
        failures = manager.last_cascade_errors
        message = f"{len(failures)} punch records could not be updated and were queued" if failures else None
        return ok(employee.to_dict(), message=message)

    @app.route("/api/admin/employees/<employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @admin_required
    def delete_employee(employee_id: str):
        applied = manager.delete_employee(employee_id)
        return ok({"id": employee_id}, queued=not applied)
