from __future__ import annotations

from flask import Flask, request

from ..common.http import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/kiosk/validate", methods=["POST"], endpoint="kiosk_validate")
    def kiosk_validate():
        data = request.get_json(silent=True) or {}
        employee = container.kiosk_service.validate_pin(data.get("pin", ""))
        return ok({"id": employee.id, "name": employee.name})

    @app.route("/api/kiosk/punch", methods=["POST"], endpoint="kiosk_punch")
    def kiosk_punch():
        data = request.get_json(silent=True) or {}
        confirmation = container.kiosk_service.register_punch(data.get("pin", ""), data.get("kind", ""))
        return ok(
            confirmation.record.to_dict(),
            status=201,
            message=confirmation.message,
            queued=confirmation.queued,
        )
