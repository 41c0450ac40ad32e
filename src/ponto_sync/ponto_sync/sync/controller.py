from __future__ import annotations

from dataclasses import asdict

from flask import Flask

from ..auth.decorators import admin_required
from ..common.http import ok
from ..container import Container


def _result_dict(result) -> dict:
    return {
        "status": result.status.value,
        "employees": result.employees,
        "punches": result.punches,
        "message": result.message,
        "replayed": result.replayed,
    }


def _report_dict(report) -> dict:
    data = asdict(report)
    data["blocked"] = [c.value for c in report.blocked]
    data["drained"] = report.drained
    return data


def register(app: Flask, container: Container) -> None:
    manager = container.sync_manager

    @app.route("/api/sync/refresh", methods=["POST"], endpoint="sync_refresh")
    @admin_required
    def sync_refresh():
        return ok(_result_dict(manager.refresh()))

    @app.route("/api/sync/replay", methods=["POST"], endpoint="sync_replay")
    @admin_required
    def sync_replay():
        report, result = manager.on_connectivity_restored()
        return ok({"replay": _report_dict(report), "refresh": _result_dict(result)})

    @app.route("/api/sync/status", methods=["GET"], endpoint="sync_status")
    def sync_status():
        return ok(
            {
                "status": manager.status.value,
                "backend": "connected" if container.backend.ping() else "disconnected",
                "pending": len(manager.pending_writes()),
            }
        )
