"""Drain the pending-write queue against the backend.

Uses the same settings as the app (APP_ENV / .env), so point CACHE_BACKEND at
the cache the kiosk wrote to.
"""

from __future__ import annotations

import sys
from pathlib import Path

import importlib
import logging

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.ponto_sync.ponto_sync.container import build_container


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper())

    container = build_container(settings)
    manager = container.sync_manager
    try:
        pending = len(manager.pending_writes())
        if not pending:
            print("OK: queue is empty")
            return 0

        report, result = manager.on_connectivity_restored()
    finally:
        container.backend.close()
        container.proxy.close()

    print(f"replayed={report.replayed} remaining={report.remaining} status={result.status.value}")
    for error in report.errors:
        print(f"  error: {error}")
    return 0 if report.drained else 1


if __name__ == "__main__":
    raise SystemExit(main())
