from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.ponto_sync.ponto_sync.database.bootstrap import ensure_kv_table, list_keys
from src.ponto_sync.ponto_sync.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    config = DBConfig.from_mapping(settings.DB_CONFIG)
    conn = DatabaseConnection.get_instance(config)

    ensure_kv_table(conn)
    keys = list_keys(conn)
    print(
        "OK: cache table ready -> "
        f"{config.user}@{config.host}:{config.port}/{config.database} "
        f"(keys={len(keys)})"
    )


if __name__ == "__main__":
    main()
