from __future__ import annotations

import json
from typing import Any, Callable

from ..database.bootstrap import KV_TABLE
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .store import KeyValueStore


class MySQLStore(KeyValueStore):
    """Key-value cache kept in one MySQL table (see database.bootstrap.ensure_kv_table).

    Read-modify-write operations lock the row with SELECT ... FOR UPDATE inside
    a single transaction, so two processes sharing the table cannot lose an
    appended queue entry.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str, default: Any = None) -> Any:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT v FROM `{KV_TABLE}` WHERE k=%s", (key,))
            row = fetchone(cur)
            if not row:
                return default
            return json.loads(row["v"])

    def _upsert(self, cur, key: str, value: Any) -> None:
        cur.execute(
            f"""
            INSERT INTO `{KV_TABLE}`(k, v) VALUES(%s, %s)
            ON DUPLICATE KEY UPDATE v=VALUES(v)
            """,
            (key, json.dumps(value, ensure_ascii=False)),
        )

    def set(self, key: str, value: Any) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._upsert(cur, key, value)

    def update(self, key: str, mutate: Callable[[Any], Any], default: Any = None) -> Any:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT v FROM `{KV_TABLE}` WHERE k=%s FOR UPDATE", (key,))
            row = fetchone(cur)
            current = json.loads(row["v"]) if row else default
            new_value = mutate(current)
            self._upsert(cur, key, new_value)
            return new_value

    def append(self, key: str, item: Any) -> None:
        self.update(key, lambda items: [*(items or []), item], default=[])
