from __future__ import annotations

from .connection import DatabaseConnection

KV_TABLE = "kv_store"

KV_TABLE_DDL = f"""
CREATE TABLE IF NOT EXISTS `{KV_TABLE}` (
    k VARCHAR(64) NOT NULL PRIMARY KEY,
    v LONGTEXT NOT NULL,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
) CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci
"""


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    database = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def ensure_kv_table(conn_factory: DatabaseConnection) -> None:
    """Create the database and the key-value table backing the offline cache (idempotent)."""
    ensure_database_exists(conn_factory)
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute(KV_TABLE_DDL)
        conn.commit()
    finally:
        conn.close()


def list_keys(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute(f"SELECT k FROM `{KV_TABLE}` ORDER BY k")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
