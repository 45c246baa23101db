"""Database schema DDL and initialization.

Tables:
  - kv_store: key/value records holding JSON documents (configuration,
    rows, rates timestamp) the calculator loads at startup and writes on save
"""

from __future__ import annotations
import sqlite3
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

KV_STORE_DDL = f"""
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

ALL_DDL = (KV_STORE_DDL,)


def init_db(db_path: Path) -> None:
    """Create tables if they do not exist (idempotent)."""
    conn = sqlite3.connect(db_path)
    try:
        for ddl in ALL_DDL:
            conn.execute(ddl)
        conn.commit()
    finally:
        conn.close()
