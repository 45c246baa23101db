"""Key/value access layer over the ``kv_store`` table."""

from __future__ import annotations

import json
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any, Dict, Optional

from .schema import BASIC_UTC_NOW, init_db


class KeyValueStore:
    def __init__(self, db_path: Path):
        self.db_path = db_path
        init_db(db_path)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def get(self, key: str) -> Optional[str]:
        with closing(self._connect()) as conn:
            cur = conn.cursor()
            cur.execute("SELECT value FROM kv_store WHERE key=?", (key,))
            row = cur.fetchone()
            return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with closing(self._connect()) as conn:
            conn.execute(
                "INSERT INTO kv_store(key,value) VALUES(?,?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
                f"updated_at=({BASIC_UTC_NOW})",
                (key, value),
            )
            conn.commit()

    def get_json(self, key: str) -> Any:
        """Decoded JSON value; raises ValueError when the stored text is corrupt."""
        raw = self.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set_json(self, key: str, obj: Any) -> None:
        self.set(key, json.dumps(obj, separators=(",", ":")))

    def set_many_json(self, items: Dict[str, Any]) -> None:
        with closing(self._connect()) as conn:
            for key, obj in items.items():
                conn.execute(
                    "INSERT INTO kv_store(key,value) VALUES(?,?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
                    f"updated_at=({BASIC_UTC_NOW})",
                    (key, json.dumps(obj, separators=(",", ":"))),
                )
            conn.commit()
