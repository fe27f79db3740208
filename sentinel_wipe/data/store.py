"""Local data store — SQLite at ~/.sentinel-wipe/data.db."""

from __future__ import annotations

import os
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional


_DEFAULT_DB_PATH = os.path.join(
    str(Path.home()), ".sentinel-wipe", "data.db"
)

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS wipe_journal (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    target TEXT NOT NULL,
    target_kind TEXT NOT NULL,
    method TEXT NOT NULL,
    verdict TEXT NOT NULL,
    success INTEGER NOT NULL,
    exit_code INTEGER,
    log_path TEXT
);
"""


class DataStore:
    """Local SQLite data store."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or _DEFAULT_DB_PATH
        os.makedirs(os.path.dirname(self.db_path), exist_ok=True)
        self._conn: Optional[sqlite3.Connection] = None
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_db(self) -> None:
        conn = self._get_conn()
        conn.executescript(_SCHEMA)
        conn.commit()

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    # ── Config ───────────────────────────────────────────────────────

    def get_config(self, key: str) -> Optional[str]:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT value FROM config WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set_config(self, key: str, value: str) -> None:
        conn = self._get_conn()
        conn.execute(
            "INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    def unset_config(self, key: str) -> None:
        conn = self._get_conn()
        conn.execute("DELETE FROM config WHERE key = ?", (key,))
        conn.commit()

    # ── Wipe journal ─────────────────────────────────────────────────

    def record_wipe(
        self,
        target: str,
        target_kind: str,
        method: str,
        verdict: str,
        success: bool,
        exit_code: Optional[int] = None,
        log_path: Optional[str] = None,
    ) -> str:
        """Append one dispatched wipe to the journal and return its id."""
        entry_id = str(uuid.uuid4())
        conn = self._get_conn()
        conn.execute(
            """INSERT INTO wipe_journal
               (id, created_at, target, target_kind, method, verdict,
                success, exit_code, log_path)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                entry_id,
                datetime.now().isoformat(),
                target,
                target_kind,
                method,
                verdict,
                1 if success else 0,
                exit_code,
                log_path,
            ),
        )
        conn.commit()
        return entry_id

    def get_wipe_history(self, limit: int = 20) -> list[dict]:
        """Return the most recent journal entries, newest first."""
        conn = self._get_conn()
        rows = conn.execute(
            """SELECT * FROM wipe_journal
               ORDER BY created_at DESC, rowid DESC
               LIMIT ?""",
            (limit,),
        ).fetchall()
        results = []
        for row in rows:
            d = dict(row)
            d["success"] = bool(d["success"])
            results.append(d)
        return results
