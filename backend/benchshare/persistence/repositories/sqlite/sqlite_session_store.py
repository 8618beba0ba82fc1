"""SQLite implementation of SessionStore — one JSON document per session."""
from __future__ import annotations
import json
from datetime import datetime, timezone
from typing import Any, Optional

from benchshare.persistence.db import connect
from benchshare.persistence.interfaces.session_store import HITS, OWN, SessionStore

# JSON object keys are strings; these mappings are keyed by page id.
_PAGE_ID_MAPPINGS = {HITS, OWN}


class SqliteSessionStore(SessionStore):

    def get(self, session_id: str, key: str) -> Optional[Any]:
        with connect() as conn:
            row = conn.execute("SELECT data FROM sessions WHERE id = ?", (session_id,)).fetchone()
        if not row:
            return None
        value = json.loads(row["data"]).get(key)
        if key in _PAGE_ID_MAPPINGS and value is not None:
            return {int(k): v for k, v in value.items()}
        return value

    def set(self, session_id: str, key: str, value: Any) -> None:
        with connect() as conn:
            row = conn.execute("SELECT data FROM sessions WHERE id = ?", (session_id,)).fetchone()
            data = json.loads(row["data"]) if row else {}
            data[key] = value
            conn.execute(
                """
                INSERT INTO sessions (id, data, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    data       = excluded.data,
                    updated_at = excluded.updated_at
                """,
                (session_id, json.dumps(data), datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()
