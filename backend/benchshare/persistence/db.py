"""SQLite connection + schema initialisation."""
from __future__ import annotations
import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Type

from benchshare.core import config
from benchshare.core.security import hash_password
from benchshare.errors import UpstreamFailure

_MIGRATIONS_DIR = os.path.join(os.path.dirname(__file__), "migrations")

logger = logging.getLogger(__name__)


def get_connection() -> sqlite3.Connection:
    conn = sqlite3.connect(config.DATABASE_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db() -> None:
    """Run all migration SQL files against the database."""
    os.makedirs(os.path.dirname(os.path.abspath(config.DATABASE_PATH)), exist_ok=True)
    migration_file = os.path.join(_MIGRATIONS_DIR, "001_init.sql")
    with open(migration_file, "r", encoding="utf-8") as f:
        sql = f.read()
    conn = get_connection()
    conn.executescript(sql)
    conn.commit()
    conn.close()
    _seed_default_user()


def _seed_default_user() -> None:
    """Insert a default admin user."""
    import uuid
    from datetime import datetime, timezone

    conn = get_connection()
    try:
        count = conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]
        if count == 0:
            hashed = hash_password("admin")
            conn.execute(
                """
                INSERT INTO users (id, username, password_hash, role, display_name, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    str(uuid.uuid4()),
                    "admin",
                    hashed,
                    "admin",
                    "Administrator",
                    datetime.now(timezone.utc).isoformat(),
                ),
            )
            conn.commit()
            logger.info("Seeded default admin user")
    finally:
        conn.close()


@contextmanager
def connect(error_cls: Type[Exception] = UpstreamFailure) -> Iterator[sqlite3.Connection]:
    """Yield a connection; any SQLite error leaves as *error_cls*."""
    conn = None
    try:
        conn = get_connection()
        yield conn
    except sqlite3.Error as e:
        raise error_cls(str(e)) from e
    finally:
        if conn is not None:
            conn.close()
