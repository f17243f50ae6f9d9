"""SQLite memory of the last visited location."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from order_desk import config

_HISTORY_LIMIT = 50


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _connect() -> sqlite3.Connection:
    db_file = Path(config.DB_PATH)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(db_file)


def bootstrap_schema() -> None:
    """Create the location table if it does not already exist."""
    with _connect() as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS locations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                location TEXT NOT NULL,
                visited_at TEXT NOT NULL
            );
            """
        )


def save_location(location: str) -> None:
    """Append a visited location, keeping only the most recent entries."""
    with _connect() as conn:
        with conn:
            conn.execute(
                "INSERT INTO locations (location, visited_at) VALUES (?, ?)",
                (location, _utc_now_iso()),
            )
            conn.execute(
                """
                DELETE FROM locations
                WHERE id NOT IN (SELECT id FROM locations ORDER BY id DESC LIMIT ?)
                """,
                (_HISTORY_LIMIT,),
            )


def load_last_location() -> str | None:
    """Return the most recently saved location, if any."""
    with _connect() as conn:
        row = conn.execute("SELECT location FROM locations ORDER BY id DESC LIMIT 1").fetchone()
    if row is None:
        return None
    return str(row[0])
