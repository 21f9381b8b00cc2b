from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

LOGGER = logging.getLogger(__name__)

MIGRATIONS_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    applied_at TEXT NOT NULL
);
"""

# Append only; versions must stay in ascending order.
MIGRATIONS: tuple[tuple[int, str, str], ...] = (
    (
        1,
        "create_page_views",
        """
        CREATE TABLE IF NOT EXISTS page_views (
            path TEXT PRIMARY KEY,
            count INTEGER NOT NULL DEFAULT 0 CHECK (count >= 0),
            last_viewed_at TEXT NOT NULL
        );
        """,
    ),
)


def _prepare_db_path(db_path: Path) -> Path:
    normalized = Path(db_path)
    normalized.parent.mkdir(parents=True, exist_ok=True)
    return normalized


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def connect(db_path: Path) -> sqlite3.Connection:
    normalized = _prepare_db_path(db_path)
    connection = sqlite3.connect(normalized)
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA journal_mode = WAL;")
    connection.execute("PRAGMA synchronous = NORMAL;")
    return connection


def applied_versions(connection: sqlite3.Connection) -> set[int]:
    connection.executescript(MIGRATIONS_TABLE_SCHEMA)
    rows = connection.execute("SELECT version FROM schema_migrations").fetchall()
    return {int(row["version"]) for row in rows}


def run_migrations(connection: sqlite3.Connection) -> list[int]:
    """Apply pending migrations in order and return the versions applied."""
    done = applied_versions(connection)
    applied: list[int] = []
    for version, name, script in MIGRATIONS:
        if version in done:
            continue
        connection.executescript(script)
        connection.execute(
            "INSERT INTO schema_migrations (version, name, applied_at) VALUES (?, ?, ?)",
            (version, name, _utc_now()),
        )
        connection.commit()
        LOGGER.info("Applied migration %03d_%s", version, name)
        applied.append(version)
    return applied


@contextmanager
def open_db(db_path: Path) -> Iterator[sqlite3.Connection]:
    connection = connect(db_path)
    try:
        yield connection
    finally:
        connection.close()


def initialize_database(db_path: Path) -> None:
    with open_db(db_path) as connection:
        run_migrations(connection)


def record_page_view(db_path: Path, path: str) -> int:
    with open_db(db_path) as connection:
        connection.execute(
            """
            INSERT INTO page_views (path, count, last_viewed_at)
            VALUES (?, 1, ?)
            ON CONFLICT(path) DO UPDATE SET
                count=page_views.count + 1,
                last_viewed_at=excluded.last_viewed_at
            """,
            (path, _utc_now()),
        )
        connection.commit()
        row = connection.execute(
            "SELECT count FROM page_views WHERE path = ?",
            (path,),
        ).fetchone()
    return int(row["count"])
