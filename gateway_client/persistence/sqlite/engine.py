"""Connections and schema for the access database.

File databases run in WAL mode with NORMAL synchronous writes; every
connection waits up to ``SQLITE_BUSY_TIMEOUT_MS`` on a locked database
before failing. Errors propagate; the access gate decides how to degrade.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from ...config.defaults import (
    SQLITE_BUSY_TIMEOUT_MS,
    SQLITE_DEFAULT_DB_RELPATH,
    SQLITE_JOURNAL_MODE,
    SQLITE_SYNCHRONOUS,
)

MEMORY_DB = ":memory:"


def get_db_path(db_path: Optional[str] = None) -> Path:
    """Return the database file path (``~/.gateway_client/access.db`` by default)."""
    return Path(db_path).expanduser() if db_path else Path.home() / SQLITE_DEFAULT_DB_RELPATH


def create_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Open a connection and apply PRAGMA settings.

    ``":memory:"`` opens a private in-memory database (no WAL). For file
    databases the parent directory is created first.

    The connection is opened with ``check_same_thread=False`` so a background
    session may read access data; callers must not share one connection
    between threads concurrently.
    """
    if db_path == MEMORY_DB:
        conn = sqlite3.connect(MEMORY_DB, check_same_thread=False)
    else:
        path = get_db_path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(path), check_same_thread=False)
        conn.execute(f"PRAGMA journal_mode={SQLITE_JOURNAL_MODE};")
        conn.execute(f"PRAGMA synchronous={SQLITE_SYNCHRONOUS};")
    conn.row_factory = sqlite3.Row
    conn.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")  # ms
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    """Create ``user_tiers`` (tier and credit window per user) and
    ``model_configs`` (catalog keyed by provider and model) if missing.
    """
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS user_tiers (
            user_id TEXT PRIMARY KEY,
            tier TEXT NOT NULL DEFAULT 'free',
            credits_balance REAL,
            credits_limit REAL,
            reset_at TEXT,
            updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS model_configs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            provider TEXT NOT NULL,
            model TEXT NOT NULL,
            display_name TEXT NOT NULL,
            tier_required TEXT NOT NULL DEFAULT 'free',
            is_active INTEGER NOT NULL DEFAULT 1,
            context_window INTEGER,
            max_tokens INTEGER,
            input_price REAL,
            output_price REAL,
            updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (provider, model)
        );
        """
    )
    conn.commit()


__all__ = ["MEMORY_DB", "get_db_path", "create_connection", "init_schema"]
