"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), applying migrations on application start
(``init_db``) and small helpers shared by the services for generating
identifiers and timestamps.

Identifiers are UUID4 strings and timestamps are ISO-8601 strings in
UTC, so rows can be relayed to clients without conversion.  The
migration mechanism stores applied versions in the ``migrations``
table and executes newer migrations in order.
"""

import logging
import os
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from .config import settings

logger = logging.getLogger(__name__)


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the package root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # sports_events_api/
    return str((base_dir / db_url).resolve())


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Foreign keys are enabled per connection; SQLite leaves them
    off by default and the ``event_venues`` cascade depends on them.
    ``casefold(text)`` is available in SQL for case-insensitive matching
    beyond ASCII, which SQLite's own ``LIKE`` does not provide.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    conn.create_function("casefold", 1, _casefold, deterministic=True)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and commits on success."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def new_id() -> str:
    """Return a fresh primary key."""
    return str(uuid.uuid4())


def utcnow() -> str:
    """Current time as an ISO-8601 UTC string with a ``Z`` suffix."""
    return to_iso(datetime.now(timezone.utc))


def to_iso(value: datetime) -> str:
    """Normalise a datetime to the stored ISO-8601 UTC representation.

    Naive values are taken to be UTC.  The fixed width format keeps
    lexicographic order equal to chronological order, which the
    ``ORDER BY scheduled_at`` queries rely on.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: accounts and sessions
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT UNIQUE,
            full_name TEXT,
            password TEXT,
            provider TEXT NOT NULL DEFAULT 'email',
            provider_subject TEXT,
            disabled INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE UNIQUE INDEX IF NOT EXISTS idx_users_provider_subject
            ON users(provider, provider_subject)
            WHERE provider_subject IS NOT NULL;

        CREATE TABLE IF NOT EXISTS sessions (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            created_at TEXT NOT NULL,
            expires_at TEXT NOT NULL,
            revoked_at TEXT,
            FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
        );

        CREATE INDEX IF NOT EXISTS idx_sessions_user_id ON sessions(user_id);
        """,
    ),
    # Migration 2: events, venues and the link table between them
    (
        2,
        """
        CREATE TABLE IF NOT EXISTS venues (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            address TEXT,
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS events (
            id TEXT PRIMARY KEY,
            owner_id TEXT NOT NULL,
            name TEXT NOT NULL,
            category TEXT NOT NULL,
            scheduled_at TEXT NOT NULL,
            description TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY(owner_id) REFERENCES users(id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS event_venues (
            id TEXT PRIMARY KEY,
            event_id TEXT NOT NULL,
            venue_id TEXT NOT NULL,
            UNIQUE(event_id, venue_id),
            FOREIGN KEY(event_id) REFERENCES events(id) ON DELETE CASCADE,
            FOREIGN KEY(venue_id) REFERENCES venues(id) ON DELETE CASCADE
        );

        CREATE INDEX IF NOT EXISTS idx_events_owner_scheduled ON events(owner_id, scheduled_at);
        CREATE INDEX IF NOT EXISTS idx_event_venues_event_id ON event_venues(event_id);
        CREATE INDEX IF NOT EXISTS idx_venues_name ON venues(name);
        """,
    ),
]


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version and applies every newer entry of
    ``MIGRATIONS``.  Append new migrations with an incremented version.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                logger.info("Applying migration %s", version)
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
