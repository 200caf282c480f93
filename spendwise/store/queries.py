"""Database query functions."""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from spendwise.errors import StorageError
from spendwise.store.schema import get_db_path

logger = logging.getLogger(__name__)


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def load_blob(key: str, db_path: Path | None = None) -> str | None:
    """Load a stored JSON blob.

    Args:
        key: Storage key (e.g. "1700000000000_funds").
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The stored text, or None if nothing is stored under the key.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT value FROM kv WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row["value"] if row else None


def save_blob(key: str, value: str, db_path: Path | None = None) -> None:
    """Store a JSON blob, replacing any previous value.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                "INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, ?)",
                (key, value, datetime.now().isoformat()),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


def insert_user(
    user_id: int, name: str, email: str, password_hash: str, created_at: str, db_path: Path | None = None
) -> bool:
    """Insert a user account.

    Returns:
        True if inserted, False if the email is already registered.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                "INSERT INTO users (id, name, email, password_hash, created_at) VALUES (?, ?, ?, ?, ?)",
                (user_id, name, email, password_hash, created_at),
            )
            conn.commit()
            return True
        except sqlite3.IntegrityError:
            conn.rollback()
            return False
        except sqlite3.Error:
            conn.rollback()
            raise


def get_user_by_email(email: str, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a user row by email, including the password hash."""
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id, name, email, password_hash, created_at FROM users WHERE email = ?", (email,))
        row = cursor.fetchone()
        return dict(row) if row else None


def get_user_by_id(user_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a user row by id, without the password hash."""
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id, name, email, created_at FROM users WHERE id = ?", (user_id,))
        row = cursor.fetchone()
        return dict(row) if row else None


def get_max_user_id(db_path: Path | None = None) -> int | None:
    """Highest user id in use, or None if there are no users."""
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT MAX(id) FROM users")
        row = cursor.fetchone()
        return row[0] if row else None


class SqliteKeyValueStore:
    """Persistence collaborator for the record store.

    ``save`` reports failure by returning False so the caller can keep working
    in memory. ``load`` raises StorageError so "unavailable" is not mistaken
    for "nothing stored".
    """

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path if db_path is not None else get_db_path()

    def load(self, key: str) -> str | None:
        try:
            return load_blob(key, self.db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Could not load {key} from {self.db_path}: {e}") from e

    def save(self, key: str, blob: str) -> bool:
        try:
            save_blob(key, blob, self.db_path)
            return True
        except sqlite3.Error as e:
            logger.debug("Could not save %s to %s: %s", key, self.db_path, e)
            return False
