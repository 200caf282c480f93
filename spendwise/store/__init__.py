"""Database store layer - provides persistence for the application.

This module re-exports the public store API for easy importing.
"""

from spendwise.store.queries import (
    SqliteKeyValueStore,
    get_user_by_email,
    get_user_by_id,
    insert_user,
    load_blob,
    save_blob,
)
from spendwise.store.records import KeyValueStore, RecordStore
from spendwise.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "get_user_by_email",
    "get_user_by_id",
    "insert_user",
    "load_blob",
    "save_blob",
    "SqliteKeyValueStore",
    # Records
    "KeyValueStore",
    "RecordStore",
]
