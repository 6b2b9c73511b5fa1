"""
SQLite-backed key/value slot for persisted analytics state.

Schema versioning ensures automatic migration when schema changes.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from typing import Optional

from storage.base import KeyValueBackend
from storage.errors import StorageUnavailable

# Schema version - increment when schema changes
EXPECTED_SCHEMA_VERSION = 1


class SqliteBackend(KeyValueBackend):
    """
    Durable key/value storage in a single SQLite file.

    Tables:
    - schema_meta: tracks schema version
    - kv_store: one row per key, whole-value overwrite

    Tables from another schema version are dropped on initialize().
    """

    def __init__(self, database_path: str, quota_bytes: Optional[int] = None):
        """
        Initialize the backend.

        Args:
            database_path: Path to the SQLite database file.
            quota_bytes: Maximum total size of stored keys and values.
        """
        super().__init__(quota_bytes)
        self.database_path = database_path
        self.conn: Optional[sqlite3.Connection] = None

        # Create directory if it doesn't exist
        db_dir = os.path.dirname(database_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        logging.info(f"Key/value storage at {database_path}")

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self.conn is None:
            self.conn = sqlite3.connect(self.database_path)
        return self.conn

    def _get_schema_version(self) -> Optional[int]:
        """Get current schema version from database."""
        try:
            cursor = self._get_connection().cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_meta'"
            )
            if cursor.fetchone() is None:
                return None

            cursor.execute("SELECT schema_version FROM schema_meta LIMIT 1")
            row = cursor.fetchone()
            return row[0] if row else None
        except sqlite3.Error:
            return None

    def _create_schema(self) -> None:
        cursor = self._get_connection().cursor()
        cursor.execute("DROP TABLE IF EXISTS kv_store")
        cursor.execute("DROP TABLE IF EXISTS schema_meta")

        cursor.execute("""
            CREATE TABLE schema_meta (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                schema_version INTEGER NOT NULL,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """)
        cursor.execute("""
            CREATE TABLE kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """)
        cursor.execute(
            "INSERT INTO schema_meta (id, schema_version) VALUES (1, ?)",
            (EXPECTED_SCHEMA_VERSION,)
        )

        self._get_connection().commit()
        logging.info(f"Created schema version {EXPECTED_SCHEMA_VERSION}")

    def initialize(self) -> None:
        """
        Initialize the database schema.

        If schema_meta is missing or version doesn't match EXPECTED_SCHEMA_VERSION,
        drops the old tables and creates a fresh schema.
        """
        try:
            current_version = self._get_schema_version()

            if current_version != EXPECTED_SCHEMA_VERSION:
                if current_version is not None:
                    logging.warning(
                        f"Schema version mismatch: found {current_version}, "
                        f"expected {EXPECTED_SCHEMA_VERSION}. Dropping old tables."
                    )
                else:
                    logging.info("No schema found, creating fresh database.")
                self._create_schema()
            else:
                logging.info(f"Schema version {current_version} is current")

        except sqlite3.Error as e:
            logging.error(f"Database initialization error: {e}")
            raise StorageUnavailable(str(e)) from e

    def get_item(self, key: str) -> Optional[str]:
        try:
            cursor = self._get_connection().cursor()
            cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row[0] if row else None
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Error reading '{key}': {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            cursor = self._get_connection().cursor()
            if self.quota_bytes is not None:
                cursor.execute(
                    "SELECT key, length(CAST(key AS BLOB)) + length(CAST(value AS BLOB)) FROM kv_store"
                )
                self._check_quota(key, value, {row[0]: row[1] for row in cursor.fetchall()})

            cursor.execute("""
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, datetime('now'))
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            """, (key, value))
            self._get_connection().commit()
            logging.debug(f"Stored {len(value)} chars under '{key}'")
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Error writing '{key}': {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            cursor = self._get_connection().cursor()
            cursor.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            self._get_connection().commit()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Error removing '{key}': {e}") from e

    def close(self) -> None:
        """Close database connection."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None
            logging.info("Database connection closed")
