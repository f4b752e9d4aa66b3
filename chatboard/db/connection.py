"""
ChatBoard Database Connection Manager

SQLite database with WAL mode so readers never block the single writer.
"""

import os
import sqlite3
import logging
import stat
from pathlib import Path
from contextlib import contextmanager
from typing import Optional, Generator

from ..errors import StorageUnavailable

logger = logging.getLogger(__name__)

SCHEMA_TABLES = ("messages", "users")


class Database:
    """
    SQLite database manager for ChatBoard.

    One instance per request or process. Writers serialize through
    BEGIN IMMEDIATE; a busy database raises StorageUnavailable once the
    busy timeout expires instead of hanging the caller.
    """

    def __init__(self, path: str, busy_timeout: float = 5.0):
        """
        Initialize database manager.

        Args:
            path: Path to SQLite database file (or ":memory:")
            busy_timeout: Seconds to wait on a locked database
        """
        self.path = Path(path)
        self.busy_timeout = busy_timeout
        self._conn: Optional[sqlite3.Connection] = None
        self._initialized = False

    def __enter__(self) -> "Database":
        if not self._initialized:
            self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def in_memory(self) -> bool:
        return str(self.path) == ":memory:"

    def initialize(self):
        """Open the connection and make sure the schema exists."""
        created = not self.in_memory and not self.path.exists()

        try:
            if not self.in_memory:
                self.path.parent.mkdir(parents=True, exist_ok=True)

            self._conn = sqlite3.connect(
                str(self.path),
                timeout=self.busy_timeout,
                check_same_thread=False,
                isolation_level=None  # Autocommit mode
            )
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
        except (OSError, sqlite3.Error) as e:
            self.close()
            raise StorageUnavailable(f"Can't open database: {e}") from e

        try:
            self.ensure_schema()
            if created:
                self._restrict_permissions()
        except Exception:
            self.close()
            raise

        self._initialized = True
        logger.debug(f"Database initialized: {self.path}")

    def ensure_schema(self):
        """Create tables if missing. No-op when both already exist."""
        if self.schema_exists():
            return

        logger.info(f"Creating database schema at {self.path}")
        try:
            self.conn.executescript("""
                CREATE TABLE IF NOT EXISTS messages (
                    id          INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp   INTEGER NOT NULL,
                    ip          TEXT NOT NULL,
                    username    TEXT NOT NULL,
                    body        TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_messages_timestamp
                    ON messages(timestamp, id);

                CREATE TABLE IF NOT EXISTS users (
                    username    TEXT PRIMARY KEY,
                    password    TEXT NOT NULL
                );
            """)
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Failed to create schema: {e}") from e

    def schema_exists(self) -> bool:
        """Cheap probe for both tables in sqlite_master."""
        placeholders = ",".join("?" for _ in SCHEMA_TABLES)
        row = self.fetchone(
            f"SELECT COUNT(*) FROM sqlite_master WHERE type = 'table' AND name IN ({placeholders})",
            SCHEMA_TABLES
        )
        return bool(row) and row[0] == len(SCHEMA_TABLES)

    def _restrict_permissions(self):
        """Owner and group read/write only (0660)."""
        try:
            os.chmod(self.path, stat.S_IRUSR | stat.S_IWUSR | stat.S_IRGRP | stat.S_IWGRP)
        except OSError as e:
            logger.warning(f"Could not set permissions on {self.path}: {e}")

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageUnavailable("Database is not open")
        return self._conn

    @contextmanager
    def transaction(self, immediate: bool = True) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database transactions.

        With immediate=True the write lock is taken up front, so reads made
        inside the block cannot be invalidated by another writer before
        commit.
        """
        self.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
        try:
            yield self.conn
            self.execute("COMMIT")
        except Exception:
            if self.conn.in_transaction:
                self.conn.execute("ROLLBACK")
            raise

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute SQL query."""
        try:
            return self.conn.execute(sql, params)
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as e:
            raise StorageUnavailable(str(e)) from e

    def fetchone(self, sql: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        """Execute query and fetch one result."""
        return self.execute(sql, params).fetchone()

    def fetchall(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Execute query and fetch all results."""
        return self.execute(sql, params).fetchall()

    def close(self):
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
            self._initialized = False
            logger.debug("Database connection closed")
