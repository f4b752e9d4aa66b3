"""
ChatBoard Account Database Operations

CRUD operations for accounts. These are unconditional; password checks
belong to AccountService.
"""

import sqlite3
import logging
from typing import Optional

from ..errors import Conflict
from .connection import Database
from .models import Account

logger = logging.getLogger(__name__)


class AccountRepository:
    """Repository for account-related database operations."""

    def __init__(self, db: Database):
        self.db = db

    def get_password(self, username: str) -> Optional[str]:
        """Stored password for username (case-sensitive), None if absent."""
        row = self.db.fetchone(
            "SELECT password FROM users WHERE username = ?",
            (username,)
        )
        return row["password"] if row else None

    def get_account(self, username: str) -> Optional[Account]:
        """Get account by username."""
        row = self.db.fetchone("SELECT * FROM users WHERE username = ?", (username,))
        return Account(username=row["username"], password=row["password"]) if row else None

    def account_exists(self, username: str) -> bool:
        row = self.db.fetchone("SELECT 1 FROM users WHERE username = ?", (username,))
        return row is not None

    def insert_account(self, username: str, password: str) -> Account:
        """
        Create an account.

        The primary key on username turns a concurrent duplicate insert
        into Conflict.
        """
        try:
            self.db.execute(
                "INSERT INTO users (username, password) VALUES (?, ?)",
                (username, password)
            )
        except sqlite3.IntegrityError as e:
            raise Conflict("User already exists.") from e

        return Account(username=username, password=password)

    def update_password(self, username: str, new_password: str) -> bool:
        """Overwrite stored password."""
        cursor = self.db.execute(
            "UPDATE users SET password = ? WHERE username = ?",
            (new_password, username)
        )
        return cursor.rowcount > 0

    def delete_account(self, username: str) -> bool:
        """Delete an account. Messages posted under it are left alone."""
        cursor = self.db.execute("DELETE FROM users WHERE username = ?", (username,))
        return cursor.rowcount > 0

    def count_accounts(self) -> int:
        """Count registered accounts."""
        row = self.db.fetchone("SELECT COUNT(*) FROM users")
        return row[0] if row else 0
