"""
ChatBoard Message Database Operations

Insert, recent-window listing, and retention pruning for messages.
"""

import time
import logging
from typing import Optional

from ..errors import ValidationError
from .connection import Database
from .models import Message

logger = logging.getLogger(__name__)


class MessageRepository:
    """Repository for message-related database operations."""

    def __init__(self, db: Database):
        self.db = db

    def insert_message(
        self,
        ip: str,
        username: str,
        body: str,
        timestamp: Optional[int] = None
    ) -> Message:
        """Append a message. The store assigns the id."""
        if not body:
            raise ValidationError("Message is empty.")

        if timestamp is None:
            timestamp = int(time.time())

        cursor = self.db.execute("""
            INSERT INTO messages (timestamp, ip, username, body)
            VALUES (?, ?, ?, ?)
        """, (timestamp, ip, username, body))

        return Message(
            id=cursor.lastrowid,
            timestamp=timestamp,
            ip=ip,
            username=username,
            body=body
        )

    def get_message_by_id(self, message_id: int) -> Optional[Message]:
        """Get message by ID."""
        row = self.db.fetchone("SELECT * FROM messages WHERE id = ?", (message_id,))
        return self._row_to_message(row) if row else None

    def recent_messages(self, limit: int) -> list[Message]:
        """
        Get the newest `limit` messages, oldest first.

        Selected newest-first by id, then reversed into chronological order.
        """
        rows = self.db.fetchall(
            "SELECT * FROM messages ORDER BY id DESC LIMIT ?",
            (limit,)
        )
        return [self._row_to_message(row) for row in reversed(rows)]

    def prune_to_limit(self, keep: int, protect_id: Optional[int] = None) -> int:
        """
        Delete all but the `keep` most recent messages.

        Recency is (timestamp DESC, id DESC). When protect_id is given that
        row always survives and takes one of the `keep` slots.

        Returns number of deleted rows.
        """
        if protect_id is None:
            cursor = self.db.execute("""
                DELETE FROM messages WHERE id NOT IN (
                    SELECT id FROM messages
                    ORDER BY timestamp DESC, id DESC
                    LIMIT ?
                )
            """, (max(keep, 0),))
        else:
            cursor = self.db.execute("""
                DELETE FROM messages WHERE id != ? AND id NOT IN (
                    SELECT id FROM messages WHERE id != ?
                    ORDER BY timestamp DESC, id DESC
                    LIMIT ?
                )
            """, (protect_id, protect_id, max(keep - 1, 0)))

        deleted = cursor.rowcount
        if deleted > 0:
            logger.info(f"Pruned {deleted} old messages (keeping {keep})")
        return deleted

    def count_messages(self) -> int:
        """Count stored messages."""
        row = self.db.fetchone("SELECT COUNT(*) FROM messages")
        return row[0] if row else 0

    def timestamp_range(self) -> tuple[Optional[int], Optional[int]]:
        """Oldest and newest stored timestamps, (None, None) when empty."""
        row = self.db.fetchone("SELECT MIN(timestamp), MAX(timestamp) FROM messages")
        if not row:
            return None, None
        return row[0], row[1]

    def _row_to_message(self, row) -> Message:
        """Convert database row to Message object."""
        return Message(
            id=row["id"],
            timestamp=row["timestamp"],
            ip=row["ip"],
            username=row["username"],
            body=row["body"]
        )
