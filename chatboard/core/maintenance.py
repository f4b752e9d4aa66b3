"""
ChatBoard Maintenance Module

Offline housekeeping run from the command line:
- Retention pruning outside the posting path
- Statistics collection
"""

import logging
from typing import TYPE_CHECKING

from ..db.messages import MessageRepository
from ..db.users import AccountRepository
from ..utils.formatting import format_timestamp

if TYPE_CHECKING:
    from .board import MessageBoard

logger = logging.getLogger(__name__)


class MaintenanceManager:
    """Maintenance tasks for a ChatBoard database."""

    def __init__(self, board: "MessageBoard"):
        self.board = board
        self.config = board.config
        self.message_repo = MessageRepository(board.db)
        self.account_repo = AccountRepository(board.db)

    def run_retention(self) -> int:
        """
        Prune the board to the configured retention limit.

        Returns number of deleted messages.
        """
        keep = self.config.limits.retention_limit
        with self.board.db.transaction():
            deleted = self.message_repo.prune_to_limit(keep)

        logger.info(f"Retention run complete: {deleted} deleted, limit {keep}")
        return deleted

    def get_stats(self) -> dict:
        """
        Board statistics.

        Returns dict with message and account counts plus the oldest and
        newest message times (RFC 3339, "Never" when the board is empty).
        """
        oldest, newest = self.message_repo.timestamp_range()
        return {
            "messages": self.message_repo.count_messages(),
            "accounts": self.account_repo.count_accounts(),
            "retention_limit": self.config.limits.retention_limit,
            "oldest": format_timestamp(oldest),
            "newest": format_timestamp(newest),
        }
