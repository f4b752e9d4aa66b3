"""
ChatBoard Main Board Class

Central orchestrator for one request or process.
"""

import logging
from typing import Optional

from ..config import Config
from ..db.connection import Database

logger = logging.getLogger(__name__)


class MessageBoard:
    """
    Main ChatBoard class - owns the database and the services.

    Use as a context manager so the connection is always released:

        with MessageBoard(config) as board:
            result = board.router.dispatch(request)
    """

    def __init__(self, config: Config, db: Optional[Database] = None):
        """
        Args:
            config: Loaded configuration object
            db: Injected database (opened from config.database when None)
        """
        self.config = config
        self.db = db or Database(
            config.database.path,
            busy_timeout=config.database.busy_timeout_seconds
        )

        # These will be initialized in setup()
        self.account_service = None
        self.message_service = None
        self.router = None

    def setup(self):
        """Open the database and wire up services."""
        if not self.db.is_open:
            self.db.initialize()

        from .accounts import AccountService
        from .messages import MessageService
        from .router import Router

        self.account_service = AccountService(self)
        self.message_service = MessageService(self)
        self.router = Router(self)

        logger.debug(f"{self.config.board.name} ready ({self.db.path})")

    def close(self):
        self.db.close()

    def __enter__(self) -> "MessageBoard":
        try:
            self.setup()
        except Exception:
            self.close()
            raise
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
