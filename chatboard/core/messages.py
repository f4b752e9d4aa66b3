"""
ChatBoard Message Service

Posting policy and the read/write surface of the board.
"""

import time
import logging
from typing import Optional, TYPE_CHECKING

from ..db.models import Message
from ..db.messages import MessageRepository
from ..errors import BoardError, ValidationError
from ..utils.formatting import truncate_utf8

if TYPE_CHECKING:
    from .board import MessageBoard

logger = logging.getLogger(__name__)

UNKNOWN_IP = "UNKNOWN_IP"


def resolve_remote_ip(
    proxy_ip: Optional[str],
    peer_ip: Optional[str],
    trust_proxy: bool = True
) -> str:
    """Proxy-supplied address if trusted, else direct peer, else UNKNOWN_IP."""
    if trust_proxy and proxy_ip:
        return proxy_ip
    if peer_ip:
        return peer_ip
    return UNKNOWN_IP


class MessageService:
    """
    Message service for ChatBoard.

    Features:
    - Anonymous and authenticated posting
    - Best-effort truncation of oversized bodies
    - Retention window enforced after every post
    """

    def __init__(self, board: "MessageBoard"):
        self.board = board
        self.config = board.config
        self.db = board.db
        self.message_repo = MessageRepository(board.db)

    def post_message(
        self,
        username: str,
        password: str,
        body: str,
        proxy_ip: Optional[str] = None,
        peer_ip: Optional[str] = None
    ) -> int:
        """
        Post a message and prune the board to its retention limit.

        Returns:
            The new message id

        Raises:
            ValidationError: empty body
            AuthFailed: registered username with missing or wrong password
            StorageUnavailable: insert failed
        """
        body = (body or "").strip()
        if not body:
            raise ValidationError("Message is empty.")

        max_bytes = self.config.limits.max_message_bytes
        truncated = truncate_utf8(body, max_bytes)
        if truncated != body:
            logger.warning(f"Message truncated to {max_bytes} bytes")
            body = truncated

        anonymous = self.config.board.anonymous_username
        if not username:
            username = anonymous

        ip = resolve_remote_ip(proxy_ip, peer_ip, self.config.network.trust_proxy_header)

        with self.db.transaction():
            if username != anonymous:
                self.board.account_service.authorize(username, password)
            message = self.message_repo.insert_message(
                ip=ip,
                username=username,
                body=body,
                timestamp=int(time.time())
            )

        logger.info(f"Message {message.id} posted by '{username}' from {ip}")

        self._prune(protect_id=message.id)
        return message.id

    def list_recent(self, limit: Optional[int] = None) -> list[Message]:
        """
        Most recent messages, oldest first.

        Raises:
            ValidationError: limit below 1
        """
        max_list = self.config.limits.max_list_messages
        if limit is None:
            limit = max_list
        if limit < 1:
            raise ValidationError("Limit must be at least 1.")

        return self.message_repo.recent_messages(min(limit, max_list))

    def _prune(self, protect_id: int):
        """Retention housekeeping. Failures never undo the post."""
        try:
            with self.db.transaction():
                self.message_repo.prune_to_limit(
                    self.config.limits.retention_limit,
                    protect_id=protect_id
                )
        except BoardError as e:
            logger.error(f"Retention prune failed: {e}")
