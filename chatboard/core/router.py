"""
ChatBoard Request Router

Maps normalized requests onto service calls and turns the outcome into a
transport-agnostic Result. Knows nothing about HTTP framing or JSON.
"""

import logging
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Optional, TYPE_CHECKING

from ..errors import BoardError, MethodNotAllowed, ValidationError

if TYPE_CHECKING:
    from .board import MessageBoard

logger = logging.getLogger(__name__)

ACCOUNT_POST_ACTIONS = ("register", "login", "update")


@dataclass
class Request:
    """Already-decoded request handed over by an adapter."""
    method: str
    action: str = ""
    params: dict[str, str] = field(default_factory=dict)
    cookie_username: str = ""
    cookie_password: str = ""
    proxy_ip: Optional[str] = None
    peer_ip: Optional[str] = None


@dataclass
class Result:
    """Outcome for an adapter to serialize."""
    status_code: int
    body: dict

    @property
    def status_text(self) -> str:
        return HTTPStatus(self.status_code).phrase

    @classmethod
    def success(cls, message: str, **fields) -> "Result":
        return cls(200, {"status": "success", "message": message, **fields})

    @classmethod
    def error(cls, status_code: int, message: str) -> "Result":
        return cls(status_code, {"status": "error", "message": message})


class Router:
    """Dispatches requests to MessageService and AccountService."""

    def __init__(self, board: "MessageBoard"):
        self.board = board

    def dispatch(self, request: Request) -> Result:
        """Handle one request. Board errors become error results."""
        method = (request.method or "").upper()
        try:
            if method == "GET":
                return self._list_messages(request)
            if method == "POST":
                if request.action in ACCOUNT_POST_ACTIONS:
                    return self._account_action(request)
                return self._post_message(request)
            if method == "DELETE":
                if request.action == "delete":
                    return self._delete_account(request)
                raise MethodNotAllowed("Unsupported DELETE action.")
            raise MethodNotAllowed("Unsupported request method.")
        except BoardError as e:
            logger.debug(f"{method} action='{request.action}' failed: {e.message}")
            return Result.error(e.status_code, e.message)

    def _list_messages(self, request: Request) -> Result:
        limit = None
        raw_limit = request.params.get("limit")
        if raw_limit:
            try:
                limit = int(raw_limit)
            except ValueError:
                raise ValidationError("Limit must be an integer.")

        messages = self.board.message_service.list_recent(limit)
        return Result.success(
            f"{len(messages)} messages.",
            data=[m.to_dict() for m in messages]
        )

    def _post_message(self, request: Request) -> Result:
        message_id = self.board.message_service.post_message(
            username=request.cookie_username,
            password=request.cookie_password,
            body=request.params.get("message", ""),
            proxy_ip=request.proxy_ip,
            peer_ip=request.peer_ip
        )
        return Result.success("Message posted and old messages cleaned.", id=str(message_id))

    def _account_action(self, request: Request) -> Result:
        accounts = self.board.account_service
        username = request.params.get("username", "")
        password = request.params.get("password", "")

        if request.action == "register":
            accounts.register(username, password)
            return Result.success("User registered successfully.")

        if request.action == "login":
            accounts.login(username, password)
            return Result.success("Login successful.")

        accounts.change_password(username, password, request.params.get("new_password", ""))
        return Result.success("Password updated successfully.")

    def _delete_account(self, request: Request) -> Result:
        # Cookie credentials take precedence over form fields
        username = request.cookie_username or request.params.get("username", "")
        password = request.cookie_password or request.params.get("password", "")

        self.board.account_service.delete_account(username, password)
        return Result.success("User deleted successfully.")
