"""
ChatBoard Account Service

Username/password binding layered on free-text usernames. There is no
session state: every request re-authenticates.
"""

import logging
from typing import TYPE_CHECKING

from ..db.users import AccountRepository
from ..errors import AuthFailed, Conflict, ValidationError

if TYPE_CHECKING:
    from .board import MessageBoard

logger = logging.getLogger(__name__)


class AccountService:
    """
    Account operations for ChatBoard.

    Registration is explicit: posting under an unregistered name never
    claims it. Passwords are compared in plaintext.
    """

    def __init__(self, board: "MessageBoard"):
        self.board = board
        self.config = board.config
        self.db = board.db
        self.account_repo = AccountRepository(board.db)

    def authorize(self, username: str, password: str) -> bool:
        """
        Check whether posting under username is allowed.

        Must be called inside the caller's write transaction so the check
        and the subsequent insert are atomic.

        Returns:
            True if the username is registered and the password matches,
            False if no such account exists (the name stays unreserved).

        Raises:
            AuthFailed: account exists and password is empty or wrong
        """
        stored = self.account_repo.get_password(username)
        if stored is None:
            return False

        if not password or password != stored:
            logger.info(f"Rejected post for '{username}': bad password")
            raise AuthFailed("Incorrect password or password not provided for existing user.")

        return True

    def register(self, username: str, password: str):
        """
        Claim a username.

        Raises:
            ValidationError: missing fields, name too long, or reserved name
            Conflict: username already taken
        """
        if not username or not password:
            raise ValidationError("Username and password are required.")

        if len(username) > self.config.limits.max_username_length:
            raise ValidationError(
                f"Username too long (max {self.config.limits.max_username_length} chars)."
            )

        if username == self.config.board.anonymous_username:
            raise ValidationError(f"Username '{username}' is reserved.")

        with self.db.transaction():
            if self.account_repo.account_exists(username):
                raise Conflict("User already exists.")
            self.account_repo.insert_account(username, password)

        logger.info(f"Registered user '{username}'")

    def login(self, username: str, password: str):
        """
        Verify credentials without side effects.

        Raises:
            ValidationError: missing fields
            AuthFailed: unknown user or wrong password
        """
        if not username or not password:
            raise ValidationError("Username and password are required.")

        self._check_password(username, password)

    def change_password(self, username: str, old_password: str, new_password: str):
        """
        Replace the stored password.

        Raises:
            ValidationError: any field missing
            AuthFailed: unknown user or wrong old password
        """
        if not username or not old_password or not new_password:
            raise ValidationError("Username, old password, and new password are required.")

        with self.db.transaction():
            self._check_password(username, old_password, "Incorrect username or password.")
            self.account_repo.update_password(username, new_password)

        logger.info(f"Password changed for '{username}'")

    def delete_account(self, username: str, password: str):
        """
        Remove an account. Its earlier messages keep the username label.

        Raises:
            ValidationError: missing fields
            AuthFailed: unknown user or wrong password
        """
        if not username or not password:
            raise ValidationError("Username and password are required.")

        with self.db.transaction():
            self._check_password(username, password)
            self.account_repo.delete_account(username)

        logger.info(f"Deleted user '{username}'")

    def _check_password(
        self,
        username: str,
        password: str,
        error: str = "Invalid username or password."
    ):
        stored = self.account_repo.get_password(username)
        if stored is None or password != stored:
            logger.info(f"Authentication failed for '{username}'")
            raise AuthFailed(error)
