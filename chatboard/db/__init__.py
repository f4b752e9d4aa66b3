"""ChatBoard Database Module - SQLite database operations."""

from .connection import Database
from .models import Message, Account
from .messages import MessageRepository
from .users import AccountRepository

__all__ = ["Database", "Message", "Account", "MessageRepository", "AccountRepository"]
