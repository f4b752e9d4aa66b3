"""ChatBoard Core Module - Board orchestrator, services, and routing."""

from .board import MessageBoard
from .accounts import AccountService
from .messages import MessageService
from .router import Router, Request, Result
from .maintenance import MaintenanceManager

__all__ = [
    "MessageBoard",
    "AccountService",
    "MessageService",
    "Router",
    "Request",
    "Result",
    "MaintenanceManager",
]
