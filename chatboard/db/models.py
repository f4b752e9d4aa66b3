"""
ChatBoard Data Models

Dataclasses representing database entities.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Message:
    """Board message. Immutable once stored."""
    id: int
    timestamp: int  # Unix seconds
    ip: str
    username: str
    body: str

    def to_dict(self) -> dict:
        """Wire representation used in listing responses."""
        return {
            "id": str(self.id),
            "timestamp": self.timestamp,
            "ip": self.ip,
            "username": self.username,
            "message": self.body,
        }


@dataclass
class Account:
    """Registered username.

    The password is kept and compared in plaintext. This is a known
    security defect carried over from the original board.
    """
    username: str = ""
    password: str = ""
