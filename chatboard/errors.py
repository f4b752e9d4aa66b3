"""
ChatBoard Error Types

Every error carries the HTTP status code the router reports for it.
"""


class BoardError(Exception):
    """Base class for all board errors."""
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or ""


class ValidationError(BoardError):
    """Bad or missing input."""
    status_code = 400


class AuthFailed(BoardError):
    """Invalid username or password."""
    status_code = 401


class NotFound(BoardError):
    """Requested entity does not exist."""
    status_code = 404


class MethodNotAllowed(BoardError):
    """Unsupported request method or action."""
    status_code = 405


class Conflict(BoardError):
    """User already exists."""
    status_code = 409


class StorageUnavailable(BoardError):
    """Database could not be opened or written."""
    status_code = 500
