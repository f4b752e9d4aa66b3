"""ChatBoard Utilities Module."""

from .formatting import truncate_utf8, format_timestamp

__all__ = ["truncate_utf8", "format_timestamp"]
