"""
ChatBoard Formatting Utilities

Helper functions for sizing and formatting output.
"""

from datetime import datetime, timezone
from typing import Optional


def truncate_utf8(text: str, max_bytes: int) -> str:
    """
    Truncate text to at most max_bytes of UTF-8.

    Never splits a multi-byte character, so the result may be a few bytes
    shorter than max_bytes when the cut lands inside one.

    Args:
        text: Text to truncate
        max_bytes: Maximum encoded length

    Returns:
        Truncated text
    """
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    return encoded[:max_bytes].decode("utf-8", errors="ignore")


def format_timestamp(timestamp: Optional[int]) -> str:
    """
    Format unix seconds as RFC 3339 UTC.

    Args:
        timestamp: Seconds since epoch

    Returns:
        Formatted string like "2025-12-10T14:32:00Z"
    """
    if timestamp is None:
        return "Never"

    dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")
