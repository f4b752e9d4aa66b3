"""
ChatBoard Form and Cookie Decoding

Pure functions turning raw query strings, form bodies and Cookie headers
into plain string mappings.
"""

from typing import Optional
from urllib.parse import parse_qsl, unquote_plus


def parse_form(data: Optional[str]) -> dict[str, str]:
    """
    Decode an application/x-www-form-urlencoded string.

    '+' becomes a space, %XX escapes are decoded, blank values are kept,
    and the last occurrence of a repeated key wins.
    """
    if not data:
        return {}
    return dict(parse_qsl(data, keep_blank_values=True))


def parse_cookies(header: Optional[str]) -> dict[str, str]:
    """
    Split a Cookie header into URL-decoded name/value pairs.

    Pairs without '=' are ignored.
    """
    cookies = {}
    if not header:
        return cookies

    for part in header.split(";"):
        name, sep, value = part.strip().partition("=")
        if not sep or not name:
            continue
        cookies[name] = unquote_plus(value)

    return cookies
