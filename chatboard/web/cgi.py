"""
ChatBoard CGI Adapter

One process per request: read the CGI environment, hand the router a
normalized Request, write a JSON response with a CGI Status header.
"""

import json
import logging
import os
import sys
from typing import Mapping, Optional, BinaryIO, TextIO

from ..config import Config
from ..core.board import MessageBoard
from ..core.router import Request, Result
from ..errors import BoardError, ValidationError
from .forms import parse_form, parse_cookies

logger = logging.getLogger(__name__)


def _header_env_name(header: str) -> str:
    """CF-Connecting-IP -> HTTP_CF_CONNECTING_IP"""
    return "HTTP_" + header.upper().replace("-", "_")


def request_from_environ(
    environ: Mapping[str, str],
    stdin: Optional[BinaryIO],
    config: Config
) -> Request:
    """
    Build a Request from CGI variables and the request body.

    Raises:
        ValidationError: body larger than limits.max_post_data_bytes
    """
    method = environ.get("REQUEST_METHOD", "").upper()
    query = parse_form(environ.get("QUERY_STRING", ""))

    try:
        content_length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        content_length = 0

    if content_length > config.limits.max_post_data_bytes:
        raise ValidationError("Invalid or missing POST data length.")

    params = dict(query)
    if content_length > 0 and stdin is not None:
        raw = stdin.read(content_length)
        params.update(parse_form(raw.decode("utf-8", errors="replace")))

    cookies = parse_cookies(environ.get("HTTP_COOKIE"))

    return Request(
        method=method,
        action=query.get("action", ""),
        params=params,
        cookie_username=cookies.get("username", ""),
        cookie_password=cookies.get("password", ""),
        proxy_ip=environ.get(_header_env_name(config.network.proxy_header)),
        peer_ip=environ.get("REMOTE_ADDR")
    )


def render_result(result: Result) -> str:
    """CGI response text: Status line, content type, JSON body."""
    body = json.dumps(result.body, ensure_ascii=False, separators=(",", ":"))
    return (
        f"Status: {result.status_code} {result.status_text}\r\n"
        "Content-type: application/json\r\n\r\n"
        f"{body}\n"
    )


def handle_cgi_request(
    config: Config,
    environ: Mapping[str, str],
    stdin: Optional[BinaryIO]
) -> Result:
    """Run a single CGI request through the board."""
    if not environ.get("REQUEST_METHOD"):
        return Result.error(500, "REQUEST_METHOD not set.")

    try:
        request = request_from_environ(environ, stdin, config)
        with MessageBoard(config) as board:
            return board.router.dispatch(request)
    except BoardError as e:
        logger.error(f"Request failed: {e.message}")
        return Result.error(e.status_code, e.message)
    except Exception as e:
        logger.exception(f"Unhandled error: {e}")
        return Result.error(500, "Internal server error.")


def run_cgi(
    config: Config,
    environ: Optional[Mapping[str, str]] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[TextIO] = None
) -> int:
    """
    CGI entry point.

    Returns process exit code: 0 for a 2xx response, 1 otherwise.
    """
    environ = os.environ if environ is None else environ
    stdin = sys.stdin.buffer if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    result = handle_cgi_request(config, environ, stdin)
    stdout.write(render_result(result))
    stdout.flush()

    return 0 if 200 <= result.status_code < 300 else 1
