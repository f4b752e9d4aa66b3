"""
ChatBoard Flask Application

WSGI front end (``web`` extra) exposing the same routing as the CGI
handler on a single endpoint. Each request opens and closes its own board.
"""

import logging
from typing import Optional

from flask import Flask, jsonify, request

from ..config import Config
from ..core.board import MessageBoard
from ..core.router import Request, Result
from ..errors import BoardError
from .forms import parse_cookies

logger = logging.getLogger(__name__)


def _build_request(config: Config) -> Request:
    params = request.args.to_dict()
    params.update(request.form.to_dict())
    # Raw header, so "+" and %-escapes decode the same way as under CGI
    cookies = parse_cookies(request.headers.get("Cookie"))

    return Request(
        method=request.method,
        action=request.args.get("action", ""),
        params=params,
        cookie_username=cookies.get("username", ""),
        cookie_password=cookies.get("password", ""),
        proxy_ip=request.headers.get(config.network.proxy_header),
        peer_ip=request.remote_addr
    )


def create_app(config: Optional[Config] = None) -> Flask:
    """Application factory."""
    config = config or Config()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.limits.max_post_data_bytes
    app.config["CHATBOARD"] = config

    @app.route(config.web.endpoint, methods=["GET", "POST", "DELETE", "PUT", "PATCH"])
    def chat_handler():
        try:
            with MessageBoard(config) as board:
                result = board.router.dispatch(_build_request(config))
        except BoardError as e:
            logger.error(f"Request failed: {e.message}")
            result = Result.error(e.status_code, e.message)

        return jsonify(result.body), result.status_code

    @app.errorhandler(413)
    def too_large(_error):
        result = Result.error(400, "Invalid or missing POST data length.")
        return jsonify(result.body), result.status_code

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"}), 200

    logger.debug(f"Flask app created, endpoint {config.web.endpoint}")
    return app
