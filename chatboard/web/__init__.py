"""ChatBoard Web Module - CGI and WSGI adapters around the router."""

from .forms import parse_form, parse_cookies
from .cgi import request_from_environ, render_result, run_cgi

__all__ = ["parse_form", "parse_cookies", "request_from_environ", "render_result", "run_cgi"]
