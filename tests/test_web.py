"""
Tests for ChatBoard CGI and Flask Adapters
"""

import io
import json
import pytest

from chatboard.config import Config
from chatboard.core.router import Result
from chatboard.web.app import create_app
from chatboard.web.cgi import request_from_environ, render_result, run_cgi
from chatboard.web.forms import parse_form, parse_cookies
from chatboard.errors import ValidationError


def make_config(tmp_path) -> Config:
    config = Config()
    config.database.path = str(tmp_path / "board.db")
    return config


def split_response(output: str) -> tuple[str, dict]:
    """Split CGI output into status line and JSON body."""
    headers, _, body = output.partition("\r\n\r\n")
    return headers.split("\r\n")[0], json.loads(body)


class TestForms:
    """Tests for form and cookie decoding."""

    def test_parse_form(self):
        params = parse_form("message=hello+world%21&empty=&action=login")

        assert params == {"message": "hello world!", "empty": "", "action": "login"}

    def test_parse_form_empty(self):
        assert parse_form("") == {}
        assert parse_form(None) == {}

    def test_parse_form_utf8(self):
        assert parse_form("message=%E4%BD%A0%E5%A5%BD")["message"] == "你好"

    def test_parse_cookies(self):
        cookies = parse_cookies("username=al%20ice; password=p%3Dw; junk; theme=dark")

        assert cookies["username"] == "al ice"
        assert cookies["password"] == "p=w"
        assert cookies["theme"] == "dark"
        assert "junk" not in cookies

    def test_parse_cookies_missing(self):
        assert parse_cookies(None) == {}


class TestCgiRequest:
    """Tests for building requests from a CGI environment."""

    def test_post_request(self, tmp_path):
        body = b"message=hi+there"
        environ = {
            "REQUEST_METHOD": "POST",
            "QUERY_STRING": "",
            "CONTENT_LENGTH": str(len(body)),
            "HTTP_COOKIE": "username=alice; password=secret",
            "HTTP_CF_CONNECTING_IP": "203.0.113.9",
            "REMOTE_ADDR": "10.0.0.1",
        }

        request = request_from_environ(environ, io.BytesIO(body), make_config(tmp_path))

        assert request.method == "POST"
        assert request.action == ""
        assert request.params["message"] == "hi there"
        assert request.cookie_username == "alice"
        assert request.cookie_password == "secret"
        assert request.proxy_ip == "203.0.113.9"
        assert request.peer_ip == "10.0.0.1"

    def test_action_from_query(self, tmp_path):
        environ = {"REQUEST_METHOD": "DELETE", "QUERY_STRING": "action=delete"}

        request = request_from_environ(environ, io.BytesIO(b""), make_config(tmp_path))

        assert request.action == "delete"

    def test_oversized_body(self, tmp_path):
        environ = {"REQUEST_METHOD": "POST", "CONTENT_LENGTH": "5000"}

        with pytest.raises(ValidationError):
            request_from_environ(environ, io.BytesIO(b"x" * 5000), make_config(tmp_path))

    def test_render_result(self):
        output = render_result(Result.error(409, "User already exists."))

        assert output.startswith("Status: 409 Conflict\r\nContent-type: application/json\r\n\r\n")
        status, body = split_response(output)
        assert body == {"status": "error", "message": "User already exists."}


class TestRunCgi:
    """End-to-end CGI handling."""

    def _run(self, config, environ, body=b""):
        environ = dict(environ)
        environ.setdefault("CONTENT_LENGTH", str(len(body)))
        stdout = io.StringIO()
        code = run_cgi(config, environ, io.BytesIO(body), stdout)
        return code, stdout.getvalue()

    def test_post_then_get(self, tmp_path):
        config = make_config(tmp_path)

        code, output = self._run(config, {"REQUEST_METHOD": "POST", "REMOTE_ADDR": "10.0.0.1"}, b"message=hello")
        assert code == 0
        assert split_response(output)[0] == "Status: 200 OK"

        code, output = self._run(config, {"REQUEST_METHOD": "GET"})
        status, body = split_response(output)
        assert code == 0
        assert body["status"] == "success"
        assert body["data"][0]["message"] == "hello"
        assert body["data"][0]["ip"] == "10.0.0.1"

    def test_missing_method(self, tmp_path):
        code, output = self._run(make_config(tmp_path), {})

        assert code == 1
        status, body = split_response(output)
        assert status == "Status: 500 Internal Server Error"
        assert body["message"] == "REQUEST_METHOD not set."

    def test_oversized_body(self, tmp_path):
        code, output = self._run(
            make_config(tmp_path),
            {"REQUEST_METHOD": "POST", "CONTENT_LENGTH": "9999"}
        )

        assert code == 1
        assert split_response(output)[0] == "Status: 400 Bad Request"

    def test_storage_unavailable(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        config = Config()
        config.database.path = str(blocker / "board.db")

        code, output = self._run(config, {"REQUEST_METHOD": "GET"})

        assert code == 1
        assert split_response(output)[0] == "Status: 500 Internal Server Error"

    def test_register_flow(self, tmp_path):
        config = make_config(tmp_path)
        environ = {"REQUEST_METHOD": "POST", "QUERY_STRING": "action=register"}

        code, _ = self._run(config, environ, b"username=bob&password=x")
        assert code == 0

        code, output = self._run(config, environ, b"username=bob&password=x")
        assert code == 1
        assert split_response(output)[0] == "Status: 409 Conflict"


class TestFlaskApp:
    """Tests for the WSGI front end."""

    def _client(self, tmp_path):
        config = make_config(tmp_path)
        app = create_app(config)
        app.config["TESTING"] = True
        return app.test_client(use_cookies=False), config.web.endpoint

    def test_post_and_list(self, tmp_path):
        client, endpoint = self._client(tmp_path)

        response = client.post(endpoint, data={"message": "hi"})
        assert response.status_code == 200

        response = client.get(endpoint)
        data = response.get_json()["data"]
        assert data[0]["message"] == "hi"
        assert data[0]["ip"] == "127.0.0.1"

    def test_proxy_header(self, tmp_path):
        client, endpoint = self._client(tmp_path)

        client.post(endpoint, data={"message": "hi"}, headers={"CF-Connecting-IP": "198.51.100.7"})

        data = client.get(endpoint).get_json()["data"]
        assert data[0]["ip"] == "198.51.100.7"

    def test_cookie_auth(self, tmp_path):
        client, endpoint = self._client(tmp_path)
        client.post(f"{endpoint}?action=register", data={"username": "alice", "password": "secret"})

        bad = client.post(endpoint, data={"message": "hi"}, headers={"Cookie": "username=alice; password=nope"})
        good = client.post(endpoint, data={"message": "hi"}, headers={"Cookie": "username=alice; password=secret"})

        assert bad.status_code == 401
        assert good.status_code == 200

    def test_cookie_plus_decoding(self, tmp_path):
        client, endpoint = self._client(tmp_path)
        client.post(f"{endpoint}?action=register", data={"username": "al ice", "password": "s p"})

        response = client.post(endpoint, data={"message": "hi"}, headers={"Cookie": "username=al+ice; password=s%20p"})

        assert response.status_code == 200
        data = client.get(endpoint).get_json()["data"]
        assert data[0]["username"] == "al ice"

    def test_delete_account(self, tmp_path):
        client, endpoint = self._client(tmp_path)
        client.post(f"{endpoint}?action=register", data={"username": "alice", "password": "secret"})

        response = client.delete(f"{endpoint}?action=delete", headers={"Cookie": "username=alice; password=secret"})

        assert response.status_code == 200
        assert response.get_json()["message"] == "User deleted successfully."

    def test_unsupported_method(self, tmp_path):
        client, endpoint = self._client(tmp_path)

        assert client.put(endpoint).status_code == 405

    def test_health(self, tmp_path):
        client, _ = self._client(tmp_path)

        assert client.get("/health").get_json() == {"status": "ok"}
