"""Tests for the responses-backed mock capability set."""

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests

from minor_test.core.mocks.http_mocks import ResponsesMocks, local_host_pattern


class _OkHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        body = b"ok"
        self.send_response(200)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def local_server():
    """Run a real HTTP server on the loopback interface."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), _OkHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


class TestResponsesMocks:
    """Interception behaviour seen through requests."""

    def test_mocked_call_is_answered(self, http_mocks):
        http_mocks.mock_get("http://api.example.com/users", json=[{"id": 1}])

        response = requests.get("http://api.example.com/users")

        assert response.status_code == 200
        assert response.json() == [{"id": 1}]

    def test_unmocked_external_call_fails(self, http_mocks):
        with pytest.raises(requests.exceptions.ConnectionError):
            requests.get("http://api.example.com/unknown")

    def test_local_connect_survives_clean_all(self, http_mocks, local_server):
        port = local_server.server_address[1]
        http_mocks.enable_local_connect("127.0.0.1")
        http_mocks.mock_get("http://api.example.com/users", json=[])

        http_mocks.clean_all()

        assert http_mocks.registered() == []
        session = requests.Session()
        session.trust_env = False
        assert session.get(f"http://127.0.0.1:{port}/health").text == "ok"
        with pytest.raises(requests.exceptions.ConnectionError):
            requests.get("http://api.example.com/users")

    def test_enable_local_connect_is_idempotent(self, http_mocks):
        http_mocks.enable_local_connect("localhost")
        http_mocks.enable_local_connect("localhost")

        assert len(http_mocks.requests_mock.passthru_prefixes) == 1

    def test_pending_mocks_and_is_done(self, http_mocks):
        http_mocks.mock_get("http://api.example.com/users", json=[])
        http_mocks.mock_post("http://api.example.com/users", status=201)

        assert http_mocks.pending_mocks() == [
            "GET http://api.example.com/users",
            "POST http://api.example.com/users",
        ]
        assert not http_mocks.is_done()

        requests.get("http://api.example.com/users")
        requests.post("http://api.example.com/users", json={"name": "x"})

        assert http_mocks.pending_mocks() == []
        assert http_mocks.is_done()

    def test_stop_restores_real_transport(self):
        mocks = ResponsesMocks()
        mocks.stop()
        mocks.stop()

        assert mocks._active is False


class TestLocalHostPattern:
    """Matching of passthrough URLs."""

    def test_matches_host_with_and_without_port(self):
        pattern = local_host_pattern("localhost")

        assert pattern.match("http://localhost/")
        assert pattern.match("https://localhost:8443/api")
        assert pattern.match("http://localhost")

    def test_rejects_lookalike_hosts(self):
        pattern = local_host_pattern("localhost")

        assert not pattern.match("http://localhost.evil.com/")
        assert not pattern.match("http://api.example.com/?next=http://localhost/")
