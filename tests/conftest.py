"""Shared fixtures for client tests."""

import sys
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class RecordingHandler:
    """MockTransport handler that records requests and replies with a canned result."""

    def __init__(self, reply):
        self.reply = reply
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


@pytest.fixture
def make_transport():
    """Build an AsyncClient backed by a recording MockTransport."""
    def factory(reply):
        handler = RecordingHandler(reply)
        return httpx.AsyncClient(transport=httpx.MockTransport(handler)), handler
    return factory


class EnvelopeHandler(BaseHTTPRequestHandler):
    """Keep-alive HTTP/1.1 handler answering every POST with a fixed envelope."""

    protocol_version = "HTTP/1.1"
    body = b'{"results": {"some_field": 1}, "error": null}'

    def do_POST(self):
        self.rfile.read(int(self.headers.get("Content-Length", 0)))
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(self.body)))
        self.end_headers()
        self.wfile.write(self.body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def local_server(monkeypatch):
    """Serve EnvelopeHandler on 127.0.0.1; yields the base URL."""
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)

    server = ThreadingHTTPServer(("127.0.0.1", 0), EnvelopeHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield f"http://127.0.0.1:{server.server_address[1]}/api/v1"

    server.shutdown()
    server.server_close()
