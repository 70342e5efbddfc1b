import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from gptlink.transport import (
    FakeTransport,
    HttpRequest,
    HttpResponse,
    TransportError,
    UrllibTransport,
)

LARGE_BODY = b"x" * 50_000


class _Handler(BaseHTTPRequestHandler):
    def log_message(self, format, *args):
        pass

    def _reply(self, status, body, content_type="text/plain"):
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self):
        if self.path == "/ok":
            self._reply(200, b"hello")
        elif self.path == "/large":
            self._reply(200, LARGE_BODY)
        elif self.path == "/auth":
            self._reply(200, self.headers.get("Authorization", "").encode())
        else:
            self._reply(404, b'{"error":"missing"}', "application/json")

    def do_POST(self):
        length = int(self.headers.get("Content-Length", "0"))
        self._reply(200, self.rfile.read(length))

    def do_DELETE(self):
        self._reply(200, b"DELETE")


@pytest.fixture
def server_url():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


def test_fake_transport_returns_preset_content():
    transport = FakeTransport()
    transport.set_response('{"object":"list"}')
    response = transport.send(HttpRequest(url="https://api.example.com/v1/models"), None)
    assert response.status == 200
    assert response.text == '{"object":"list"}'
    assert response.ok


def test_fake_transport_records_requests():
    transport = FakeTransport("body")
    first = HttpRequest(url="https://api.example.com/a")
    second = HttpRequest(url="https://api.example.com/b", method="POST")
    transport.send(first, None)
    transport.send(second, None)
    assert transport.requests == [first, second]


def test_fake_transport_does_not_report_progress():
    calls = []
    transport = FakeTransport("data")
    response = transport.send(HttpRequest(), calls.append)
    assert calls == []
    assert response.content == b"data"


def test_fake_transport_set_response_replaces_content():
    transport = FakeTransport("first")
    transport.set_response("second")
    assert transport.send(HttpRequest(), None).text == "second"


def test_request_set_content_as_string_encodes_utf8():
    request = HttpRequest()
    request.set_content_as_string("héllo")
    assert request.body == "héllo".encode("utf-8")


def test_response_ok_depends_on_status():
    assert HttpResponse(status=204).ok
    assert not HttpResponse(status=401).ok


def test_urllib_get(server_url):
    response = UrllibTransport(timeout=5).send(HttpRequest(url=f"{server_url}/ok"), None)
    assert response.status == 200
    assert response.content == b"hello"
    assert response.url == f"{server_url}/ok"


def test_urllib_post_sends_body(server_url):
    request = HttpRequest(url=f"{server_url}/echo", method="POST", body=b'{"a": 1}')
    response = UrllibTransport(timeout=5).send(request, None)
    assert response.content == b'{"a": 1}'


def test_urllib_sends_headers(server_url):
    request = HttpRequest(url=f"{server_url}/auth", headers={"Authorization": "Bearer token"})
    response = UrllibTransport(timeout=5).send(request, None)
    assert response.text == "Bearer token"


def test_urllib_uses_method(server_url):
    request = HttpRequest(url=f"{server_url}/file", method="DELETE")
    assert UrllibTransport(timeout=5).send(request, None).text == "DELETE"


def test_urllib_http_error_returns_response(server_url):
    response = UrllibTransport(timeout=5).send(HttpRequest(url=f"{server_url}/missing"), None)
    assert response.status == 404
    assert not response.ok
    assert response.text == '{"error":"missing"}'


def test_urllib_progress_is_cumulative(server_url):
    seen = []
    transport = UrllibTransport(timeout=5, chunk_size=4096)
    response = transport.send(HttpRequest(url=f"{server_url}/large"), lambda r: seen.append(len(r.content)))
    assert response.content == LARGE_BODY
    assert len(seen) > 1
    assert seen == sorted(seen)
    assert seen[-1] == len(LARGE_BODY)


def test_urllib_connection_failure_raises():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    with pytest.raises(TransportError):
        UrllibTransport(timeout=5).send(HttpRequest(url=f"http://127.0.0.1:{port}/"), None)


def test_urllib_rejects_bad_chunk_size():
    with pytest.raises(ValueError):
        UrllibTransport(chunk_size=0)