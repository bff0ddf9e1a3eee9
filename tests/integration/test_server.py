"""
End-to-end tests over real sockets.
"""

import gzip
import threading
from pathlib import Path

import pytest

from tinyhttp import HTTPServer, ServerConfig


class TestRoutes:
    """Each route, byte for byte where the format is fixed."""

    def test_greeting(self, client):
        response = client.request("GET", "/", headers={"User-Agent": "x", "Accept-Encoding": "gzip"})

        assert response.raw == b"HTTP/1.1 200 OK\r\n\r\nHello, World!\n"

    def test_unmatched_path(self, client):
        response = client.request("GET", "/nope")

        assert response.raw == b"HTTP/1.1 404 Not Found\r\n\r\nPath not found\n"

    def test_user_agent(self, client):
        response = client.request("GET", "/user-agent", headers={"User-Agent": "xyz"})

        assert response.raw == (
            b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 3\r\n\r\nxyz"
        )

    def test_user_agent_missing(self, client):
        response = client.request("GET", "/user-agent")

        assert response.status == 200
        assert response.body == b"Unknown"

    def test_echo(self, client):
        response = client.request("GET", "/echo/abc")

        assert response.raw == (
            b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 3\r\n\r\nabc"
        )

    def test_echo_gzip(self, client):
        response = client.request("GET", "/echo/abc", headers={"Accept-Encoding": "gzip"})

        assert response.status == 200
        assert response.headers["Content-Encoding"] == "gzip"
        assert int(response.headers["Content-Length"]) == len(response.body)
        assert gzip.decompress(response.body) == b"abc"

    def test_echo_unsupported_encoding(self, client):
        response = client.request("GET", "/echo/abc", headers={"Accept-Encoding": "identity"})

        assert response.raw == b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\n"

    def test_method_not_allowed(self, client):
        response = client.request("PUT", "/")

        assert response.raw == b"HTTP/1.1 405 Method Not Allowed\r\n\r\n"


class TestFiles:
    """Upload and download against a temporary directory."""

    def test_upload_then_download(self, client, tmp_path: Path):
        upload = client.request(
            "POST", "/files/foo.txt",
            headers={"Content-Length": "5"},
            body=b"hello",
        )

        assert upload.status == 201
        assert upload.body == b"hello"
        assert upload.headers["Content-Length"] == "5"
        assert (tmp_path / "foo.txt").read_bytes() == b"hello"

        download = client.request("GET", "/files/foo.txt")

        assert download.raw == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: application/octet-stream\r\n"
            b"Content-Length: 5\r\n"
            b"\r\n"
            b"hello"
        )

    def test_binary_round_trip(self, client):
        payload = bytes(range(256)) * 64

        client.request(
            "POST", "/files/blob.bin",
            headers={"Content-Length": str(len(payload))},
            body=payload,
        )

        assert client.request("GET", "/files/blob.bin").body == payload

    def test_missing_file(self, client):
        assert client.request("GET", "/files/missing.txt").raw == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_upload_without_length(self, client, tmp_path: Path):
        response = client.request("POST", "/files/bar.txt", body=b"hello")

        assert response.raw == b"HTTP/1.1 411 Length Required\r\n\r\n"
        assert not (tmp_path / "bar.txt").exists()

    def test_upload_invalid_length(self, client):
        response = client.request("POST", "/files/bar.txt", headers={"Content-Length": "abc"})

        assert response.raw == b"HTTP/1.1 400 Bad Request\r\n\r\n"

    def test_upload_short_body(self, client, tmp_path: Path):
        raw = b"POST /files/bar.txt HTTP/1.1\r\nContent-Length: 10\r\n\r\nhello"
        response = client.send(raw, half_close=True)

        assert response.raw == b"HTTP/1.1 400 Bad Request\r\n\r\n"
        assert not (tmp_path / "bar.txt").exists()

    def test_upload_failure(self, client):
        response = client.request(
            "POST", "/files/no/such/dir.txt",
            headers={"Content-Length": "1"},
            body=b"x",
        )

        assert response.raw == b"HTTP/1.1 500 Internal Server Error\r\n\r\n"


class TestMalformedInput:

    def test_bad_request_line(self, client):
        response = client.send(b"GET\r\n\r\n")

        assert response.raw == b"HTTP/1.1 400 Bad Request\r\n\r\n"

    def test_blank_request_line(self, client):
        response = client.send(b"\n")

        assert response.raw == b"HTTP/1.1 400 Bad Request\r\n\r\n"

    def test_header_value_with_colons(self, client):
        """Only the first colon ends the header name."""
        response = client.request("GET", "/user-agent", headers={"User-Agent": "a:b::c"})

        assert response.body == b"a:b::c"
        assert response.headers["Content-Length"] == "6"

    def test_half_close_mid_headers(self, client):
        response = client.send(b"GET / HTTP/1.1\r\nHost: loc", half_close=True)

        assert response.raw == b"HTTP/1.1 400 Bad Request\r\n\r\n"


class TestConcurrency:

    def test_stalled_client_does_not_block_others(self, client):
        """A connection that never finishes its headers holds only its own thread."""
        stalled = client.connect()
        try:
            stalled.sendall(b"GET / HTTP/1.1\r\nHost: slow")

            response = client.request("GET", "/echo/still-alive")

            assert response.body == b"still-alive"
        finally:
            stalled.close()

    def test_parallel_requests(self, client):
        results = {}

        def fetch(i: int):
            results[i] = client.request("GET", f"/echo/{i}").body

        threads = [threading.Thread(target=fetch, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10.0)

        assert results == {i: str(i).encode() for i in range(20)}


class TestLifecycle:

    def test_shutdown_stops_accepting(self, files_dir: str):
        server = HTTPServer(ServerConfig(host="127.0.0.1", port=0, directory=files_dir))
        thread = threading.Thread(target=server.run, daemon=True)
        thread.start()
        assert server.wait_until_listening(timeout=5.0)

        server.shutdown()
        thread.join(timeout=5.0)

        assert not thread.is_alive()

    def test_invalid_config_fails_fast(self):
        with pytest.raises(ValueError):
            HTTPServer(ServerConfig(port=70000))
