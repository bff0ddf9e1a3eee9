"""
Unit tests for HTTP response building.
"""

import pytest

from tinyhttp.http.errors import (
    HTTPError,
    MissingLengthError,
    NotFoundError,
    StorageError,
    UnmatchedRouteError,
    UnsupportedMethodError,
)
from tinyhttp.http.response import (
    HTTPResponse,
    ResponseBuilder,
    created,
    greeting,
    ok_text,
    path_not_found,
    status_only,
)
from tinyhttp.http.status_codes import HTTPStatus


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        response = HTTPResponse(status=HTTPStatus.OK)
        assert response.status_line == "HTTP/1.1 200 OK"

        response = HTTPResponse(status=HTTPStatus.NOT_FOUND)
        assert response.status_line == "HTTP/1.1 404 Not Found"

    def test_to_bytes_exact(self):
        """Headers appear in insertion order, then the separator, then the body."""
        response = HTTPResponse(
            status=HTTPStatus.OK,
            headers={"Content-Type": "text/plain", "Content-Length": "4"},
            body=b"test",
        )

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 4\r\n"
            b"\r\n"
            b"test"
        )

    def test_no_implicit_headers(self):
        """Nothing is added at serialization time."""
        response = HTTPResponse(body=b"hello world")

        assert response.to_bytes() == b"HTTP/1.1 200 OK\r\n\r\nhello world"

    def test_set_header_chaining(self):
        """Test method chaining for headers."""
        response = (HTTPResponse()
            .set_header("X-One", "1")
            .set_header("X-Two", "2"))

        assert response.headers["X-One"] == "1"
        assert response.headers["X-Two"] == "2"


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_status(self):
        """Test setting status code."""
        response = ResponseBuilder().status(HTTPStatus.CREATED).build()

        assert response.status == HTTPStatus.CREATED

    def test_body_sets_length_from_bytes(self):
        response = ResponseBuilder().body(b"\x1f\x8b\x08\x00").build()

        assert response.headers["Content-Length"] == "4"
        assert response.body == b"\x1f\x8b\x08\x00"

    def test_body_without_length(self):
        response = ResponseBuilder().body(b"abc", declare_length=False).build()

        assert "Content-Length" not in response.headers
        assert response.body == b"abc"

    def test_text_body(self):
        """Test text() sets type, length and body in that order."""
        response = ResponseBuilder().text("abc").build()

        assert list(response.headers.items()) == [
            ("Content-Type", "text/plain"),
            ("Content-Length", "3"),
        ]
        assert response.body == b"abc"

    def test_text_keeps_latin1_bytes(self):
        """Text taken from the wire is written back byte for byte."""
        response = ResponseBuilder().text("caf\xe9").build()

        assert response.body == b"caf\xe9"
        assert response.headers["Content-Length"] == "4"

    def test_octets_body(self):
        response = ResponseBuilder().octets(b"\x00\x01").build()

        assert response.headers["Content-Type"] == "application/octet-stream"
        assert response.headers["Content-Length"] == "2"

    def test_header_replace_keeps_position(self):
        response = (ResponseBuilder()
            .header("A", "1")
            .header("B", "2")
            .header("A", "3")
            .build())

        assert list(response.headers.items()) == [("A", "3"), ("B", "2")]

    def test_build_copies_headers(self):
        builder = ResponseBuilder().header("A", "1")
        first = builder.build()
        builder.header("B", "2")

        assert "B" not in first.headers

    def test_method_chaining(self):
        """Test fluent API chaining."""
        data = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type("text/plain")
            .header("Content-Encoding", "gzip")
            .body(b"xyz")
            .to_bytes())

        assert data == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Encoding: gzip\r\n"
            b"Content-Length: 3\r\n"
            b"\r\n"
            b"xyz"
        )


class TestConvenienceFunctions:
    """Tests for convenience response functions."""

    def test_greeting(self):
        assert greeting().to_bytes() == b"HTTP/1.1 200 OK\r\n\r\nHello, World!\n"

    def test_path_not_found(self):
        assert path_not_found().to_bytes() == b"HTTP/1.1 404 Not Found\r\n\r\nPath not found\n"

    @pytest.mark.parametrize("status,expected", [
        (HTTPStatus.BAD_REQUEST, b"HTTP/1.1 400 Bad Request\r\n\r\n"),
        (HTTPStatus.NOT_FOUND, b"HTTP/1.1 404 Not Found\r\n\r\n"),
        (HTTPStatus.METHOD_NOT_ALLOWED, b"HTTP/1.1 405 Method Not Allowed\r\n\r\n"),
        (HTTPStatus.LENGTH_REQUIRED, b"HTTP/1.1 411 Length Required\r\n\r\n"),
        (HTTPStatus.INTERNAL_SERVER_ERROR, b"HTTP/1.1 500 Internal Server Error\r\n\r\n"),
    ])
    def test_status_only(self, status: HTTPStatus, expected: bytes):
        assert status_only(status).to_bytes() == expected

    def test_ok_text(self):
        response = ok_text("xyz")

        assert response.status == HTTPStatus.OK
        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 3\r\n\r\nxyz"
        )

    def test_created(self):
        response = created("5")

        assert response.to_bytes() == (
            b"HTTP/1.1 201 Created\r\nContent-Type: text/plain\r\nContent-Length: 1\r\n\r\n5"
        )


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_status_phrases(self):
        """Test that all statuses have phrases."""
        assert HTTPStatus.OK.phrase == "OK"
        assert HTTPStatus.CREATED.phrase == "Created"
        assert HTTPStatus.LENGTH_REQUIRED.phrase == "Length Required"
        assert HTTPStatus.INTERNAL_SERVER_ERROR.phrase == "Internal Server Error"

    def test_status_categories(self):
        """Test status category helpers."""
        assert HTTPStatus.NOT_FOUND.is_client_error
        assert HTTPStatus.INTERNAL_SERVER_ERROR.is_server_error
        assert not HTTPStatus.INTERNAL_SERVER_ERROR.is_client_error

        assert HTTPStatus.NOT_FOUND.is_error
        assert not HTTPStatus.CREATED.is_error

    def test_int_comparison(self):
        assert HTTPStatus.METHOD_NOT_ALLOWED == 405


class TestHTTPErrors:
    """Tests for the error hierarchy."""

    def test_errors_carry_status(self):
        assert MissingLengthError("x").status_code == HTTPStatus.LENGTH_REQUIRED
        assert NotFoundError("x").status_code == HTTPStatus.NOT_FOUND
        assert StorageError("x").status_code == HTTPStatus.INTERNAL_SERVER_ERROR
        assert UnsupportedMethodError("x").status_code == HTTPStatus.METHOD_NOT_ALLOWED

    def test_status_override(self):
        error = HTTPError("teapot", HTTPStatus.NOT_FOUND)

        assert error.status_code == HTTPStatus.NOT_FOUND
        assert str(error) == "teapot"

    def test_error_response_is_bare(self):
        """Clients never see the message."""
        data = NotFoundError("secret path /etc/x").to_response().to_bytes()

        assert data == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_unmatched_route_response_has_body(self):
        data = UnmatchedRouteError("no route").to_response().to_bytes()

        assert data == b"HTTP/1.1 404 Not Found\r\n\r\nPath not found\n"
