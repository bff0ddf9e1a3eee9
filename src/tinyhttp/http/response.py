"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds HTTP/1.1 responses and serializes them byte for byte.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ STATUS LINE ──────────────────────────────────────────────────┐ │
    │  │    HTTP/1.1 200 OK\r\n                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS (zero or more) ───────────────────────────────────────┐ │
    │  │    Content-Type: text/plain\r\n                                │ │
    │  │    Content-Encoding: gzip\r\n                                  │ │
    │  │    Content-Length: 23\r\n                                      │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE (separator) ───────────────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY (optional) ──────────────────────────────────────────────┐ │
    │  │    <exactly Content-Length bytes, or everything up to close>   │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
NOTHING IMPLICIT
=============================================================================

Serialization writes exactly the headers that were set, in the order they
were set. There is no automatic Date, Server or Content-Length header:

    status_only(HTTPStatus.NOT_FOUND).to_bytes()
        → b"HTTP/1.1 404 Not Found\r\n\r\n"

Every connection serves one request and is then closed, so a response
without Content-Length is still framed: the body ends where the stream
ends. Some responses rely on that (the greeting, "Path not found").

When Content-Length IS sent it must equal len(body) exactly. The builder
computes it from the final body bytes, so a gzip body gets the compressed
size, never the original one.

=============================================================================
BUILDER PATTERN
=============================================================================

    response = (ResponseBuilder()
        .status(HTTPStatus.OK)
        .content_type("text/plain")
        .header("Content-Encoding", "gzip")
        .body(compressed)
        .build())

Each method returns the builder, build() returns the HTTPResponse.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Union

from .status_codes import HTTPStatus


# Header section codec. ISO-8859-1 maps every byte to one code point, so
# text taken from a request can be written back without changing a byte.
HEADER_ENCODING = "iso-8859-1"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    =========================================================================
    RESPONSE LIFECYCLE
    =========================================================================

        Handler returns          to_bytes()              Connection sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes
            │                       │                        │
        HTTPResponse(            b"HTTP/1.1 200 OK\r\n    sock.sendall(
          status=200,              Content-Type: ...\r\n     response_bytes
          headers={...},           \r\n                    )
          body=b"abc"              abc"
        )

    =========================================================================
    """

    status: HTTPStatus = HTTPStatus.OK       # HTTP status code (enum)
    headers: Dict[str, str] = field(default_factory=dict)  # Insertion-ordered
    body: bytes = b""                        # Response body
    version: str = "HTTP/1.1"                # Always HTTP/1.1 on this server

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {self.status.value} {self.status.phrase}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a response header, returning self for chaining."""
        self.headers[name] = value
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize the response to bytes for sending over the socket.

        =====================================================================
        SERIALIZATION FORMAT
        =====================================================================

            HTTP/1.1 200 OK\r\n          ← Status line
            Content-Type: text/plain\r\n ← Headers, as set, in order
            Content-Length: 3\r\n
            \r\n                         ← Empty line (separator)
            abc                          ← Body bytes

        =====================================================================

        Returns:
            Complete HTTP response as bytes ready for socket.sendall()
        """
        lines = [self.status_line]

        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")

        # Two trailing CRLFs: one ends the last header line (or the status
        # line), the other is the empty separator line.
        head = "\r\n".join(lines) + "\r\n\r\n"

        return head.encode(HEADER_ENCODING) + self.body


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

    Each method returns `self`, enabling chaining:

        builder.status(HTTPStatus.CREATED).text("5").build()

    Content-Length is written by body() and text() by default, computed
    from the bytes actually stored. Pass declare_length=False for the
    close-delimited responses that must not carry one.
    """

    def __init__(self):
        self._status = HTTPStatus.OK           # Default to 200 OK
        self._headers: Dict[str, str] = {}     # Headers, in order
        self._body: bytes = b""                # Response body

    # =========================================================================
    # STATUS / HEADERS
    # =========================================================================

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        """Set the HTTP status code."""
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """
        Add a single response header.

        Headers are emitted in the order they are first added. Setting a
        name again replaces its value but keeps its position.
        """
        self._headers[name] = value
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        """Set the Content-Type header."""
        return self.header("Content-Type", content_type)

    # =========================================================================
    # BODY
    # =========================================================================

    def body(self, body: Union[str, bytes], declare_length: bool = True) -> "ResponseBuilder":
        """
        Set the response body.

        Args:
            body: Raw bytes, or text (encoded as ISO-8859-1, byte-preserving
                  for text that came off the wire).
            declare_length: Add Content-Length equal to the stored byte
                            count. False leaves the body close-delimited.

        Returns:
            Self for method chaining
        """
        if isinstance(body, str):
            body = body.encode(HEADER_ENCODING)
        self._body = body
        if declare_length:
            self._headers["Content-Length"] = str(len(body))
        return self

    def text(self, text: Union[str, bytes]) -> "ResponseBuilder":
        """Set a text/plain body with matching Content-Length."""
        self.content_type("text/plain")
        return self.body(text)

    def octets(self, content: bytes) -> "ResponseBuilder":
        """Set an application/octet-stream body with matching Content-Length."""
        self.content_type("application/octet-stream")
        return self.body(content)

    # =========================================================================
    # BUILD
    # =========================================================================

    def build(self) -> HTTPResponse:
        """Build and return the HTTPResponse object."""
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )

    def to_bytes(self) -> bytes:
        """Build and serialize the response in one step."""
        return self.build().to_bytes()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One-liners for the fixed responses this server sends.
#
#     return greeting()
#     return status_only(HTTPStatus.LENGTH_REQUIRED)
#
# =============================================================================

GREETING_BODY = b"Hello, World!\n"
PATH_NOT_FOUND_BODY = b"Path not found\n"


def status_only(status: HTTPStatus) -> HTTPResponse:
    """
    Create a response that is just a status line and the separator.

    Used for every error response:

        HTTP/1.1 411 Length Required\r\n
        \r\n
    """
    return HTTPResponse(status=status)


def greeting() -> HTTPResponse:
    """Create the 200 greeting: no headers, body read until close."""
    return ResponseBuilder().body(GREETING_BODY, declare_length=False).build()


def path_not_found() -> HTTPResponse:
    """Create the catch-all 404: no headers, fixed close-delimited text."""
    return (ResponseBuilder()
        .status(HTTPStatus.NOT_FOUND)
        .body(PATH_NOT_FOUND_BODY, declare_length=False)
        .build())


def ok_text(text: Union[str, bytes]) -> HTTPResponse:
    """Create a 200 text/plain response with Content-Length."""
    return ResponseBuilder().text(text).build()


def created(text: Union[str, bytes]) -> HTTPResponse:
    """Create a 201 text/plain response with Content-Length."""
    return ResponseBuilder().status(HTTPStatus.CREATED).text(text).build()
