"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Reads an HTTP/1.1 request line and header block off a buffered byte stream
and produces a structured HTTPRequest. The body is left in the stream.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ REQUEST LINE ─────────────────────────────────────────────────┐ │
    │  │    POST /files/notes.txt HTTP/1.1\r\n                          │ │
    │  │    ─┬── ────────┬─────── ────┬───                              │ │
    │  │   Method       Path       Version (ignored)                    │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS ──────────────────────────────────────────────────────┐ │
    │  │    Host: localhost:4221\r\n                                    │ │
    │  │    User-Agent: curl/8.4.0\r\n                                  │ │
    │  │    Content-Length: 5\r\n                                       │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE (header terminator) ───────────────────────────────┐ │
    │  │    \r\n                         ◄── parser stops HERE           │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY (left unread in the stream) ─────────────────────────────┐ │
    │  │    hello                        ◄── read_body() reads 5 bytes   │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
NO LENGTH FOR HEADERS
=============================================================================

Nothing tells the server how long the header block is. The only signal is
the empty line. So the parser reads LINE BY LINE from a buffered reader:

    stream.readline()  →  b"POST /files/notes.txt HTTP/1.1\r\n"
    stream.readline()  →  b"Host: localhost:4221\r\n"
    stream.readline()  →  b"Content-Length: 5\r\n"
    stream.readline()  →  b"\r\n"                 ← terminator, stop
    (stream now points at b"hello")

Reading in lines from a BufferedReader (not recv() chunks) means the parser
never over-reads into the body: whatever the reader buffered past the
terminator is still there for read_body().

=============================================================================
PARSING RULES
=============================================================================

1. REQUEST LINE: split on any whitespace. Token 1 is the method, token 2
   the path. Fewer than two tokens → MalformedRequestError (400).
   The path is taken literally: no percent-decoding, no query split.

2. HEADERS: each line is stripped; an empty line ends the block.
   Split on the FIRST colon, strip name and value.

       "X-Time: 12:30:00"  →  ("X-Time", "12:30:00")
       "garbage-no-colon"  →  ignored

3. CASE AND DUPLICATES: names are stored exactly as sent and looked up
   exactly. "user-agent" is NOT "User-Agent". A repeated name overwrites
   the earlier value.

4. BROKEN STREAM: EOF before a full line, a reset, or a timeout raises
   TransportError (400, best effort).

=============================================================================
"""

import io
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Optional

from .errors import (
    InvalidLengthError,
    MalformedRequestError,
    MissingLengthError,
    ShortBodyError,
    TransportError,
)
from .response import HEADER_ENCODING


@dataclass
class HTTPRequest:
    """
    Represents a parsed HTTP request.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:         First request-line token ("GET", "POST", ...)

        path:           Second request-line token, verbatim
                        "/echo/a%20b" stays "/echo/a%20b"

        version:        Third token if present ("HTTP/1.1"), else ""
                        Carried for logging only

        headers:        Header name → value, names exactly as received

        path_params:    Captures filled in by the router
                        Route "/echo/*text" with "/echo/abc" → {"text": "abc"}

        client_address: (ip, port) of the peer, for logging

        body_stream:    The connection's buffered reader, positioned just
                        after the header terminator. None for requests
                        built by hand.

    =========================================================================
    """

    method: str
    path: str
    version: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    path_params: Dict[str, str] = field(default_factory=dict)
    client_address: tuple[str, int] = ("", 0)
    body_stream: Optional[BinaryIO] = field(default=None, repr=False)

    @property
    def request_line(self) -> str:
        """The request line as received, minus the line terminator."""
        return " ".join(part for part in (self.method, self.path, self.version) if part)

    def get_header(self, name: str, default: str = "") -> str:
        """
        Get a header value by its exact name.

        Lookup is case-sensitive on purpose: get_header("user-agent")
        does not find a header sent as "User-Agent".
        """
        return self.headers.get(name, default)

    @property
    def content_length(self) -> Optional[int]:
        """
        The declared body size.

        Returns:
            None if the Content-Length header is absent.

        Raises:
            InvalidLengthError: If the value is not a non-negative integer.
        """
        raw = self.headers.get("Content-Length")
        if raw is None:
            return None

        # int() alone would also accept "+5", " 5" and "1_000"
        if not (raw.isascii() and raw.isdigit()):
            raise InvalidLengthError(f"Invalid Content-Length: {raw!r}")

        return int(raw)

    def read_body(self) -> bytes:
        """
        Read exactly Content-Length bytes from the stream.

        Called lazily, only by handlers that need a body. A second call
        reads past the body, so handlers call it once.

        Raises:
            MissingLengthError: Content-Length was not sent (411).
            InvalidLengthError: Content-Length is not numeric (400).
            ShortBodyError: The stream ended or failed early (400).
        """
        length = self.content_length
        if length is None:
            raise MissingLengthError("Content-Length header is required")

        if length == 0:
            return b""

        if self.body_stream is None:
            raise ShortBodyError(f"Expected {length} body bytes, stream is empty")

        # BufferedReader.read(n) keeps reading until n bytes or EOF
        try:
            body = self.body_stream.read(length)
        except OSError as e:
            raise ShortBodyError(f"Failed reading body: {e}") from e

        if len(body) < length:
            raise ShortBodyError(
                f"Incomplete body: expected {length} bytes, got {len(body)}"
            )

        return body


class RequestParser:
    """
    Parses the request line and headers from a buffered binary stream.

    ==========================================================================
    PARSER FLOW
    ==========================================================================

        BufferedReader (socket.makefile("rb"))
              │
              ▼
        ┌───────────────────────────────────────────────────────────────────┐
        │  1. readline() → request line                                     │
        │     │  EOF / error?      → TransportError                         │
        │     │  < 2 tokens?       → MalformedRequestError                  │
        │     ▼                                                             │
        │  2. readline() until an empty line → headers                      │
        │     │  EOF / error?      → TransportError                         │
        │     ▼                                                             │
        │  3. HTTPRequest(..., body_stream=stream)                          │
        └───────────────────────────────────────────────────────────────────┘
    """

    def parse(
        self,
        stream: BinaryIO,
        client_address: tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Parse one request head from the stream.

        Args:
            stream: Buffered binary reader positioned at a request line.
            client_address: Client's (ip, port) tuple for logging.

        Returns:
            Parsed HTTPRequest whose body_stream is `stream`.

        Raises:
            TransportError: The stream broke before the terminator.
            MalformedRequestError: The request line is unusable.
        """
        method, path, version = self._parse_request_line(self._read_line(stream))
        headers = self._read_headers(stream)

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            client_address=client_address,
            body_stream=stream,
        )

    def _read_line(self, stream: BinaryIO) -> str:
        """
        Read one LF-terminated line and decode it.

        readline() returns whatever it has at EOF, so a line that does
        not end in LF means the peer closed mid-line.
        """
        try:
            raw = stream.readline()
        except OSError as e:
            # socket.timeout and ConnectionResetError are both OSError
            raise TransportError(f"Error reading request: {e}") from e

        if not raw.endswith(b"\n"):
            raise TransportError("Connection closed before end of line")

        return raw.decode(HEADER_ENCODING)

    def _parse_request_line(self, line: str) -> tuple[str, str, str]:
        """
        Split the request line into (method, path, version).

            "GET /echo/abc HTTP/1.1\\r\\n"  →  ("GET", "/echo/abc", "HTTP/1.1")
            "GET /\\r\\n"                   →  ("GET", "/", "")
            "GET\\r\\n"                     →  MalformedRequestError
        """
        parts = line.split()
        if len(parts) < 2:
            raise MalformedRequestError(f"Invalid request line: {line.strip()!r}")

        version = parts[2] if len(parts) > 2 else ""
        return parts[0], parts[1], version

    def _read_headers(self, stream: BinaryIO) -> Dict[str, str]:
        """
        Read header lines up to and including the empty terminator line.

        Returns:
            Dictionary of header name → value, names as sent.
        """
        headers: Dict[str, str] = {}

        while True:
            line = self._read_line(stream).strip()
            if not line:
                return headers

            name, sep, value = line.partition(":")
            if not sep:
                continue  # No colon: not a header, skip it

            # Later duplicates overwrite earlier ones
            headers[name.strip()] = value.strip()


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
) -> HTTPRequest:
    """
    Parse a request held entirely in memory.

    Wraps the bytes in a BufferedReader so the result behaves exactly like
    a request read off a socket, body included:

        request = parse_request(b"POST /files/a HTTP/1.1\\r\\n"
                                b"Content-Length: 2\\r\\n\\r\\nhi")
        request.read_body()  # b"hi"
    """
    stream = io.BufferedReader(io.BytesIO(data))
    return RequestParser().parse(stream, client_address)
