"""
=============================================================================
HTTP PROTOCOL IMPLEMENTATION
=============================================================================

The HTTP/1.1 framing layer: bytes off a socket in, bytes onto a socket out.

=============================================================================
HTTP PROTOCOL OVERVIEW
=============================================================================

One request, one response, then the connection closes:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    HTTP Request-Response Cycle                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   CLIENT                                         SERVER              │
    │      │                                              │                │
    │      │   HTTP Request                               │                │
    │      │  ─────────────────────────────────────────►  │                │
    │      │   GET /echo/abc HTTP/1.1                     │                │
    │      │   Accept-Encoding: gzip                      │                │
    │      │                                              │                │
    │      │                              HTTP Response   │                │
    │      │  ◄─────────────────────────────────────────  │                │
    │      │               HTTP/1.1 200 OK                │                │
    │      │               Content-Type: text/plain       │                │
    │      │               Content-Encoding: gzip         │                │
    │      │               Content-Length: 23             │                │
    │      │                                              │                │
    │      │  ◄──────────── close ──────────────────────  │                │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
MODULE COMPONENTS
=============================================================================

    status_codes.py   HTTPStatus: the seven codes the server can send
    errors.py         HTTPError and one subclass per failure kind
    request.py        RequestParser: request line + headers, lazy body
    response.py       HTTPResponse / ResponseBuilder: exact serialization
    compression.py    Accept-Encoding negotiation and gzip
    router.py         Router: ordered (method, pattern) → handler table

=============================================================================
"""

from .request import HTTPRequest, RequestParser, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    # Convenience functions for the fixed responses
    status_only,    # Bare status line
    greeting,       # 200 "Hello, World!\n"
    path_not_found, # 404 "Path not found\n"
    ok_text,        # 200 text/plain
    created,        # 201 text/plain
)
from .errors import (
    HTTPError,
    TransportError,
    MalformedRequestError,
    MissingLengthError,
    InvalidLengthError,
    ShortBodyError,
    NotFoundError,
    EncodingError,
    StorageError,
    UnsupportedMethodError,
    UnmatchedRouteError,
)
from .compression import ContentEncoding, negotiate_encoding, gzip_body
from .router import Router, Route, RouteMatch
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "parse_request",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "status_only",
    "greeting",
    "path_not_found",
    "ok_text",
    "created",

    # Errors
    "HTTPError",
    "TransportError",
    "MalformedRequestError",
    "MissingLengthError",
    "InvalidLengthError",
    "ShortBodyError",
    "NotFoundError",
    "EncodingError",
    "StorageError",
    "UnsupportedMethodError",
    "UnmatchedRouteError",

    # Content encoding
    "ContentEncoding",
    "negotiate_encoding",
    "gzip_body",

    # Routing
    "Router",
    "Route",
    "RouteMatch",

    # Status codes
    "HTTPStatus",
]
