"""
=============================================================================
TEXT HANDLERS
=============================================================================

The three routes that answer with text built from the request itself.

    ┌──────────────────┬─────────────────────────────────────────────────────┐
    │ Route            │ Response                                            │
    ├──────────────────┼─────────────────────────────────────────────────────┤
    │ GET /            │ 200, no headers, "Hello, World!\\n" until close     │
    │ GET /user-agent  │ 200 text/plain, User-Agent value or "Unknown"       │
    │ GET /echo/*text  │ 200 text/plain, the suffix, gzip when accepted      │
    └──────────────────┴─────────────────────────────────────────────────────┘

=============================================================================
ECHO AND CONTENT ENCODING
=============================================================================

    GET /echo/abc HTTP/1.1            →  Content-Type: text/plain
                                         Content-Length: 3
                                         abc

    GET /echo/abc HTTP/1.1            →  Content-Type: text/plain
    Accept-Encoding: gzip                Content-Encoding: gzip
                                         Content-Length: 23
                                         <gzip member>

    GET /echo/abc HTTP/1.1            →  Content-Type: text/plain
    Accept-Encoding: identity            (nothing else)

The suffix is echoed verbatim: "/echo/a%20b" answers "a%20b".

=============================================================================
"""

import logging

from ..http.compression import ContentEncoding, gzip_body, negotiate_encoding
from ..http.request import HTTPRequest
from ..http.response import HEADER_ENCODING, HTTPResponse, ResponseBuilder, greeting, ok_text


logger = logging.getLogger(__name__)

UNKNOWN_USER_AGENT = "Unknown"


def index(request: HTTPRequest) -> HTTPResponse:
    """GET / - the fixed greeting. Headers are ignored."""
    return greeting()


def user_agent(request: HTTPRequest) -> HTTPResponse:
    """
    GET /user-agent - echo the User-Agent header.

    The lookup is exact-case, so a header sent as "user-agent" is treated
    as absent. An absent or empty value answers "Unknown".
    """
    return ok_text(request.get_header("User-Agent") or UNKNOWN_USER_AGENT)


def echo(request: HTTPRequest) -> HTTPResponse:
    """
    GET /echo/*text - echo the path suffix, compressed when negotiated.

    Raises:
        EncodingError: gzip compression failed (500).
    """
    text = request.path_params.get("text", "")
    encoding = negotiate_encoding(request.headers.get("Accept-Encoding"))

    builder = ResponseBuilder().content_type("text/plain")

    if encoding is ContentEncoding.GZIP:
        compressed = gzip_body(text.encode(HEADER_ENCODING))
        logger.debug(f"Echo compressed {len(text)} -> {len(compressed)} bytes")
        return builder.header("Content-Encoding", "gzip").body(compressed).build()

    if encoding is ContentEncoding.UNSUPPORTED:
        # Header present without gzip: Content-Type only, no length, no body
        return builder.build()

    return builder.body(text).build()
