"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can put on the wire, with their reason phrases.

=============================================================================
THE STATUS LINE
=============================================================================

Every response starts with exactly one status line:

    HTTP/1.1 404 Not Found\r\n
    ──┬───── ─┬─ ────┬────
      │       │      │
    Version  Code  Reason phrase

The server only ever emits the seven codes below. Each code path writes the
literal phrase listed here, nothing else:

    ┌────────┬───────────────────────────┬──────────────────────────────────┐
    │  Code  │  Phrase                   │  Produced by                     │
    ├────────┼───────────────────────────┼──────────────────────────────────┤
    │  200   │  OK                       │  greeting, user-agent, echo,     │
    │        │                           │  file download                   │
    │  201   │  Created                  │  file upload                     │
    │  400   │  Bad Request              │  bad request line, bad length,   │
    │        │                           │  short body, broken stream       │
    │  404   │  Not Found                │  unknown path, missing file      │
    │  405   │  Method Not Allowed       │  method other than GET/POST      │
    │  411   │  Length Required          │  upload without Content-Length   │
    │  500   │  Internal Server Error    │  gzip failure, disk failure      │
    └────────┴───────────────────────────┴──────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare as plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.value
        404
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    # 2xx SUCCESS
    OK = 200                            # Request served
    CREATED = 201                       # Upload stored

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400                   # Unparseable request or body
    NOT_FOUND = 404                     # No such route or file
    METHOD_NOT_ALLOWED = 405            # Method has no routes at all
    LENGTH_REQUIRED = 411               # Upload without Content-Length

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500         # Compression or storage failure

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 200 OK
                     ─── ──
                      │   └── Reason phrase
                      └────── Status code
        """
        return _STATUS_PHRASES[self]

    @property
    def is_client_error(self) -> bool:
        """Check if this is a 4xx (client error) status code."""
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        """Check if this is a 5xx (server error) status code."""
        return 500 <= self < 600

    @property
    def is_error(self) -> bool:
        """Check if this is an error status code (4xx or 5xx)."""
        return self >= 400


# =============================================================================
# REASON PHRASES
# =============================================================================
#
# These strings are part of the wire format: clients compare status lines
# byte for byte, so they are written exactly as RFC 7231 spells them.
#
_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.LENGTH_REQUIRED: "Length Required",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
