"""
=============================================================================
HTTP ERRORS
=============================================================================

Every way a request can fail, as an exception that knows its HTTP status.

=============================================================================
ERROR TAXONOMY
=============================================================================

    HTTPError (base: message + status_code)
    │
    ├── TransportError          400   Stream closed or broken mid-headers
    ├── MalformedRequestError   400   Request line has < 2 tokens
    ├── MissingLengthError      411   Upload without Content-Length
    ├── InvalidLengthError      400   Content-Length is not a number
    ├── ShortBodyError          400   Fewer body bytes than declared
    ├── NotFoundError           404   File cannot be opened / stat'ed / read
    ├── EncodingError           500   gzip compression failed
    ├── StorageError            500   File cannot be created / written
    ├── UnsupportedMethodError  405   Method with no routes at all
    └── UnmatchedRouteError     404   No route for this path

=============================================================================
PROPAGATION
=============================================================================

Errors are raised where they are detected (parser, router, handlers) and
caught in exactly one place: the connection-handling unit in server.py.

    raise NotFoundError(...)            ◄── handlers/files.py
            │
            ▼
    except HTTPError as e:              ◄── HTTPServer._process_connection
        log it
        send e.to_response()
        close the connection

Nothing is retried and nothing escapes the connection. Clients only ever
see the status line; the message is for the operator's log. The single
exception is UnmatchedRouteError, whose response carries the fixed text
"Path not found\\n".

=============================================================================
"""

from typing import Optional

from .response import HTTPResponse, status_only, path_not_found
from .status_codes import HTTPStatus


class HTTPError(Exception):
    """
    Base class for failures that map to an HTTP status.

    Like any exception it carries a message, plus the status code the
    client should receive. Subclasses fix the status with a class
    attribute, so raising one only needs a message:

        raise NotFoundError(f"Cannot open {path}")
    """

    status_code: HTTPStatus = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str, status_code: Optional[HTTPStatus] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code

    def to_response(self) -> HTTPResponse:
        """Build the response sent for this error: a bare status line."""
        return status_only(self.status_code)


# =============================================================================
# READ-SIDE ERRORS (request line, headers, body)
# =============================================================================

class TransportError(HTTPError):
    """
    The stream failed before the header terminator was reached.

    EOF, reset or timeout while reading. A 400 is still attempted, but the
    peer may already be gone, so delivery is best effort.
    """

    status_code = HTTPStatus.BAD_REQUEST


class MalformedRequestError(HTTPError):
    """Request line does not contain at least a method and a path."""

    status_code = HTTPStatus.BAD_REQUEST


class MissingLengthError(HTTPError):
    """A body is required but Content-Length was not sent."""

    status_code = HTTPStatus.LENGTH_REQUIRED


class InvalidLengthError(HTTPError):
    """Content-Length is present but not a non-negative integer."""

    status_code = HTTPStatus.BAD_REQUEST


class ShortBodyError(HTTPError):
    """The stream ended before Content-Length bytes were read."""

    status_code = HTTPStatus.BAD_REQUEST


# =============================================================================
# HANDLER-SIDE ERRORS
# =============================================================================

class NotFoundError(HTTPError):
    """
    A requested file could not be served.

    Missing files and permission problems are deliberately reported the
    same way.
    """

    status_code = HTTPStatus.NOT_FOUND


class EncodingError(HTTPError):
    """Compressing a response body failed."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


class StorageError(HTTPError):
    """Creating or writing an uploaded file failed."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


# =============================================================================
# ROUTING ERRORS
# =============================================================================

class UnsupportedMethodError(HTTPError):
    """No route at all is registered for this method."""

    status_code = HTTPStatus.METHOD_NOT_ALLOWED


class UnmatchedRouteError(HTTPError):
    """The method is known, but no pattern matches the path."""

    status_code = HTTPStatus.NOT_FOUND

    def to_response(self) -> HTTPResponse:
        return path_not_found()
