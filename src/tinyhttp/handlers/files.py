"""
=============================================================================
FILE HANDLERS
=============================================================================

Download and upload of raw files under one configured directory.

=============================================================================
PATH CONSTRUCTION
=============================================================================

The configured directory is a plain string prefix. The two directions
build paths differently, and both are kept as they are:

    ┌──────────────────────────┬───────────────────────────────────────────┐
    │ GET /files/notes.txt     │ directory + "notes.txt"                   │
    │   directory="/tmp/"      │ → "/tmp/notes.txt"                        │
    │   directory="/tmp"       │ → "/tmpnotes.txt"  (no separator added)   │
    ├──────────────────────────┼───────────────────────────────────────────┤
    │ POST /files/notes.txt    │ directory + "/" + "notes.txt"             │
    │   directory="/tmp/"      │ → "/tmp//notes.txt" (same file)           │
    │   directory="/tmp"       │ → "/tmp/notes.txt"                        │
    └──────────────────────────┴───────────────────────────────────────────┘

So the directory is given with a trailing separator.

KNOWN GAP: names are not sanitized. "/files/../secret" reaches outside
the directory. Do not point this server at anything sensitive.

=============================================================================
FAILURE MAPPING
=============================================================================

    ┌──────────────────────────────────────┬──────────────────────┬────────┐
    │ Condition                            │ Exception            │ Status │
    ├──────────────────────────────────────┼──────────────────────┼────────┤
    │ open / fstat fails, no directory     │ NotFoundError        │ 404    │
    │ read fails or returns < size bytes   │ NotFoundError        │ 404    │
    │ no Content-Length                    │ MissingLengthError   │ 411    │
    │ Content-Length not a number          │ InvalidLengthError   │ 400    │
    │ body shorter than Content-Length     │ ShortBodyError       │ 400    │
    │ create / write fails                 │ StorageError         │ 500    │
    └──────────────────────────────────────┴──────────────────────┴────────┘

The upload body is read in full BEFORE the file is created, so a short
body never leaves an empty or truncated file behind.

=============================================================================
"""

import os
import logging
from typing import BinaryIO, Optional

from ..http.errors import NotFoundError, StorageError
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, created


logger = logging.getLogger(__name__)


class FileStore:
    """
    Opens and creates files relative to a base directory string.

    The directory is injected at construction (from ServerConfig) and
    never read from global state. With no directory configured every
    operation fails with FileNotFoundError.
    """

    def __init__(self, directory: Optional[str] = None):
        self.directory = directory

    def _require_directory(self) -> str:
        if self.directory is None:
            raise FileNotFoundError("No file directory configured")
        return self.directory

    def path_for_read(self, name: str) -> str:
        """Read path: directory and name concatenated as-is."""
        return f"{self._require_directory()}{name}"

    def path_for_write(self, name: str) -> str:
        """Write path: directory, "/", name."""
        return f"{self._require_directory()}/{name}"

    def open(self, name: str) -> tuple[BinaryIO, int]:
        """
        Open a file for reading.

        Returns:
            (binary reader, size in bytes taken from fstat at open time)

        Raises:
            OSError: The file cannot be opened or stat'ed.
        """
        handle = open(self.path_for_read(name), "rb")
        try:
            size = os.fstat(handle.fileno()).st_size
        except OSError:
            handle.close()
            raise
        return handle, size

    def create(self, name: str) -> BinaryIO:
        """
        Create or truncate a file for writing.

        Raises:
            OSError: The file cannot be created.
        """
        return open(self.path_for_write(name), "wb")


class FileHandler:
    """
    Handlers for GET /files/*name and POST /files*rest.

    Usage:
        files = FileHandler(FileStore("/tmp/"))
        router.add_route("/files/*name", files.serve, method="GET")
        router.add_route("/files*rest", files.upload, method="POST")
    """

    def __init__(self, store: FileStore):
        self.store = store

    def serve(self, request: HTTPRequest) -> HTTPResponse:
        """
        Send a file as application/octet-stream.

        Raises:
            NotFoundError: The file cannot be opened, stat'ed or fully read.
        """
        name = request.path_params.get("name", "")

        try:
            handle, size = self.store.open(name)
        except OSError as e:
            raise NotFoundError(f"Cannot open file {name!r}: {e}") from e

        with handle:
            try:
                content = handle.read(size)
            except OSError as e:
                raise NotFoundError(f"Cannot read file {name!r}: {e}") from e

        # Never send fewer bytes than the Content-Length we would announce
        if len(content) < size:
            raise NotFoundError(
                f"Short read on {name!r}: expected {size} bytes, got {len(content)}"
            )

        return ResponseBuilder().octets(content).build()

    def upload(self, request: HTTPRequest) -> HTTPResponse:
        """
        Store the request body, answering 201 with the stored bytes echoed back.

        The name is the path with a leading "/files/" removed, if there is
        one. POST /files therefore writes to directory + "/" + "/files".

        Raises:
            MissingLengthError: No Content-Length (411).
            InvalidLengthError: Unparseable Content-Length (400).
            ShortBodyError: Body shorter than declared (400).
            StorageError: The file cannot be created or written (500).
        """
        name = request.path.removeprefix("/files/")
        body = request.read_body()

        try:
            with self.store.create(name) as handle:
                handle.write(body)
        except OSError as e:
            raise StorageError(f"Cannot write file {name!r}: {e}") from e

        logger.info(f"Stored {len(body)} bytes as {name!r}")
        return created(body)
