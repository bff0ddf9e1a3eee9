"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket: a buffered reader for the request, a
send method for the response, and a careful close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does NOT preserve message boundaries. The client may write

    send(b"GET /echo/abc HTTP/1.1\\r\\n\\r\\n")

and the server may receive it as

    recv() → b"GET /ec"
    recv() → b"ho/abc HTTP/1.1\\r\\n\\r"
    recv() → b"\\n"

So the request cannot be parsed from a single recv(). Instead the socket
is wrapped in a buffered reader:

    reader = sock.makefile("rb", buffering=buffer_size)

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    BUFFERED READER OVER A SOCKET                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   kernel buffer ──recv()──► reader buffer ──readline()──► parser     │
    │                                            ──read(n)────► body       │
    │                                                                      │
    │   readline() blocks until it sees b"\\n" (or EOF)                    │
    │   read(n) blocks until it has n bytes (or EOF)                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Bytes the reader fetched past the header terminator stay in its buffer,
so the body is never lost and never double-read.

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

There is no keep-alive. Every connection goes through:

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED
     │         │             │                         ▲
     │         └── parse error ────────────────────────┤
     └──────────── any error anywhere ─────────────────┘

close() runs on every path (the class is a context manager), so no
socket or file descriptor is ever leaked.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional
import uuid


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Tracked for logging and to make close() idempotent.
    """
    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Reading the request head
    PROCESSING = "processing"  # Request parsed, handler is executing
    WRITING = "writing"        # Sending response data
    CLOSING = "closing"        # Shutdown sequence in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents one client connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Responsibilities                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  1. BUFFERED READING                                                 │
    │     └── reader: socket.makefile("rb") shared by parser and body      │
    │                                                                      │
    │  2. TIMEOUT                                                          │
    │     └── None by default: a slow client only blocks its own thread    │
    │                                                                      │
    │  3. STATE TRACKING                                                   │
    │     └── Which phase of handling we are in, for logs                  │
    │                                                                      │
    │  4. GRACEFUL CLOSE                                                   │
    │     └── Close reader, shutdown(SHUT_WR), drain, close socket         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Unique connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when connection was accepted.
    """

    # Required parameters
    socket: socket.socket
    address: tuple[str, int]

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    buffer_size: int = 8192            # Reader buffer size
    timeout: Optional[float] = None    # Socket timeout, None = block forever

    # Internal state (not shown in repr for cleaner logs)
    _reader: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        """Configure the socket once the dataclass fields are set."""
        self.socket.setblocking(True)

        if self.timeout:
            self.socket.settimeout(self.timeout)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    @property
    def reader(self) -> BinaryIO:
        """
        Buffered binary reader over the socket, created on first use.

        The request parser and HTTPRequest.read_body() both read from this
        same object, in that order.
        """
        if self._reader is None:
            self._reader = self.socket.makefile("rb", buffering=self.buffer_size)
        return self._reader

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response data to the client.

        Uses sendall() so a large body is never half-written.

        Returns:
            True if send succeeded, False if connection lost.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            # ConnectionResetError, BrokenPipeError and timeouts included
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully. Safe to call more than once.

        ┌─────────────────────────────────────────────────────────────────┐
        │                    TCP Close Sequence                            │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │   Server                              Client                     │
        │      │                                   │                       │
        │      │   FIN ──────────────────────────► │  (shutdown SHUT_WR)  │
        │      │                                   │                       │
        │      │ ◄───────────────────────── ACK   │                       │
        │      │                                   │                       │
        │      │ ◄───────────────────────── FIN   │  (client closes)      │
        │      │                                   │                       │
        │   (socket closed)                  (socket closed)               │
        │                                                                  │
        └─────────────────────────────────────────────────────────────────┘

        The FIN is what ends a close-delimited body like the greeting.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        # The makefile() reader holds its own reference to the socket; the
        # descriptor is only released once both are closed.
        if self._reader is not None:
            try:
                self._reader.close()
            except OSError:
                pass
            self._reader = None

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            # Drain unread request bytes so close() does not send a RST
            # that could discard the response still in flight
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows using Connection with 'with' for automatic cleanup:

            with conn:
                request = parser.parse(conn.reader, conn.address)
                conn.send_response(response.to_bytes())
            # Connection closed here, whatever happened inside
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure connection is closed."""
        self.close()
        return False  # Don't suppress exceptions
