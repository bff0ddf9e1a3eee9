"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

The connection acceptor: bind, listen, accept, hand off. It never reads
or writes request data itself.

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create a TCP socket
    2. bind()      Attach it to host:port (default 0.0.0.0:4221)
    3. listen()    Let the OS queue incoming connections
    4. accept()    Take one connection off the queue → new client socket
    5. (repeat 4 until shutdown)
    6. close()     Release the listening socket

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   listening socket ──accept()──► client socket ──► Connection        │
    │          ▲                                              │            │
    │          │                                              ▼            │
    │          └────────── loop ◄──── connection_handler(conn)             │
    │                                 (returns at once, work runs in       │
    │                                  its own thread)                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
INTERRUPTIBLE ACCEPT
=============================================================================

accept() would block forever, so the listening socket gets a one-second
timeout. Each timeout returns control to the loop, which checks the
running flag:

    while running:
        try:
            accept()          # at most 1 second
        except timeout:
            continue          # check the flag again

shutdown() only clears the flag; the loop notices within a second.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP socket server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      SocketServer Internals                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    start(handler)                                                    │
    │        ├──► _create_socket()   SO_REUSEADDR, TCP_NODELAY, 1s timeout │
    │        ├──► bind() / listen()                                        │
    │        ├──► _setup_signals()   SIGTERM/SIGINT (main thread only)     │
    │        ├──► _listening.set()   wake wait_until_listening()           │
    │        └──► _accept_loop()     BLOCKS until shutdown()               │
    │                                                                      │
    │    shutdown()                  clear running flag                    │
    │    _cleanup()                  restore signals, close socket         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig):
        """
        Initialize the socket server.

        Nothing is bound here; the socket is created in start().
        """
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set once the socket is listening, for callers in other threads
        self._listening = threading.Event()

        self._original_handlers: dict = {}

    @property
    def address(self) -> Tuple[str, int]:
        """
        Get the server's bound address (IP, port).

        With port 0 in the config this is the ephemeral port the OS chose,
        once the server is listening.
        """
        if self._socket is not None:
            host, port = self._socket.getsockname()[:2]
            return (host, port)
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Rebind immediately after a restart despite TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Responses are written in one sendall(); send them without delay
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # Bounded accept() so the loop can notice shutdown
        sock.settimeout(1.0)

        return sock

    def _setup_signals(self):
        """
        Install SIGTERM/SIGINT handlers that trigger a graceful shutdown.

        signal.signal() only works in the main thread. When the server is
        started from another thread (tests, embedding) the handlers are
        left alone and the owner calls shutdown() itself.
        """
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not in main thread, signal handlers not installed")
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Start accepting connections.

        This method BLOCKS until shutdown() is called.

        Args:
            connection_handler: Called with each new Connection. Must
                                return quickly; the accept loop waits on it.

        Raises:
            OSError: The address cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)

        self._running = True

        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._listening.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """Accept connections until the running flag is cleared."""
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue  # Normal: re-check self._running
            except OSError as e:
                # Usually means the socket was closed under us
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
            )

            connection_handler(conn)

    def shutdown(self):
        """
        Initiate graceful shutdown.

        Safe to call from a signal handler, from another thread, or more
        than once.
        """
        logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        """Clean up resources on shutdown."""
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._listening.clear()
        logger.info("Socket server stopped")

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the socket is bound and listening.

        Returns:
            True once listening, False if the timeout expired first.
        """
        return self._listening.wait(timeout)
