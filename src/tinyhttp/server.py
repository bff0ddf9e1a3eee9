"""
=============================================================================
MAIN HTTP SERVER
=============================================================================

The orchestrator: wires the file store, handlers and router together and
runs one thread per accepted connection.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    HTTP SERVER ARCHITECTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │   HTTPServer    │                          │
    │                        │   (Orchestrator)│                          │
    │                        └────────┬────────┘                          │
    │                                 │                                    │
    │            ┌────────────────────┼────────────────────┐              │
    │            │                    │                    │              │
    │            ▼                    ▼                    ▼              │
    │    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐        │
    │    │SocketServer  │    │ Thread per   │    │    Router    │        │
    │    │ (Networking) │    │ connection   │    │ (Dispatching)│        │
    │    └──────┬───────┘    └──────┬───────┘    └──────┬───────┘        │
    │           │                   │                   │                 │
    │           ▼                   ▼                   ▼                 │
    │    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐        │
    │    │  Connection  │    │RequestParser │    │   Handlers   │        │
    │    │ (TCP Conn.)  │    │              │    │  FileStore   │        │
    │    └──────────────┘    └──────────────┘    └──────────────┘        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. CLIENT CONNECTS
       └── SocketServer accepts, wraps the socket in a Connection

    2. NEW THREAD
       └── A daemon thread runs _process_connection(conn)

    3. PARSE REQUEST HEAD
       └── RequestParser reads request line + headers from conn.reader

    4. ROUTE DISPATCH
       └── Router matches (method, path) → handler
       └── Upload handler reads the body itself, if it needs it

    5. SEND RESPONSE
       └── One sendall() of the serialized response

    6. CLOSE
       └── Always, on every path. No keep-alive.

Any HTTPError raised in 3 or 4 becomes its status line. Anything else
becomes a bare 500 and a traceback in the log.

=============================================================================
"""

import logging
import threading
import time
from typing import Optional, Tuple

from .access_log import AccessLogger, RequestLog
from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState
from .handlers import FileHandler, FileStore, echo, index, user_agent
from .http import (
    HTTPError,
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    RequestParser,
    Router,
    status_only,
)


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Threaded HTTP/1.1 server with a fixed route table.

    =========================================================================
    ROUTES (precedence order)
    =========================================================================

        GET  /               greeting
        GET  /user-agent     echo the User-Agent header
        GET  /echo/*text     echo the path suffix (gzip when accepted)
        GET  /files/*name    download directory + name
        POST /files*rest     upload to directory + "/" + name

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer(ServerConfig(directory="/tmp/"))
        server.run()          # Blocks until Ctrl+C / SIGTERM / shutdown()

    From another thread:

        threading.Thread(target=server.run, daemon=True).start()
        server.wait_until_listening(5.0)
        host, port = server.address
        ...
        server.shutdown()

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Initialize the HTTP server.

        Raises:
            ValueError: The configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        # ─────────────────────────────────────────────────────────────────
        # CORE COMPONENTS
        # ─────────────────────────────────────────────────────────────────

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()
        self._access_log = AccessLogger(log_format=self.config.log_format)

        # ─────────────────────────────────────────────────────────────────
        # APPLICATION COMPONENTS
        # ─────────────────────────────────────────────────────────────────

        self.files = FileHandler(FileStore(self.config.directory))
        self._router = self._build_router()

    def _build_router(self) -> Router:
        """Register the route table. Order is precedence."""
        router = Router()
        router.add_route("/", index, method="GET")
        router.add_route("/user-agent", user_agent, method="GET")
        router.add_route("/echo/*text", echo, method="GET")
        router.add_route("/files/*name", self.files.serve, method="GET")
        router.add_route("/files*rest", self.files.upload, method="POST")
        return router

    @property
    def router(self) -> Router:
        """The route table, for inspection."""
        return self._router

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port once listening."""
        return self._socket_server.address

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Returns after shutdown() is called, or on SIGINT/SIGTERM when run
        from the main thread.

        Raises:
            OSError: The configured address cannot be bound.
        """
        self._setup_logging()

        logger.info(f"Starting HTTP server on {self.config.host}:{self.config.port}")
        if self.config.directory is None:
            logger.warning("No file directory configured, /files/ requests will fail")
        else:
            logger.info(f"Serving files from {self.config.directory!r}")
        for line in self._router.describe():
            logger.debug(f"Route: {line}")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        """Block until run() has bound the socket. False on timeout."""
        return self._socket_server.wait_until_listening(timeout)

    def shutdown(self):
        """
        Stop accepting connections.

        Connections already being handled finish in their own threads.
        """
        logger.info("Shutting down server...")
        self._socket_server.shutdown()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("tinyhttp").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Start a thread for a new connection.

        Called by SocketServer in the accept loop, so it returns at once.
        Daemon threads: a stalled client never keeps the process alive.
        """
        worker = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        worker.start()

    def _process_connection(self, conn: Connection):
        """
        Serve exactly one request on a connection, then close it.

        =====================================================================
        ERROR BOUNDARY
        =====================================================================

        Every HTTPError raised while parsing or handling ends up here:

            parse / route / handler
                  │
                  ├── returns HTTPResponse ─────────────┐
                  ├── raises HTTPError ──► to_response() ┤
                  └── raises anything else ──► bare 500 ─┤
                                                         ▼
                                              send, access log, close

        =====================================================================
        """
        started = time.time()
        request: Optional[HTTPRequest] = None

        with conn:  # Context manager ensures connection is closed
            conn.state = ConnectionState.READING
            try:
                request = self._parser.parse(conn.reader, conn.address)
                logger.info(f"[{conn.id}] Incoming request: {request.request_line}")

                conn.state = ConnectionState.PROCESSING
                response = self._router.handle(request)

            except HTTPError as e:
                response = self._error_response(conn, e)

            except Exception as e:
                logger.exception(f"[{conn.id}] Handler error: {e}")
                response = status_only(HTTPStatus.INTERNAL_SERVER_ERROR)

            conn.send_response(response.to_bytes())
            self._log_access(conn, request, response, started)

    def _error_response(self, conn: Connection, error: HTTPError) -> HTTPResponse:
        """Log an HTTPError at a level matching its status and build its response."""
        status = error.status_code
        message = f"[{conn.id}] {int(status)} {status.phrase}: {error}"

        if status.is_server_error:
            logger.error(message)
        else:
            logger.warning(message)

        return error.to_response()

    def _log_access(
        self,
        conn: Connection,
        request: Optional[HTTPRequest],
        response: HTTPResponse,
        started: float,
    ):
        entry = RequestLog.create(
            request_id=conn.id,
            client_ip=conn.client_ip,
            request=request,
            response=response,
            started=started,
        )
        self._access_log.log(entry)
