"""
=============================================================================
TINYHTTP - Minimal HTTP/1.1 Server Over Raw TCP Sockets
=============================================================================

A small HTTP server written directly against the socket API: it parses
the request line and headers from a buffered byte stream, dispatches a
fixed set of routes, and writes byte-exact HTTP/1.1 responses.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    TINYHTTP ARCHITECTURE                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. RAW SOCKET PROGRAMMING                                         │
    │      - Listening socket with an interruptible accept loop           │
    │      - One daemon thread per connection                             │
    │      - Buffered reads, single sendall() per response                │
    │                                                                      │
    │   2. HTTP/1.1 FRAMING                                               │
    │      - Request line + header block, body read by Content-Length     │
    │      - Exact response serialization, no implicit headers            │
    │      - gzip negotiation for echoed text                             │
    │                                                                      │
    │   3. ROUTES                                                         │
    │      - GET /, /user-agent, /echo/*, /files/*                        │
    │      - POST /files*                                                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    tinyhttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m tinyhttp)
    ├── server.py            # HTTPServer: routes, threads, error boundary
    ├── config.py            # ServerConfig dataclass
    ├── access_log.py        # RequestLog / AccessLogger
    ├── core/                # Low-level components
    │   ├── socket_server.py # TCP listen / accept
    │   └── connection.py    # Connection wrapper
    ├── http/                # HTTP protocol components
    │   ├── request.py       # Request parsing
    │   ├── response.py      # Response building
    │   ├── errors.py        # HTTPError hierarchy
    │   ├── compression.py   # Accept-Encoding / gzip
    │   ├── router.py        # URL routing
    │   └── status_codes.py  # HTTPStatus enum
    └── handlers/            # Route handlers
        ├── text.py          # Greeting, user-agent, echo
        └── files.py         # FileStore, download, upload

=============================================================================
QUICK START
=============================================================================

    from tinyhttp import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(directory="/tmp/"))
    server.run()

    $ curl -v http://localhost:4221/echo/abc
    $ curl -v --data-binary hello http://localhost:4221/files/hello.txt

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
