"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking plumbing underneath the HTTP layer.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Creates the TCP listening socket, binds, listens                 │
    │  • Runs the accept() loop                                           │
    │  • Handles graceful shutdown via signals (SIGTERM, SIGINT)         │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ One Connection per accept()
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                         CONNECTION                                   │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Wraps one client socket                                          │
    │  • Buffered reader for request line, headers and body               │
    │  • sendall() for the response, then shutdown/drain/close            │
    └─────────────────────────────────────────────────────────────────────┘

Concurrency lives one level up: HTTPServer starts a thread per
Connection. Nothing here is shared between connections.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # Main TCP server - accepts connections
    "Connection",       # Wrapper for client socket - handles I/O
    "ConnectionState",  # Enum for connection lifecycle states
]
