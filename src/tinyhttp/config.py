"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Every tunable of the server in one dataclass.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m tinyhttp --directory /tmp/ --port 4221           │
    │                                                                      │
    │   2. Environment variables (ServerConfig.from_env)                  │
    │      └── TINYHTTP_PORT=4221 TINYHTTP_DIRECTORY=/tmp/                │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The file directory is the only setting handlers see, and they see it
through the FileStore built from this object, never through globals.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout

    FILES
    - directory

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IP address to bind to. All interfaces by default.
    """

    port: int = 4221
    """
    The port number to listen on. 0 asks the OS for a free port
    (SocketServer.address reports the real one).
    """

    backlog: int = 128
    """
    Maximum number of queued connections before new ones are refused.
    """

    buffer_size: int = 8192
    """
    Size of each connection's read buffer in bytes.
    """

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds.
    None = blocking: a client that never finishes its request holds only
    its own thread, forever. Set a value to reclaim such threads; a read
    that times out is answered with 400.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    directory: Optional[str] = None
    """
    Base directory for /files/. Used as a string prefix, so give it a
    trailing separator ("/tmp/"). None = every file request fails.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    log_format: str = "text"
    """
    Access log format: 'text' (Apache-like) or 'json' (one object per line).
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        TINYHTTP_HOST        Server host (default: 0.0.0.0)
        TINYHTTP_PORT        Server port (default: 4221)
        TINYHTTP_DIRECTORY   File directory (default: None)
        TINYHTTP_TIMEOUT     Connection timeout in seconds (default: none)
        TINYHTTP_LOG_LEVEL   Logging level (default: INFO)
        TINYHTTP_LOG_FORMAT  Access log format (default: text)

        =====================================================================
        """
        timeout = os.getenv("TINYHTTP_TIMEOUT")
        return cls(
            host=os.getenv("TINYHTTP_HOST", "0.0.0.0"),
            port=int(os.getenv("TINYHTTP_PORT", "4221")),
            directory=os.getenv("TINYHTTP_DIRECTORY"),
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("TINYHTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("TINYHTTP_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called when the server is constructed, so a bad value fails at
        startup rather than on the first request.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log_format: {self.log_format}. Must be 'text' or 'json'.")
