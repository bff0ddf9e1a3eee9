"""
=============================================================================
HTTP SERVER CLI ENTRY POINT
=============================================================================

Command-line interface for running the server.

=============================================================================
USAGE
=============================================================================

    # Serve files from /tmp/ on 0.0.0.0:4221
    python -m tinyhttp --directory /tmp/

    # Same, directory given positionally
    python -m tinyhttp /tmp/

    # Custom port, verbose logs, JSON access log
    python -m tinyhttp --directory /tmp/ --port 8080 --log-level DEBUG --log-format json

    # Installed console script
    tinyhttp --directory /tmp/

The directory is a string prefix for file names; keep its trailing "/".

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .server import HTTPServer
from .config import ServerConfig, LOG_LEVELS, LOG_FORMATS


def build_parser(defaults: Optional[ServerConfig] = None) -> argparse.ArgumentParser:
    """
    Build the argument parser.

    Defaults come from the environment (ServerConfig.from_env), so a flag
    overrides TINYHTTP_* and TINYHTTP_* overrides the built-in value.
    """
    defaults = defaults or ServerConfig.from_env()

    parser = argparse.ArgumentParser(
        prog="tinyhttp",
        description="Minimal HTTP/1.1 server over raw TCP sockets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tinyhttp --directory /tmp/          # Serve and store files in /tmp/
  python -m tinyhttp /tmp/                      # Same, positional form
  python -m tinyhttp --port 8080                # Custom port
  TINYHTTP_PORT=8080 python -m tinyhttp /tmp/   # Port from the environment
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "directory",
        nargs="?",
        default=defaults.directory,
        help="Directory for /files/ (same as --directory)"
    )

    parser.add_argument(
        "--directory", "-d",
        dest="directory_option",
        default=None,
        help="Directory for /files/, with trailing separator (e.g., /tmp/)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help="Host to bind to (default: %(default)s)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help="Port to listen on (default: %(default)s)"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=defaults.timeout,
        help="Per-connection socket timeout in seconds (default: none)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=defaults.log_level,
        help="Logging level (default: %(default)s)"
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=defaults.log_format,
        help="Access log format (default: %(default)s)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"tinyhttp {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Translate parsed CLI arguments to a ServerConfig. --directory wins."""
    return ServerConfig(
        host=args.host,
        port=args.port,
        timeout=args.timeout,
        directory=args.directory_option or args.directory,
        log_level=args.log_level,
        log_format=args.log_format,
    )


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point. Blocks until the server stops."""
    try:
        args = build_parser().parse_args(argv)
        server = HTTPServer(config_from_args(args))
        server.run()
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
