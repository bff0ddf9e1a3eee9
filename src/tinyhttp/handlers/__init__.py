"""
=============================================================================
HANDLERS MODULE
=============================================================================

Request handlers for the server's fixed set of routes.

=============================================================================
WHAT IS A HANDLER?
=============================================================================

A handler takes a parsed request and returns a response, or raises an
HTTPError that the connection unit turns into a status line.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    REQUEST → HANDLER → RESPONSE                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    Request                 Handler                 Response         │
    │   ┌─────────┐           ┌─────────┐           ┌─────────┐          │
    │   │ GET     │           │         │           │ 200 OK  │          │
    │   │ /echo/  │ ────────▶ │ echo()  │ ────────▶ │         │          │
    │   │ abc     │           │         │           │ abc     │          │
    │   └─────────┘           └─────────┘           └─────────┘          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    text.py    index, user_agent, echo (plain functions)
    files.py   FileStore + FileHandler.serve / FileHandler.upload

=============================================================================
"""

from .text import index, user_agent, echo
from .files import FileStore, FileHandler

__all__ = [
    "index",
    "user_agent",
    "echo",
    "FileStore",
    "FileHandler",
]
