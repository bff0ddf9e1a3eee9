"""
=============================================================================
ACCESS LOG
=============================================================================

One line per answered request on the "tinyhttp.access" logger.

=============================================================================
LOG FORMATS
=============================================================================

    TEXT (default, Apache-like):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ 127.0.0.1 - - [18/Oct/2026:10:55:36 +0000] "GET /echo/abc" 200 3 0.41ms │
    │ ──────────────────────────────────────────────────────────────────  │
    │ IP          Timestamp                 Method/Path  Status Size Time  │
    └─────────────────────────────────────────────────────────────────────┘

    JSON (one object per line, for log aggregators):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ {"request_id": "a1b2c3d4", "method": "GET", "path": "/echo/abc",   │
    │  "client_ip": "127.0.0.1", "user_agent": "curl/8.4.0",             │
    │  "status_code": 200, "content_length": 3, "duration_ms": 0.41,     │
    │  "timestamp": "18/Oct/2026:10:55:36 +0000"}                        │
    └─────────────────────────────────────────────────────────────────────┘

A request whose head never parsed (broken stream, bad request line) is
logged with "-" for method, path and user agent.

The request id is the connection id, so access lines can be matched with
the "[a1b2c3d4] ..." lines from tinyhttp.core.connection.

=============================================================================
"""

import time
import json
import logging
from dataclasses import dataclass, asdict
from typing import Optional

from .http.request import HTTPRequest
from .http.response import HTTPResponse


# Namespaced so it can be routed separately:
#   logging.getLogger("tinyhttp.access").addHandler(file_handler)
logger = logging.getLogger("tinyhttp.access")


@dataclass
class RequestLog:
    """
    Structured log entry for one request.

    request_id:     Connection id, for correlation
    method:         HTTP method, "-" if the request never parsed
    path:           Request path as received
    client_ip:      Client's IP address
    user_agent:     User-Agent header or "-"
    status_code:    HTTP response code
    content_length: Response body size in bytes
    duration_ms:    Time from accept to response built
    timestamp:      When the request was logged
    """

    request_id: str
    method: str
    path: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    @classmethod
    def create(
        cls,
        request_id: str,
        client_ip: str,
        request: Optional[HTTPRequest],
        response: HTTPResponse,
        started: float,
    ) -> "RequestLog":
        """Build an entry from what the connection unit has at the end."""
        return cls(
            request_id=request_id,
            method=request.method if request else "-",
            path=request.path if request else "-",
            client_ip=client_ip,
            user_agent=(request.get_header("User-Agent") if request else "") or "-",
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=(time.time() - started) * 1000,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        """Format as an Apache-style access line."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class AccessLogger:
    """
    Writes RequestLog entries in the configured format.

    Usage:
        access = AccessLogger(log_format="json")
        access.log(RequestLog.create(...))
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        self.log_format = log_format
        self.log_level = log_level

    def format(self, entry: RequestLog) -> str:
        if self.log_format == "json":
            return json.dumps(entry.to_dict())
        return entry.to_text()

    def log(self, entry: RequestLog) -> None:
        logger.log(self.log_level, self.format(entry))
