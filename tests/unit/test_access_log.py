"""
Unit tests for access logging.
"""

import json
import logging
import time

from tinyhttp.access_log import AccessLogger, RequestLog
from tinyhttp.http import HTTPStatus, ok_text, parse_request, status_only


def make_entry(request=None, response=None) -> RequestLog:
    return RequestLog.create(
        request_id="abcd1234",
        client_ip="127.0.0.1",
        request=request,
        response=response or ok_text("xyz"),
        started=time.time(),
    )


class TestRequestLog:

    def test_create_from_request(self):
        request = parse_request(b"GET /user-agent HTTP/1.1\r\nUser-Agent: curl\r\n\r\n")
        entry = make_entry(request)

        assert entry.method == "GET"
        assert entry.path == "/user-agent"
        assert entry.user_agent == "curl"
        assert entry.status_code == 200
        assert entry.content_length == 3
        assert entry.duration_ms >= 0

    def test_create_without_request(self):
        """A request that never parsed is logged with placeholders."""
        entry = make_entry(None, status_only(HTTPStatus.BAD_REQUEST))

        assert (entry.method, entry.path, entry.user_agent) == ("-", "-", "-")
        assert entry.status_code == 400
        assert entry.content_length == 0

    def test_to_text(self):
        text = make_entry(parse_request(b"GET /echo/abc HTTP/1.1\r\n\r\n")).to_text()

        assert text.startswith("127.0.0.1 - - [")
        assert '"GET /echo/abc" 200 3 ' in text
        assert text.endswith("ms")

    def test_to_dict(self):
        data = make_entry().to_dict()

        assert data["request_id"] == "abcd1234"
        assert data["status_code"] == 200
        assert isinstance(data["duration_ms"], float)


class TestAccessLogger:

    def test_text_format(self, caplog):
        with caplog.at_level(logging.INFO, logger="tinyhttp.access"):
            AccessLogger("text").log(make_entry())

        assert caplog.records[-1].name == "tinyhttp.access"
        assert '"- -" 200 3' in caplog.records[-1].getMessage()

    def test_json_format(self, caplog):
        with caplog.at_level(logging.INFO, logger="tinyhttp.access"):
            AccessLogger("json").log(make_entry())

        data = json.loads(caplog.records[-1].getMessage())
        assert data["client_ip"] == "127.0.0.1"
        assert data["status_code"] == 200
