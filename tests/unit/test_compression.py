"""
Unit tests for Accept-Encoding negotiation and gzip.
"""

import gzip

import pytest

from tinyhttp.http.compression import (
    ContentEncoding,
    accepts_gzip,
    gzip_body,
    negotiate_encoding,
)
from tinyhttp.http.errors import EncodingError


class TestAcceptsGzip:
    """Tests for token matching."""

    @pytest.mark.parametrize("header", [
        "gzip",
        "deflate, gzip",
        "gzip, br",
        " gzip ",
        "deflate,gzip , br",
    ])
    def test_gzip_listed(self, header: str):
        assert accepts_gzip(header)

    @pytest.mark.parametrize("header", [
        "",
        "identity",
        "br, deflate",
        "x-gzip",
        "gzip;q=1.0",
        "GZIP",
    ])
    def test_gzip_not_listed(self, header: str):
        assert not accepts_gzip(header)


class TestNegotiateEncoding:
    """Tests for the three negotiation outcomes."""

    def test_header_absent(self):
        assert negotiate_encoding(None) is ContentEncoding.IDENTITY

    def test_gzip_accepted(self):
        assert negotiate_encoding("invalid-encoding, gzip") is ContentEncoding.GZIP

    def test_header_without_gzip(self):
        assert negotiate_encoding("invalid-encoding") is ContentEncoding.UNSUPPORTED

    def test_empty_header_is_present(self):
        """An empty value is still a header that lacks gzip."""
        assert negotiate_encoding("") is ContentEncoding.UNSUPPORTED


class TestGzipBody:
    """Tests for gzip_body()."""

    def test_decompresses_to_original(self):
        compressed = gzip_body(b"abc")

        assert compressed[:2] == b"\x1f\x8b"  # gzip magic
        assert gzip.decompress(compressed) == b"abc"

    def test_empty_body(self):
        assert gzip.decompress(gzip_body(b"")) == b""

    def test_compressor_failure(self, monkeypatch):
        def broken(data, compresslevel=9):
            raise OSError("disk on fire")

        monkeypatch.setattr(gzip, "compress", broken)

        with pytest.raises(EncodingError) as exc_info:
            gzip_body(b"abc")

        assert exc_info.value.status_code == 500
