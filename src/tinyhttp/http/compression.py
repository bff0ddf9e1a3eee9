"""
=============================================================================
CONTENT-ENCODING NEGOTIATION
=============================================================================

Decides, from the client's Accept-Encoding header, whether an echo body is
sent gzip-compressed, plain, or not at all.

=============================================================================
HOW NEGOTIATION WORKS
=============================================================================

The client advertises the encodings it can decode:

    Accept-Encoding: deflate, gzip , br
                     ───┬─── ──┬── ─┬
                        │      │    └─ token "br"
                        │      └────── token "gzip" (spaces stripped)
                        └───────────── token "deflate"

The server looks for ONE token, "gzip", by exact match after stripping.
There is no q-value parsing: "gzip;q=0" is not the token "gzip".

    ┌──────────────────────────────┬──────────────┬───────────────────────┐
    │ Accept-Encoding header       │ Outcome      │ Response              │
    ├──────────────────────────────┼──────────────┼───────────────────────┤
    │ (absent)                     │ IDENTITY     │ plain body,           │
    │                              │              │ Content-Length = raw  │
    ├──────────────────────────────┼──────────────┼───────────────────────┤
    │ "gzip" / "br, gzip" / ...    │ GZIP         │ gzip body,            │
    │                              │              │ Content-Encoding,     │
    │                              │              │ Content-Length = gz   │
    ├──────────────────────────────┼──────────────┼───────────────────────┤
    │ "identity" / "br" / ""       │ UNSUPPORTED  │ Content-Type only,    │
    │                              │              │ NO length, NO body    │
    └──────────────────────────────┴──────────────┴───────────────────────┘

The UNSUPPORTED row is a known quirk kept for compatibility: a header that
names only other encodings gets an empty 200 instead of a plain body.

=============================================================================
GZIP FRAMING
=============================================================================

gzip.compress() produces a complete gzip member: 10-byte header, DEFLATE
stream, CRC32 and size trailer. Even "abc" grows to ~23 bytes, which is why
Content-Length must be measured AFTER compressing.

=============================================================================
"""

import gzip
import zlib
from enum import Enum
from typing import Optional

from .errors import EncodingError


class ContentEncoding(Enum):
    """Result of negotiating an echo body's encoding."""

    IDENTITY = "identity"        # No Accept-Encoding header at all
    GZIP = "gzip"                # Client listed gzip
    UNSUPPORTED = "unsupported"  # Header present, gzip not in it


def accepts_gzip(accept_encoding: str) -> bool:
    """
    Check whether a raw Accept-Encoding value lists the gzip token.

        accepts_gzip("gzip")              → True
        accepts_gzip("deflate, gzip ")    → True
        accepts_gzip("gzip;q=1.0")        → False (not an exact token)
        accepts_gzip("x-gzip")            → False
    """
    return any(token.strip() == "gzip" for token in accept_encoding.split(","))


def negotiate_encoding(accept_encoding: Optional[str]) -> ContentEncoding:
    """
    Choose the encoding for an echo response.

    Args:
        accept_encoding: The Accept-Encoding header value, or None when
                         the request did not carry the header.
    """
    if accept_encoding is None:
        return ContentEncoding.IDENTITY

    if accepts_gzip(accept_encoding):
        return ContentEncoding.GZIP

    return ContentEncoding.UNSUPPORTED


def gzip_body(data: bytes, level: int = 6) -> bytes:
    """
    Compress a body into a single gzip member.

    Args:
        data: Uncompressed body bytes.
        level: Compression level (1 = fastest, 9 = smallest, 6 balanced).

    Raises:
        EncodingError: If the compressor fails (500).
    """
    try:
        return gzip.compress(data, compresslevel=level)
    except (zlib.error, OSError, ValueError) as e:
        raise EncodingError(f"gzip compression failed: {e}") from e
