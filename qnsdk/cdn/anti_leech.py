"""Timestamp anti-leech URLs for the CDN."""

from __future__ import annotations

import hashlib
import time
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

_PATH_SAFE = "/%!$&'()*+,;=:@~-._"


def create_timestamp_antileech_url(
    url_str: str, encrypt_key: str, duration_in_seconds: int
) -> str:
    """Add ``sign`` and ``t`` parameters valid for the given number of seconds."""
    parts = urlsplit(url_str)
    expire_hex = format(int(time.time()) + int(duration_in_seconds), "x")
    path = quote(parts.path, safe=_PATH_SAFE)
    signed = hashlib.md5(f"{encrypt_key}{path}{expire_hex}".encode()).hexdigest()
    query = urlencode([("sign", signed), ("t", expire_hex)])
    separator = "&" if parts.query else "?"
    return urlunsplit(parts) + separator + query