"""Access/secret key credentials and request signing."""

from __future__ import annotations

import base64
import enum
import hashlib
import hmac
import string
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from urllib.parse import unquote, urlsplit

from qnsdk.conf import CONTENT_TYPE_FORM, CONTENT_TYPE_JSON

_X_QINIU_PREFIX = "X-Qiniu-"
_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


class TokenType(enum.IntEnum):
    """Signature algorithm used for management requests."""

    QINIU = 0
    QBOX = 1


def _canonical_header_key(key: str) -> str:
    if not key or any(ch not in _TOKEN_CHARS for ch in key):
        return key
    parts = []
    upper = True
    for ch in key:
        parts.append(ch.upper() if upper else ch.lower())
        upper = ch == "-"
    return "".join(parts)


@dataclass
class Request:
    """An outgoing HTTP request as seen by the signers."""

    method: str = "GET"
    url: str = ""
    headers: Mapping[str, str | Iterable[str]] | None = field(default_factory=dict)
    body: bytes | str | None = None
    host: str | None = None

    def __post_init__(self) -> None:
        if not self.method:
            self.method = "GET"
        normalized: dict[str, list[str]] = {}
        for name, values in (self.headers or {}).items():
            items = [values] if isinstance(values, str) else list(values)
            normalized.setdefault(_canonical_header_key(name), []).extend(items)
        self.headers = normalized
        if isinstance(self.body, str):
            self.body = self.body.encode()
        parts = urlsplit(self.url)
        self.path = unquote(parts.path)
        self.raw_query = parts.query
        if self.host is None:
            self.host = parts.netloc.rpartition("@")[2]

    def header(self, name: str) -> str:
        """First value of a header, or an empty string."""
        values = self.headers.get(_canonical_header_key(name))
        return values[0] if values else ""

    def set_header(self, name: str, value: str) -> None:
        self.headers[_canonical_header_key(name)] = [value]

    def add_header(self, name: str, value: str) -> None:
        self.headers.setdefault(_canonical_header_key(name), []).append(value)


def _path_and_query(req: Request) -> str:
    return f"{req.path}?{req.raw_query}" if req.raw_query else req.path


def collect_data(req: Request) -> bytes:
    """Bytes covered by a QBox signature."""
    data = (_path_and_query(req) + "\n").encode()
    if req.body is not None and req.header("Content-Type") == CONTENT_TYPE_FORM:
        data += req.body
    return data


def collect_data_v2(req: Request) -> bytes:
    """Bytes covered by a Qiniu signature; sets a default Content-Type."""
    lines = [f"{req.method} {_path_and_query(req)}", f"Host: {req.host}"]

    content_type = req.header("Content-Type")
    if not content_type:
        content_type = CONTENT_TYPE_FORM
        req.set_header("Content-Type", content_type)
    lines.append(f"Content-Type: {content_type}")

    qiniu_headers = sorted(
        (_canonical_header_key(name), value)
        for name, values in req.headers.items()
        if len(name) > len(_X_QINIU_PREFIX) and name.startswith(_X_QINIU_PREFIX)
        for value in values
    )
    lines.extend(f"{name}: {value}" for name, value in qiniu_headers)

    data = ("\n".join(lines) + "\n\n").encode()
    if req.body is not None and content_type in (CONTENT_TYPE_FORM, CONTENT_TYPE_JSON):
        data += req.body
    return data


class Credentials:
    """An access key and secret key pair used to sign tokens and requests."""

    def __init__(self, access_key: str, secret_key: str | bytes) -> None:
        self.access_key = access_key
        self.secret_key = secret_key.encode() if isinstance(secret_key, str) else bytes(secret_key)

    def __repr__(self) -> str:
        return f"Credentials(access_key={self.access_key!r})"

    def sign(self, data: bytes | str) -> str:
        """HMAC-SHA1 sign data, returning ``access_key:signature``."""
        if isinstance(data, str):
            data = data.encode()
        digest = hmac.new(self.secret_key, data, hashlib.sha1).digest()
        return f"{self.access_key}:{base64.urlsafe_b64encode(digest).decode()}"

    def sign_with_data(self, data: bytes | str) -> str:
        """Sign the URL-safe base64 of data and append the encoded data."""
        if isinstance(data, str):
            data = data.encode()
        encoded = base64.urlsafe_b64encode(data).decode()
        return f"{self.sign(encoded)}:{encoded}"

    def sign_request(self, req: Request) -> str:
        return self.sign(collect_data(req))

    def sign_request_v2(self, req: Request) -> str:
        return self.sign(collect_data_v2(req))

    def add_token(self, token_type: TokenType, req: Request) -> None:
        """Sign the request and add the matching Authorization header."""
        if token_type == TokenType.QINIU:
            req.add_header("Authorization", "Qiniu " + self.sign_request_v2(req))
        else:
            req.add_header("Authorization", "QBox " + self.sign_request(req))

    def verify_callback(self, req: Request) -> bool:
        """Whether an upload callback request carries a valid QBox signature."""
        authorization = req.header("Authorization")
        if not authorization:
            return False
        return authorization == "QBox " + self.sign_request(req)