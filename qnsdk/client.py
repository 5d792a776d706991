"""HTTP client that signs requests and decodes API responses."""

from __future__ import annotations

import json
import platform
import sys
from collections.abc import Iterable, Mapping
from typing import Any, BinaryIO, Union
from urllib.parse import urlencode

import requests

from qnsdk import log
from qnsdk.auth.context import RequestContext, credentials_from_context, with_credentials_type
from qnsdk.auth.credentials import Credentials, Request, TokenType
from qnsdk.conf import CONTENT_TYPE_FORM, CONTENT_TYPE_JSON, VERSION

user_agent = "Python qiniu/client package"
debug_mode = False
deep_debug_info = False

Headers = Mapping[str, Union[str, Iterable[str]]]
Body = Union[bytes, str, BinaryIO, None]
FormData = Mapping[str, Union[str, Iterable[str]]]


def turn_on_debug() -> bool:
    """Log every request and response sent by the client; return the previous setting."""
    global debug_mode
    previous = debug_mode
    debug_mode = True
    return previous


def set_app_name(user_app: str) -> None:
    """Put an application name into the User-Agent of later requests."""
    global user_agent
    user_agent = (
        f"QiniuPython/{VERSION} ({sys.platform}; {platform.machine()}; {user_app}) "
        f"Python/{platform.python_version()}"
    )


class JsonDecodeError(ValueError):
    """A body that could not be decoded as JSON, with the body kept."""

    def __init__(self, original: Exception, data: bytes) -> None:
        super().__init__(str(original))
        self.original = original
        self.data = data

    def __str__(self) -> str:
        return f"{self.original}: {self.data.decode('utf-8', 'replace')}"


def decode_json_from_data(data: bytes | str) -> Any:
    """Decode JSON, raising :class:`JsonDecodeError` that includes the body."""
    raw = data.encode() if isinstance(data, str) else bytes(data)
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise JsonDecodeError(exc, raw) from exc


class ErrorInfo(Exception):
    """An error reply from the API server."""

    def __init__(
        self, code: int = 0, err: str = "", key: str = "", reqid: str = "", errno: int = 0
    ) -> None:
        super().__init__(err)
        self.code = code
        self.err = err
        self.key = key
        self.reqid = reqid
        self.errno = errno

    def __str__(self) -> str:
        return self.err

    @property
    def http_code(self) -> int:
        return self.code

    def error_detail(self) -> str:
        """All fields as compact JSON, leaving out empty ones except the code."""
        detail: dict[str, Any] = {}
        if self.err:
            detail["error"] = self.err
        if self.key:
            detail["key"] = self.key
        if self.reqid:
            detail["reqid"] = self.reqid
        if self.errno:
            detail["errno"] = self.errno
        detail["code"] = self.code
        return json.dumps(detail, separators=(",", ":"), ensure_ascii=False)

    def rpc_error(self) -> tuple[int, int, str, str]:
        return self.code, self.errno, self.key, self.err


def _parse_error(info: ErrorInfo, body: bytes) -> None:
    try:
        ret = decode_json_from_data(body)
    except JsonDecodeError:
        ret = None
    if isinstance(ret, dict) and isinstance(ret.get("error"), str) and ret["error"]:
        info.err = ret["error"]
        info.key = ret.get("key") or ""
        info.errno = ret.get("errno") or 0
        return
    info.err = body.decode("utf-8", "replace")


def response_error(resp: requests.Response) -> ErrorInfo:
    """Build the :class:`ErrorInfo` that describes a response."""
    info = ErrorInfo(code=resp.status_code, reqid=resp.headers.get("X-Reqid", ""))
    if resp.status_code > 299:
        body = resp.content
        if body:
            if resp.headers.get("Content-Type", "").startswith("application/json"):
                _parse_error(info, body)
            else:
                info.err = body.decode("utf-8", "replace").rstrip("\n")
    return info


def _dump_headers(headers: Mapping[str, str]) -> list[str]:
    return [f"{name}: {value}" for name, value in sorted(headers.items())]


def _dump_request(req: Request, include_body: bool) -> str:
    flat = {name: ", ".join(values) for name, values in req.headers.items()}
    lines = [f"{req.method} {req.url} HTTP/1.1", f"Host: {req.host}", *_dump_headers(flat), ""]
    text = "\r\n".join(lines) + "\r\n"
    if include_body and req.body:
        text += req.body.decode("utf-8", "replace")
    return text


def _dump_response(resp: requests.Response, include_body: bool) -> str:
    lines = [f"HTTP/1.1 {resp.status_code} {resp.reason}", *_dump_headers(dict(resp.headers)), ""]
    text = "\r\n".join(lines) + "\r\n"
    if include_body:
        text += resp.content.decode("utf-8", "replace")
    return text


def call_ret(resp: requests.Response) -> Any:
    """Decoded JSON of a 2xx response (None if empty); raise ErrorInfo otherwise."""
    try:
        if debug_mode:
            log.debug(_dump_response(resp, deep_debug_info))
        if resp.status_code // 100 == 2:
            body = resp.content
            return decode_json_from_data(body) if body else None
        raise response_error(resp)
    finally:
        resp.close()


def _read_body(body: Body) -> bytes | None:
    if body is None:
        return None
    if hasattr(body, "read"):
        body = body.read()
    if isinstance(body, str):
        return body.encode()
    return bytes(body)


def _with_header(headers: Headers | None, name: str, value: str) -> dict[str, list[str]]:
    merged = {
        key: [values] if isinstance(values, str) else list(values)
        for key, values in (headers or {}).items()
    }
    merged.setdefault(name, []).append(value)
    return merged


def _encode_form(data: FormData) -> str:
    pairs = []
    for key in sorted(data):
        values = data[key]
        pairs.extend((key, value) for value in ([values] if isinstance(values, str) else values))
    return urlencode(pairs)


class Client:
    """Sends API requests, signing them with credentials found in the context."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session if session is not None else requests.Session()

    def _new_request(
        self,
        ctx: RequestContext | None,
        method: str,
        req_url: str,
        headers: Headers | None,
        body: bytes | None,
    ) -> Request:
        req = Request(method=method, url=req_url, headers=headers, body=body)
        cred, token_type = credentials_from_context(ctx)
        if cred is not None:
            cred.add_token(token_type, req)
        if debug_mode:
            log.debug(_dump_request(req, deep_debug_info))
        return req

    def do(self, ctx: RequestContext | None, req: Request) -> requests.Response:
        """Send a prepared request, adding the User-Agent if it has none."""
        if "User-Agent" not in req.headers:
            req.set_header("User-Agent", user_agent)
        flat = {name: ", ".join(values) for name, values in req.headers.items()}
        return self.session.request(req.method, req.url, headers=flat, data=req.body)

    def do_request(
        self, ctx: RequestContext | None, method: str, req_url: str, headers: Headers | None
    ) -> requests.Response:
        return self.do(ctx, self._new_request(ctx, method, req_url, headers, None))

    def do_request_with(
        self,
        ctx: RequestContext | None,
        method: str,
        req_url: str,
        headers: Headers | None,
        body: Body,
        body_length: int,
    ) -> requests.Response:
        data = _read_body(body)
        if data is not None and body_length > 0 and len(data) != body_length:
            raise ValueError(
                f"http: ContentLength={body_length} with Body length {len(data)}"
            )
        return self.do(ctx, self._new_request(ctx, method, req_url, headers, data))

    def do_request_with_form(
        self,
        ctx: RequestContext | None,
        method: str,
        req_url: str,
        headers: Headers | None,
        data: FormData,
    ) -> requests.Response:
        merged = _with_header(headers, "Content-Type", CONTENT_TYPE_FORM)
        encoded = _encode_form(data)
        if method in ("GET", "HEAD", "DELETE"):
            req_url += "&" if "?" in req_url else "?"
            return self.do_request(ctx, method, req_url + encoded, merged)
        return self.do_request_with(ctx, method, req_url, merged, encoded, len(encoded))

    def do_request_with_json(
        self,
        ctx: RequestContext | None,
        method: str,
        req_url: str,
        headers: Headers | None,
        data: Any,
    ) -> requests.Response:
        body = json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode()
        merged = _with_header(headers, "Content-Type", CONTENT_TYPE_JSON)
        return self.do_request_with(ctx, method, req_url, merged, body, len(body))

    def call(
        self, ctx: RequestContext | None, method: str, req_url: str, headers: Headers | None
    ) -> Any:
        return call_ret(self.do_request_with(ctx, method, req_url, headers, None, 0))

    def call_with(
        self,
        ctx: RequestContext | None,
        method: str,
        req_url: str,
        headers: Headers | None,
        body: Body,
        body_length: int,
    ) -> Any:
        return call_ret(self.do_request_with(ctx, method, req_url, headers, body, body_length))

    def call_with_form(
        self,
        ctx: RequestContext | None,
        method: str,
        req_url: str,
        headers: Headers | None,
        param: FormData,
    ) -> Any:
        return call_ret(self.do_request_with_form(ctx, method, req_url, headers, param))

    def call_with_json(
        self,
        ctx: RequestContext | None,
        method: str,
        req_url: str,
        headers: Headers | None,
        param: Any,
    ) -> Any:
        return call_ret(self.do_request_with_json(ctx, method, req_url, headers, param))

    def credentialed_call(
        self,
        ctx: RequestContext | None,
        cred: Credentials,
        token_type: TokenType,
        method: str,
        req_url: str,
        headers: Headers | None,
    ) -> Any:
        ctx = with_credentials_type(ctx, cred, token_type)
        return self.call(ctx, method, req_url, headers)

    def credentialed_call_with(
        self,
        ctx: RequestContext | None,
        cred: Credentials,
        token_type: TokenType,
        method: str,
        req_url: str,
        headers: Headers | None,
        body: Body,
        body_length: int,
    ) -> Any:
        ctx = with_credentials_type(ctx, cred, token_type)
        return self.call_with(ctx, method, req_url, headers, body, body_length)

    def credentialed_call_with_form(
        self,
        ctx: RequestContext | None,
        cred: Credentials,
        token_type: TokenType,
        method: str,
        req_url: str,
        headers: Headers | None,
        param: FormData,
    ) -> Any:
        ctx = with_credentials_type(ctx, cred, token_type)
        return self.call_with_form(ctx, method, req_url, headers, param)

    def credentialed_call_with_json(
        self,
        ctx: RequestContext | None,
        cred: Credentials,
        token_type: TokenType,
        method: str,
        req_url: str,
        headers: Headers | None,
        param: Any,
    ) -> Any:
        ctx = with_credentials_type(ctx, cred, token_type)
        return self.call_with_json(ctx, method, req_url, headers, param)