"""Client for the linking (video IoT) management API."""

from __future__ import annotations

import base64
import json
import time
from typing import Any
from urllib.parse import urlencode

import requests

from qnsdk.auth.context import with_credentials_type
from qnsdk.auth.credentials import Credentials, TokenType
from qnsdk.client import Client
from qnsdk.linking.models import (
    Device,
    DeviceAccessToken,
    DeviceHistoryItem,
    LiveRequest,
    LiveResponse,
    PatchOperation,
    RpcRequest,
    RpcResponse,
    SaveasReply,
    Segment,
    Statement,
    StatReq,
)

API_HOST = "linking.qiniuapi.com/v1"
API_HTTP_SCHEME = "http://"
STAT_URL = "http://linking.qiniuapi.com/statd/device"


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _encode_query(params: dict[str, Any]) -> str:
    return urlencode(sorted((key, _query_value(value)) for key, value in params.items()))


def _encode_device(device: str) -> str:
    return base64.urlsafe_b64encode(device.encode()).decode()


class Manager:
    """A linking user's client; every request is signed with a Qiniu token."""

    def __init__(self, mac: Credentials, session: requests.Session | None = None) -> None:
        self.mac = mac
        self._client = Client(session)
        self._ctx = with_credentials_type(None, mac, TokenType.QINIU)

    @staticmethod
    def _url(path: str) -> str:
        return API_HTTP_SCHEME + API_HOST + path

    def _call(self, method: str, url: str) -> Any:
        return self._client.call(self._ctx, method, url, None)

    def _call_json(self, method: str, url: str, body: Any) -> Any:
        return self._client.call_with_json(self._ctx, method, url, None, body)

    def add_device(self, appid: str, dev: Device) -> Device:
        """Register a new device under an application."""
        ret = self._call_json("POST", self._url(f"/apps/{appid}/devices"), dev.to_dict())
        return Device.from_dict(ret)

    def query_device(self, appid: str, device: str) -> Device:
        url = self._url(f"/apps/{appid}/devices/{_encode_device(device)}")
        return Device.from_dict(self._call("GET", url))

    def update_device(self, appid: str, device: str, ops: list[PatchOperation]) -> Device:
        url = self._url(f"/apps/{appid}/devices/{_encode_device(device)}")
        body = {"operations": [op.to_dict() for op in ops]}
        return Device.from_dict(self._call_json("PATCH", url, body))

    def list_device(
        self,
        appid: str,
        prefix: str,
        marker: str,
        limit: int,
        online: bool,
        status: bool,
        device_type: int,
        batch: str,
    ) -> tuple[list[Device], str]:
        """Devices of an application and the marker of the next page."""
        query: dict[str, Any] = {"online": online, "status": status, "type": device_type}
        if limit > 0:
            query["limit"] = limit
        if prefix:
            query["prefix"] = prefix
        if marker:
            query["marker"] = marker
        if batch:
            query["batch"] = batch
        ret = self._call("GET", self._url(f"/apps/{appid}/devices?{_encode_query(query)}")) or {}
        items = [Device.from_dict(item) for item in (ret.get("items") or [])]
        return items, ret.get("marker") or ""

    def delete_device(self, appid: str, device: str) -> None:
        """Delete a device; this cannot be undone."""
        self._call("DELETE", self._url(f"/apps/{appid}/devices/{_encode_device(device)}"))

    def list_device_history_activity(
        self, appid: str, dev: str, start: int, end: int, marker: str, limit: int
    ) -> tuple[list[DeviceHistoryItem], str]:
        """Online sessions of a device within a time range."""
        query: dict[str, Any] = {"start": start, "end": end}
        if limit > 0:
            query["limit"] = limit
        if marker:
            query["marker"] = marker
        path = f"/apps/{appid}/devices/{_encode_device(dev)}/historyactivity?{_encode_query(query)}"
        ret = self._call("GET", self._url(path)) or {}
        items = [DeviceHistoryItem.from_dict(item) for item in (ret.get("items") or [])]
        return items, ret.get("marker") or ""

    def _device_token(self, policy: DeviceAccessToken) -> str:
        payload = json.dumps(policy.to_dict(), separators=(",", ":"), ensure_ascii=False)
        return self.mac.sign_with_data(payload.encode())

    def token(self, appid: str, device: str, deadline: int, actions: list[Statement]) -> str:
        """A device access token granting the given actions until ``deadline``."""
        policy = DeviceAccessToken(
            appid=appid,
            device=device,
            deadline=deadline,
            random=time.time_ns(),
            statement=list(actions),
        )
        return self._device_token(policy)

    def vod_token(self, appid: str, device: str, deadline: int) -> str:
        """Token for playback, thumbnails, time-shifted live and segment queries."""
        return self.token(appid, device, deadline, [Statement(action="linking:vod")])

    def status_token(self, appid: str, device: str, deadline: int) -> str:
        """Token for online-history and device queries."""
        return self.token(appid, device, deadline, [Statement(action="linking:status")])

    def segments(
        self, appid: str, device: str, start: int, end: int, marker: str, limit: int
    ) -> tuple[list[Segment], str]:
        """Recorded video segments of a device."""
        query: dict[str, Any] = {}
        if limit > 0:
            query["limit"] = limit
        if marker:
            query["marker"] = marker
        if start > 0:
            query["start"] = start
        if end > 0:
            query["end"] = end
        path = f"/apps/{appid}/devices/{_encode_device(device)}/vod/segments?{_encode_query(query)}"
        ret = self._call("GET", self._url(path)) or {}
        items = [Segment.from_dict(item) for item in (ret.get("items") or [])]
        return items, ret.get("marker") or ""

    def rpc(self, appid: str, device: str, req: RpcRequest) -> RpcResponse:
        url = self._url(f"/apps/{appid}/devices/{_encode_device(device)}/rpc")
        return RpcResponse.from_dict(self._call_json("POST", url, req.to_dict()))

    def saveas(
        self, appid: str, device: str, start: int, end: int, fname: str, fmt: str
    ) -> SaveasReply:
        """Save a range of recorded video to cloud storage."""
        body: dict[str, Any] = {"start": start, "end": end}
        if fname:
            body["fname"] = fname
        if fmt:
            body["format"] = fmt
        url = self._url(f"/apps/{appid}/devices/{_encode_device(device)}/vod/saveas")
        return SaveasReply.from_dict(self._call_json("POST", url, body))

    def start_live(self, req: LiveRequest) -> LiveResponse:
        return LiveResponse.from_dict(self._call_json("POST", self._url("/startlive"), req.to_dict()))

    def stat(self, req: StatReq) -> list[dict[str, Any]]:
        """Statistics of active devices."""
        query = {"start": req.start, "end": req.end, "g": req.group, "select": req.select}
        ret = self._call("GET", f"{STAT_URL}?{_encode_query(query)}")
        return list(ret or [])