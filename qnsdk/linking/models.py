"""Data types exchanged with the linking (video IoT) API."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any


def _omit_empty(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    return {key: value for key, value in pairs if value}


@dataclass
class PatchOperation:
    """One change to a device: ``op`` is ``replace`` or ``delete``."""

    op: str
    key: str
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op, "key": self.key, "value": self.value}


@dataclass
class Channel:
    channelid: int = 0
    comment: str = ""


@dataclass
class Device:
    """A device registered under an application.

    ``segment_expire_days``: 0 no recording, -1 forever, -2 inherit from app.
    ``upload_mode``: -1 inherit, 0 device decides, 1 always upload, 2 never.
    ``type``: 0 normal device, 1 gateway (up to ``max_channel`` channels).
    """

    device: str = ""
    login_at: int = 0
    remote_ip: str = ""
    segment_expire_days: int = 0
    upload_mode: int = 0
    state: int = 0
    actived_at: int = 0
    created_at: int = 0
    updated_at: int = 0
    license_mode: int = 0
    meta: bytes = b""
    type: int = 0
    max_channel: int = 0
    channels: list[Channel] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"device": self.device}
        out.update(
            _omit_empty(
                [
                    ("loginAt", self.login_at),
                    ("remoteIp", self.remote_ip),
                    ("segmentExpireDays", self.segment_expire_days),
                    ("uploadMode", self.upload_mode),
                    ("state", self.state),
                    ("activedAt", self.actived_at),
                    ("createdAt", self.created_at),
                    ("updatedAt", self.updated_at),
                    ("licenseMode", self.license_mode),
                ]
            )
        )
        if self.meta:
            out["meta"] = base64.b64encode(self.meta).decode()
        out["type"] = self.type
        if self.max_channel:
            out["maxChannel"] = self.max_channel
        if self.channels:
            out["channels"] = [
                {"channelid": ch.channelid, "comment": ch.comment} for ch in self.channels
            ]
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Device:
        data = data or {}
        return cls(
            device=data.get("device") or "",
            login_at=data.get("loginAt") or 0,
            remote_ip=data.get("remoteIp") or "",
            segment_expire_days=data.get("segmentExpireDays") or 0,
            upload_mode=data.get("uploadMode") or 0,
            state=data.get("state") or 0,
            actived_at=data.get("activedAt") or 0,
            created_at=data.get("createdAt") or 0,
            updated_at=data.get("updatedAt") or 0,
            license_mode=data.get("licenseMode") or 0,
            meta=base64.b64decode(data.get("meta") or ""),
            type=data.get("type") or 0,
            max_channel=data.get("maxChannel") or 0,
            channels=[
                Channel(channelid=ch.get("channelid") or 0, comment=ch.get("comment") or "")
                for ch in (data.get("channels") or [])
            ],
        )


@dataclass
class DeviceHistoryItem:
    """One online session of a device."""

    login_at: int = 0
    logout_at: int = 0
    remote_ip: str = ""
    logout_reason: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> DeviceHistoryItem:
        data = data or {}
        return cls(
            login_at=data.get("loginAt") or 0,
            logout_at=data.get("logoutAt") or 0,
            remote_ip=data.get("remoteIp") or "",
            logout_reason=data.get("logoutReason") or "",
        )


@dataclass
class Statement:
    action: str


@dataclass
class DeviceAccessToken:
    """The policy signed into a device access token."""

    appid: str
    device: str
    deadline: int
    random: int
    statement: list[Statement] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "appid": self.appid,
            "device": self.device,
            "deadline": self.deadline,
            "random": self.random,
            "statement": [{"action": st.action} for st in self.statement],
        }


@dataclass
class Segment:
    """A recorded video segment; ``from_`` and ``to`` are timestamps."""

    from_: int = 0
    to: int = 0
    frame: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Segment:
        data = data or {}
        return cls(
            from_=data.get("from") or 0, to=data.get("to") or 0, frame=data.get("frame") or ""
        )


@dataclass
class RpcRequest:
    """A remote call delivered to a device; ``params`` is any JSON value."""

    action: int
    params: Any = None
    timeout: int = 0
    response: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"action": self.action}
        if self.params is not None:
            out["params"] = self.params
        if self.timeout:
            out["timeout"] = self.timeout
        if self.response:
            out["response"] = True
        return out


@dataclass
class DevResponse:
    error_code: int = 0
    error: str = ""
    value: Any = None


@dataclass
class RpcResponse:
    id: str = ""
    resp: DevResponse = field(default_factory=DevResponse)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> RpcResponse:
        data = data or {}
        resp = data.get("response") or {}
        return cls(
            id=data.get("id") or "",
            resp=DevResponse(
                error_code=resp.get("errorCode") or 0,
                error=resp.get("error") or "",
                value=resp.get("value"),
            ),
        )


@dataclass
class SaveasReply:
    """Result of saving a video range; ``duration`` is in milliseconds."""

    fname: str = ""
    persistent_id: str = ""
    duration: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> SaveasReply:
        data = data or {}
        return cls(
            fname=data.get("fname") or "",
            persistent_id=data.get("persistentId") or "",
            duration=data.get("duration") or 0,
        )


@dataclass
class LiveRequest:
    appid: str
    device_name: str
    publish_ip: str = ""
    play_ip: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "appid": self.appid,
            "deviceName": self.device_name,
            "publishIP": self.publish_ip,
            "playIP": self.play_ip,
        }


@dataclass
class PlayUrls:
    rtmp: str = ""
    hls: str = ""
    flv: str = ""


@dataclass
class LiveResponse:
    publish_url: str = ""
    play_urls: PlayUrls = field(default_factory=PlayUrls)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> LiveResponse:
        data = data or {}
        urls = data.get("playUrls") or {}
        return cls(
            publish_url=data.get("publishUrl") or "",
            play_urls=PlayUrls(
                rtmp=urls.get("rtmp") or "", hls=urls.get("hls") or "", flv=urls.get("flv") or ""
            ),
        )


@dataclass
class StatReq:
    """Query for active-device statistics; ``group`` is the granularity."""

    start: int = 0
    end: int = 0
    group: str = ""
    select: str = ""