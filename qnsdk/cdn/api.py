"""Fusion CDN management: refresh, prefetch, traffic statistics and logs."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import requests

from qnsdk.auth.credentials import Credentials, Request
from qnsdk.conf import CONTENT_TYPE_JSON

FUSION_HOST = "http://fusion.qiniuapi.com"

_MAX_URLS = 100
_MAX_DIRS = 10


@dataclass
class TrafficData:
    china: list[int] = field(default_factory=list)
    oversea: list[int] = field(default_factory=list)

    @classmethod
    def _from_json(cls, data: dict[str, Any]) -> TrafficData:
        return cls(china=list(data.get("china") or []), oversea=list(data.get("oversea") or []))


@dataclass
class TrafficResp:
    code: int = 0
    error: str = ""
    time: list[str] = field(default_factory=list)
    data: dict[str, TrafficData] = field(default_factory=dict)

    @classmethod
    def _from_json(cls, data: dict[str, Any]) -> TrafficResp:
        return cls(
            code=data.get("code") or 0,
            error=data.get("error") or "",
            time=list(data.get("time") or []),
            data={k: TrafficData._from_json(v or {}) for k, v in (data.get("data") or {}).items()},
        )


@dataclass
class RefreshResp:
    code: int = 0
    error: str = ""
    request_id: str = ""
    invalid_urls: list[str] = field(default_factory=list)
    invalid_dirs: list[str] = field(default_factory=list)
    url_quota_day: int = 0
    url_surplus_day: int = 0
    dir_quota_day: int = 0
    dir_surplus_day: int = 0

    @classmethod
    def _from_json(cls, data: dict[str, Any]) -> RefreshResp:
        return cls(
            code=data.get("code") or 0,
            error=data.get("error") or "",
            request_id=data.get("requestId") or "",
            invalid_urls=list(data.get("invalidUrls") or []),
            invalid_dirs=list(data.get("invalidDirs") or []),
            url_quota_day=data.get("urlQuotaDay") or 0,
            url_surplus_day=data.get("urlSurplusDay") or 0,
            dir_quota_day=data.get("dirQuotaDay") or 0,
            dir_surplus_day=data.get("dirSurplusDay") or 0,
        )


@dataclass
class PrefetchResp:
    code: int = 0
    error: str = ""
    request_id: str = ""
    invalid_urls: list[str] = field(default_factory=list)
    quota_day: int = 0
    surplus_day: int = 0

    @classmethod
    def _from_json(cls, data: dict[str, Any]) -> PrefetchResp:
        return cls(
            code=data.get("code") or 0,
            error=data.get("error") or "",
            request_id=data.get("requestId") or "",
            invalid_urls=list(data.get("invalidUrls") or []),
            quota_day=data.get("quotaDay") or 0,
            surplus_day=data.get("surplusDay") or 0,
        )


@dataclass
class LogDomainInfo:
    name: str = ""
    size: int = 0
    modified_time: int = 0
    url: str = ""

    @classmethod
    def _from_json(cls, data: dict[str, Any]) -> LogDomainInfo:
        return cls(
            name=data.get("name") or "",
            size=data.get("size") or 0,
            modified_time=data.get("mtime") or 0,
            url=data.get("url") or "",
        )


@dataclass
class ListLogResult:
    code: int = 0
    error: str = ""
    data: dict[str, list[LogDomainInfo]] = field(default_factory=dict)

    @classmethod
    def _from_json(cls, data: dict[str, Any]) -> ListLogResult:
        return cls(
            code=data.get("code") or 0,
            error=data.get("error") or "",
            data={
                domain: [LogDomainInfo._from_json(item) for item in (items or [])]
                for domain, items in (data.get("data") or {}).items()
            },
        )


def _decode_object(raw: bytes) -> dict[str, Any]:
    value = json.loads(raw)
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return value


class CdnManager:
    """Refreshes and prefetches CDN content and queries traffic and logs."""

    def __init__(self, mac: Credentials, host: str | None = None) -> None:
        self.mac = mac
        self.host = host
        self._session = requests.Session()

    def _post(self, path: str, body: dict[str, Any]) -> bytes:
        url = f"{self.host or FUSION_HOST}{path}"
        payload = json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode()
        signature = self.mac.sign_request(Request(method="POST", url=url, body=payload))
        headers = {"Authorization": "QBox " + signature, "Content-Type": CONTENT_TYPE_JSON}
        with self._session.post(url, data=payload, headers=headers) as resp:
            return resp.content

    def _traffic(self, path: str, start_date: str, end_date: str, granularity: str,
                 domain_list: list[str]) -> TrafficResp:
        body = {
            "startDate": start_date,
            "endDate": end_date,
            "granularity": granularity,
            "domains": ";".join(domain_list),
        }
        return TrafficResp._from_json(_decode_object(self._post(path, body)))

    def get_bandwidth_data(self, start_date: str, end_date: str, granularity: str,
                           domain_list: list[str]) -> TrafficResp:
        """Bandwidth per domain; granularity is 5min, hour or day."""
        return self._traffic("/v2/tune/bandwidth", start_date, end_date, granularity, domain_list)

    def get_flux_data(self, start_date: str, end_date: str, granularity: str,
                      domain_list: list[str]) -> TrafficResp:
        """Traffic volume per domain; granularity is 5min, hour or day."""
        return self._traffic("/v2/tune/flux", start_date, end_date, granularity, domain_list)

    def refresh_urls_and_dirs(self, urls: list[str] | None, dirs: list[str] | None) -> RefreshResp:
        """Refresh up to 100 URLs and 10 directories."""
        if urls is not None and len(urls) > _MAX_URLS:
            raise ValueError("urls count exceeds the limit of 100")
        if dirs is not None and len(dirs) > _MAX_DIRS:
            raise ValueError("dirs count exceeds the limit of 10")
        raw = self._post("/v2/tune/refresh", {"urls": urls, "dirs": dirs})
        return RefreshResp._from_json(_decode_object(raw))

    def refresh_urls(self, urls: list[str]) -> RefreshResp:
        return self.refresh_urls_and_dirs(urls, None)

    def refresh_dirs(self, dirs: list[str]) -> RefreshResp:
        return self.refresh_urls_and_dirs(None, dirs)

    def prefetch_urls(self, urls: list[str]) -> PrefetchResp:
        """Prefetch up to 100 URLs."""
        if len(urls) > _MAX_URLS:
            raise ValueError("urls count exceeds the limit of 100")
        raw = self._post("/v2/tune/prefetch", {"urls": urls})
        return PrefetchResp._from_json(_decode_object(raw))

    def get_cdn_log_list(self, day: str, domains: list[str]) -> ListLogResult:
        """Download links of the access logs of the given domains for a day."""
        body = {"day": day, "domains": ";".join(domains)}
        try:
            raw = self._post("/v2/tune/log/list", body)
        except requests.RequestException as exc:
            raise RuntimeError(f"get response error, {exc}") from exc
        try:
            result = ListLogResult._from_json(_decode_object(raw))
        except ValueError as exc:
            raise RuntimeError(f"get response error, {exc}") from exc
        if result.error:
            raise RuntimeError(f"get log list error, {result.code} {result.error}")
        return result