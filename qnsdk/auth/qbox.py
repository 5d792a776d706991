"""Function-style helpers around :class:`Credentials`."""

from __future__ import annotations

from qnsdk.auth.credentials import Credentials, Request

Mac = Credentials


def new_mac(access_key: str, secret_key: str | bytes) -> Mac:
    return Credentials(access_key, secret_key)


def sign(mac: Mac, data: bytes | str) -> str:
    """Sign data, typically for download tokens."""
    return mac.sign(data)


def sign_with_data(mac: Mac, data: bytes | str) -> str:
    """Sign and embed data, typically for upload tokens."""
    return mac.sign_with_data(data)


def verify_callback(mac: Mac, req: Request) -> bool:
    """Whether an upload callback request was signed with this key pair."""
    return mac.verify_callback(req)