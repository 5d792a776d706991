"""Signing, HTTP client, CDN, device-linking and logging helpers for an object storage service."""

__version__ = "7.9.8"

__all__ = ["auth", "cdn", "client", "conf", "errors", "linking", "log"]