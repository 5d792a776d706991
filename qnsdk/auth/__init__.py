"""Credentials, request signing and credential contexts."""

__all__ = ["context", "credentials", "qbox"]