"""Error type shared across the SDK."""

from __future__ import annotations


class QError(Exception):
    """An SDK error carrying a machine-readable code and a message."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(code, message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


def new_error(code: str, message: str) -> QError:
    """Build a :class:`QError` from a code and a message."""
    return QError(code, message)