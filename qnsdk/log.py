"""Small leveled logger used by the SDK for its own debug output."""

from __future__ import annotations

import enum
import sys
import threading
import time
from typing import Any, TextIO

INFO_PREFIX = "[I] "
DEBUG_PREFIX = "[D] "
WARN_PREFIX = "[W] "


class LogLevel(enum.IntEnum):
    DEBUG = 0
    INFO = 1
    WARN = 2


class Logger:
    """Writes timestamped, prefixed lines at or above a minimum level."""

    def __init__(self, out: TextIO | None, prefix: str, level: LogLevel) -> None:
        self._out = out
        self.prefix = prefix
        self.level = LogLevel(level)
        self._lock = threading.Lock()

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def _output(self, level: LogLevel, args: tuple[Any, ...]) -> None:
        if self.level > level:
            return
        stamp = time.strftime("%Y/%m/%d %H:%M:%S")
        message = " ".join(str(arg) for arg in args)
        line = f"{self.prefix}{stamp} {message}\n"
        with self._lock:
            self.out.write(line)

    def debug(self, *args: Any) -> None:
        self._output(LogLevel.DEBUG, args)

    def info(self, *args: Any) -> None:
        self._output(LogLevel.INFO, args)

    def warn(self, *args: Any) -> None:
        self._output(LogLevel.WARN, args)


_std = Logger(None, DEBUG_PREFIX, LogLevel.DEBUG)
_info = Logger(None, INFO_PREFIX, LogLevel.INFO)
_warn = Logger(None, WARN_PREFIX, LogLevel.WARN)


def debug(*args: Any) -> None:
    _std.debug(*args)


def info(*args: Any) -> None:
    _info.info(*args)


def warn(*args: Any) -> None:
    _warn.warn(*args)