"""Destinations for tracker status lines."""

from __future__ import annotations

import logging
import sys
from typing import Callable, TextIO

StatusSink = Callable[[str], None]


class ConsoleSink:
    """Write each status line to a text stream followed by a blank line."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def __call__(self, line: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(f"{line}\n\n")
        stream.flush()


class LoggingSink:
    """Forward status lines to a logger."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self._logger = logger or logging.getLogger("delegation_tracker.status")
        self._level = level

    def __call__(self, line: str) -> None:
        self._logger.log(self._level, line)


__all__ = ["ConsoleSink", "LoggingSink", "StatusSink"]
