"""Repeating progress timers scheduled on the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Timer(Protocol):
    """Handle for a scheduled repeating callback."""

    @property
    def cancelled(self) -> bool:
        ...

    def cancel(self) -> None:
        ...


class TimerFactory(Protocol):
    """Starts repeating timers for the tracker."""

    def start(self, interval: float, callback: Callable[[], None]) -> Timer:
        ...


class RepeatingTimer:
    """Invoke ``callback`` every ``interval`` seconds until cancelled.

    Each tick re-arms itself with ``loop.call_later`` after the callback runs,
    so at most one handle is pending at any time.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], None],
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("Timer interval must be greater than zero")
        self._interval = interval
        self._callback = callback
        self._loop = loop or asyncio.get_running_loop()
        self._cancelled = False
        self._ticks = 0
        self._handle: asyncio.TimerHandle | None = self._loop.call_later(interval, self._tick)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def ticks(self) -> int:
        return self._ticks

    def _tick(self) -> None:
        self._handle = None
        if self._cancelled:
            return
        self._ticks += 1
        try:
            self._callback()
        finally:
            if not self._cancelled:
                self._handle = self._loop.call_later(self._interval, self._tick)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class IdleTimer:
    """Timer stand-in used when no event loop is available to schedule ticks."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class LoopTimerFactory:
    """Create :class:`RepeatingTimer` instances on the running event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def start(self, interval: float, callback: Callable[[], None]) -> Timer:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug("No running event loop; progress ticks disabled")
                return IdleTimer()
        return RepeatingTimer(interval, callback, loop=loop)


__all__ = ["IdleTimer", "LoopTimerFactory", "RepeatingTimer", "Timer", "TimerFactory"]
