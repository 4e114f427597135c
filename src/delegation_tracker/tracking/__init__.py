"""Delegated task tracking: registry, timers, text folding and sinks."""

from .sinks import ConsoleSink, LoggingSink, StatusSink
from .text import extract_text
from .timers import IdleTimer, LoopTimerFactory, RepeatingTimer, Timer, TimerFactory
from .tracker import FALLBACK_LABEL, DelegatedTask, DelegationTracker, RunStatistics

__all__ = [
    "ConsoleSink",
    "DelegatedTask",
    "DelegationTracker",
    "FALLBACK_LABEL",
    "IdleTimer",
    "LoggingSink",
    "LoopTimerFactory",
    "RepeatingTimer",
    "RunStatistics",
    "StatusSink",
    "Timer",
    "TimerFactory",
    "extract_text",
]
