"""Registry of in-flight delegated tasks and their status output."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from ..events import (
    CompletionEvent,
    DispatchEvent,
    ProgressEvent,
    RunCompleteEvent,
    TextEvent,
    TrackerEvent,
)
from .sinks import ConsoleSink, StatusSink
from .text import extract_text
from .timers import LoopTimerFactory, Timer, TimerFactory

logger = logging.getLogger(__name__)

FALLBACK_LABEL = "subagent"
DEFAULT_INTERVAL = 5.0
DEFAULT_CONTEXT_PREVIEW = 90


@dataclass(slots=True)
class DelegatedTask:
    """One outstanding unit of work handed to a subagent."""

    correlation_id: str
    label: str
    started_at: float
    timer: Timer
    subagent: bool = True

    @property
    def noun(self) -> str:
        return f"{self.label} subagent" if self.subagent else self.label


@dataclass(slots=True)
class RunStatistics:
    """Aggregate figures reported when the runtime finishes a run."""

    duration_ms: float
    total_cost_usd: float

    @property
    def duration_seconds(self) -> float:
        return self.duration_ms / 1000

    def render(self) -> str:
        duration = self.duration_ms
        if float(duration).is_integer():
            duration_text = str(int(duration))
        else:
            duration_text = f"{duration:.1f}"
        return f"Total duration: {duration_text}ms | Total cost: ${self.total_cost_usd:.4f}"


def _preview(context: str | None, limit: int) -> str:
    if not context:
        return ""
    text = " ".join(context.split())
    if len(text) > limit:
        return f"{text[:limit]}…"
    return text


class DelegationTracker:
    """Correlate dispatch, progress and result events for delegated tasks.

    Every public method is synchronous and tolerant of malformed or out-of-order
    events: unknown correlation ids fall back to a generic label and never touch
    the registry. Each registered task owns a repeating progress timer that is
    cancelled when the task completes, when the run completes, or when the
    tracker is reset or closed.
    """

    def __init__(
        self,
        sink: StatusSink | None = None,
        *,
        interval: float = DEFAULT_INTERVAL,
        timer_factory: TimerFactory | None = None,
        clock: Callable[[], float] = time.monotonic,
        context_preview_chars: int = DEFAULT_CONTEXT_PREVIEW,
    ) -> None:
        if interval <= 0:
            raise ValueError("Progress interval must be greater than zero")
        self._sink: StatusSink = sink or ConsoleSink()
        self._interval = interval
        self._timer_factory: TimerFactory = timer_factory or LoopTimerFactory()
        self._clock = clock
        self._context_preview_chars = context_preview_chars
        self._tasks: dict[str, DelegatedTask] = {}
        self.last_statistics: RunStatistics | None = None

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, correlation_id: object) -> bool:
        return correlation_id in self._tasks

    def __enter__(self) -> "DelegationTracker":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def interval(self) -> float:
        return self._interval

    def active_tasks(self) -> tuple[DelegatedTask, ...]:
        """Return a snapshot of the tasks that are still outstanding."""

        return tuple(self._tasks.values())

    def label_for(self, correlation_id: str | None) -> str:
        if correlation_id is None:
            return FALLBACK_LABEL
        task = self._tasks.get(correlation_id)
        return task.label if task is not None else FALLBACK_LABEL

    def _elapsed(self, task: DelegatedTask) -> int:
        return max(0, round(self._clock() - task.started_at))

    def _emit(self, line: str, **extra: Any) -> None:
        logger.debug("Status line", extra={"line": line, **extra})
        self._sink(line)

    def handle(self, event: TrackerEvent) -> None:
        """Route a tracker event to the matching ``on_*`` method."""

        if isinstance(event, DispatchEvent):
            self.on_dispatch(
                event.correlation_id,
                event.label,
                event.context,
                subagent=event.subagent,
            )
        elif isinstance(event, ProgressEvent):
            self.on_progress(event.correlation_id, event.delta)
        elif isinstance(event, CompletionEvent):
            self.on_complete(event.correlation_id, event.result)
        elif isinstance(event, RunCompleteEvent):
            self.on_run_complete(event.duration_ms, event.total_cost_usd)
        elif isinstance(event, TextEvent):
            if isinstance(event.text, str) and event.text.strip():
                self._emit(event.text)
        else:
            logger.debug("Ignoring unsupported event", extra={"event_type": type(event).__name__})

    def on_dispatch(
        self,
        correlation_id: str,
        label: str | None,
        context: str | None = None,
        *,
        subagent: bool = True,
    ) -> None:
        resolved = (label.strip() if isinstance(label, str) else "") or FALLBACK_LABEL

        stale = self._tasks.pop(correlation_id, None)
        if stale is not None:
            stale.timer.cancel()

        started_at = self._clock()
        if subagent:
            preview = _preview(context, self._context_preview_chars)
            suffix = f": {preview}" if preview else ""
            self._emit(
                f"Delegating to {resolved} subagent{suffix}",
                correlation_id=correlation_id,
                label=resolved,
            )
        else:
            self._emit(f"Using tool: {resolved}", correlation_id=correlation_id, label=resolved)

        owner: list[DelegatedTask] = []

        def _tick() -> None:
            if not owner or self._tasks.get(correlation_id) is not owner[0]:
                return
            task = owner[0]
            self._emit(
                f"{task.noun} still working ({self._elapsed(task)}s elapsed)...",
                correlation_id=correlation_id,
                label=task.label,
            )

        task = DelegatedTask(
            correlation_id=correlation_id,
            label=resolved,
            started_at=started_at,
            timer=self._timer_factory.start(self._interval, _tick),
            subagent=subagent,
        )
        owner.append(task)
        self._tasks[correlation_id] = task

    def on_progress(self, correlation_id: str | None, delta: Any) -> None:
        label = self.label_for(correlation_id)
        if correlation_id is not None and correlation_id not in self._tasks:
            logger.debug("Progress for untracked task", extra={"correlation_id": correlation_id})
        text = extract_text(delta)
        if not text:
            return
        self._emit(f"{label} update: {text}", correlation_id=correlation_id, label=label)

    def on_complete(self, correlation_id: str | None, result: Any) -> None:
        text = extract_text(result)
        task = self._tasks.pop(correlation_id, None) if correlation_id is not None else None

        if task is None:
            if correlation_id is not None:
                logger.debug("Result for untracked task", extra={"correlation_id": correlation_id})
            if text:
                self._emit(
                    f"{FALLBACK_LABEL} result: {text}",
                    correlation_id=correlation_id,
                    label=FALLBACK_LABEL,
                )
            return

        task.timer.cancel()
        suffix = f": {text}" if text else "."
        self._emit(
            f"{task.noun} returned after {self._elapsed(task)}s{suffix}",
            correlation_id=task.correlation_id,
            label=task.label,
        )

    def on_run_complete(self, duration_ms: float, total_cost_usd: float | None) -> None:
        statistics = RunStatistics(
            duration_ms=duration_ms,
            total_cost_usd=total_cost_usd if total_cost_usd is not None else 0.0,
        )
        self.last_statistics = statistics
        self._emit(
            statistics.render(),
            duration_ms=statistics.duration_ms,
            total_cost_usd=statistics.total_cost_usd,
        )
        leftover = self._release_all()
        if leftover:
            logger.debug("Released tasks without results", extra={"count": leftover})

    def _release_all(self) -> int:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.timer.cancel()
        return len(tasks)

    def reset(self) -> None:
        """Cancel every outstanding timer and forget all state."""

        self._release_all()
        self.last_statistics = None

    def close(self) -> None:
        """Release outstanding timers; safe to call more than once."""

        self._release_all()


__all__ = [
    "DEFAULT_CONTEXT_PREVIEW",
    "DEFAULT_INTERVAL",
    "DelegatedTask",
    "DelegationTracker",
    "FALLBACK_LABEL",
    "RunStatistics",
]
