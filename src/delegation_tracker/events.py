"""Orchestration events consumed by the delegation tracker."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Union


class EventDecodeError(ValueError):
    """Raised when a serialized event cannot be turned into a tracker event."""


@dataclass(slots=True)
class TextEvent:
    """Plain assistant text to pass through to the output."""

    text: str


@dataclass(slots=True)
class DispatchEvent:
    """A delegated task (or plain tool call) has started."""

    correlation_id: str
    label: str | None
    context: str | None = None
    subagent: bool = True


@dataclass(slots=True)
class ProgressEvent:
    """Intermediate output tied to a delegated task."""

    correlation_id: str | None
    delta: Any


@dataclass(slots=True)
class CompletionEvent:
    """Final result for a delegated task."""

    correlation_id: str | None
    result: Any


@dataclass(slots=True)
class RunCompleteEvent:
    """Run summary emitted once the runtime has finished."""

    duration_ms: float
    total_cost_usd: float | None


TrackerEvent = Union[TextEvent, DispatchEvent, ProgressEvent, CompletionEvent, RunCompleteEvent]

_EVENT_TAGS: dict[type, str] = {
    TextEvent: "text",
    DispatchEvent: "dispatch",
    ProgressEvent: "progress",
    CompletionEvent: "complete",
    RunCompleteEvent: "run_complete",
}


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise EventDecodeError(f"Field '{key}' must be a string")
    return value


def _number(data: Mapping[str, Any], key: str, *, required: bool = True) -> float | None:
    value = data.get(key)
    if value is None:
        if required:
            raise EventDecodeError(f"Field '{key}' is required")
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise EventDecodeError(f"Field '{key}' must be a number")
    return value


def event_from_dict(data: Mapping[str, Any]) -> TrackerEvent:
    """Build a tracker event from a JSON-style mapping tagged with ``type``."""

    if not isinstance(data, Mapping):
        raise EventDecodeError("Event must be a JSON object")

    kind = data.get("type")
    if kind == "text":
        return TextEvent(text=_optional_str(data, "text") or "")
    if kind == "dispatch":
        correlation_id = _optional_str(data, "correlation_id")
        if not correlation_id:
            raise EventDecodeError("Dispatch events require a correlation_id")
        return DispatchEvent(
            correlation_id=correlation_id,
            label=_optional_str(data, "label"),
            context=_optional_str(data, "context"),
            subagent=bool(data.get("subagent", True)),
        )
    if kind == "progress":
        return ProgressEvent(
            correlation_id=_optional_str(data, "correlation_id"),
            delta=data.get("delta"),
        )
    if kind == "complete":
        return CompletionEvent(
            correlation_id=_optional_str(data, "correlation_id"),
            result=data.get("result"),
        )
    if kind == "run_complete":
        return RunCompleteEvent(
            duration_ms=_number(data, "duration_ms"),
            total_cost_usd=_number(data, "total_cost_usd", required=False),
        )
    raise EventDecodeError(f"Unknown event type {kind!r}")


def event_to_dict(event: TrackerEvent) -> dict[str, Any]:
    """Serialize a tracker event into a JSON-friendly mapping."""

    try:
        tag = _EVENT_TAGS[type(event)]
    except KeyError as exc:
        raise TypeError(f"Unsupported event type {type(event).__name__}") from exc
    payload: dict[str, Any] = {"type": tag}
    for field in fields(event):
        payload[field.name] = getattr(event, field.name)
    return payload


__all__ = [
    "CompletionEvent",
    "DispatchEvent",
    "EventDecodeError",
    "ProgressEvent",
    "RunCompleteEvent",
    "TextEvent",
    "TrackerEvent",
    "event_from_dict",
    "event_to_dict",
]
