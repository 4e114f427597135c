"""Translate Claude Agent SDK messages into tracker events."""

from __future__ import annotations

from typing import Any, Mapping

from claude_agent_sdk.types import (
    AssistantMessage,
    ResultMessage,
    StreamEvent,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    UserMessage,
)

from ..events import (
    CompletionEvent,
    DispatchEvent,
    ProgressEvent,
    RunCompleteEvent,
    TextEvent,
    TrackerEvent,
)
from ..tracking.text import extract_text


def _dispatch_from_tool_use(block: ToolUseBlock) -> DispatchEvent:
    payload = block.input if isinstance(block.input, Mapping) else {}
    subagent_type = payload.get("subagent_type")
    if isinstance(subagent_type, str) and subagent_type.strip():
        context = payload.get("description") or payload.get("prompt")
        return DispatchEvent(
            correlation_id=block.id,
            label=subagent_type,
            context=context if isinstance(context, str) else None,
        )
    return DispatchEvent(correlation_id=block.id, label=block.name, subagent=False)


def _delta_payload(delta: Any) -> Any:
    if not isinstance(delta, Mapping):
        return None
    if isinstance(delta.get("text"), str):
        return delta["text"]
    output = delta.get("output")
    if isinstance(output, (str, list)):
        return output
    if isinstance(delta.get("content"), list):
        return delta["content"]
    return None


def stream_progress_payload(event: Mapping[str, Any]) -> Any:
    """Pick the progress payload out of a raw ``tool_result*`` stream event.

    ``output_text_delta`` is used when the ``delta`` payload carries no text.
    """

    payload = _delta_payload(event.get("delta"))
    if payload is not None and extract_text(payload):
        return payload

    output_text_delta = event.get("output_text_delta")
    if isinstance(output_text_delta, Mapping) and output_text_delta.get("text"):
        return output_text_delta["text"]
    return None


def _translate_stream_event(message: StreamEvent) -> list[TrackerEvent]:
    event = message.event if isinstance(message.event, Mapping) else {}
    event_type = event.get("type")
    if not isinstance(event_type, str) or not event_type.startswith("tool_result"):
        return []

    tool_use_id = event.get("tool_use_id")
    correlation_id = tool_use_id if isinstance(tool_use_id, str) else None
    events: list[TrackerEvent] = []

    payload = stream_progress_payload(event)
    if payload is not None:
        events.append(ProgressEvent(correlation_id=correlation_id, delta=payload))
    if correlation_id is not None and event_type == "tool_result":
        events.append(CompletionEvent(correlation_id=correlation_id, result=None))
    return events


def translate_message(message: Any) -> list[TrackerEvent]:
    """Return the tracker events carried by one SDK message.

    Messages the tracker has no interest in (system messages, thinking blocks,
    unrelated stream events) translate to an empty list.
    """

    if isinstance(message, AssistantMessage):
        events: list[TrackerEvent] = []
        for block in message.content:
            if isinstance(block, TextBlock):
                events.append(TextEvent(text=block.text))
            elif isinstance(block, ToolUseBlock):
                events.append(_dispatch_from_tool_use(block))
            elif isinstance(block, ToolResultBlock):
                events.append(CompletionEvent(correlation_id=block.tool_use_id, result=block.content))
        return events

    if isinstance(message, UserMessage):
        if not isinstance(message.content, list):
            return []
        return [
            CompletionEvent(correlation_id=block.tool_use_id, result=block.content)
            for block in message.content
            if isinstance(block, ToolResultBlock)
        ]

    if isinstance(message, StreamEvent):
        return _translate_stream_event(message)

    if isinstance(message, ResultMessage):
        return [
            RunCompleteEvent(
                duration_ms=message.duration_ms,
                total_cost_usd=message.total_cost_usd or 0.0,
            )
        ]

    return []


__all__ = ["stream_progress_payload", "translate_message"]
