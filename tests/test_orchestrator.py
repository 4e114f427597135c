from __future__ import annotations

import asyncio

import pytest
from claude_agent_sdk.types import (
    AssistantMessage,
    ResultMessage,
    StreamEvent,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    UserMessage,
)

from delegation_tracker.orchestrator import DEFAULT_BRIEF, build_orchestrator_prompt, run_orchestration
from delegation_tracker.profiles import SubagentProfile
from delegation_tracker.runtime import AgentRuntimeError, FakeAgentRuntime
from delegation_tracker.tracking import DelegationTracker


def _profiles() -> dict[str, SubagentProfile]:
    return {
        "researcher": SubagentProfile(id="researcher", description="Finds context.", prompt="Research"),
        "coder": SubagentProfile(id="coder", description="Plans the build.", prompt="Code"),
    }


def _messages() -> list[object]:
    return [
        AssistantMessage(
            content=[
                TextBlock(text="Splitting the work."),
                ToolUseBlock(id="t1", name="Task", input={"subagent_type": "researcher", "description": "Dig in"}),
                ToolUseBlock(id="t2", name="Task", input={"subagent_type": "coder", "prompt": "Outline modules"}),
            ],
            model="claude-sonnet-4-5",
        ),
        StreamEvent(
            uuid="e1",
            session_id="s1",
            event={"type": "tool_result_delta", "tool_use_id": "t2", "delta": {"text": "50% done"}},
        ),
        UserMessage(content=[ToolResultBlock(tool_use_id="t1", content=[{"type": "text", "text": "three insights"}])]),
        ResultMessage(
            subtype="success",
            duration_ms=1200,
            duration_api_ms=1000,
            is_error=False,
            num_turns=3,
            session_id="s1",
            total_cost_usd=0.0341,
        ),
    ]


def test_build_orchestrator_prompt_lists_profiles() -> None:
    prompt = build_orchestrator_prompt(DEFAULT_BRIEF, _profiles())

    assert prompt.startswith("You are the lead orchestrator")
    assert "uptime logs" in prompt
    assert "- researcher: Finds context." in prompt
    assert "- coder: Plans the build." in prompt
    assert "Parallel Impact" in prompt


def test_build_orchestrator_prompt_without_profiles() -> None:
    prompt = build_orchestrator_prompt("Brief", {})

    assert "- general-purpose" in prompt


def test_run_orchestration_feeds_tracker() -> None:
    lines: list[str] = []
    runtime = FakeAgentRuntime(_messages())

    async def scenario():
        tracker = DelegationTracker(lines.append, interval=60)
        statistics = await run_orchestration(runtime, tracker, "go")
        return tracker, statistics

    tracker, statistics = asyncio.run(scenario())

    assert runtime.prompts == ["go"]
    assert lines[0] == "Splitting the work."
    assert lines[1] == "Delegating to researcher subagent: Dig in"
    assert lines[2] == "Delegating to coder subagent: Outline modules"
    assert lines[3] == "coder update: 50% done"
    assert lines[4].startswith("researcher subagent returned after")
    assert lines[4].endswith(": three insights")
    assert lines[5] == "Total duration: 1200ms | Total cost: $0.0341"
    assert len(lines) == 6
    assert len(tracker) == 0
    assert statistics is not None and statistics.total_cost_usd == 0.0341


def test_run_orchestration_closes_tracker_on_failure() -> None:
    runtime = FakeAgentRuntime(_messages()[:1], error=AgentRuntimeError("boom"))

    async def scenario() -> DelegationTracker:
        tracker = DelegationTracker(lambda line: None, interval=60)
        try:
            await run_orchestration(runtime, tracker, "go")
        finally:
            assert len(tracker) == 0
        return tracker

    with pytest.raises(AgentRuntimeError):
        asyncio.run(scenario())
