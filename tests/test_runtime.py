from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from claude_agent_sdk import AgentDefinition, ClaudeSDKError

from delegation_tracker.config import TrackerSettings
from delegation_tracker.runtime import (
    AgentRuntime,
    AgentRuntimeError,
    FakeAgentRuntime,
    MissingCredentialsError,
    ensure_credentials,
)
from delegation_tracker.runtime import client as client_module


def _settings(**overrides) -> TrackerSettings:
    base = {"ANTHROPIC_API_KEY": "sk-test", "TRACKER_MAX_TURNS": 8}
    base.update(overrides)
    return TrackerSettings(**base)


def test_ensure_credentials_requires_key() -> None:
    ensure_credentials(_settings())
    with pytest.raises(MissingCredentialsError):
        ensure_credentials(_settings(ANTHROPIC_API_KEY="  "))


def test_build_options_carries_settings_and_agents(tmp_path: Path) -> None:
    agents = {"coder": AgentDefinition(description="d", prompt="p", tools=["Edit"], model="sonnet")}
    runtime = AgentRuntime(_settings(CLAUDE_MODEL="claude-opus-4-1"), agents=agents, cwd=tmp_path)

    options = runtime.build_options()

    assert options.model == "claude-opus-4-1"
    assert options.cwd == str(tmp_path)
    assert options.permission_mode == "bypassPermissions"
    assert options.allowed_tools == ["Read", "Write", "Edit", "Bash", "Task"]
    assert options.max_turns == 8
    assert options.agents == agents
    assert options.include_partial_messages is True


def test_stream_passes_prompt_and_options(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    async def fake_query(*, prompt, options):
        captured["prompt"] = prompt
        captured["options"] = options
        yield "first"
        yield "second"

    monkeypatch.setattr(client_module, "query", fake_query)
    runtime = AgentRuntime(_settings())

    async def collect() -> list[object]:
        return [message async for message in runtime.stream("hello")]

    assert asyncio.run(collect()) == ["first", "second"]
    assert captured["prompt"] == "hello"
    assert captured["options"].agents is None


def test_stream_wraps_sdk_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    async def failing_query(*, prompt, options):
        yield "partial"
        raise ClaudeSDKError("connection lost")

    monkeypatch.setattr(client_module, "query", failing_query)
    runtime = AgentRuntime(_settings())

    async def collect() -> list[object]:
        return [message async for message in runtime.stream("hello")]

    with pytest.raises(AgentRuntimeError, match="connection lost"):
        asyncio.run(collect())


def test_fake_runtime_records_prompts() -> None:
    fake = FakeAgentRuntime(["a", "b"])

    async def collect() -> list[object]:
        return [message async for message in fake.stream("prompt-1")]

    assert asyncio.run(collect()) == ["a", "b"]
    assert fake.prompts == ["prompt-1"]
