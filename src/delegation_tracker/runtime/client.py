"""Async wrapper around the Claude Agent SDK query stream."""

from __future__ import annotations

from pathlib import Path
from typing import Any, AsyncIterator, Iterable, Mapping

from claude_agent_sdk import AgentDefinition, ClaudeAgentOptions, ClaudeSDKError, query

from ..config import TrackerSettings


class AgentRuntimeError(RuntimeError):
    """Base class for agent runtime errors."""


class MissingCredentialsError(AgentRuntimeError):
    """Raised when no Anthropic API key is configured."""


def ensure_credentials(settings: TrackerSettings) -> None:
    """Fail fast when the runtime has no API key to work with."""

    if not (settings.anthropic_api_key or "").strip():
        raise MissingCredentialsError(
            "ANTHROPIC_API_KEY is not set. Create a .env file with your API key "
            "or export it in the environment."
        )


class AgentRuntime:
    """Stream messages for one orchestrator prompt through the Claude Agent SDK."""

    def __init__(
        self,
        settings: TrackerSettings,
        *,
        agents: Mapping[str, AgentDefinition] | None = None,
        cwd: Path | None = None,
    ) -> None:
        self._settings = settings
        self._agents = dict(agents or {})
        self._cwd = cwd or Path.cwd()

    @property
    def agents(self) -> dict[str, AgentDefinition]:
        return dict(self._agents)

    def build_options(self) -> ClaudeAgentOptions:
        settings = self._settings
        return ClaudeAgentOptions(
            model=settings.claude_model,
            cwd=str(self._cwd),
            permission_mode=settings.permission_mode,
            allowed_tools=list(settings.allowed_tools),
            max_turns=settings.max_turns,
            agents=self._agents or None,
            include_partial_messages=True,
        )

    async def stream(self, prompt: str) -> AsyncIterator[Any]:
        try:
            async for message in query(prompt=prompt, options=self.build_options()):
                yield message
        except ClaudeSDKError as exc:
            raise AgentRuntimeError(f"Agent run failed: {exc}") from exc


class FakeAgentRuntime(AgentRuntime):
    """Test double that replays a fixed list of SDK messages."""

    def __init__(self, messages: Iterable[Any] | None = None, *, error: Exception | None = None) -> None:  # type: ignore[override]
        self._messages = list(messages or [])
        self._error = error
        self._prompts: list[str] = []
        self._agents = {}

    async def stream(self, prompt: str) -> AsyncIterator[Any]:  # type: ignore[override]
        self._prompts.append(prompt)
        for message in self._messages:
            yield message
        if self._error is not None:
            raise self._error

    @property
    def prompts(self) -> list[str]:
        return self._prompts


__all__ = [
    "AgentRuntime",
    "AgentRuntimeError",
    "FakeAgentRuntime",
    "MissingCredentialsError",
    "ensure_credentials",
]
