"""Claude Agent SDK integration: message translation and the query wrapper."""

from .client import (
    AgentRuntime,
    AgentRuntimeError,
    FakeAgentRuntime,
    MissingCredentialsError,
    ensure_credentials,
)
from .translate import stream_progress_payload, translate_message

__all__ = [
    "AgentRuntime",
    "AgentRuntimeError",
    "FakeAgentRuntime",
    "MissingCredentialsError",
    "ensure_credentials",
    "stream_progress_payload",
    "translate_message",
]
