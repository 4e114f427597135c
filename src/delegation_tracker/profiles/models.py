"""Profile models for subagent definitions."""

from __future__ import annotations

from typing import Any, Literal

from claude_agent_sdk import AgentDefinition
from pydantic import BaseModel, Field, field_validator


class SubagentProfile(BaseModel):
    """Configuration describing a subagent the orchestrator may delegate to."""

    id: str = Field(..., description="Agent id the orchestrator passes as subagent_type.")
    description: str = Field(..., description="When the orchestrator should use this agent.")
    prompt: str = Field(..., description="System prompt given to the subagent.")
    tools: list[str] = Field(
        default_factory=list,
        description="Tools the subagent may use; empty inherits the orchestrator's tools.",
    )
    model: Literal["sonnet", "opus", "haiku", "inherit"] | None = Field(
        default=None,
        description="Model alias for the subagent; unset inherits the orchestrator's model.",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Arbitrary metadata for listing and filtering.",
    )

    @field_validator("id")
    @classmethod
    def _normalize_id(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Subagent profile id must not be empty")
        return normalized

    @field_validator("description", "prompt")
    @classmethod
    def _require_text(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Subagent description and prompt must not be empty")
        return normalized

    @field_validator("tools", mode="before")
    @classmethod
    def _ensure_list(cls, value: Any):  # type: ignore[override]
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return list(value)
        raise TypeError("Subagent tools must be a sequence of strings")

    def to_agent_definition(self) -> AgentDefinition:
        """Return the SDK definition used to register this subagent."""

        return AgentDefinition(
            description=self.description,
            prompt=self.prompt,
            tools=list(self.tools) or None,
            model=self.model,
        )


__all__ = ["SubagentProfile"]
