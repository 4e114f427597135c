"""Subagent profile models and loader exports."""

from .loader import ProfileLoadError, ProfileLoader, agent_definitions
from .models import SubagentProfile

__all__ = [
    "ProfileLoadError",
    "ProfileLoader",
    "SubagentProfile",
    "agent_definitions",
]
