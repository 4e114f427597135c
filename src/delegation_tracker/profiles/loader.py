"""Read subagent profiles from YAML and check them against the tool allow-list."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import yaml
from claude_agent_sdk import AgentDefinition
from pydantic import ValidationError

from .models import SubagentProfile


class ProfileLoadError(RuntimeError):
    """Raised when one or more profile files cannot be used."""


def _profile_files(base: Path) -> list[Path]:
    return sorted(base.glob("*.yml")) + sorted(base.glob("*.yaml"))


class ProfileLoader:
    """Collect subagent profiles from directories of YAML files.

    When ``allowed_tools`` is given, a profile that names a tool outside it is
    rejected: the orchestrator could never grant that tool to the subagent.
    """

    def __init__(
        self,
        search_paths: Iterable[Path] | None = None,
        *,
        allowed_tools: Iterable[str] | None = None,
    ) -> None:
        paths = [Path(path) for path in (search_paths or [])]
        self._search_paths: list[Path] = [path for path in paths if path.is_dir()]
        self._allowed_tools = frozenset(allowed_tools) if allowed_tools is not None else None

    @property
    def search_paths(self) -> list[Path]:
        return list(self._search_paths)

    def _read(self, path: Path) -> SubagentProfile | None:
        try:
            document = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ProfileLoadError(f"Failed to parse YAML in {path}: {exc}") from exc
        if document is None:
            return None

        try:
            profile = SubagentProfile.model_validate(document)
        except ValidationError as exc:
            raise ProfileLoadError(f"Profile validation error in {path}: {exc}") from exc

        if self._allowed_tools is not None:
            denied = [tool for tool in profile.tools if tool not in self._allowed_tools]
            if denied:
                raise ProfileLoadError(
                    f"Profile '{profile.id}' in {path} requests tools outside the allow-list: "
                    + ", ".join(denied)
                )
        return profile

    def load_all(self) -> dict[str, SubagentProfile]:
        """Return every profile keyed by id; later search paths win on collisions.

        All unusable files are reported together in one ``ProfileLoadError``.
        """

        profiles: dict[str, SubagentProfile] = {}
        errors: list[str] = []
        for base in self._search_paths:
            for path in _profile_files(base):
                try:
                    profile = self._read(path)
                except ProfileLoadError as exc:
                    errors.append(str(exc))
                    continue
                if profile is not None:
                    profiles[profile.id] = profile

        if errors:
            raise ProfileLoadError("; ".join(errors))
        return profiles


def agent_definitions(profiles: dict[str, SubagentProfile]) -> dict[str, AgentDefinition]:
    """Map profile ids to SDK agent definitions for ``ClaudeAgentOptions.agents``."""

    return {profile_id: profile.to_agent_definition() for profile_id, profile in profiles.items()}


__all__ = ["ProfileLoadError", "ProfileLoader", "SubagentProfile", "agent_definitions"]
