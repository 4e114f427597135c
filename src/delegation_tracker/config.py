"""Configuration management for the delegation tracker."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
import os
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class TrackerSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    anthropic_api_key: str | None = Field(default=None, validation_alias="ANTHROPIC_API_KEY")
    claude_model: str = Field(default="claude-sonnet-4-5", validation_alias="CLAUDE_MODEL")
    progress_interval: float = Field(default=5.0, validation_alias="TRACKER_PROGRESS_INTERVAL")
    context_preview_chars: int = Field(default=90, validation_alias="TRACKER_CONTEXT_PREVIEW")
    max_turns: int | None = Field(default=None, validation_alias="TRACKER_MAX_TURNS")
    permission_mode: str = Field(
        default="bypassPermissions", validation_alias="TRACKER_PERMISSION_MODE"
    )
    allowed_tools: Annotated[tuple[str, ...], NoDecode] = Field(
        default=("Read", "Write", "Edit", "Bash", "Task"),
        validation_alias="TRACKER_ALLOWED_TOOLS",
    )
    profile_paths: Annotated[tuple[Path, ...], NoDecode] = Field(
        default=(Path("profiles"),), validation_alias="TRACKER_PROFILE_PATHS"
    )
    log_level: str = Field(default="INFO", validation_alias="TRACKER_LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "TRACKER_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("progress_interval")
    @classmethod
    def _validate_progress_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("TRACKER_PROGRESS_INTERVAL must be > 0")
        return value

    @field_validator("context_preview_chars")
    @classmethod
    def _validate_context_preview(cls, value: int) -> int:
        if value < 10:
            raise ValueError("TRACKER_CONTEXT_PREVIEW must be >= 10")
        return value

    @field_validator("max_turns")
    @classmethod
    def _validate_max_turns(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("TRACKER_MAX_TURNS must be >= 1")
        return value

    @field_validator("permission_mode")
    @classmethod
    def _validate_permission_mode(cls, value: str) -> str:
        allowed = {"default", "acceptEdits", "plan", "bypassPermissions"}
        if value not in allowed:
            raise ValueError(f"TRACKER_PERMISSION_MODE must be one of {sorted(allowed)}")
        return value

    @field_validator("allowed_tools", mode="before")
    @classmethod
    def _parse_allowed_tools(cls, value):
        if value is None or value == "":
            return ()
        if isinstance(value, (list, tuple)):
            return tuple(str(item).strip() for item in value if str(item).strip())
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        raise TypeError("TRACKER_ALLOWED_TOOLS must be a list or a comma-separated string")

    @field_validator("profile_paths", mode="before")
    @classmethod
    def _parse_profile_paths(cls, value):
        if value is None or value == "":
            return (Path("profiles"),)
        if isinstance(value, (list, tuple)):
            return tuple(Path(str(item)) for item in value)
        if isinstance(value, str):
            parts = [part.strip() for part in value.split(os.pathsep) if part.strip()]
            return tuple(Path(part) for part in parts) or (Path("profiles"),)
        raise TypeError("TRACKER_PROFILE_PATHS must be a list of paths or a path-separated string")


@lru_cache(maxsize=1)
def get_settings() -> TrackerSettings:
    """Return cached settings instance."""

    settings = TrackerSettings()
    settings.profile_paths = tuple(path.expanduser().resolve() for path in settings.profile_paths)
    return settings


__all__ = ["TrackerSettings", "get_settings"]
