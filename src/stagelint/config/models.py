# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the stagelint dispatcher."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models import ProjectKind

DEFAULT_LINTABLE_EXTENSIONS: Final[tuple[str, ...]] = (".ts", ".tsx", ".js", ".jsx")
DEFAULT_PROJECT_ROOTS: Final[dict[str, ProjectKind]] = {
    "apps": ProjectKind.APPLICATION,
    "libs": ProjectKind.LIBRARY,
}
DEFAULT_TICKET_PREFIXES: Final[tuple[str, ...]] = ("EARS", "PROJ", "DEV", "BUG")


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class DispatchConfig(BaseModel):
    """Settings controlling classification and lint dispatch."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    lintable_extensions: tuple[str, ...] = DEFAULT_LINTABLE_EXTENSIONS
    excluded_projects: tuple[str, ...] = ()
    project_roots: dict[str, ProjectKind] = Field(default_factory=lambda: dict(DEFAULT_PROJECT_ROOTS))
    engine_command: tuple[str, ...] = ("npx", "eslint")
    tool_command: tuple[str, ...] = ("npx", "nx")
    workspace_manifest: str = "nx.json"
    workspace_fallback: bool = True
    timeout: float | None = Field(default=300.0, gt=0)
    jobs: int = Field(default=1, ge=1)

    @field_validator("lintable_extensions", mode="after")
    @classmethod
    def _normalise_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        normalised: list[str] = []
        for raw in value:
            ext = raw.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            if ext not in normalised:
                normalised.append(ext)
        return tuple(normalised)

    @field_validator("project_roots", mode="after")
    @classmethod
    def _validate_roots(cls, value: dict[str, ProjectKind]) -> dict[str, ProjectKind]:
        cleaned: dict[str, ProjectKind] = {}
        for prefix, kind in value.items():
            key = prefix.replace("\\", "/").strip("/")
            if not key:
                raise ValueError("project root prefixes must not be empty")
            if kind is ProjectKind.WORKSPACE_ROOT:
                raise ValueError(f"project root '{prefix}' cannot map to the workspace root")
            cleaned[key] = kind
        return cleaned

    @field_validator("engine_command", "tool_command", mode="after")
    @classmethod
    def _require_command(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value or not value[0].strip():
            raise ValueError("command must contain at least an executable")
        return value


class CommitMsgConfig(BaseModel):
    """Ticket reference rules applied to commit messages."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    project_prefixes: tuple[str, ...] = DEFAULT_TICKET_PREFIXES
    min_ticket_number: int = Field(default=1, ge=0)
    max_ticket_number: int = Field(default=99999, ge=1)
    allow_multiple_tickets: bool = False
    required: bool = True
    exempt_branches: tuple[str, ...] = ("main", "master", "develop", "release/*", "hotfix/*")
    exempt_commit_types: tuple[str, ...] = ("merge", "revert", "initial")
    require_colon: bool = True
    min_message_length: int = Field(default=10, ge=0)
    examples: tuple[str, ...] = (
        "EARS-1887: fix user authentication bug",
        "PROJ-123: add new dashboard component",
        "DEV-456: update API documentation",
    )

    @model_validator(mode="after")
    def _check_ranges(self) -> CommitMsgConfig:
        if self.min_ticket_number > self.max_ticket_number:
            raise ValueError("min_ticket_number must not exceed max_ticket_number")
        if self.required and not self.project_prefixes:
            raise ValueError("project_prefixes must not be empty when tickets are required")
        return self


class HooksConfig(BaseModel):
    """Git hook installation settings."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    hooks_dir: Path | None = None
    hooks: tuple[str, ...] = ("pre-commit", "commit-msg")
    executable: str = "stagelint"


class Config(BaseModel):
    """Top-level stagelint configuration."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    commit_msg: CommitMsgConfig = Field(default_factory=CommitMsgConfig)
    hooks: HooksConfig = Field(default_factory=HooksConfig)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible snapshot of the configuration."""

        return self.model_dump(mode="json")


__all__ = [
    "DEFAULT_LINTABLE_EXTENSIONS",
    "DEFAULT_PROJECT_ROOTS",
    "CommitMsgConfig",
    "Config",
    "ConfigError",
    "DispatchConfig",
    "HooksConfig",
]
