# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the stagelint package."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

from pydantic import BaseModel, ConfigDict, field_validator

EXIT_OK: Final[int] = 0
EXIT_FAILURE: Final[int] = 1


class ProjectKind(StrEnum):
    """Kinds of monorepo units a staged file can belong to."""

    APPLICATION = "application"
    LIBRARY = "library"
    WORKSPACE_ROOT = "workspace-root"


class Strategy(StrEnum):
    """Lint strategies a plan may attempt, in their canonical order."""

    NATIVE = "native-project-lint"
    DIRECT = "direct-engine"
    WORKSPACE = "workspace-wide"


_KIND_ORDER: Final[dict[ProjectKind, int]] = {
    ProjectKind.APPLICATION: 0,
    ProjectKind.LIBRARY: 1,
    ProjectKind.WORKSPACE_ROOT: 2,
}


@dataclass(frozen=True, slots=True)
class StagedFile:
    """A staged path relative to the repository root.

    Equality and hashing use the normalised path only, so the same file given
    with different separators collapses to one entry.
    """

    normalized: str
    raw: str = field(default="", compare=False)
    exists: bool = field(default=True, compare=False)

    def __str__(self) -> str:
        return self.normalized


@dataclass(frozen=True, slots=True)
class ProjectRef:
    """Identify the monorepo unit a staged file belongs to."""

    kind: ProjectKind
    name: str | None = None

    def __post_init__(self) -> None:
        if self.kind is ProjectKind.WORKSPACE_ROOT and self.name is not None:
            raise ValueError("workspace-root references carry no name")
        if self.kind is not ProjectKind.WORKSPACE_ROOT and not self.name:
            raise ValueError(f"{self.kind} references require a name")

    @classmethod
    def workspace_root(cls) -> ProjectRef:
        """Return the reference used for files outside any project."""

        return cls(ProjectKind.WORKSPACE_ROOT)

    @property
    def is_workspace_root(self) -> bool:
        return self.kind is ProjectKind.WORKSPACE_ROOT

    @property
    def label(self) -> str:
        """Return a human-readable label such as ``library 'shared'``."""

        if self.name is None:
            return "workspace root"
        return f"{self.kind} '{self.name}'"

    def sort_key(self) -> tuple[int, str]:
        """Return a key ordering projects first and the workspace root last."""

        return _KIND_ORDER[self.kind], self.name or ""


@dataclass(frozen=True, slots=True)
class FileGroup:
    """Staged files classified under a single :class:`ProjectRef`."""

    ref: ProjectRef
    files: frozenset[StagedFile]

    @property
    def paths(self) -> list[str]:
        """Return the member paths in deterministic order."""

        return sorted(staged.normalized for staged in self.files)

    def __len__(self) -> int:
        return len(self.files)


@dataclass(frozen=True, slots=True)
class LintPlan:
    """Ordered strategies to attempt for a group; never empty."""

    ref: ProjectRef
    strategies: tuple[Strategy, ...]

    def __post_init__(self) -> None:
        if not self.strategies:
            raise ValueError(f"lint plan for {self.ref.label} has no strategies")
        if self.ref.is_workspace_root and Strategy.NATIVE in self.strategies:
            raise ValueError("workspace-root files cannot use native project lint")


class Violation(BaseModel):
    """A single lint finding reported by the engine."""

    model_config = ConfigDict(frozen=True)

    file: str
    line: int | None = None
    column: int | None = None
    severity: str = "error"
    message: str
    rule: str | None = None

    @field_validator("file", mode="before")
    @classmethod
    def _normalize_file(cls, value: object) -> object:
        if isinstance(value, str):
            return value.replace("\\", "/")
        return value

    def render(self) -> str:
        """Return the finding as ``file:line:column: message [rule]``."""

        location = self.file
        if self.line is not None:
            location = f"{location}:{self.line}"
            if self.column is not None:
                location = f"{location}:{self.column}"
        suffix = f" [{self.rule}]" if self.rule else ""
        return f"{location}: {self.severity}: {self.message}{suffix}"


@dataclass(frozen=True, slots=True)
class StrategyAttempt:
    """Record of running one strategy for a group."""

    strategy: Strategy
    success: bool
    invocations: int
    failed_files: tuple[str, ...] = ()
    skipped: bool = False


@dataclass(frozen=True, slots=True)
class RunResult:
    """Terminal outcome for one group after its plan has run."""

    group: FileGroup
    strategy: Strategy | None
    success: bool
    output: str = ""
    failed_files: tuple[str, ...] = ()
    violations: tuple[Violation, ...] = ()
    attempts: tuple[StrategyAttempt, ...] = ()
    notes: tuple[str, ...] = ()

    @property
    def invocations(self) -> int:
        return sum(attempt.invocations for attempt in self.attempts)


@dataclass(slots=True)
class DispatchReport:
    """Aggregate of every group's :class:`RunResult`."""

    results: list[RunResult] = field(default_factory=list)
    considered: int = 0
    excluded: tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        """Return the logical AND of all group results."""

        return all(result.success for result in self.results)

    @property
    def exit_code(self) -> int:
        return EXIT_OK if self.success else EXIT_FAILURE


__all__ = [
    "EXIT_FAILURE",
    "EXIT_OK",
    "DispatchReport",
    "FileGroup",
    "LintPlan",
    "ProjectKind",
    "ProjectRef",
    "RunResult",
    "StagedFile",
    "Strategy",
    "StrategyAttempt",
    "Violation",
]
