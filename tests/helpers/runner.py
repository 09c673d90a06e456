# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Recording command runner and filesystem helpers for dispatch tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from stagelint.process import CommandResult

Handler = Callable[[list[str]], tuple[int, str, str] | int]


def _succeed(_: list[str]) -> int:
    return 0


@dataclass
class FakeRunner:
    """Record command lines and answer them through ``handler``."""

    handler: Handler = _succeed
    calls: list[list[str]] = field(default_factory=list)
    cwds: list[Path] = field(default_factory=list)

    def __call__(self, args: Sequence[str], *, cwd: Path) -> CommandResult:
        command = list(args)
        self.calls.append(command)
        self.cwds.append(cwd)
        answer = self.handler(command)
        if isinstance(answer, int):
            answer = (answer, "", "")
        returncode, stdout, stderr = answer
        return CommandResult(args=tuple(command), returncode=returncode, stdout=stdout, stderr=stderr)

    def engine_calls(self) -> list[list[str]]:
        return [call for call in self.calls if call[:2] == ["npx", "eslint"]]

    def tool_calls(self) -> list[list[str]]:
        return [call for call in self.calls if call[:2] == ["npx", "nx"]]


def is_project_query(args: list[str]) -> bool:
    return args[2:4] == ["show", "project"]


def touch(root: Path, *paths: str) -> None:
    """Create empty files under ``root``."""

    for path in paths:
        target = root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("", encoding="utf-8")


LINT_TARGET_JSON = '{"name": "web", "targets": {"build": {}, "lint": {"executor": "@nx/eslint:lint"}}}'
NO_LINT_TARGET_JSON = '{"name": "web", "targets": {"build": {}}}'
