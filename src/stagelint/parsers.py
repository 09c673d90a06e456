# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers turning lint engine console output into :class:`Violation` records."""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import Final

from .models import Violation

_ANSI_RE: Final[re.Pattern[str]] = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")
# ESLint "stylish":   12:5  error  Unexpected any  @typescript-eslint/no-explicit-any
_STYLISH_ENTRY_RE: Final[re.Pattern[str]] = re.compile(
    r"^\s+(?P<line>\d+):(?P<column>\d+)\s+(?P<severity>error|warning)\s+(?P<message>.+?)(?:\s{2,}(?P<rule>\S+))?\s*$"
)
# ESLint "unix":   src/a.ts:12:5: Unexpected any [Error/@typescript-eslint/no-explicit-any]
_UNIX_ENTRY_RE: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>[^\s:][^:]*?):(?P<line>\d+):(?P<column>\d+):\s+(?P<message>.+?)\s+"
    r"\[(?P<severity>Error|Warning)(?:/(?P<rule>[^\]]+))?\]\s*$"
)
_SUMMARY_PREFIXES: Final[tuple[str, ...]] = ("✖", "✔", "×")


def strip_ansi(text: str) -> str:
    """Return ``text`` without ANSI escape sequences."""

    return _ANSI_RE.sub("", text)


def _relative(path: str, root: Path | None) -> str:
    if root is None:
        return path
    candidate = Path(path)
    if not candidate.is_absolute():
        return path
    try:
        return candidate.relative_to(root).as_posix()
    except ValueError:
        return path


def parse_eslint_output(text: str, *, root: Path | None = None) -> list[Violation]:
    """Parse ESLint ``stylish`` or ``unix`` formatted output.

    Lines that match neither format (progress output from wrappers such as
    Nx, summaries, blank lines) are ignored.

    Args:
        text: Captured stdout of the engine or orchestration tool.
        root: Repository root used to relativise absolute file paths.

    Returns:
        list[Violation]: Findings in the order they were reported.
    """

    violations: list[Violation] = []
    current_file: str | None = None
    for raw_line in strip_ansi(text).splitlines():
        if not raw_line.strip():
            continue
        if match := _UNIX_ENTRY_RE.match(raw_line):
            violations.append(
                Violation(
                    file=_relative(match["file"], root),
                    line=int(match["line"]),
                    column=int(match["column"]),
                    severity=match["severity"].lower(),
                    message=match["message"],
                    rule=match["rule"],
                )
            )
            continue
        if match := _STYLISH_ENTRY_RE.match(raw_line):
            if current_file is None:
                continue
            violations.append(
                Violation(
                    file=current_file,
                    line=int(match["line"]),
                    column=int(match["column"]),
                    severity=match["severity"],
                    message=match["message"],
                    rule=match["rule"],
                )
            )
            continue
        if raw_line[0].isspace() or raw_line.lstrip().startswith(_SUMMARY_PREFIXES):
            continue
        header = raw_line.strip()
        current_file = _relative(header, root) if Path(header).suffix else None
    return violations


def count_by_severity(violations: Iterable[Violation]) -> dict[str, int]:
    """Return the number of findings per severity."""

    counts: dict[str, int] = {}
    for violation in violations:
        counts[violation.severity] = counts.get(violation.severity, 0) + 1
    return counts


__all__ = ["count_by_severity", "parse_eslint_output", "strip_ansi"]
