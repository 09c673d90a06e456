# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for lint engine output parsing."""

from __future__ import annotations

from pathlib import Path

from stagelint.parsers import count_by_severity, parse_eslint_output, strip_ansi

STYLISH = """
/repo/apps/web/src/main.ts
   4:10  error    'unused' is defined but never used  @typescript-eslint/no-unused-vars
  12:1   warning  Unexpected console statement        no-console

/repo/libs/shared/index.ts
  1:1  error  Parsing error: Unexpected token

✖ 3 problems (2 errors, 1 warning)
"""


def test_parse_stylish_output() -> None:
    violations = parse_eslint_output(STYLISH, root=Path("/repo"))

    assert [(v.file, v.line, v.severity, v.rule) for v in violations] == [
        ("apps/web/src/main.ts", 4, "error", "@typescript-eslint/no-unused-vars"),
        ("apps/web/src/main.ts", 12, "warning", "no-console"),
        ("libs/shared/index.ts", 1, "error", None),
    ]
    assert violations[2].message == "Parsing error: Unexpected token"


def test_parse_unix_output() -> None:
    text = "apps/web/a.ts:3:5: Missing semicolon. [Error/semi]\napps/web/a.ts:9:1: Trailing spaces. [Warning]\n"
    violations = parse_eslint_output(text)

    assert [(v.line, v.column, v.severity, v.rule) for v in violations] == [
        (3, 5, "error", "semi"),
        (9, 1, "warning", None),
    ]
    assert violations[0].render() == "apps/web/a.ts:3:5: error: Missing semicolon. [semi]"


def test_orchestrator_noise_is_ignored() -> None:
    text = "\x1b[1m>  NX   Running target lint for project web\x1b[0m\n\nSuccessfully ran target lint\n"
    assert parse_eslint_output(text) == []


def test_strip_ansi() -> None:
    assert strip_ansi("\x1b[31merror\x1b[0m") == "error"


def test_count_by_severity() -> None:
    counts = count_by_severity(parse_eslint_output(STYLISH, root=Path("/repo")))
    assert counts == {"error": 2, "warning": 1}
