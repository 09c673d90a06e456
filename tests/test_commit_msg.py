# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for commit message ticket validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from stagelint.commit_msg import TicketRef, TicketValidator, read_commit_message
from stagelint.config import CommitMsgConfig


@pytest.fixture
def validator() -> TicketValidator:
    return TicketValidator(CommitMsgConfig())


def test_valid_ticket(validator: TicketValidator) -> None:
    result = validator.validate("EARS-1887: fix user authentication bug", branch="feature/login")

    assert result.is_valid
    assert result.tickets == [TicketRef("EARS", 1887)]
    assert result.remaining_message == "fix user authentication bug"
    assert str(result.tickets[0]) == "EARS-1887"


def test_prefix_match_is_case_insensitive(validator: TicketValidator) -> None:
    result = validator.validate("proj-12 : add new dashboard component", branch="feature/x")
    assert result.is_valid
    assert result.tickets == [TicketRef("PROJ", 12)]


def test_missing_ticket(validator: TicketValidator) -> None:
    result = validator.validate("fix user authentication bug", branch="feature/login")
    assert not result.is_valid
    assert result.errors == ["No valid ticket found at the beginning of commit message"]


def test_missing_colon_and_short_message(validator: TicketValidator) -> None:
    result = validator.validate("DEV-45 tiny", branch="feature/x")
    assert not result.is_valid
    assert "Commit message must include a colon (:) after the ticket number" in result.errors
    assert "Commit message too short after ticket number (minimum 10 characters)" in result.errors


def test_ticket_number_range(validator: TicketValidator) -> None:
    result = validator.validate("BUG-0: handle empty payload in parser", branch="feature/x")
    assert result.errors == ["Ticket number 0 is out of valid range (1-99999)"]


def test_unknown_prefix_is_rejected(validator: TicketValidator) -> None:
    assert not validator.validate("ABC-12: handle empty payload", branch="feature/x").is_valid


@pytest.mark.parametrize("branch", ["main", "develop", "release/1.4", "release-1.4", "hotfix/urgent", "hotfix-login"])
def test_exempt_branches(validator: TicketValidator, branch: str) -> None:
    result = validator.validate("no ticket here", branch=branch)
    assert result.is_valid
    assert result.exempt_reason is not None and branch in result.exempt_reason


@pytest.mark.parametrize("branch", ["mainline", "feature/main", "feature/release-notes"])
def test_exact_branch_names_only_match_exactly(validator: TicketValidator, branch: str) -> None:
    assert not validator.is_branch_exempt(branch)
    assert not validator.validate("no ticket here", branch=branch).is_valid


@pytest.mark.parametrize("message", ["Merge branch 'feature' into main", "Revert \"EARS-1: thing\"", "Initial commit"])
def test_exempt_commit_types(validator: TicketValidator, message: str) -> None:
    assert validator.validate(message, branch="feature/x").is_valid


def test_multiple_tickets_when_allowed() -> None:
    validator = TicketValidator(CommitMsgConfig(allow_multiple_tickets=True))
    result = validator.validate("EARS-1, DEV-2: shared fix for both issues", branch="feature/x")
    assert result.is_valid
    assert result.tickets == [TicketRef("EARS", 1), TicketRef("DEV", 2)]


def test_validation_can_be_disabled() -> None:
    result = TicketValidator(CommitMsgConfig(required=False)).validate("anything", branch="feature/x")
    assert result.is_valid
    assert result.exempt_reason == "Ticket validation is disabled"


def test_only_subject_line_is_checked(validator: TicketValidator) -> None:
    message = "EARS-7: tighten retry policy for uploads\n\nLonger body without any ticket."
    assert validator.validate(message, branch="feature/x").is_valid


def test_read_commit_message_strips_comments(tmp_path: Path) -> None:
    path = tmp_path / "COMMIT_EDITMSG"
    path.write_text("EARS-1: subject line here\n# Please enter the commit message\n", encoding="utf-8")
    assert read_commit_message(path) == "EARS-1: subject line here"
