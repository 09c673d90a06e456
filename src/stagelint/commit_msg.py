# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Validate ticket references at the start of commit messages."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from .config.models import CommitMsgConfig


@dataclass(frozen=True, slots=True)
class TicketRef:
    """A ticket reference such as ``PROJ-123``."""

    project: str
    number: int

    def __str__(self) -> str:
        return f"{self.project}-{self.number}"


@dataclass(slots=True)
class TicketValidation:
    """Result of validating a single commit message."""

    is_valid: bool = False
    tickets: list[TicketRef] = field(default_factory=list)
    remaining_message: str = ""
    errors: list[str] = field(default_factory=list)
    exempt_reason: str | None = None


def read_commit_message(path: Path) -> str:
    """Return the message git will record, without ``#`` comment lines."""

    lines = path.read_text(encoding="utf-8").splitlines()
    return "\n".join(line for line in lines if not line.startswith("#")).strip()


class TicketValidator:
    """Check commit messages against the configured ticket rules."""

    def __init__(self, config: CommitMsgConfig) -> None:
        self._config = config
        prefixes = "|".join(re.escape(prefix) for prefix in config.project_prefixes)
        ticket = rf"(?:{prefixes})-\d+"
        if config.allow_multiple_tickets:
            head = rf"{ticket}(?:(?:\s+|,\s*){ticket})*"
        else:
            head = ticket
        self._pattern = re.compile(rf"^(?P<tickets>{head})(?P<colon>\s*:)?\s*(?P<rest>.*)$", re.IGNORECASE)
        self._ticket_pattern = re.compile(rf"(?P<project>{prefixes})-(?P<number>\d+)", re.IGNORECASE)

    def is_branch_exempt(self, branch: str) -> bool:
        """Return whether ``branch`` is exempt from the ticket requirement.

        A ``prefix/*`` pattern exempts every branch starting with ``prefix``
        (``release/*`` covers both ``release/1.4`` and ``release-1.4``); other
        patterns must match the branch name exactly.
        """

        if not branch:
            return False
        for pattern in self._config.exempt_branches:
            if pattern.endswith("/*"):
                if branch.startswith(pattern[:-2]):
                    return True
            elif branch == pattern:
                return True
        return False

    def is_commit_type_exempt(self, message: str) -> bool:
        lowered = message.lower()
        return any(
            lowered.startswith(kind) or f"{kind}:" in lowered for kind in self._config.exempt_commit_types
        )

    def validate(self, message: str, *, branch: str = "") -> TicketValidation:
        """Validate ``message`` and collect every rule it breaks.

        Only the subject line is matched against the ticket format; the body
        is free-form.

        Args:
            message: Commit message with comment lines already removed.
            branch: Current branch name used for branch exemptions.

        Returns:
            TicketValidation: Parsed tickets plus any validation errors.
        """

        config = self._config
        result = TicketValidation(remaining_message=message)
        if not config.required:
            result.is_valid = True
            result.exempt_reason = "Ticket validation is disabled"
            return result
        if self.is_branch_exempt(branch):
            result.is_valid = True
            result.exempt_reason = f"Branch '{branch}' is exempt from the ticket requirement"
            return result
        if self.is_commit_type_exempt(message):
            result.is_valid = True
            result.exempt_reason = "Commit type is exempt from the ticket requirement"
            return result

        subject = message.splitlines()[0].strip() if message else ""
        match = self._pattern.match(subject)
        if match is None:
            result.errors.append("No valid ticket found at the beginning of commit message")
            return result

        result.tickets = [
            TicketRef(project=found["project"].upper(), number=int(found["number"]))
            for found in self._ticket_pattern.finditer(match["tickets"])
        ]
        result.remaining_message = match["rest"].strip()

        for ticket in result.tickets:
            if not config.min_ticket_number <= ticket.number <= config.max_ticket_number:
                result.errors.append(
                    f"Ticket number {ticket.number} is out of valid range "
                    f"({config.min_ticket_number}-{config.max_ticket_number})"
                )
        if config.require_colon and not match["colon"]:
            result.errors.append("Commit message must include a colon (:) after the ticket number")
        if len(result.remaining_message) < config.min_message_length:
            result.errors.append(
                f"Commit message too short after ticket number (minimum {config.min_message_length} characters)"
            )

        result.is_valid = not result.errors and bool(result.tickets)
        return result


__all__ = ["TicketRef", "TicketValidation", "TicketValidator", "read_commit_message"]
