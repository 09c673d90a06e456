# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command validating the ticket reference in a commit message."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...commit_msg import TicketValidation, TicketValidator, read_commit_message
from ...config.models import CommitMsgConfig
from ...discovery import GitDiscovery
from ..shared import CLIError, CLILogger, build_cli_logger, load_project_config, state_from_context

REQUIRED_FORMAT = "PROJECT-#### : commit message"


def commit_msg_command(
    ctx: typer.Context,
    message_file: Annotated[
        Path,
        typer.Argument(help="Path to the commit message file git passes to the hook.", show_default=False),
    ],
    branch: Annotated[
        str | None,
        typer.Option("--branch", help="Branch name used for exemptions (default: current branch)."),
    ] = None,
) -> None:
    """Check that a commit message starts with a valid ticket reference."""

    state = state_from_context(ctx)
    logger = build_cli_logger(emoji=state.emoji, debug=state.debug)
    root = Path.cwd()
    try:
        config = load_project_config(root).commit_msg
        try:
            message = read_commit_message(message_file)
        except OSError as exc:
            raise CLIError(f"Error reading commit message: {exc}") from exc
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    current_branch = branch if branch is not None else GitDiscovery().current_branch(root)
    logger.debug(f"commit-msg branch={current_branch or '-'} file={message_file}")
    logger.info("Validating ticket in commit message...")
    result = TicketValidator(config).validate(message, branch=current_branch)
    _emit_result(result, message=message, config=config, logger=logger)
    raise typer.Exit(code=0 if result.is_valid else 1)


def _emit_result(result: TicketValidation, *, message: str, config: CommitMsgConfig, logger: CLILogger) -> None:
    if result.exempt_reason:
        logger.info(result.exempt_reason)
        return
    if result.is_valid:
        logger.ok("Ticket validation passed!")
        logger.echo("Found tickets:")
        for ticket in result.tickets:
            logger.echo(f"   {ticket}")
        return

    logger.fail("Ticket validation failed!")
    for error in result.errors:
        logger.echo(f"   • {error}")
    logger.echo("")
    logger.echo("Required format:")
    logger.echo(f"   {REQUIRED_FORMAT}")
    if config.examples:
        logger.echo("")
        logger.echo("Valid examples:")
        for example in config.examples:
            logger.echo(f"   {example}")
    logger.echo("")
    logger.echo("Valid project prefixes:")
    for prefix in config.project_prefixes:
        logger.echo(f"   {prefix}-####")
    logger.echo("")
    logger.echo("Your commit message:")
    logger.echo(f'   "{message}"')


def register(app: typer.Typer) -> None:
    app.command("commit-msg")(commit_msg_command)


__all__ = ["REQUIRED_FORMAT", "commit_msg_command", "register"]
