# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command that lints whatever is currently staged in git."""

from __future__ import annotations

from pathlib import Path

import typer

from ...discovery import GitDiscovery
from ...process import SubprocessExecutionError
from ..shared import CLIError, build_cli_logger, state_from_context
from .dispatch import execute_dispatch


def staged_command(ctx: typer.Context) -> None:
    """Lint files staged for commit (added, copied, modified, or renamed)."""

    state = state_from_context(ctx)
    logger = build_cli_logger(emoji=state.emoji, debug=state.debug)
    root = Path.cwd()
    try:
        try:
            files = GitDiscovery().staged_files(root)
        except SubprocessExecutionError as exc:
            raise CLIError(f"Unable to list staged files: {exc}") from exc
        logger.debug(f"staged root={root} count={len(files)}")
        if not files:
            logger.ok("No staged files to lint")
            raise typer.Exit(code=0)
        code = execute_dispatch(files, state=state, root=root)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=code)


def register(app: typer.Typer) -> None:
    app.command("staged")(staged_command)


__all__ = ["register", "staged_command"]
