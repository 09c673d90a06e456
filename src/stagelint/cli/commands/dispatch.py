# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command that lints an explicit list of staged files."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

import typer

from ...executor import run_dispatch
from ..shared import AppState, CLIError, build_cli_logger, load_project_config, state_from_context


def execute_dispatch(files: Sequence[str], *, state: AppState, root: Path | None = None) -> int:
    """Load configuration for ``root`` and dispatch ``files``.

    Args:
        files: Staged paths relative to ``root``.
        state: Global CLI options.
        root: Repository root; defaults to the working directory.

    Returns:
        int: Process exit status for the dispatch run.

    Raises:
        CLIError: When the configuration cannot be loaded.
    """

    resolved_root = root or Path.cwd()
    logger = build_cli_logger(emoji=state.emoji, debug=state.debug)
    config = load_project_config(resolved_root)
    logger.debug(f"dispatch root={resolved_root} files={len(files)} jobs={config.dispatch.jobs}")
    return run_dispatch(files, config=config.dispatch, root=resolved_root, use_emoji=state.emoji)


def dispatch_command(
    ctx: typer.Context,
    files: Annotated[
        list[str] | None,
        typer.Argument(help="Staged files to lint, relative to the repository root.", show_default=False),
    ] = None,
) -> None:
    """Lint staged files with each owning project's lint target."""

    state = state_from_context(ctx)
    try:
        code = execute_dispatch(files or [], state=state)
    except CLIError as exc:
        build_cli_logger(emoji=state.emoji).fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=code)


def register(app: typer.Typer) -> None:
    """Register the ``dispatch`` command on ``app``."""

    app.command("dispatch")(dispatch_command)


__all__ = ["dispatch_command", "execute_dispatch", "register"]
