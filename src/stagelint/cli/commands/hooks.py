# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command for installing git hooks."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...discovery import GitDiscovery
from ...hooks import InstallResult, install_hooks
from ..shared import CLIError, CLILogger, build_cli_logger, load_project_config, state_from_context


def install_hooks_command(
    ctx: typer.Context,
    root: Annotated[
        Path | None,
        typer.Option("--root", "-r", help="Repository root (default: working directory).", file_okay=False),
    ] = None,
    hooks_dir: Annotated[
        Path | None,
        typer.Option("--hooks-dir", help="Override the git hooks directory."),
    ] = None,
    hook: Annotated[
        list[str] | None,
        typer.Option("--hook", help="Hook to install (repeatable; default: configured hooks)."),
    ] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Print actions without modifying files.")] = False,
) -> None:
    """Install stagelint's pre-commit and commit-msg hooks."""

    state = state_from_context(ctx)
    logger = build_cli_logger(emoji=state.emoji, debug=state.debug)
    try:
        result = _perform_installation(
            (root or Path.cwd()).resolve(),
            hooks_dir=hooks_dir,
            hooks=hook,
            dry_run=dry_run,
            logger=logger,
        )
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    _emit_hooks_summary(result, dry_run=dry_run, logger=logger)
    raise typer.Exit(code=0)


def _perform_installation(
    root: Path,
    *,
    hooks_dir: Path | None,
    hooks: list[str] | None,
    dry_run: bool,
    logger: CLILogger,
) -> InstallResult:
    """Install hooks, merging CLI flags over the configured defaults.

    Raises:
        CLIError: When the repository or a requested hook cannot be resolved.
    """

    settings = load_project_config(root).hooks
    selected = hooks or list(settings.hooks)
    logger.debug(f"install-hooks root={root} hooks={','.join(selected)} dry_run={dry_run}")
    try:
        return install_hooks(
            root,
            hooks_dir=hooks_dir or settings.hooks_dir,
            hooks=selected,
            executable=settings.executable,
            dry_run=dry_run,
            git_dir_lookup=GitDiscovery().git_dir,
            use_emoji=logger.use_emoji,
        )
    except (FileNotFoundError, ValueError) as exc:
        raise CLIError(str(exc)) from exc


def _emit_hooks_summary(result: InstallResult, *, dry_run: bool, logger: CLILogger) -> None:
    if result.backups:
        backup_paths = ", ".join(str(path) for path in result.backups)
        logger.warn(f"Backed up existing hooks: {backup_paths}")
    if dry_run and result.installed:
        planned = ", ".join(str(path) for path in result.installed)
        logger.warn(f"DRY RUN: would install {planned}")


def register(app: typer.Typer) -> None:
    app.command("install-hooks")(install_hooks_command)


__all__ = ["install_hooks_command", "register"]
