# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

from typing import Annotated

import typer

from .. import __version__
from .commands import register_commands
from .commands.dispatch import dispatch_command
from .shared import AppState, configure_logging, debug_requested

app = typer.Typer(
    name="stagelint",
    help="Lint staged files with the lint target of the project that owns them.",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"stagelint {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    debug: Annotated[bool, typer.Option("--debug", help="Emit debug logging to stderr.")] = False,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Prefix status lines with emoji.")] = True,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Store global options for subcommands."""

    enabled = debug_requested(debug)
    configure_logging(debug=enabled)
    ctx.obj = AppState(debug=enabled, emoji=emoji)


register_commands(app)

dispatch_app = typer.Typer(
    name="stagelint-dispatch",
    help="Lint the given staged files; intended to be called by a pre-commit hook runner.",
    add_completion=False,
)
dispatch_app.command()(dispatch_command)


def main() -> None:
    """Run the ``stagelint`` console script."""

    app(prog_name="stagelint")


def dispatch_main() -> None:
    """Run the ``stagelint-dispatch`` console script."""

    configure_logging(debug=debug_requested())
    dispatch_app(prog_name="stagelint-dispatch")


__all__ = ["app", "dispatch_app", "dispatch_main", "main"]
