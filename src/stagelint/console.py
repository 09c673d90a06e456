# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Terminal detection and the shared Rich console."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from functools import cache
from typing import Final

from rich.console import Console

FORCE_COLOR_ENV: Final[str] = "FORCE_COLOR"


def detect_tty() -> bool:
    """Return ``True`` when stdout is a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def child_color_env(base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return an environment forcing or suppressing colour in child processes.

    Linters decide on colour from their own stdout, which is always a pipe
    here; ``FORCE_COLOR`` makes them follow stagelint's terminal instead.

    Args:
        base: Environment to copy; defaults to ``os.environ``.

    Returns:
        dict[str, str]: Copy of ``base`` with ``FORCE_COLOR`` set.
    """

    env = dict(os.environ if base is None else base)
    env[FORCE_COLOR_ENV] = "1" if detect_tty() else "0"
    return env


@cache
def _build_console(styled: bool, emoji: bool, tty: bool) -> Console:
    return Console(
        color_system="auto" if styled else None,
        force_terminal=tty,
        no_color=not styled,
        emoji=emoji,
        soft_wrap=True,
        highlight=False,
    )


def get_console(*, color: bool, emoji: bool) -> Console:
    """Return the console for the requested colour and emoji preferences.

    Colour is only honoured when stdout is a terminal. Consoles are cached
    per combination and resolve ``sys.stdout`` at print time.
    """

    tty = detect_tty()
    return _build_console(color and tty, emoji, tty)


__all__ = [
    "FORCE_COLOR_ENV",
    "child_color_env",
    "detect_tty",
    "get_console",
]
