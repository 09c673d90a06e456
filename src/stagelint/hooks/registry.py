# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Registry of the git hooks stagelint can install."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

MANAGED_MARKER: Final[str] = "# managed by stagelint"

_HOOK_COMMANDS: Final[dict[str, str]] = {
    "pre-commit": "staged",
    "commit-msg": 'commit-msg "$1"',
}


def available_hooks() -> tuple[str, ...]:
    """Return the supported git hook names in installation order."""

    return tuple(_HOOK_COMMANDS)


def is_supported(name: str) -> bool:
    return name in _HOOK_COMMANDS


def normalise_hook_order(hooks: Iterable[str] | None = None) -> tuple[str, ...]:
    """Return the requested hooks in registry order.

    Args:
        hooks: Optional hook names; ``None`` selects every supported hook.

    Returns:
        tuple[str, ...]: De-duplicated names ordered as in the registry.

    Raises:
        ValueError: If a requested hook is not supported.
    """

    if hooks is None:
        return available_hooks()
    requested = set(hooks)
    unknown = sorted(name for name in requested if not is_supported(name))
    if unknown:
        raise ValueError(f"Unsupported hook(s): {', '.join(unknown)}")
    return tuple(name for name in _HOOK_COMMANDS if name in requested)


def render_hook(name: str, *, executable: str) -> str:
    """Return the shell script installed for hook ``name``.

    Args:
        name: Supported hook name.
        executable: Command used to invoke stagelint from the hook.

    Returns:
        str: Executable POSIX shell script.
    """

    return f'#!/usr/bin/env sh\n{MANAGED_MARKER}\nexec {executable} {_HOOK_COMMANDS[name]}\n'


__all__ = ["MANAGED_MARKER", "available_hooks", "is_supported", "normalise_hook_order", "render_hook"]
