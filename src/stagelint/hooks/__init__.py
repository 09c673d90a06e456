# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Hook registration and installation services."""

from __future__ import annotations

from .installer import install_hooks
from .models import InstallResult
from .registry import MANAGED_MARKER, available_hooks, is_supported, normalise_hook_order, render_hook

HOOK_NAMES: tuple[str, ...] = available_hooks()

__all__ = [
    "HOOK_NAMES",
    "MANAGED_MARKER",
    "InstallResult",
    "available_hooks",
    "install_hooks",
    "is_supported",
    "normalise_hook_order",
    "render_hook",
]
