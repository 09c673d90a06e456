# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line interface for stagelint."""

from __future__ import annotations

from .app import app, dispatch_main, main

__all__ = ["app", "dispatch_main", "main"]
