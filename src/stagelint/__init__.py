# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Staged-file lint dispatcher for Nx-style JavaScript/TypeScript monorepos."""

from __future__ import annotations

__version__ = "0.3.0"

__all__ = ["__version__"]
