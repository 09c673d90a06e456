# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders."""

from __future__ import annotations

from .loader import ConfigLoader, ConfigLoadResult, load_config
from .models import CommitMsgConfig, Config, ConfigError, DispatchConfig, HooksConfig

__all__ = [
    "CommitMsgConfig",
    "Config",
    "ConfigError",
    "ConfigLoadResult",
    "ConfigLoader",
    "DispatchConfig",
    "HooksConfig",
    "load_config",
]
