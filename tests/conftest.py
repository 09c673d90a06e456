# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from helpers.runner import FakeRunner

from stagelint.config import DispatchConfig


@pytest.fixture
def dispatch_config() -> DispatchConfig:
    return DispatchConfig(excluded_projects=("ui-kit",))


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Return a repository root with a workspace manifest."""

    (tmp_path / "nx.json").write_text("{}", encoding="utf-8")
    return tmp_path


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()
