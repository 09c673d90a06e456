# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for subprocess helpers."""

from __future__ import annotations

import subprocess
import sys
import time
from pathlib import Path

import pytest

from stagelint.console import FORCE_COLOR_ENV, child_color_env
from stagelint.process import (
    NOT_FOUND_RETURNCODE,
    TIMEOUT_RETURNCODE,
    CommandOptions,
    ProcessRegistry,
    SubprocessExecutionError,
    SubprocessRunner,
    kill_process_tree,
    run_command,
)


def test_run_command_captures_output(tmp_path: Path) -> None:
    result = run_command(
        [sys.executable, "-c", "import os, sys; print(os.getcwd()); print('oops', file=sys.stderr)"],
        options=CommandOptions(cwd=tmp_path),
    )

    assert result.success
    assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()
    assert result.stderr.strip() == "oops"


def test_missing_executable_is_a_failed_result() -> None:
    result = run_command(["definitely-not-a-real-linter-binary"])

    assert result.returncode == NOT_FOUND_RETURNCODE
    assert "was not found on PATH" in result.stderr


def test_timeout_kills_the_child() -> None:
    registry = ProcessRegistry()
    result = run_command(
        [sys.executable, "-c", "import time; time.sleep(30)"],
        options=CommandOptions(timeout=0.2),
        registry=registry,
    )

    assert result.timed_out
    assert result.returncode == TIMEOUT_RETURNCODE
    assert "timed out" in result.stderr
    assert registry.active() == 0


def test_check_raises_on_failure() -> None:
    with pytest.raises(SubprocessExecutionError) as excinfo:
        run_command([sys.executable, "-c", "raise SystemExit(3)"], options=CommandOptions(check=True))
    assert excinfo.value.returncode == 3


def test_empty_command_is_rejected() -> None:
    with pytest.raises(ValueError):
        run_command([])


def test_negative_timeout_is_rejected() -> None:
    with pytest.raises(ValueError):
        CommandOptions(timeout=-1)


def test_closed_registry_kills_new_processes() -> None:
    registry = ProcessRegistry()
    registry.terminate_all()
    process = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
    try:
        registry.register(process)
        assert process.wait(timeout=10) != 0
        assert registry.active() == 0
    finally:
        if process.poll() is None:
            process.kill()
            process.wait()
    registry.reopen()


def test_terminate_all_counts_live_processes() -> None:
    registry = ProcessRegistry()
    process = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
    registry.register(process)

    assert registry.terminate_all() == 1
    process.wait(timeout=10)
    assert registry.active() == 0


def test_subprocess_runner_sets_force_color(tmp_path: Path) -> None:
    runner = SubprocessRunner(timeout=10)
    result = runner([sys.executable, "-c", f"import os; print(os.environ['{FORCE_COLOR_ENV}'])"], cwd=tmp_path)

    assert result.stdout.strip() in {"0", "1"}


def test_child_color_env_preserves_base() -> None:
    env = child_color_env({"PATH": "/bin"})
    assert env["PATH"] == "/bin"
    assert env[FORCE_COLOR_ENV] in {"0", "1"}


posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX process groups")


@posix_only
def test_timeout_is_enforced_through_wrapper_processes() -> None:
    start = time.monotonic()
    result = run_command(["sh", "-c", "sleep 6; echo done"], options=CommandOptions(timeout=0.5))

    assert result.timed_out
    assert "done" not in result.stdout
    assert time.monotonic() - start < 3


@posix_only
def test_timeout_kills_background_grandchildren(tmp_path: Path) -> None:
    marker = tmp_path / "alive"
    script = f"(sleep 2; touch '{marker}') >/dev/null 2>&1 & sleep 30"

    start = time.monotonic()
    result = run_command(["sh", "-c", script], options=CommandOptions(timeout=0.5))

    assert result.timed_out
    assert time.monotonic() - start < 3
    time.sleep(2.5)
    assert not marker.exists()


@posix_only
def test_terminate_all_kills_the_whole_group(tmp_path: Path) -> None:
    marker = tmp_path / "alive"
    registry = ProcessRegistry()
    process = subprocess.Popen(
        ["sh", "-c", f"(sleep 2; touch '{marker}') & wait"],
        start_new_session=True,
    )
    registry.register(process)

    assert registry.terminate_all() == 1
    process.wait(timeout=10)
    time.sleep(2.5)
    assert not marker.exists()


@posix_only
def test_kill_process_tree_tolerates_finished_process() -> None:
    process = subprocess.Popen([sys.executable, "-c", "pass"], start_new_session=True)
    process.wait(timeout=10)

    kill_process_tree(process)

    assert process.returncode == 0
