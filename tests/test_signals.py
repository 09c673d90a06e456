# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for interrupt handling."""

from __future__ import annotations

import os
import signal
import subprocess
import sys
import threading

import pytest

from stagelint.process import ProcessRegistry
from stagelint.signals import DispatchInterrupted, interrupt_guard


def test_interrupted_exit_code() -> None:
    exc = DispatchInterrupted(signal.SIGTERM)
    assert exc.exit_code == 128 + signal.SIGTERM
    assert "SIGTERM" in str(exc)


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
def test_guard_kills_children_and_raises() -> None:
    registry = ProcessRegistry()
    child = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
    registry.register(child)
    try:
        with pytest.raises(DispatchInterrupted) as excinfo:
            with interrupt_guard(registry):
                os.kill(os.getpid(), signal.SIGTERM)
                # The handler runs before the next bytecode boundary.
                for _ in range(1000):
                    pass
        assert excinfo.value.signum == signal.SIGTERM
        assert child.wait(timeout=10) != 0
    finally:
        if child.poll() is None:
            child.kill()
            child.wait()


def test_guard_restores_previous_handlers() -> None:
    before = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
    registry = ProcessRegistry()
    with interrupt_guard(registry):
        assert signal.getsignal(signal.SIGINT) is not before[signal.SIGINT]
    assert {sig: signal.getsignal(sig) for sig in before} == before


def test_guard_reopens_registry() -> None:
    registry = ProcessRegistry()
    registry.terminate_all()
    with interrupt_guard(registry):
        pass
    child = subprocess.Popen([sys.executable, "-c", "pass"])
    registry.register(child)
    assert child.wait(timeout=10) == 0
    registry.unregister(child)


def test_guard_is_inert_off_main_thread() -> None:
    seen: list[object] = []

    def worker() -> None:
        with interrupt_guard(ProcessRegistry()):
            seen.append(signal.getsignal(signal.SIGINT))

    before = signal.getsignal(signal.SIGINT)
    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()
    assert seen == [before]
