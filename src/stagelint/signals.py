# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Interrupt handling for dispatch runs."""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from types import FrameType
from typing import Final

from .process import PROCESS_REGISTRY, ProcessRegistry

_LOGGER = logging.getLogger(__name__)

HANDLED_SIGNALS: Final[tuple[signal.Signals, ...]] = (signal.SIGINT, signal.SIGTERM)


class DispatchInterrupted(RuntimeError):
    """Raised from a signal handler to abort the current dispatch run."""

    def __init__(self, signum: int) -> None:
        self.signum = signum
        self.exit_code = 128 + signum
        try:
            name = signal.Signals(signum).name
        except ValueError:
            name = str(signum)
        super().__init__(f"Linting interrupted by {name}")


@contextmanager
def interrupt_guard(registry: ProcessRegistry | None = None) -> Iterator[None]:
    """Abort promptly on SIGINT/SIGTERM, killing in-flight child processes.

    The handler kills every registered process and raises
    :class:`DispatchInterrupted` in the main thread. File rewrites already
    performed by the linters are left in place; they are idempotent.
    Outside the main thread the guard is a no-op because Python only
    delivers signals there.

    Args:
        registry: Registry of live processes. Defaults to the process-wide one.

    Yields:
        None: Control returns to the caller with handlers installed.
    """

    tracker = registry if registry is not None else PROCESS_REGISTRY
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum: int, _frame: FrameType | None) -> None:
        killed = tracker.terminate_all()
        _LOGGER.debug("signal=%d killed=%d", signum, killed)
        raise DispatchInterrupted(signum)

    previous = {sig: signal.getsignal(sig) for sig in HANDLED_SIGNALS}
    for sig in HANDLED_SIGNALS:
        signal.signal(sig, _handler)
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
        tracker.reopen()


__all__ = ["HANDLED_SIGNALS", "DispatchInterrupted", "interrupt_guard"]
