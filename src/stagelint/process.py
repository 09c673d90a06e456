# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import signal

# Bandit: all launches go through run_command with argument lists, never a shell.
import subprocess  # nosec B404
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Protocol

from .console import child_color_env

TIMEOUT_RETURNCODE: Final[int] = 124
NOT_FOUND_RETURNCODE: Final[int] = 127
_POSIX: Final[bool] = os.name != "nt"

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CommandOptions:
    """Command execution options."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = False
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout must be non-negative")


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a finished external command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        """Return ``True`` when the command exited with status zero."""

        return self.returncode == 0

    @property
    def timed_out(self) -> bool:
        """Return ``True`` when the command was killed after its timeout."""

        return self.returncode == TIMEOUT_RETURNCODE


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(self, result: CommandResult) -> None:
        """Initialise the error with captured subprocess metadata.

        Args:
            result: Result of the failed command.
        """

        super().__init__(
            f"Command '{result.args[0] if result.args else '<empty>'}' exited with status "
            f"{result.returncode}. stderr: {result.stderr or '<none>'}",
        )
        self.result = result
        self.returncode = result.returncode


@dataclass(slots=True)
class ProcessRegistry:
    """Track live child processes so interrupts can terminate them."""

    _processes: set[subprocess.Popen[str]] = field(default_factory=set)
    _lock: threading.Lock = field(default_factory=threading.Lock)
    _closed: bool = False

    def register(self, process: subprocess.Popen[str]) -> None:
        """Track ``process``; once closed, new processes are killed on sight."""

        with self._lock:
            closed = self._closed
            if not closed:
                self._processes.add(process)
        if closed:
            kill_process_tree(process)

    def unregister(self, process: subprocess.Popen[str]) -> None:
        with self._lock:
            self._processes.discard(process)

    def active(self) -> int:
        """Return the number of child processes still running."""

        with self._lock:
            return len(self._processes)

    def terminate_all(self) -> int:
        """Kill every registered process and refuse new ones until reopened.

        Returns:
            int: Number of processes that were still alive.
        """

        with self._lock:
            self._closed = True
            processes = list(self._processes)
            self._processes.clear()
        killed = 0
        for process in processes:
            if process.poll() is None:
                killed += 1
            # The wrapper may be gone while its workers still run.
            kill_process_tree(process)
        return killed

    def reopen(self) -> None:
        with self._lock:
            self._closed = False


def kill_process_tree(process: subprocess.Popen[str]) -> None:
    """Kill ``process`` and every process in the group it leads.

    Wrappers such as ``npx`` start the real linter as a grandchild holding the
    output pipes. Children launched by :func:`run_command` lead their own
    process group on POSIX, so the whole group is signalled. Elsewhere, or for
    processes that do not lead a group, only ``process`` itself is killed.

    Args:
        process: Child process to terminate.
    """

    if _POSIX:
        try:
            leads_group = os.getpgid(process.pid) == process.pid
        except ProcessLookupError:
            # A reaped leader keeps its group id while members remain.
            leads_group = process.returncode is not None
        if leads_group:
            with contextlib.suppress(ProcessLookupError):
                os.killpg(process.pid, signal.SIGKILL)
            return
    process.kill()


PROCESS_REGISTRY: Final[ProcessRegistry] = ProcessRegistry()


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Normalise the subprocess argument sequence.

    ``shutil.which`` honours ``PATHEXT`` so ``npx`` resolves to ``npx.cmd`` on
    Windows without running through a shell.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Validated argument list suitable for subprocess execution.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    options: CommandOptions | None = None,
    registry: ProcessRegistry | None = None,
) -> CommandResult:
    """Execute ``args`` capturing output, honouring timeouts and interrupts.

    A missing executable and a timeout are reported through the result
    (statuses 127 and 124) rather than raised, so callers can treat both as an
    ordinary command failure. Any exception raised while waiting, including
    ``KeyboardInterrupt`` and exceptions thrown from signal handlers, kills the
    child and its process group before propagating.

    Args:
        args: Command and argument sequence to execute.
        options: Options configuring execution semantics.
        registry: Registry tracking the live process. Defaults to the
            process-wide :data:`PROCESS_REGISTRY`.

    Returns:
        CommandResult: Exit status and captured output.

    Raises:
        SubprocessExecutionError: When ``check`` is true and the process exits
            with a non-zero status.
    """

    resolved_options = options or CommandOptions()
    tracker = registry if registry is not None else PROCESS_REGISTRY
    try:
        normalized = _normalize_args(args)
    except FileNotFoundError as exc:
        result = CommandResult(args=tuple(args), returncode=NOT_FOUND_RETURNCODE, stderr=str(exc))
        return _checked(result, resolved_options)

    _LOGGER.debug("running command=%s cwd=%s", " ".join(args), resolved_options.cwd)
    # Bandit: commands originate from configuration; we pass argument lists
    # directly without shell expansion.
    process = subprocess.Popen(  # nosec B603
        normalized,
        cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
        env=dict(resolved_options.env) if resolved_options.env is not None else None,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
        start_new_session=_POSIX,
    )
    tracker.register(process)
    try:
        try:
            stdout, stderr = process.communicate(timeout=resolved_options.timeout)
            returncode = process.returncode
        except subprocess.TimeoutExpired:
            kill_process_tree(process)
            stdout, stderr = process.communicate()
            timeout_msg = f"Command timed out after {resolved_options.timeout:.1f}s"
            stderr = f"{stderr}\n{timeout_msg}" if stderr else timeout_msg
            returncode = TIMEOUT_RETURNCODE
        except BaseException:
            kill_process_tree(process)
            process.wait()
            raise
    finally:
        tracker.unregister(process)

    result = CommandResult(args=tuple(args), returncode=returncode, stdout=stdout or "", stderr=stderr or "")
    return _checked(result, resolved_options)


def _checked(result: CommandResult, options: CommandOptions) -> CommandResult:
    if options.check and not result.success:
        raise SubprocessExecutionError(result)
    return result


class CommandRunner(Protocol):
    """Capability used by the dispatcher to launch external commands."""

    def __call__(self, args: Sequence[str], *, cwd: Path) -> CommandResult:
        """Run ``args`` inside ``cwd`` and return the captured result."""
        ...


@dataclass(slots=True)
class SubprocessRunner:
    """Default :class:`CommandRunner` backed by :func:`run_command`."""

    timeout: float | None = None
    env: Mapping[str, str] | None = None

    def __call__(self, args: Sequence[str], *, cwd: Path) -> CommandResult:
        options = CommandOptions(cwd=cwd, env=child_color_env(self.env), timeout=self.timeout)
        return run_command(args, options=options)


__all__ = [
    "NOT_FOUND_RETURNCODE",
    "PROCESS_REGISTRY",
    "TIMEOUT_RETURNCODE",
    "CommandOptions",
    "CommandResult",
    "CommandRunner",
    "ProcessRegistry",
    "SubprocessExecutionError",
    "SubprocessRunner",
    "kill_process_tree",
    "run_command",
]
