# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Git-based discovery of staged files and repository metadata."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

from .process import CommandOptions, SubprocessExecutionError, run_command

GitRunner = Callable[[Sequence[str], Path], list[str]]

STAGED_DIFF_FILTER = "ACMR"


class GitDiscovery:
    """Collect staged files and branch information from git."""

    def __init__(self, *, runner: GitRunner | None = None) -> None:
        """Create a git discovery helper.

        Args:
            runner: Optional command runner used to execute git commands. A
                default based on :func:`run_command` is used when omitted.
        """

        self._runner = runner or self._default_runner

    def staged_files(self, root: Path) -> list[str]:
        """Return staged paths relative to ``root``.

        Deleted files are excluded by the diff filter; renamed files are
        reported under their new name.

        Args:
            root: Repository root directory.

        Returns:
            list[str]: Repository-relative paths in git's order.
        """

        cmd = ["git", "diff", "--name-only", "--cached", f"--diff-filter={STAGED_DIFF_FILTER}"]
        return [stripped for raw in self._runner(cmd, root) if (stripped := raw.strip())]

    def current_branch(self, root: Path) -> str:
        """Return the checked-out branch name, or ``""`` when detached or unknown."""

        try:
            lines = self._runner(["git", "branch", "--show-current"], root)
        except SubprocessExecutionError:
            return ""
        return lines[0].strip() if lines else ""

    def git_dir(self, root: Path) -> Path | None:
        """Return the repository's git directory, honouring worktrees."""

        try:
            lines = self._runner(["git", "rev-parse", "--git-dir"], root)
        except SubprocessExecutionError:
            return None
        if not lines:
            return None
        candidate = Path(lines[0].strip())
        return candidate if candidate.is_absolute() else (root / candidate).resolve()

    @staticmethod
    def _default_runner(cmd: Sequence[str], root: Path) -> list[str]:
        """Execute ``cmd`` returning stdout lines.

        Args:
            cmd: Git command to execute.
            root: Repository root directory.

        Returns:
            list[str]: Raw stdout lines produced by subprocess execution.

        Raises:
            SubprocessExecutionError: When git exits with a non-zero status or
                is not installed.
        """

        result = run_command(cmd, options=CommandOptions(cwd=root, check=True))
        return result.stdout.splitlines()


__all__ = ["STAGED_DIFF_FILTER", "GitDiscovery", "GitRunner"]
