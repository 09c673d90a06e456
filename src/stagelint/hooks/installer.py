# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Install stagelint's git hook scripts into a repository."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..logging import info, ok
from .models import InstallResult
from .registry import MANAGED_MARKER, normalise_hook_order, render_hook

GitDirLookup = Callable[[Path], Path | None]


@dataclass(slots=True)
class HookOperationOutcome:
    """Filesystem paths affected by a single hook installation."""

    installed: Path | None = None
    unchanged: Path | None = None
    backup: Path | None = None


def install_hooks(
    root: Path,
    *,
    hooks_dir: Path | None = None,
    hooks: Iterable[str] | None = None,
    executable: str = "stagelint",
    dry_run: bool = False,
    git_dir_lookup: GitDirLookup | None = None,
    use_emoji: bool = True,
) -> InstallResult:
    """Write stagelint hook scripts into the repository's hooks directory.

    Hooks previously written by stagelint are replaced in place; any other
    existing hook is renamed with a timestamped ``.backup`` suffix first.
    Re-running with identical settings changes nothing.

    Args:
        root: Repository root whose hooks should be installed.
        hooks_dir: Optional override for the target hooks directory.
        hooks: Optional iterable restricting the hook names to install.
        executable: Command the hook scripts invoke.
        dry_run: When ``True`` avoid filesystem mutations while reporting actions.
        git_dir_lookup: Resolves the git directory when ``.git`` is not a
            plain directory (worktrees, submodules).
        use_emoji: Prefix progress messages with emoji.

    Returns:
        InstallResult: Aggregated record of installed, unchanged, and backed-up hooks.

    Raises:
        FileNotFoundError: Raised when the repository has no git directory.
        ValueError: Raised when an unsupported hook name is requested.
    """

    target_dir = _resolve_target_dir(root.resolve(), hooks_dir, git_dir_lookup)
    result = InstallResult()
    for name in normalise_hook_order(hooks):
        outcome = _install_single_hook(
            target_dir / name,
            render_hook(name, executable=executable),
            dry_run=dry_run,
            use_emoji=use_emoji,
        )
        if outcome.installed is not None:
            result.installed.append(outcome.installed)
        if outcome.unchanged is not None:
            result.unchanged.append(outcome.unchanged)
        if outcome.backup is not None:
            result.backups.append(outcome.backup)

    if dry_run:
        ok(f"Dry run complete: would install {len(result.installed)} hooks", use_emoji=use_emoji)
    else:
        ok(f"Installed {len(result.installed)} hooks ({len(result.unchanged)} already current)", use_emoji=use_emoji)
    return result


def _resolve_target_dir(root: Path, hooks_dir: Path | None, git_dir_lookup: GitDirLookup | None) -> Path:
    if hooks_dir is not None:
        return hooks_dir if hooks_dir.is_absolute() else root / hooks_dir
    git_dir = root / ".git"
    if git_dir.is_dir():
        return git_dir / "hooks"
    if git_dir.is_file() and git_dir_lookup is not None and (resolved := git_dir_lookup(root)) is not None:
        return resolved / "hooks"
    raise FileNotFoundError(f"Not a git repository (missing .git directory): {root}")


def _install_single_hook(destination: Path, content: str, *, dry_run: bool, use_emoji: bool) -> HookOperationOutcome:
    outcome = HookOperationOutcome()
    name = destination.name
    if destination.is_file() and not destination.is_symlink():
        existing = destination.read_text(encoding="utf-8", errors="replace")
        if existing == content:
            outcome.unchanged = destination
            return outcome
        if MANAGED_MARKER not in existing:
            timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
            backup_path = destination.with_name(f"{name}.backup.{timestamp}")
            info(f"Backing up existing {name} hook to {backup_path}", use_emoji=use_emoji)
            if not dry_run:
                destination.rename(backup_path)
            outcome.backup = backup_path

    info(f"Installing {name} hook", use_emoji=use_emoji)
    outcome.installed = destination
    if dry_run:
        return outcome

    destination.parent.mkdir(parents=True, exist_ok=True)
    if destination.is_symlink():
        destination.unlink()
    destination.write_text(content, encoding="utf-8")
    destination.chmod(0o755)
    return outcome


__all__ = ["install_hooks"]
