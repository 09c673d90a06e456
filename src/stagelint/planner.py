# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Plan and run the lint strategies for a single file group."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .config.models import DispatchConfig
from .models import FileGroup, LintPlan, ProjectRef, RunResult, Strategy, StrategyAttempt
from .parsers import parse_eslint_output
from .process import CommandResult, CommandRunner

_LOGGER = logging.getLogger(__name__)

SUPPRESSED_STDERR_MARKERS: Final[tuple[str, ...]] = ("warning", "deprecated")

CommandBuilder = Callable[[Sequence[str]], list[str]]


def filter_stderr(text: str) -> str:
    """Drop stderr lines that only carry warnings or deprecation notices."""

    kept = [
        line for line in text.splitlines() if not any(marker in line.lower() for marker in SUPPRESSED_STDERR_MARKERS)
    ]
    return "\n".join(kept).strip("\n")


def build_plan(ref: ProjectRef, *, workspace_available: bool, workspace_fallback: bool = True) -> LintPlan:
    """Return the ordered strategies applicable to ``ref``.

    Project groups prefer the orchestration tool's own lint target, workspace
    root files start with the engine directly. Without a workspace manifest
    the orchestration tool is never consulted and the engine is the only
    strategy.

    Args:
        ref: Project owning the group.
        workspace_available: ``True`` when the workspace manifest exists.
        workspace_fallback: Allow the unscoped workspace-wide lint as a last
            resort.

    Returns:
        LintPlan: Non-empty, ordered strategies.
    """

    if not workspace_available:
        return LintPlan(ref=ref, strategies=(Strategy.DIRECT,))
    strategies: list[Strategy] = []
    if not ref.is_workspace_root:
        strategies.append(Strategy.NATIVE)
    strategies.append(Strategy.DIRECT)
    if workspace_fallback:
        strategies.append(Strategy.WORKSPACE)
    return LintPlan(ref=ref, strategies=tuple(strategies))


@dataclass(slots=True)
class StrategyOutcome:
    """Mutable record accumulated while one strategy runs."""

    strategy: Strategy
    success: bool = False
    skipped: bool = False
    invocations: int = 0
    failed_files: list[str] = field(default_factory=list)
    output: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    note: str | None = None

    def record(self, result: CommandResult) -> None:
        """Count an invocation, keeping its stdout and any meaningful stderr."""

        self.invocations += 1
        if result.stdout.strip():
            self.output.append(result.stdout.rstrip("\n"))
        if result.success:
            return
        if stderr := filter_stderr(result.stderr):
            self.errors.append(stderr)

    def to_attempt(self) -> StrategyAttempt:
        return StrategyAttempt(
            strategy=self.strategy,
            success=self.success,
            invocations=self.invocations,
            failed_files=tuple(self.failed_files),
            skipped=self.skipped,
        )


AttemptFn = Callable[[Strategy, Sequence[str]], StrategyOutcome]


def attempt_in_order(plan: LintPlan, files: Sequence[str], attempt: AttemptFn) -> list[StrategyOutcome]:
    """Run ``plan`` strategies in order, stopping at the first success.

    Files that still fail under one strategy become the input of the next;
    a skipped strategy passes its input through unchanged.

    Args:
        plan: Ordered strategies to try.
        files: Files of the group being linted.
        attempt: Callable running one strategy against a file list.

    Returns:
        list[StrategyOutcome]: One outcome per strategy actually reached.
    """

    outcomes: list[StrategyOutcome] = []
    remaining = list(files)
    for strategy in plan.strategies:
        outcome = attempt(strategy, remaining)
        outcomes.append(outcome)
        if outcome.success:
            break
        if not outcome.skipped and outcome.failed_files:
            remaining = list(outcome.failed_files)
    return outcomes


def run_with_split(
    build: CommandBuilder,
    files: Sequence[str],
    *,
    run: Callable[[list[str]], CommandResult],
    outcome: StrategyOutcome,
) -> StrategyOutcome:
    """Run a file-scoped command as one batch, retrying file by file on failure.

    A failed batch alone does not say which files are at fault; the per-file
    retries attribute failures precisely. The strategy succeeds when every
    per-file retry passes.

    Args:
        build: Callable turning a file list into a command line.
        files: Files to lint.
        run: Callable executing a command line.
        outcome: Outcome to populate.

    Returns:
        StrategyOutcome: ``outcome`` with success and failing files filled in.
    """

    batch = run(build(files))
    outcome.record(batch)
    if batch.success:
        outcome.success = True
        return outcome
    if len(files) <= 1:
        outcome.failed_files = list(files)
        return outcome
    _LOGGER.debug("batch failed strategy=%s files=%d; retrying per file", outcome.strategy, len(files))
    outcome.output.clear()
    outcome.errors.clear()
    for path in files:
        single = run(build([path]))
        outcome.record(single)
        if not single.success:
            outcome.failed_files.append(path)
    outcome.success = not outcome.failed_files
    return outcome


class WorkspaceTool:
    """Adapter around the monorepo orchestration tool's CLI."""

    def __init__(self, config: DispatchConfig, *, root: Path, runner: CommandRunner) -> None:
        self._command = list(config.tool_command)
        self._manifest = root / config.workspace_manifest
        self._root = root
        self._runner = runner
        self._targets: dict[str, bool] = {}
        self._lock = threading.Lock()

    @property
    def available(self) -> bool:
        """Return ``True`` when the workspace manifest exists at the root."""

        return self._manifest.is_file()

    def has_lint_target(self, project: str) -> bool:
        """Return whether ``project`` exposes a ``lint`` target.

        Any query failure (missing executable, non-zero exit, unparsable JSON)
        is treated as "no lint target".

        Args:
            project: Project name as known to the orchestration tool.

        Returns:
            bool: ``True`` when the project's targets include ``lint``.
        """

        with self._lock:
            cached = self._targets.get(project)
        if cached is not None:
            return cached
        result = self._runner([*self._command, "show", "project", project, "--json"], cwd=self._root)
        found = result.success and _has_lint_key(result.stdout)
        if not result.success:
            _LOGGER.debug("project query failed project=%s returncode=%d", project, result.returncode)
        with self._lock:
            self._targets[project] = found
        return found

    def lint_command(self, project: str, files: Sequence[str]) -> list[str]:
        return [*self._command, "lint", project, "--fix", f"--files={','.join(files)}"]

    def run_many_command(self) -> list[str]:
        return [*self._command, "run-many", "--target=lint", "--all", "--fix"]


def _has_lint_key(stdout: str) -> bool:
    text = stdout.strip()
    start = text.find("{")
    if start < 0:
        return False
    try:
        payload = json.loads(text[start:])
    except json.JSONDecodeError:
        return False
    if not isinstance(payload, dict):
        return False
    targets = payload.get("targets")
    return isinstance(targets, dict) and "lint" in targets


class DispatchPlanner:
    """Build and execute the :class:`LintPlan` of each file group."""

    def __init__(self, config: DispatchConfig, *, root: Path, runner: CommandRunner) -> None:
        """Bind the planner to a repository and a command runner.

        Args:
            config: Dispatch settings.
            root: Repository root; every command runs from here.
            runner: Capability used to launch the engine and the tool.
        """

        self._config = config
        self._root = root
        self._runner = runner
        self._engine = list(config.engine_command)
        self.workspace = WorkspaceTool(config, root=root, runner=runner)

    def plan(self, group: FileGroup) -> LintPlan:
        return build_plan(
            group.ref,
            workspace_available=self.workspace.available,
            workspace_fallback=self._config.workspace_fallback,
        )

    def run(self, group: FileGroup) -> RunResult:
        """Run ``group``'s plan to completion and return its terminal result.

        Args:
            group: Files of a single project (or the workspace root).

        Returns:
            RunResult: Outcome of the last strategy attempted.
        """

        plan = self.plan(group)
        _LOGGER.debug("plan group=%s strategies=%s", group.ref.label, ",".join(plan.strategies))
        outcomes = attempt_in_order(plan, group.paths, lambda strategy, files: self._attempt(group, strategy, files))
        attempted = [outcome for outcome in outcomes if not outcome.skipped]
        final = attempted[-1] if attempted else outcomes[-1]
        # A failed group shows every strategy's diagnostics, not just the last.
        shown = [final] if final.success else attempted
        output = "\n".join(chunk for outcome in shown for chunk in outcome.output)
        errors = [chunk for outcome in shown for chunk in outcome.errors]
        return RunResult(
            group=group,
            strategy=None if final.skipped else final.strategy,
            success=final.success,
            output="\n".join(part for part in (output, *errors) if part),
            failed_files=() if final.success else tuple(final.failed_files),
            violations=tuple(parse_eslint_output(output, root=self._root)),
            attempts=tuple(outcome.to_attempt() for outcome in outcomes),
            notes=tuple(outcome.note for outcome in outcomes if outcome.note),
        )

    def _attempt(self, group: FileGroup, strategy: Strategy, files: Sequence[str]) -> StrategyOutcome:
        outcome = StrategyOutcome(strategy=strategy)
        if strategy is Strategy.NATIVE:
            return self._native(group.ref, files, outcome)
        if strategy is Strategy.DIRECT:
            return run_with_split(self._engine_command, files, run=self._run, outcome=outcome)
        return self._workspace_wide(files, outcome)

    def _native(self, ref: ProjectRef, files: Sequence[str], outcome: StrategyOutcome) -> StrategyOutcome:
        name = ref.name or ""
        if not self.workspace.has_lint_target(name):
            outcome.skipped = True
            outcome.note = f"Project '{name}' has no lint target, using the lint engine directly"
            return outcome
        run_with_split(
            lambda chunk: self.workspace.lint_command(name, chunk),
            files,
            run=self._run,
            outcome=outcome,
        )
        if not outcome.success:
            outcome.note = f"Native lint failed for project '{name}', falling back"
        return outcome

    def _workspace_wide(self, files: Sequence[str], outcome: StrategyOutcome) -> StrategyOutcome:
        result = self._run(self.workspace.run_many_command())
        outcome.record(result)
        outcome.success = result.success
        if not result.success:
            outcome.failed_files = list(files)
        return outcome

    def _engine_command(self, files: Sequence[str]) -> list[str]:
        return [*self._engine, "--fix", *files]

    def _run(self, args: list[str]) -> CommandResult:
        return self._runner(args, cwd=self._root)


__all__ = [
    "DispatchPlanner",
    "StrategyOutcome",
    "WorkspaceTool",
    "attempt_in_order",
    "build_plan",
    "filter_stderr",
    "run_with_split",
]
