# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run every file group's lint plan and aggregate a single verdict."""

from __future__ import annotations

import logging
import signal
from collections.abc import Iterable, Iterator, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from .classify import Classification, FileClassifier
from .config.models import DispatchConfig
from .logging import fail, info, ok, passthrough, warn
from .models import DispatchReport, FileGroup, RunResult
from .parsers import count_by_severity
from .planner import DispatchPlanner
from .process import PROCESS_REGISTRY, CommandRunner, SubprocessRunner
from .signals import DispatchInterrupted, interrupt_guard

_LOGGER = logging.getLogger(__name__)


class DispatchExecutor:
    """Classify staged files, run each group's plan, and report the outcome."""

    def __init__(
        self,
        config: DispatchConfig,
        *,
        root: Path,
        runner: CommandRunner | None = None,
        classifier: FileClassifier | None = None,
        use_emoji: bool = True,
    ) -> None:
        """Create an executor for the repository at ``root``.

        Args:
            config: Dispatch settings.
            root: Repository root; staged paths are relative to it.
            runner: Command runner; defaults to real subprocesses bounded by
                the configured timeout.
            classifier: Optional classifier override.
            use_emoji: Prefix status lines with emoji.
        """

        self._config = config
        self._root = root
        self._runner = runner or SubprocessRunner(timeout=config.timeout)
        self._classifier = classifier or FileClassifier(config, root=root)
        self._planner = DispatchPlanner(config, root=root, runner=self._runner)
        self._use_emoji = use_emoji

    @property
    def planner(self) -> DispatchPlanner:
        return self._planner

    def dispatch(self, raw_paths: Sequence[str]) -> DispatchReport:
        """Lint ``raw_paths`` and return the aggregated report.

        A group's failure never stops the remaining groups. An empty input,
        or one where every file is filtered out, succeeds without launching
        any external command.

        Args:
            raw_paths: Staged paths as supplied on the command line.

        Returns:
            DispatchReport: One result per group plus the overall verdict.
        """

        report = DispatchReport()
        if not raw_paths:
            warn("No files provided to lint", use_emoji=self._use_emoji)
            return report

        classification = self._classifier.classify(raw_paths)
        report.considered = classification.considered
        report.excluded = tuple(path for path, _ in classification.excluded)
        self._announce(classification)
        if classification.is_empty:
            ok("No lintable files found or all files are excluded. Skipping lint.", use_emoji=self._use_emoji)
            return report

        if not self._planner.workspace.available:
            warn(
                f"No {self._config.workspace_manifest} found, linting files with the lint engine directly",
                use_emoji=self._use_emoji,
            )
        for result in self._run_groups(classification.file_groups()):
            self._report(result)
            report.results.append(result)

        if report.success:
            ok("All staged files linted successfully!", use_emoji=self._use_emoji)
        else:
            fail("Linting failed. Please fix the issues and try again.", use_emoji=self._use_emoji)
        return report

    def _announce(self, classification: Classification) -> None:
        for path, project in classification.excluded:
            info(f"Excluding file from {project}: {path}", use_emoji=self._use_emoji)
        if classification.is_empty:
            return
        filtered = classification.considered - classification.accepted
        info(
            f"Processing {classification.accepted} lintable files ({filtered} files excluded/filtered)...",
            use_emoji=self._use_emoji,
        )

    def _run_groups(self, groups: Sequence[FileGroup]) -> Iterator[RunResult]:
        """Yield results in group order, running up to ``jobs`` groups at once."""

        if self._config.jobs <= 1 or len(groups) <= 1:
            for group in groups:
                yield self._planner.run(group)
            return

        pool = ThreadPoolExecutor(max_workers=self._config.jobs, thread_name_prefix="stagelint")
        try:
            futures: list[Future[RunResult]] = [pool.submit(self._planner.run, group) for group in groups]
            for future in futures:
                yield future.result()
        except BaseException:
            pool.shutdown(wait=True, cancel_futures=True)
            raise
        pool.shutdown(wait=True)

    def _report(self, result: RunResult) -> None:
        label = result.group.ref.label
        _LOGGER.debug("group=%s success=%s invocations=%d", label, result.success, result.invocations)
        for note in result.notes:
            info(note, use_emoji=self._use_emoji)
        if result.success:
            strategy = result.strategy.value if result.strategy else "none"
            ok(f"{label}: {len(result.group)} file(s) linted via {strategy}", use_emoji=self._use_emoji)
            if result.violations:
                passthrough(result.output)
            return
        fail(f"{label}: lint failed after exhausting its plan", use_emoji=self._use_emoji)
        passthrough(result.output)
        if result.failed_files:
            fail(f"Files still failing: {', '.join(result.failed_files)}", use_emoji=self._use_emoji)
        counts = count_by_severity(result.violations)
        if counts:
            summary = ", ".join(f"{count} {severity}(s)" for severity, count in sorted(counts.items()))
            info(f"{label}: {summary}", use_emoji=self._use_emoji)


def run_dispatch(
    raw_paths: Iterable[str],
    *,
    config: DispatchConfig,
    root: Path,
    runner: CommandRunner | None = None,
    use_emoji: bool = True,
) -> int:
    """Dispatch ``raw_paths`` under interrupt protection and return the exit code.

    Args:
        raw_paths: Staged paths relative to ``root``.
        config: Dispatch settings.
        root: Repository root.
        runner: Optional command runner override.
        use_emoji: Prefix status lines with emoji.

    Returns:
        int: ``0`` when every group passed, ``1`` when any failed, or
        ``128 + signum`` when interrupted.
    """

    executor = DispatchExecutor(config, root=root, runner=runner, use_emoji=use_emoji)
    try:
        with interrupt_guard(PROCESS_REGISTRY):
            report = executor.dispatch(list(raw_paths))
    except DispatchInterrupted as exc:
        warn(str(exc), use_emoji=use_emoji)
        return exc.exit_code
    except KeyboardInterrupt:
        warn("Linting interrupted by user", use_emoji=use_emoji)
        return 128 + signal.SIGINT
    _LOGGER.debug("dispatch finished groups=%d success=%s", len(report.results), report.success)
    return report.exit_code


__all__ = ["DispatchExecutor", "run_dispatch"]
