# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Map staged file paths onto the monorepo projects that own them."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Final

from .config.models import DEFAULT_PROJECT_ROOTS, DispatchConfig
from .models import FileGroup, ProjectKind, ProjectRef, StagedFile

WINDOWS_SEPARATOR: Final[str] = "\\"

ExistsCheck = Callable[[str], bool]


def normalize_path(raw: str, *, separator: str = WINDOWS_SEPARATOR) -> str:
    """Return ``raw`` with ``separator`` unified to ``/`` and ``./`` prefixes removed.

    The separator is an explicit argument so classification never depends on
    the host platform: Windows-style input normalises identically everywhere.

    Args:
        raw: Path string as supplied by the hook manager or CLI.
        separator: Platform separator to replace. Defaults to the Windows
            backslash, which is a no-op for POSIX input.

    Returns:
        str: Normalised, repository-relative path.
    """

    normalized = raw.strip()
    if separator != "/":
        normalized = normalized.replace(separator, "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    while "//" in normalized:
        normalized = normalized.replace("//", "/")
    return normalized


def classify_path(
    normalized: str,
    project_roots: Mapping[str, ProjectKind] = DEFAULT_PROJECT_ROOTS,
) -> ProjectRef:
    """Return the :class:`ProjectRef` owning a normalised path.

    Prefixes are matched in mapping order and the first match wins. A file
    sitting directly in a prefix directory (``apps/README.md``) has no project
    segment and belongs to the workspace root.

    Args:
        normalized: Path produced by :func:`normalize_path`.
        project_roots: Ordered mapping of directory prefix to project kind.

    Returns:
        ProjectRef: Owning project, or the workspace root when nothing matches.
    """

    parts = PurePosixPath(normalized).parts
    for prefix, kind in project_roots.items():
        prefix_parts = PurePosixPath(prefix).parts
        depth = len(prefix_parts)
        if len(parts) > depth + 1 and parts[:depth] == prefix_parts:
            return ProjectRef(kind, parts[depth])
    return ProjectRef.workspace_root()


@dataclass(slots=True)
class Classification:
    """Result of filtering and classifying a raw path list."""

    groups: dict[ProjectRef, set[StagedFile]] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)
    unlintable: list[str] = field(default_factory=list)
    excluded: list[tuple[str, str]] = field(default_factory=list)
    considered: int = 0

    @property
    def accepted(self) -> int:
        return sum(len(files) for files in self.groups.values())

    @property
    def is_empty(self) -> bool:
        return not self.groups

    def file_groups(self) -> list[FileGroup]:
        """Return groups ordered projects first, then the workspace root."""

        ordered = sorted(self.groups, key=ProjectRef.sort_key)
        return [FileGroup(ref=ref, files=frozenset(self.groups[ref])) for ref in ordered]


class FileClassifier:
    """Filter staged paths and partition them by owning project."""

    def __init__(
        self,
        config: DispatchConfig,
        *,
        root: Path,
        exists: ExistsCheck | None = None,
        separator: str = WINDOWS_SEPARATOR,
    ) -> None:
        """Create a classifier bound to a repository root.

        Args:
            config: Dispatch settings supplying extensions, exclusions and
                project prefixes.
            root: Repository root that staged paths are relative to.
            exists: Optional existence check, defaulting to the filesystem.
            separator: Platform separator normalised to ``/``.
        """

        self._config = config
        self._root = root
        self._exists = exists or self._exists_on_disk
        self._separator = separator
        self._excluded = frozenset(config.excluded_projects)
        self._extensions = frozenset(config.lintable_extensions)
        self._root_prefix = normalize_path(str(root), separator=separator).rstrip("/") + "/"

    def classify(self, raw_paths: Iterable[str]) -> Classification:
        """Classify ``raw_paths`` into disjoint project groups.

        Deleted files are dropped silently, files with unlintable extensions
        are skipped, and files under an excluded project are recorded in
        :attr:`Classification.excluded` for the caller to report.

        Args:
            raw_paths: Paths relative to the repository root.

        Returns:
            Classification: Groups plus the skipped paths per reason.
        """

        result = Classification()
        seen: set[str] = set()
        for raw in raw_paths:
            normalized = self._relative(normalize_path(raw, separator=self._separator))
            if not normalized or normalized in seen:
                continue
            seen.add(normalized)
            result.considered += 1
            if not self._exists(normalized):
                result.missing.append(normalized)
                continue
            if PurePosixPath(normalized).suffix.lower() not in self._extensions:
                result.unlintable.append(normalized)
                continue
            ref = classify_path(normalized, self._config.project_roots)
            if ref.name is not None and ref.name in self._excluded:
                result.excluded.append((normalized, ref.name))
                continue
            staged = StagedFile(normalized=normalized, raw=raw, exists=True)
            result.groups.setdefault(ref, set()).add(staged)
        return result

    def _relative(self, normalized: str) -> str:
        # Hook managers such as lint-staged hand over absolute paths.
        if normalized.startswith(self._root_prefix):
            return normalized[len(self._root_prefix) :]
        return normalized

    def _exists_on_disk(self, normalized: str) -> bool:
        return os.path.isfile(self._root / normalized)


__all__ = [
    "WINDOWS_SEPARATOR",
    "Classification",
    "FileClassifier",
    "classify_path",
    "normalize_path",
]
