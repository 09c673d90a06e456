# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Config loading utilities with layered precedence."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import Config, ConfigError
from .sources import (
    PROJECT_CONFIG_FILENAME,
    ConfigSource,
    DefaultConfigSource,
    PackageJsonConfigSource,
    TomlConfigSource,
)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class ConfigLoadResult(BaseModel):
    """Container bundling a resolved config with the sources that shaped it."""

    model_config = ConfigDict(validate_assignment=True)

    config: Config
    sources: list[str] = Field(default_factory=list)


class ConfigLoader:
    """Apply layered configuration sources with predictable precedence."""

    def __init__(self, *, project_root: Path, sources: Sequence[ConfigSource]) -> None:
        """Initialise a loader that merges the supplied configuration sources.

        Args:
            project_root: Directory that anchors relative paths.
            sources: Ordered collection of configuration sources; later
                sources override earlier ones.

        Raises:
            ValueError: If ``sources`` is empty.
        """

        if not sources:
            raise ValueError("at least one configuration source is required")
        self._sources = list(sources)
        self._project_root = project_root.resolve()

    @classmethod
    def for_root(cls, project_root: Path, *, project_config: Path | None = None) -> ConfigLoader:
        """Build a loader that respects package.json, project, and default sources.

        Args:
            project_root: Workspace root used to discover configuration files.
            project_config: Optional override for the project TOML file.

        Returns:
            ConfigLoader: Loader configured with default precedence ordering.
        """

        root = project_root.resolve()
        project_file = project_config if project_config is not None else root / PROJECT_CONFIG_FILENAME
        sources: list[ConfigSource] = [
            DefaultConfigSource(),
            PackageJsonConfigSource(root / "package.json"),
            TomlConfigSource(project_file, name=str(project_file)),
        ]
        return cls(project_root=root, sources=sources)

    def load(self) -> Config:
        """Return the resolved configuration.

        Returns:
            Config: Fully merged configuration model.
        """

        return self.load_with_trace().config

    def load_with_trace(self) -> ConfigLoadResult:
        """Return the resolved configuration with the contributing sources.

        Returns:
            ConfigLoadResult: Resolved configuration and source names.

        Raises:
            ConfigError: When a source is malformed or the merged data fails
                validation.
        """

        merged: dict[str, Any] = {}
        contributing: list[str] = []
        for source in self._sources:
            if not (fragment := source.load()):
                continue
            merged = _deep_merge(merged, fragment)
            contributing.append(source.name)
        try:
            config = Config.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(_format_validation_error(exc)) from exc
        config = self._resolve_paths(config)
        return ConfigLoadResult(config=config, sources=contributing)

    def _resolve_paths(self, config: Config) -> Config:
        hooks_dir = config.hooks.hooks_dir
        if hooks_dir is not None and not hooks_dir.is_absolute():
            config.hooks = config.hooks.model_copy(update={"hooks_dir": self._project_root / hooks_dir})
        return config


def _format_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        problems.append(f"{location}: {error['msg']}")
    return "Invalid configuration: " + "; ".join(problems)


def load_config(project_root: Path) -> Config:
    """Load configuration for ``project_root`` using the default tiered sources."""
    return ConfigLoader.for_root(project_root).load()


__all__ = ["ConfigLoadResult", "ConfigLoader", "load_config"]
