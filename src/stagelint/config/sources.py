# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Concrete configuration sources (defaults, TOML, package.json)."""

from __future__ import annotations

import json
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, Protocol

from .models import Config, ConfigError

PACKAGE_JSON_SECTION_KEY: Final[str] = "stagelint"
PROJECT_CONFIG_FILENAME: Final[str] = ".stagelint.toml"


class ConfigSource(Protocol):
    """A named provider of raw configuration fragments."""

    name: str

    def load(self) -> Mapping[str, Any]: ...

    def describe(self) -> str: ...


class DefaultConfigSource:
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return Config().to_dict()

    def describe(self) -> str:
        return "Built-in defaults"


class TomlConfigSource:
    """Load configuration data from a TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self._path = path
        self.name = name or str(path)

    def load(self) -> Mapping[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            with self._path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {self._path}: {exc}") from exc
        return data

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


class PackageJsonConfigSource:
    """Read configuration from the ``"stagelint"`` key of ``package.json``."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self.name = str(path)

    def load(self) -> Mapping[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in {self._path}: {exc}") from exc
        if not isinstance(data, Mapping):
            raise ConfigError(f"{self._path} must contain a JSON object")
        section = data.get(PACKAGE_JSON_SECTION_KEY)
        if section is None:
            return {}
        if not isinstance(section, Mapping):
            raise ConfigError(f'"{PACKAGE_JSON_SECTION_KEY}" in {self._path} must be an object')
        return section

    def describe(self) -> str:
        return f"package.json ({self.name})"


__all__ = [
    "PACKAGE_JSON_SECTION_KEY",
    "PROJECT_CONFIG_FILENAME",
    "ConfigSource",
    "DefaultConfigSource",
    "PackageJsonConfigSource",
    "TomlConfigSource",
]
