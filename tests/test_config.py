# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for layered configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from stagelint.config import Config, ConfigError, ConfigLoader, DispatchConfig, load_config
from stagelint.config.sources import PROJECT_CONFIG_FILENAME
from stagelint.models import ProjectKind


def test_defaults_without_files(tmp_path: Path) -> None:
    result = ConfigLoader.for_root(tmp_path).load_with_trace()

    assert result.sources == ["defaults"]
    assert result.config.dispatch.lintable_extensions == (".ts", ".tsx", ".js", ".jsx")
    assert result.config.dispatch.project_roots == {
        "apps": ProjectKind.APPLICATION,
        "libs": ProjectKind.LIBRARY,
    }
    assert result.config.dispatch.workspace_manifest == "nx.json"


def test_toml_overrides_package_json(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "repo", "stagelint": {"dispatch": {"excluded_projects": ["ui-kit"], "jobs": 2}}}),
        encoding="utf-8",
    )
    (tmp_path / PROJECT_CONFIG_FILENAME).write_text("[dispatch]\njobs = 4\n", encoding="utf-8")

    result = ConfigLoader.for_root(tmp_path).load_with_trace()

    assert result.config.dispatch.excluded_projects == ("ui-kit",)
    assert result.config.dispatch.jobs == 4
    assert len(result.sources) == 3


def test_package_json_without_section_is_ignored(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text('{"name": "repo"}', encoding="utf-8")
    assert ConfigLoader.for_root(tmp_path).load_with_trace().sources == ["defaults"]


def test_extra_project_roots_merge_with_defaults(tmp_path: Path) -> None:
    (tmp_path / PROJECT_CONFIG_FILENAME).write_text(
        '[dispatch.project_roots]\n"packages" = "library"\n', encoding="utf-8"
    )
    config = load_config(tmp_path)
    assert config.dispatch.project_roots["packages"] is ProjectKind.LIBRARY
    assert config.dispatch.project_roots["apps"] is ProjectKind.APPLICATION


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    (tmp_path / PROJECT_CONFIG_FILENAME).write_text("[dispatch]\nparallel = true\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="dispatch.parallel"):
        load_config(tmp_path)


def test_invalid_toml_is_a_config_error(tmp_path: Path) -> None:
    (tmp_path / PROJECT_CONFIG_FILENAME).write_text("[dispatch\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_invalid_package_json_is_a_config_error(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid JSON"):
        load_config(tmp_path)


def test_hooks_dir_is_resolved_against_root(tmp_path: Path) -> None:
    (tmp_path / PROJECT_CONFIG_FILENAME).write_text('[hooks]\nhooks_dir = ".githooks"\n', encoding="utf-8")
    assert load_config(tmp_path).hooks.hooks_dir == tmp_path.resolve() / ".githooks"


def test_extensions_are_normalised() -> None:
    config = DispatchConfig(lintable_extensions=("TS", ".vue", "ts", " "))
    assert config.lintable_extensions == (".ts", ".vue")


@pytest.mark.parametrize(
    "overrides",
    [
        {"project_roots": {"": "application"}},
        {"project_roots": {"root": "workspace-root"}},
        {"engine_command": []},
        {"jobs": 0},
        {"timeout": 0},
    ],
)
def test_invalid_dispatch_settings(overrides: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        DispatchConfig.model_validate(overrides)


def test_commit_msg_range_must_be_ordered() -> None:
    with pytest.raises(ValueError):
        Config.model_validate({"commit_msg": {"min_ticket_number": 10, "max_ticket_number": 5}})


def test_to_dict_is_json_compatible() -> None:
    payload = Config().to_dict()
    assert json.loads(json.dumps(payload)) == payload
    assert payload["dispatch"]["project_roots"] == {"apps": "application", "libs": "library"}
