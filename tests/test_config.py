# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from codeqa.config import AnalysisConfig, LinterConfig, default_parallel_jobs, load_config
from codeqa.constants import DEFAULT_EXCLUDE_PATTERNS
from codeqa.errors import ConfigError


def test_defaults_without_configuration_files(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.root == tmp_path
    assert tuple(config.discovery.excludes) == DEFAULT_EXCLUDE_PATTERNS
    assert config.discovery.extensions == ["kt", "kts"]
    assert config.execution.enable_linter
    assert config.execution.jobs == default_parallel_jobs()
    assert config.output_dir == tmp_path / ".codeqa"
    assert config.linter_config_path == tmp_path / "detekt-config.yml"


def test_codeqa_toml_is_loaded(tmp_path: Path, write_source) -> None:
    write_source(
        "codeqa.toml",
        """
[discovery]
excludes = ["**/legacy/**"]
extensions = [".KT"]

[execution]
jobs = 2
enable_linter = false
analyzers = ["naming"]

[linter]
executable = "/opt/detekt/bin/detekt"
config_path = "config/detekt.yml"
timeout = 90
extra_args = ["--parallel"]

[output]
output_dir = "reports"
emoji = false
""",
    )

    config = load_config(tmp_path)

    assert config.discovery.excludes == ["**/legacy/**"]
    assert config.discovery.extensions == ["kt"]
    assert config.execution.jobs == 2
    assert not config.execution.enable_linter
    assert config.execution.analyzers == ["naming"]
    assert config.linter.executable == "/opt/detekt/bin/detekt"
    assert config.linter.timeout == 90
    assert config.linter.extra_args == ["--parallel"]
    assert config.linter_config_path == tmp_path / "config" / "detekt.yml"
    assert config.output_dir == tmp_path / "reports"
    assert not config.output.emoji


def test_pyproject_tool_section_is_loaded(tmp_path: Path, write_source) -> None:
    write_source("pyproject.toml", '[project]\nname = "x"\n\n[tool.codeqa.execution]\njobs = 3\n')

    assert load_config(tmp_path).execution.jobs == 3


def test_codeqa_toml_takes_precedence_over_pyproject(tmp_path: Path, write_source) -> None:
    write_source("pyproject.toml", "[tool.codeqa.execution]\njobs = 3\n")
    write_source("codeqa.toml", "[execution]\njobs = 5\n")

    assert load_config(tmp_path).execution.jobs == 5


def test_explicit_config_file(tmp_path: Path, write_source) -> None:
    path = write_source("ci/quality.toml", "[output]\nverbose = true\n")

    assert load_config(tmp_path, config_file=path).output.verbose


def test_explicit_pyproject_uses_tool_section(tmp_path: Path, write_source) -> None:
    path = write_source("other/pyproject.toml", "[tool.codeqa.output]\ncolor = false\n")

    assert not load_config(tmp_path, config_file=path).output.color


def test_missing_explicit_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path, config_file=tmp_path / "absent.toml")


@pytest.mark.parametrize(
    "content",
    [
        "[execution\njobs = 2\n",
        "[execution]\njobs = 0\n",
        "[execution]\nunknown = true\n",
        "surprise = 1\n",
    ],
)
def test_invalid_configuration_raises(tmp_path: Path, write_source, content: str) -> None:
    write_source("codeqa.toml", content)

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_root_in_file_is_ignored(tmp_path: Path, write_source) -> None:
    write_source("codeqa.toml", 'root = "/elsewhere"\n')

    assert load_config(tmp_path).root == tmp_path


def test_absolute_paths_are_kept(tmp_path: Path) -> None:
    absolute = tmp_path / "shared" / "detekt.yml"
    config = AnalysisConfig(root=tmp_path / "project", linter=LinterConfig(config_path=absolute))

    assert config.linter_config_path == absolute


def test_default_parallel_jobs_is_positive() -> None:
    assert default_parallel_jobs() >= 1
