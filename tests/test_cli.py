# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the codeqa command line."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from codeqa.cli.app import app

QUIET = ["--no-linter", "--no-emoji", "--no-color", "--jobs", "1", "--output-dir", "out"]


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path, write_source) -> Path:
    write_source("app/src/main/java/com/x/domain/GetMeals.kt", "import android.content.Context\n\nclass GetMeals\n")
    write_source("app/src/main/java/com/x/data/Secrets.kt", 'val password = "hunter2hunter2"\n')
    return tmp_path


def test_analyze_writes_report(runner: CliRunner, project: Path) -> None:
    result = runner.invoke(app, ["analyze", str(project), *QUIET])

    assert result.exit_code == 0, result.stdout
    assert (project / "out" / "analysis-report.md").is_file()
    assert (project / "out" / "baseline.json").is_file()
    assert "Files analyzed" in result.stdout


def test_analyze_fails_on_critical_when_requested(runner: CliRunner, project: Path) -> None:
    result = runner.invoke(app, ["analyze", str(project), *QUIET, "--fail-on-critical"])

    assert result.exit_code == 1
    assert "critical finding(s)" in result.stdout


def test_analyze_missing_root_exits_with_discovery_error(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(app, ["analyze", str(tmp_path / "missing"), *QUIET])

    assert result.exit_code == 2
    assert "Directory does not exist" in result.stdout


def test_analyze_invalid_config_exits_nonzero(runner: CliRunner, project: Path, write_source) -> None:
    write_source("codeqa.toml", "[execution]\njobs = 0\n")

    result = runner.invoke(app, ["analyze", str(project), *QUIET])

    assert result.exit_code == 2
    assert "Invalid codeqa configuration" in result.stdout


def test_analyze_with_paths_runs_incrementally(runner: CliRunner, project: Path) -> None:
    result = runner.invoke(
        app,
        ["analyze", str(project), *QUIET, "--path", "app/src/main/java/com/x/domain/GetMeals.kt"],
    )

    assert result.exit_code == 0, result.stdout
    assert (project / "out" / "analysis-report-incremental.md").is_file()
    assert not (project / "out" / "baseline.json").exists()


def test_analyze_with_analyzer_filter(runner: CliRunner, project: Path) -> None:
    result = runner.invoke(app, ["analyze", str(project), *QUIET, "--analyzer", "security", "--analyzer", "bogus"])

    assert result.exit_code == 0, result.stdout
    assert "Unknown analyzer 'bogus' ignored" in result.stdout
    report = (project / "out" / "analysis-report-filtered.md").read_text(encoding="utf-8")
    assert "Hard-coded Secret" in report
    assert "Android Framework Import" not in report


def test_analyzers_command_lists_registry(runner: CliRunner) -> None:
    result = runner.invoke(app, ["analyzers"])

    assert result.exit_code == 0
    for analyzer_id in (
        "architecture",
        "code-smell",
        "naming",
        "compose",
        "database",
        "performance",
        "test-coverage",
        "security",
        "documentation",
        "detekt",
    ):
        assert analyzer_id in result.stdout


def test_compare_without_history(runner: CliRunner, project: Path) -> None:
    result = runner.invoke(app, ["compare", str(project), "--output-dir", "out", "--no-emoji", "--no-color"])

    assert result.exit_code == 0
    assert "No comparison recorded yet" in result.stdout


def test_compare_after_two_runs(runner: CliRunner, project: Path, write_source) -> None:
    assert runner.invoke(app, ["analyze", str(project), *QUIET]).exit_code == 0
    write_source("app/src/main/java/com/x/data/Secrets.kt", "val password = BuildConfig.PASSWORD\n")
    assert runner.invoke(app, ["analyze", str(project), *QUIET]).exit_code == 0

    result = runner.invoke(app, ["compare", str(project), "--output-dir", "out", "--no-emoji", "--no-color"])

    assert result.exit_code == 0, result.stdout
    assert "critical_issues" in result.stdout
    assert "resolved findings" in result.stdout
