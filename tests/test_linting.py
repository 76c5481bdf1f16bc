# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the detekt adapter and the subprocess wrapper."""

from __future__ import annotations

import json
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from codeqa.errors import ConfigError, LinterError
from codeqa.linting import (
    CommandOptions,
    DetektLinter,
    LinterIssue,
    LinterResult,
    LinterSeverity,
    map_debt_to_effort,
    map_rule_set_to_category,
    map_severity_to_priority,
    parse_sarif,
    run_command,
)
from codeqa.linting.process import TIMEOUT_EXIT_CODE
from codeqa.models import Category, Effort, Priority


def _sarif(*results: dict[str, Any]) -> dict[str, Any]:
    return {"version": "2.1.0", "runs": [{"tool": {"driver": {"name": "detekt"}}, "results": list(results)}]}


def _result(
    root: Path,
    rule: str,
    *,
    relative: str = "app/src/main/Meals.kt",
    line: int = 12,
    level: str = "warning",
    properties: dict[str, Any] | None = None,
) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "ruleId": rule,
        "level": level,
        "message": {"text": f"{rule} violated."},
        "locations": [
            {
                "physicalLocation": {
                    "artifactLocation": {"uri": (root / relative).resolve().as_uri()},
                    "region": {"startLine": line, "startColumn": 5, "snippet": {"text": "fun load()"}},
                }
            }
        ],
    }
    if properties is not None:
        entry["properties"] = properties
    return entry


class FakeRunner:
    """Command runner writing a canned SARIF report."""

    def __init__(self, report: str | None, returncode: int = 0, stderr: str = "") -> None:
        self.report = report
        self.returncode = returncode
        self.stderr = stderr
        self.calls: list[tuple[list[str], CommandOptions]] = []

    def __call__(self, args: Sequence[str], *, options: CommandOptions) -> subprocess.CompletedProcess[str]:
        self.calls.append((list(args), options))
        if self.report is not None:
            target = next(arg for arg in args if arg.startswith("sarif:")).removeprefix("sarif:")
            Path(target).write_text(self.report, encoding="utf-8")
        return subprocess.CompletedProcess(list(args), self.returncode, "", self.stderr)


@pytest.fixture
def project(tmp_path: Path, write_source) -> Path:
    write_source("detekt-config.yml", "build:\n  maxIssues: 0\n")
    write_source("app/src/main/Meals.kt", "fun load() {}\n")
    return tmp_path


@pytest.mark.parametrize(
    ("severity", "priority"),
    [
        (LinterSeverity.SECURITY, Priority.CRITICAL),
        (LinterSeverity.DEFECT, Priority.HIGH),
        (LinterSeverity.WARNING, Priority.MEDIUM),
        (LinterSeverity.MAINTAINABILITY, Priority.MEDIUM),
        (LinterSeverity.PERFORMANCE, Priority.MEDIUM),
        (LinterSeverity.CODE_SMELL, Priority.LOW),
        (LinterSeverity.STYLE, Priority.LOW),
    ],
)
def test_map_severity_to_priority(severity: LinterSeverity, priority: Priority) -> None:
    assert map_severity_to_priority(severity) is priority


@pytest.mark.parametrize(
    ("rule_set", "category"),
    [
        ("complexity", Category.CODE_SMELL),
        ("coroutines", Category.STATE_MANAGEMENT),
        ("exceptions", Category.ERROR_HANDLING),
        ("naming", Category.NAMING),
        ("style", Category.NAMING),
        ("performance", Category.PERFORMANCE),
        ("comments", Category.DOCUMENTATION),
        ("compose", Category.COMPOSE),
        ("something-else", Category.CODE_SMELL),
    ],
)
def test_map_rule_set_to_category(rule_set: str, category: Category) -> None:
    assert map_rule_set_to_category(rule_set) is category


@pytest.mark.parametrize(
    ("minutes", "effort"),
    [(5, Effort.TRIVIAL), (6, Effort.SMALL), (30, Effort.SMALL), (120, Effort.MEDIUM), (121, Effort.LARGE)],
)
def test_map_debt_to_effort(minutes: int, effort: Effort) -> None:
    assert map_debt_to_effort(minutes) is effort


def test_parse_sarif_translates_results(tmp_path: Path) -> None:
    data = _sarif(
        _result(tmp_path, "detekt.complexity.LongMethod", properties={"debtMinutes": 5}),
        _result(tmp_path, "detekt.potential-bugs.UnsafeCast", level="error", line=30),
    )

    issues = parse_sarif(data, tmp_path)

    assert [(issue.rule_set, issue.rule_id) for issue in issues] == [
        ("complexity", "LongMethod"),
        ("potential-bugs", "UnsafeCast"),
    ]
    assert issues[0].file == "app/src/main/Meals.kt"
    assert issues[0].severity is LinterSeverity.WARNING
    assert issues[0].debt_minutes == 5
    assert issues[0].column == 5
    assert issues[1].severity is LinterSeverity.DEFECT
    assert issues[1].debt_minutes == 20


def test_parse_sarif_prefers_severity_property(tmp_path: Path) -> None:
    data = _sarif(_result(tmp_path, "detekt.style.MagicNumber", properties={"severity": "Security"}))

    assert parse_sarif(data, tmp_path)[0].severity is LinterSeverity.SECURITY


def test_parse_sarif_skips_results_without_location(tmp_path: Path) -> None:
    data = _sarif({"ruleId": "detekt.style.MagicNumber", "message": {"text": "x"}})

    assert parse_sarif(data, tmp_path) == []


def test_issue_to_finding() -> None:
    issue = LinterIssue(
        rule_set="complexity",
        rule_id="LongMethod",
        severity=LinterSeverity.WARNING,
        message="The function load is too long.",
        file="app/src/main/Meals.kt",
        line=12,
        debt_minutes=5,
    )

    finding = issue.to_finding()

    assert finding.id == "detekt-LongMethod-app-src-main-Meals.kt-12"
    assert finding.analyzer == "detekt"
    assert finding.title == "LongMethod (Detekt)"
    assert finding.category is Category.CODE_SMELL
    assert finding.priority is Priority.MEDIUM
    assert finding.effort is Effort.TRIVIAL
    assert finding.references == ("https://detekt.dev/docs/rules/complexity#longmethod",)
    assert "LongMethod" in finding.recommendation


def test_run_returns_findings_from_report(project: Path) -> None:
    report = json.dumps(_sarif(_result(project, "detekt.naming.FunctionNaming")))
    runner = FakeRunner(report, returncode=2)
    linter = DetektLinter(project, runner=runner, excludes=("**/build/**",), use_emoji=False)

    result = linter.run(["app/src/main/Meals.kt"], Path("detekt-config.yml"))

    assert result.ok
    assert [finding.category for finding in result.findings] == [Category.NAMING]
    args, options = runner.calls[0]
    assert args[0] == "detekt"
    assert args[args.index("--input") + 1] == str(project.resolve() / "app/src/main/Meals.kt")
    assert args[args.index("--config") + 1] == str(project.resolve() / "detekt-config.yml")
    assert args[args.index("--excludes") + 1] == "**/build/**"
    assert options.cwd == project.resolve()


def test_run_reports_missing_config(tmp_path: Path) -> None:
    runner = FakeRunner("{}")

    result = DetektLinter(tmp_path, runner=runner).run([tmp_path], Path("missing.yml"))

    assert not result.ok
    assert isinstance(result.error, ConfigError)
    assert runner.calls == []


def test_run_skips_missing_paths(project: Path, capsys) -> None:
    runner = FakeRunner("{}")

    result = DetektLinter(project, runner=runner, use_emoji=False).run(["nope/Gone.kt"], Path("detekt-config.yml"))

    assert result.ok
    assert result.findings == ()
    assert runner.calls == []
    assert "Path not found" in capsys.readouterr().out


def test_run_fails_on_unexpected_exit_code(project: Path) -> None:
    runner = FakeRunner(None, returncode=1, stderr="boom")

    result = DetektLinter(project, runner=runner).run([project], Path("detekt-config.yml"))

    assert not result.ok
    assert isinstance(result.error, LinterError)
    assert "boom" in str(result.error)


def test_run_fails_when_executable_missing(project: Path) -> None:
    def missing(args: Sequence[str], *, options: CommandOptions) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError(args[0])

    result = DetektLinter(project, runner=missing).run([project], Path("detekt-config.yml"))

    assert not result.ok
    assert "not found" in str(result.error)


def test_run_treats_empty_report_as_clean(project: Path) -> None:
    result = DetektLinter(project, runner=FakeRunner("")).run([project], Path("detekt-config.yml"))

    assert result.ok
    assert result.findings == ()


def test_run_fails_on_malformed_report(project: Path) -> None:
    result = DetektLinter(project, runner=FakeRunner("{not json")).run([project], Path("detekt-config.yml"))

    assert not result.ok
    assert "Malformed" in str(result.error)


def _mangle_message(entry: dict[str, Any]) -> None:
    entry["message"] = "bare string message"


def _mangle_start_line(entry: dict[str, Any]) -> None:
    entry["locations"][0]["physicalLocation"]["region"]["startLine"] = "twelve"


def _mangle_start_column(entry: dict[str, Any]) -> None:
    entry["locations"][0]["physicalLocation"]["region"]["startColumn"] = "fifth"


def _mangle_debt(entry: dict[str, Any]) -> None:
    entry["properties"] = {"debtMinutes": "lots"}


@pytest.mark.parametrize("mangle", [_mangle_message, _mangle_start_line, _mangle_start_column, _mangle_debt])
def test_run_fails_on_unexpected_report_structure(project: Path, mangle) -> None:
    entry = _result(project, "detekt.style.MagicNumber")
    mangle(entry)
    runner = FakeRunner(json.dumps(_sarif(entry)))

    result = DetektLinter(project, runner=runner).run([project], Path("detekt-config.yml"))

    assert not result.ok
    assert isinstance(result.error, LinterError)
    assert "Unexpected detekt SARIF structure" in str(result.error)


def test_run_fails_when_report_is_not_an_object(project: Path) -> None:
    result = DetektLinter(project, runner=FakeRunner("[1, 2]")).run([project], Path("detekt-config.yml"))

    assert not result.ok
    assert isinstance(result.error, LinterError)


def test_run_contains_runner_crashes(project: Path) -> None:
    def crashing(args: Sequence[str], *, options: CommandOptions) -> subprocess.CompletedProcess[str]:
        raise RuntimeError("runner blew up")

    result = DetektLinter(project, runner=crashing).run([project], Path("detekt-config.yml"))

    assert not result.ok
    assert isinstance(result.error, LinterError)
    assert "runner blew up" in str(result.error)


def test_linter_result_constructors() -> None:
    failure = LinterResult.failure(LinterError("x"))

    assert not failure.ok
    assert failure.findings == ()
    assert LinterResult.success().ok


def test_run_command_captures_output() -> None:
    completed = run_command([sys.executable, "-c", "print('hello')"], options=CommandOptions())

    assert completed.returncode == 0
    assert completed.stdout.strip() == "hello"


def test_run_command_reports_timeout() -> None:
    completed = run_command(
        [sys.executable, "-c", "import time; time.sleep(5)"],
        options=CommandOptions(timeout=0.2),
    )

    assert completed.returncode == TIMEOUT_EXIT_CODE
    assert "timed out" in completed.stderr
