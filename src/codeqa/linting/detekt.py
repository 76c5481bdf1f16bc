# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapter running detekt and translating its SARIF report into findings."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Final
from urllib.parse import unquote, urlparse

from pydantic import BaseModel, ConfigDict

from ..constants import DEFAULT_LINTER_EXECUTABLE, LINTER_ANALYZER_ID
from ..errors import ConfigError, LinterError
from ..logging import DebugLogger, info, warn
from ..models import Category, Effort, Finding, Priority
from .process import CommandOptions, CommandRunner, run_command, temporary_report_path

DETEKT_SUCCESS_CODES: Final[frozenset[int]] = frozenset({0, 2})
DEFAULT_DEBT_MINUTES: Final[int] = 20
_SARIF_SUFFIX: Final[str] = ".sarif"
_RULE_DOCS_URL: Final[str] = "https://detekt.dev/docs/rules/{rule_set}#{rule}"


class LinterSeverity(str, Enum):
    """Severity levels reported by detekt rules."""

    CODE_SMELL = "CodeSmell"
    STYLE = "Style"
    WARNING = "Warning"
    DEFECT = "Defect"
    MAINTAINABILITY = "Maintainability"
    SECURITY = "Security"
    PERFORMANCE = "Performance"


_SEVERITY_TO_PRIORITY: Final[Mapping[LinterSeverity, Priority]] = {
    LinterSeverity.CODE_SMELL: Priority.LOW,
    LinterSeverity.STYLE: Priority.LOW,
    LinterSeverity.WARNING: Priority.MEDIUM,
    LinterSeverity.DEFECT: Priority.HIGH,
    LinterSeverity.MAINTAINABILITY: Priority.MEDIUM,
    LinterSeverity.SECURITY: Priority.CRITICAL,
    LinterSeverity.PERFORMANCE: Priority.MEDIUM,
}

# Checked in order with case-insensitive substring matching.
_RULE_SET_CATEGORIES: Final[tuple[tuple[str, Category], ...]] = (
    ("complexity", Category.CODE_SMELL),
    ("coroutines", Category.STATE_MANAGEMENT),
    ("empty-blocks", Category.CODE_SMELL),
    ("exceptions", Category.ERROR_HANDLING),
    ("naming", Category.NAMING),
    ("performance", Category.PERFORMANCE),
    ("potential-bugs", Category.CODE_SMELL),
    ("style", Category.NAMING),
    ("compose", Category.COMPOSE),
    ("comments", Category.DOCUMENTATION),
)

_SARIF_LEVEL_SEVERITY: Final[Mapping[str, LinterSeverity]] = {
    "error": LinterSeverity.DEFECT,
    "warning": LinterSeverity.WARNING,
    "note": LinterSeverity.CODE_SMELL,
    "none": LinterSeverity.CODE_SMELL,
}
_SEVERITY_BY_NAME: Final[Mapping[str, LinterSeverity]] = {member.value: member for member in LinterSeverity}


def map_severity_to_priority(severity: LinterSeverity) -> Priority:
    """Return the finding priority for a detekt ``severity``."""

    return _SEVERITY_TO_PRIORITY[severity]


def map_rule_set_to_category(rule_set: str) -> Category:
    """Return the category implied by a detekt rule-set identifier.

    Args:
        rule_set: Rule-set id such as ``complexity`` or ``potential-bugs``.

    Returns:
        Category: First category whose keyword appears in ``rule_set``,
        falling back to :attr:`Category.CODE_SMELL`.
    """

    lowered = rule_set.lower()
    for keyword, category in _RULE_SET_CATEGORIES:
        if keyword in lowered:
            return category
    return Category.CODE_SMELL


def map_debt_to_effort(minutes: int) -> Effort:
    """Return an effort bucket for ``minutes`` of technical debt."""

    if minutes <= 5:
        return Effort.TRIVIAL
    if minutes <= 30:
        return Effort.SMALL
    if minutes <= 120:
        return Effort.MEDIUM
    return Effort.LARGE


class LinterIssue(BaseModel):
    """Single issue reported by detekt before translation."""

    model_config = ConfigDict(frozen=True)

    rule_set: str
    rule_id: str
    severity: LinterSeverity
    message: str
    file: str
    line: int
    column: int | None = None
    debt_minutes: int = DEFAULT_DEBT_MINUTES
    signature: str = ""

    def to_finding(self) -> Finding:
        """Return the normalized :class:`Finding` for this issue."""

        return Finding(
            id=f"{LINTER_ANALYZER_ID}-{self.rule_id}-{self.file.replace('/', '-')}-{self.line}",
            analyzer=LINTER_ANALYZER_ID,
            category=map_rule_set_to_category(self.rule_set),
            priority=map_severity_to_priority(self.severity),
            title=f"{self.rule_id} (Detekt)",
            description=self.message,
            file=self.file,
            line=self.line,
            column=self.column,
            code_snippet=self.signature,
            recommendation=(
                f"Detekt rule '{self.rule_id}' was violated. {self.message}\n\n"
                "Refactor the code to comply with the rule; the detekt documentation has examples."
            ),
            effort=map_debt_to_effort(self.debt_minutes),
            references=(_RULE_DOCS_URL.format(rule_set=self.rule_set.lower(), rule=self.rule_id.lower()),),
        )


@dataclass(frozen=True, slots=True)
class LinterResult:
    """Outcome of a linter run carrying either findings or an error."""

    findings: tuple[Finding, ...] = ()
    error: Exception | None = None
    issues: tuple[LinterIssue, ...] = field(default=(), repr=False)

    @property
    def ok(self) -> bool:
        """Return ``True`` when the run completed without an error."""

        return self.error is None

    @classmethod
    def success(cls, issues: Iterable[LinterIssue] = ()) -> LinterResult:
        """Return a successful result translating ``issues`` into findings."""

        materialized = tuple(issues)
        return cls(findings=tuple(issue.to_finding() for issue in materialized), issues=materialized)

    @classmethod
    def failure(cls, error: Exception) -> LinterResult:
        """Return a failed result carrying ``error`` and no findings."""

        return cls(error=error)


def parse_sarif(data: Mapping[str, Any], root: Path) -> list[LinterIssue]:
    """Translate a SARIF document produced by detekt into :class:`LinterIssue` entries.

    Args:
        data: Parsed SARIF JSON document.
        root: Project root used to relativise artifact locations.

    Returns:
        list[LinterIssue]: Issues in report order. Results without a location
        are skipped.
    """

    issues: list[LinterIssue] = []
    for run in data.get("runs", []) or []:
        for result in run.get("results", []) or []:
            issue = _parse_result(result, root)
            if issue is not None:
                issues.append(issue)
    return issues


def _parse_result(result: Mapping[str, Any], root: Path) -> LinterIssue | None:
    locations = result.get("locations") or []
    if not locations:
        return None
    physical = locations[0].get("physicalLocation", {})
    uri = physical.get("artifactLocation", {}).get("uri")
    if not uri:
        return None
    region = physical.get("region", {})
    rule_set, rule_id = _split_rule_id(str(result.get("ruleId", "")))
    properties = result.get("properties", {}) or {}
    severity = _SARIF_LEVEL_SEVERITY.get(str(result.get("level", "warning")).lower(), LinterSeverity.WARNING)
    severity = _SEVERITY_BY_NAME.get(str(properties.get("severity")), severity)
    message = result.get("message", {}).get("text", "")
    snippet = region.get("snippet", {}).get("text", "")
    return LinterIssue(
        rule_set=rule_set,
        rule_id=rule_id,
        severity=severity,
        message=message,
        file=_relative_uri(uri, root),
        line=int(region.get("startLine", 1)),
        column=region.get("startColumn"),
        debt_minutes=int(properties.get("debtMinutes", DEFAULT_DEBT_MINUTES)),
        signature=snippet,
    )


def _split_rule_id(raw: str) -> tuple[str, str]:
    """Split ``detekt.<rule-set>.<rule>`` identifiers into rule set and rule."""

    parts = raw.split(".")
    if parts and parts[0] == LINTER_ANALYZER_ID:
        parts = parts[1:]
    if len(parts) >= 2:
        return parts[0], parts[-1]
    return "", parts[0] if parts else raw


def _relative_uri(uri: str, root: Path) -> str:
    if uri.startswith("file:"):
        path = Path(unquote(urlparse(uri).path))
    else:
        path = Path(unquote(uri))
    if path.is_absolute():
        try:
            return path.resolve().relative_to(root.resolve()).as_posix()
        except ValueError:
            return path.as_posix()
    return path.as_posix()


class DetektLinter:
    """Run the detekt CLI once over a set of paths."""

    def __init__(
        self,
        root: Path,
        *,
        executable: str = DEFAULT_LINTER_EXECUTABLE,
        runner: CommandRunner = run_command,
        timeout: float | None = None,
        extra_args: Sequence[str] = (),
        excludes: Sequence[str] = (),
        use_emoji: bool = True,
        debug_logger: DebugLogger | None = None,
    ) -> None:
        """Create a linter rooted at ``root``.

        Args:
            root: Project root passed to detekt as the base path.
            executable: detekt CLI executable name or path.
            runner: Callable executing the command; replaced in tests.
            timeout: Optional timeout in seconds for the detekt process.
            extra_args: Additional arguments appended to the command line.
            excludes: Glob patterns forwarded through ``--excludes``.
            use_emoji: Whether status lines include emoji prefixes.
            debug_logger: Optional sink for debug messages.
        """

        self.root = root.resolve()
        self.executable = executable
        self._runner = runner
        self._timeout = timeout
        self._extra_args = tuple(extra_args)
        self._excludes = tuple(excludes)
        self._use_emoji = use_emoji
        self._debug_logger = debug_logger

    def run(self, paths: Sequence[Path | str], config_path: Path) -> LinterResult:
        """Lint ``paths`` with the detekt configuration at ``config_path``.

        Args:
            paths: Files or directories, relative to the root or absolute.
            config_path: Detekt YAML configuration.

        Returns:
            LinterResult: Findings on success, otherwise the failure cause.
            This method never raises.
        """

        config = config_path if config_path.is_absolute() else self.root / config_path
        if not config.is_file():
            return LinterResult.failure(ConfigError(f"Detekt config file not found: {config}"))

        valid = self._validate_paths(paths)
        if not valid:
            return LinterResult.success()

        info(f"Running detekt on {len(valid)} path(s)...", use_emoji=self._use_emoji)
        try:
            issues = self._invoke(valid, config)
        except FileNotFoundError as exc:
            return LinterResult.failure(LinterError(f"Detekt executable '{self.executable}' not found: {exc}"))
        except OSError as exc:
            return LinterResult.failure(LinterError(f"Unable to run detekt: {exc}"))
        except LinterError as exc:
            return LinterResult.failure(exc)
        except Exception as exc:  # noqa: BLE001 - pluggable runner code
            return LinterResult.failure(LinterError(f"Unexpected detekt failure: {exc!r}"))
        self._debug(f"detekt reported {len(issues)} issue(s)")
        return LinterResult.success(issues)

    def _validate_paths(self, paths: Sequence[Path | str]) -> list[Path]:
        valid: list[Path] = []
        for entry in paths:
            candidate = Path(entry)
            candidate = candidate if candidate.is_absolute() else self.root / candidate
            if candidate.exists():
                valid.append(candidate)
            else:
                warn(f"Path not found: {candidate}", use_emoji=self._use_emoji)
        return valid

    def _invoke(self, paths: Sequence[Path], config: Path) -> list[LinterIssue]:
        with temporary_report_path(_SARIF_SUFFIX) as report_path:
            args = [
                self.executable,
                "--input",
                ",".join(str(path) for path in paths),
                "--config",
                str(config),
                "--base-path",
                str(self.root),
                "--report",
                f"sarif:{report_path}",
            ]
            if self._excludes:
                args.extend(["--excludes", ",".join(self._excludes)])
            args.extend(self._extra_args)
            completed = self._runner(args, options=CommandOptions(cwd=self.root, timeout=self._timeout))
            if completed.returncode not in DETEKT_SUCCESS_CODES:
                stderr = (completed.stderr or "").strip()
                raise LinterError(f"detekt exited with code {completed.returncode}: {stderr}".rstrip(": "))
            try:
                text = report_path.read_text(encoding="utf-8")
            except OSError as exc:
                raise LinterError(f"Unable to read detekt report: {exc}") from exc
            if not text.strip():
                return []
            try:
                data = json.loads(text)
            except json.JSONDecodeError as exc:
                raise LinterError(f"Malformed detekt SARIF report: {exc}") from exc
        try:
            return parse_sarif(data, self.root)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            # pydantic's ValidationError is a ValueError
            raise LinterError(f"Unexpected detekt SARIF structure: {exc}") from exc

    def _debug(self, message: str) -> None:
        if self._debug_logger:
            self._debug_logger(message)


__all__ = [
    "DETEKT_SUCCESS_CODES",
    "DetektLinter",
    "LinterIssue",
    "LinterResult",
    "LinterSeverity",
    "map_debt_to_effort",
    "map_rule_set_to_category",
    "map_severity_to_priority",
    "parse_sarif",
]
