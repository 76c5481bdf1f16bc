# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Markdown rendering of analysis results."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Final

from ..baseline import compare_baseline
from ..constants import REPORT_BASENAME
from ..errors import PersistenceError
from ..models import AnalysisMetrics, AnalysisResult, Baseline, Category, Comparison, Finding
from ..priority import PRIORITY_ORDER

REPORT_TITLE: Final[str] = "# Code Quality Analysis Report"
_TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S UTC"


def _format_timestamp(moment: datetime) -> str:
    return moment.astimezone(UTC).strftime(_TIMESTAMP_FORMAT)


def _label(value: str) -> str:
    return value.replace("-", " ").title()


def _table(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> list[str]:
    lines = [f"| {' | '.join(headers)} |", f"|{'|'.join('---' for _ in headers)}|"]
    lines.extend(f"| {' | '.join(str(cell) for cell in row)} |" for row in rows)
    return lines


class ReportGenerator:
    """Render :class:`AnalysisResult` objects as Markdown documents."""

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))

    def generate(self, result: AnalysisResult, baseline: Baseline | None = None) -> str:
        """Return the full Markdown report for ``result``.

        Args:
            result: Completed analysis result.
            baseline: Previously stored baseline. When supplied the report
                gains a comparison section with new and resolved findings.

        Returns:
            str: Markdown document terminated by a newline.
        """

        lines = [
            REPORT_TITLE,
            "",
            f"**Generated:** {_format_timestamp(self._clock())}  ",
            f"**Mode:** {result.mode.value}  ",
            f"**Files analyzed:** {result.files_analyzed}  ",
            f"**Execution time:** {result.execution_time:.2f}s",
            "",
            self.generate_summary(result.metrics, baseline),
        ]
        if baseline is not None:
            comparison = compare_baseline(result.metrics, baseline, (finding.id for finding in result.findings))
            lines.extend(["", self.generate_comparison(comparison, baseline, result.findings)])
        lines.extend(["", self.generate_findings(result.findings)])
        return "\n".join(lines).rstrip() + "\n"

    def generate_summary(self, metrics: AnalysisMetrics, baseline: Baseline | None = None) -> str:
        """Return the executive summary section for ``metrics``.

        When ``baseline`` is given, a column with the baseline values is added.
        """

        lines = ["## Executive Summary", ""]
        rows: list[tuple[str, str]] = [
            ("Total files with findings", str(metrics.total_files)),
            ("Total findings", str(metrics.total_findings)),
            ("Average complexity", f"{metrics.average_complexity:.1f}"),
            ("Average function length", f"{metrics.average_function_length:.1f}"),
            ("Average class length", f"{metrics.average_class_length:.1f}"),
            ("Test coverage", f"{metrics.test_coverage_percentage:.1f}%"),
            ("Documentation coverage", f"{metrics.documentation_coverage_percentage:.1f}%"),
        ]
        if baseline is None:
            lines.extend(_table(("Metric", "Value"), rows))
        else:
            previous = baseline.metrics
            baseline_values = (
                str(previous.total_files),
                str(previous.total_findings),
                f"{previous.average_complexity:.1f}",
                f"{previous.average_function_length:.1f}",
                f"{previous.average_class_length:.1f}",
                f"{previous.test_coverage_percentage:.1f}%",
                f"{previous.documentation_coverage_percentage:.1f}%",
            )
            lines.extend(
                _table(
                    ("Metric", "Value", "Baseline"),
                    ((label, value, before) for (label, value), before in zip(rows, baseline_values, strict=True)),
                )
            )

        lines.extend(["", "### Findings by Priority", ""])
        lines.extend(
            _table(
                ("Priority", "Count"),
                ((_label(priority.value), metrics.findings_by_priority.get(priority, 0)) for priority in PRIORITY_ORDER),
            )
        )
        lines.extend(["", "### Findings by Category", ""])
        category_rows = [
            (_label(category.value), metrics.findings_by_category.get(category, 0))
            for category in Category
            if metrics.findings_by_category.get(category, 0) > 0
        ]
        if category_rows:
            lines.extend(_table(("Category", "Count"), category_rows))
        else:
            lines.append("No findings.")
        return "\n".join(lines)

    def generate_comparison(
        self,
        comparison: Comparison,
        baseline: Baseline,
        findings: Sequence[Finding] = (),
    ) -> str:
        """Return the baseline comparison section.

        Args:
            comparison: Result of comparing the run with ``baseline``.
            baseline: Baseline the run was compared with.
            findings: Current findings used to title new finding ids.

        Returns:
            str: Markdown section with metric deltas and the **New Findings**
            and **Resolved Findings** lists.
        """

        baseline_time = datetime.fromtimestamp(baseline.timestamp / 1000, tz=UTC)
        titles = {finding.id: finding.title for finding in findings}
        lines = ["## Baseline Comparison", "", f"Compared with baseline from {_format_timestamp(baseline_time)}.", ""]
        lines.extend(_delta_section("Improved Metrics", comparison.improved))
        lines.extend(_delta_section("Regressed Metrics", comparison.regressed))
        lines.extend([f"### New Findings ({len(comparison.new_issues)})", ""])
        if comparison.new_issues:
            lines.extend(
                f"- `{finding_id}` {titles[finding_id]}" if finding_id in titles else f"- `{finding_id}`"
                for finding_id in comparison.new_issues
            )
        else:
            lines.append("None.")
        lines.extend(["", f"### Resolved Findings ({len(comparison.resolved)})", ""])
        if comparison.resolved:
            lines.extend(f"- `{finding_id}`" for finding_id in comparison.resolved)
        else:
            lines.append("None.")
        return "\n".join(lines)

    def generate_findings(self, findings: Sequence[Finding]) -> str:
        """Return the detailed findings section grouped by priority then file."""

        lines = ["## Findings", ""]
        if not findings:
            lines.append("No findings. 🎉")
            return "\n".join(lines)

        grouped: dict[str, dict[str, list[Finding]]] = defaultdict(lambda: defaultdict(list))
        for finding in findings:
            grouped[finding.priority.value][finding.file].append(finding)

        for priority in PRIORITY_ORDER:
            by_file = grouped.get(priority.value)
            if not by_file:
                continue
            count = sum(len(entries) for entries in by_file.values())
            lines.extend([f"### {_label(priority.value)} ({count})", ""])
            for file in sorted(by_file):
                lines.extend([f"#### `{file}`", ""])
                for finding in sorted(by_file[file], key=lambda entry: entry.line):
                    lines.extend(_render_finding(finding))
        return "\n".join(lines)


def _delta_section(title: str, deltas: Mapping[str, float]) -> list[str]:
    if not deltas:
        return []
    lines = [f"### {title}", ""]
    rows = ((_label(name.replace("_", " ")), f"{value:.1f}%") for name, value in sorted(deltas.items()))
    lines.extend(_table(("Metric", "Change"), rows))
    lines.append("")
    return lines


def _render_finding(finding: Finding) -> list[str]:
    location = f"line {finding.line}" if finding.column is None else f"line {finding.line}, column {finding.column}"
    lines = [
        f"##### {finding.title} ({location})",
        "",
        f"- **ID:** `{finding.id}`",
        f"- **Analyzer:** {finding.analyzer}",
        f"- **Category:** {_label(finding.category.value)}",
        f"- **Effort:** {finding.effort.value}",
        "",
        finding.description,
        "",
    ]
    if finding.code_snippet:
        lines.extend(["```kotlin", finding.code_snippet, "```", ""])
    if finding.recommendation:
        lines.extend([f"**Recommendation:** {finding.recommendation}", ""])
    if finding.before_example:
        lines.extend(["Before:", "", "```kotlin", finding.before_example, "```", ""])
    if finding.after_example:
        lines.extend(["After:", "", "```kotlin", finding.after_example, "```", ""])
    if finding.references:
        lines.append("References:")
        lines.extend(f"- {reference}" for reference in finding.references)
        lines.append("")
    return lines


def report_path(output_dir: Path, suffix: str = "") -> Path:
    """Return the report location for ``suffix`` inside ``output_dir``."""

    return output_dir / f"{REPORT_BASENAME}{suffix}.md"


def write_report(text: str, output_dir: Path, suffix: str = "") -> Path:
    """Write ``text`` to ``analysis-report<suffix>.md`` under ``output_dir``.

    Raises:
        PersistenceError: If the directory or file cannot be written.
    """

    path = report_path(output_dir, suffix)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Unable to write report {path}: {exc}") from exc
    return path


__all__ = ["REPORT_TITLE", "ReportGenerator", "report_path", "write_report"]
