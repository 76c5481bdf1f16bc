# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Merge, re-prioritise, deduplicate and summarise findings."""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from typing import Final, TypeVar

from .models import AggregatedResult, AnalysisMetrics, Category, Finding, Priority
from .priority import is_more_severe, resolve_priority

COMPLEXITY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"complexity[:\s]+of\s+(\d+)|complexity[:\s]+(\d+)", re.IGNORECASE
)
LENGTH_PATTERN: Final[re.Pattern[str]] = re.compile(r"(\d+)\s+lines|length[:\s]+(\d+)", re.IGNORECASE)
COVERAGE_COMPONENT_MARKERS: Final[tuple[str, ...]] = ("ViewModel", "UseCase", "Repository")
_FULL_COVERAGE: Final[float] = 100.0

K = TypeVar("K")


def extract_number(pattern: re.Pattern[str], text: str) -> int | None:
    """Return the first captured integer of ``pattern`` in ``text``."""

    match = pattern.search(text)
    if match is None:
        return None
    value = next((group for group in match.groups() if group is not None), None)
    return int(value) if value is not None else None


def _average(values: Sequence[int]) -> float:
    return sum(values) / len(values) if values else 0.0


def _coverage(population: int, uncovered: int) -> float:
    if population == 0:
        return _FULL_COVERAGE
    covered = population - uncovered
    return min(max(covered / population * 100.0, 0.0), _FULL_COVERAGE)


class ResultAggregator:
    """Combine findings from every producer into an :class:`AggregatedResult`.

    Aggregation runs four steps in order: priority normalisation,
    deduplication, metrics and indexing. It is deterministic for a given input
    order and holds no state between calls.
    """

    def aggregate(self, findings: Iterable[Finding]) -> AggregatedResult:
        """Return the aggregated view of ``findings``.

        Args:
            findings: Raw findings from analyzers and the external linter.

        Returns:
            AggregatedResult: Deduplicated findings with metrics and indexes.
        """

        prioritised = [self.assign_priority(finding) for finding in findings]
        unique = self.deduplicate(prioritised)
        return AggregatedResult(
            findings=tuple(unique),
            metrics=self.calculate_metrics(unique),
            by_category=_index(unique, lambda finding: finding.category),
            by_priority=_index(unique, lambda finding: finding.priority),
            by_file=_index(unique, lambda finding: finding.file),
        )

    def assign_priority(self, finding: Finding) -> Finding:
        """Return ``finding`` with its priority raised to the category default.

        A priority already more severe than the category default is kept.
        """

        resolved = resolve_priority(finding.priority, finding.category)
        if resolved is finding.priority:
            return finding
        return finding.model_copy(update={"priority": resolved})

    def deduplicate(self, findings: Iterable[Finding]) -> list[Finding]:
        """Collapse findings sharing ``(file, line, category, title)``.

        The most severe finding of each group is kept, ties keep the first
        seen. Output order follows the first appearance of each key.
        """

        kept: dict[tuple[str, int, Category, str], Finding] = {}
        for finding in findings:
            key = finding.dedup_key
            existing = kept.get(key)
            if existing is None or is_more_severe(finding.priority, existing.priority):
                kept[key] = finding
        return list(kept.values())

    def calculate_metrics(self, findings: Sequence[Finding]) -> AnalysisMetrics:
        """Return summary counters and heuristic signals for ``findings``.

        The averages are scraped from finding titles and descriptions and the
        coverage figures estimate their populations from finding metadata, so
        all five are trend signals rather than measurements.
        """

        by_priority = {priority: 0 for priority in Priority}
        by_category = {category: 0 for category in Category}
        for finding in findings:
            by_priority[finding.priority] += 1
            by_category[finding.category] += 1

        return AnalysisMetrics(
            total_files=len({finding.file for finding in findings}),
            total_findings=len(findings),
            findings_by_priority=by_priority,
            findings_by_category=by_category,
            average_complexity=self._average_complexity(findings),
            average_function_length=self._average_length(findings, ("function", "long")),
            average_class_length=self._average_length(findings, ("class", "large")),
            test_coverage_percentage=self._test_coverage(findings),
            documentation_coverage_percentage=self._documentation_coverage(findings),
        )

    @staticmethod
    def _average_complexity(findings: Sequence[Finding]) -> float:
        values = [
            value
            for finding in findings
            if finding.category is Category.CODE_SMELL and "complexity" in finding.title.lower()
            if (value := extract_number(COMPLEXITY_PATTERN, f"{finding.title} {finding.description}")) is not None
        ]
        return _average(values)

    @staticmethod
    def _average_length(findings: Sequence[Finding], keywords: tuple[str, ...]) -> float:
        values = [
            value
            for finding in findings
            if finding.category is Category.CODE_SMELL
            and all(keyword in finding.title.lower() for keyword in keywords)
            if (value := extract_number(LENGTH_PATTERN, f"{finding.title} {finding.description}")) is not None
        ]
        return _average(values)

    @staticmethod
    def _test_coverage(findings: Sequence[Finding]) -> float:
        missing = [finding for finding in findings if finding.category is Category.TEST_COVERAGE]
        population = {finding.file for finding in missing}
        population.update(
            finding.file
            for finding in findings
            if any(marker in finding.file.rsplit("/", 1)[-1] for marker in COVERAGE_COMPONENT_MARKERS)
        )
        return _coverage(len(population), len(missing))

    @staticmethod
    def _documentation_coverage(findings: Sequence[Finding]) -> float:
        missing = [finding for finding in findings if finding.category is Category.DOCUMENTATION]
        population = {
            f"{finding.file}:{finding.line}"
            for finding in findings
            if finding.category is Category.DOCUMENTATION or "public" in finding.description.lower()
        }
        return _coverage(len(population), len(missing))


def _index(findings: Sequence[Finding], key: Callable[[Finding], K]) -> dict[K, tuple[Finding, ...]]:
    grouped: dict[K, list[Finding]] = defaultdict(list)
    for finding in findings:
        grouped[key(finding)].append(finding)
    return {name: tuple(entries) for name, entries in grouped.items()}


__all__ = ["COMPLEXITY_PATTERN", "LENGTH_PATTERN", "ResultAggregator", "extract_number"]
