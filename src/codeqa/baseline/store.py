# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Persistence of baselines and the analysis history log."""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Final

from pydantic import ValidationError

from ..constants import BASELINE_FILENAME, HISTORY_FILENAME
from ..errors import PersistenceError
from ..logging import DebugLogger, ok, warn
from ..models import (
    AggregatedResult,
    AnalysisMetrics,
    AnalysisResult,
    Baseline,
    Comparison,
    Finding,
    HistoryEntry,
    Priority,
)

# Metrics where a smaller value is an improvement, compared by percentage change.
_LOWER_IS_BETTER: Final[tuple[str, ...]] = (
    "average_complexity",
    "average_function_length",
    "average_class_length",
)
# Coverage metrics are compared by absolute percentage points.
_HIGHER_IS_BETTER: Final[tuple[tuple[str, str], ...]] = (
    ("test_coverage", "test_coverage_percentage"),
    ("documentation_coverage", "documentation_coverage_percentage"),
)


def now_millis() -> int:
    """Return the current wall-clock time in epoch milliseconds."""

    return int(time.time() * 1000)


def _percent_change(baseline: float, current: float) -> float:
    denominator = baseline if baseline > 0 else 1.0
    return abs(current - baseline) / denominator * 100.0


def compare_metrics(current: AnalysisMetrics, baseline: AnalysisMetrics) -> tuple[dict[str, float], dict[str, float]]:
    """Return ``(improved, regressed)`` maps of metric name to change.

    Finding counts per priority and the heuristic averages improve when they
    shrink and report a percentage change relative to the baseline. Coverage
    improves when it grows and reports the difference in percentage points.
    """

    improved: dict[str, float] = {}
    regressed: dict[str, float] = {}

    for priority in Priority:
        key = f"{priority.value}_issues"
        before = baseline.findings_by_priority.get(priority, 0)
        after = current.findings_by_priority.get(priority, 0)
        if after < before:
            improved[key] = _percent_change(before, after)
        elif after > before:
            regressed[key] = _percent_change(before, after)

    for name in _LOWER_IS_BETTER:
        before = getattr(baseline, name)
        after = getattr(current, name)
        if after < before:
            improved[name] = _percent_change(before, after)
        elif after > before:
            regressed[name] = _percent_change(before, after)

    for key, name in _HIGHER_IS_BETTER:
        before = getattr(baseline, name)
        after = getattr(current, name)
        if after > before:
            improved[key] = after - before
        elif after < before:
            regressed[key] = before - after

    return improved, regressed


def compare_baseline(
    current: AnalysisMetrics,
    baseline: Baseline,
    current_ids: Iterable[str] | None = None,
) -> Comparison:
    """Return the :class:`Comparison` of a run against ``baseline``."""

    improved, regressed = compare_metrics(current, baseline.metrics)
    if current_ids is None:
        return Comparison(improved=improved, regressed=regressed)
    ids = set(current_ids)
    return Comparison(
        improved=improved,
        regressed=regressed,
        resolved=tuple(sorted(baseline.finding_ids - ids)),
        new_issues=tuple(sorted(ids - baseline.finding_ids)),
    )


class BaselineStore:
    """Read and write ``baseline.json`` and ``history.jsonl`` under ``output_dir``."""

    def __init__(
        self,
        output_dir: Path,
        *,
        use_emoji: bool = True,
        debug_logger: DebugLogger | None = None,
    ) -> None:
        self.output_dir = output_dir
        self._use_emoji = use_emoji
        self._debug_logger = debug_logger

    @property
    def baseline_path(self) -> Path:
        return self.output_dir / BASELINE_FILENAME

    @property
    def history_path(self) -> Path:
        return self.output_dir / HISTORY_FILENAME

    def load_baseline(self) -> Baseline | None:
        """Return the stored baseline, or ``None`` when absent or unreadable."""

        path = self.baseline_path
        if not path.is_file():
            return None
        try:
            return Baseline.model_validate_json(path.read_text(encoding="utf-8"))
        except OSError as exc:
            warn(f"Failed to load baseline {path}: {exc}", use_emoji=self._use_emoji)
        except ValidationError as exc:
            warn(f"Failed to parse baseline {path}: {exc.error_count()} error(s)", use_emoji=self._use_emoji)
        except UnicodeDecodeError as exc:
            warn(f"Baseline {path} is not valid UTF-8: {exc.reason}", use_emoji=self._use_emoji)
        return None

    def save_baseline(self, metrics: AnalysisMetrics, findings: Iterable[Finding]) -> Baseline:
        """Persist a new baseline built from ``metrics`` and ``findings``.

        Raises:
            PersistenceError: If the baseline file cannot be written.
        """

        baseline = Baseline(
            timestamp=now_millis(),
            metrics=metrics,
            finding_ids=frozenset(finding.id for finding in findings),
        )
        self._write(self.baseline_path, baseline.model_dump_json(indent=2))
        ok(f"Baseline saved to {self.baseline_path}", use_emoji=self._use_emoji)
        return baseline

    def compare(
        self,
        current: AnalysisMetrics,
        baseline: Baseline,
        current_ids: Iterable[str] | None = None,
    ) -> Comparison:
        """Compare ``current`` metrics and finding ids with ``baseline``.

        Args:
            current: Metrics of the current run.
            baseline: Previously stored baseline.
            current_ids: Finding ids of the current run. When omitted only the
                metric deltas are populated.

        Returns:
            Comparison: Improved and regressed metrics plus resolved and new
            finding ids, each sorted.
        """

        return compare_baseline(current, baseline, current_ids)

    def save_to_history(
        self,
        result: AggregatedResult | AnalysisResult,
        baseline: Baseline | None = None,
    ) -> HistoryEntry:
        """Append a history entry for ``result`` to the history log.

        Args:
            result: Aggregated or final result to record.
            baseline: Optional baseline used to attach a comparison.

        Returns:
            HistoryEntry: The entry that was written.

        Raises:
            PersistenceError: If the history log cannot be appended to.
        """

        ids = tuple(finding.id for finding in result.findings)
        entry = HistoryEntry(
            timestamp=now_millis(),
            metrics=result.metrics,
            finding_count=len(ids),
            finding_ids=ids,
            comparison=self.compare(result.metrics, baseline, ids) if baseline is not None else None,
        )
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with self.history_path.open("a", encoding="utf-8") as handle:
                handle.write(entry.model_dump_json() + "\n")
        except OSError as exc:
            raise PersistenceError(f"Unable to append to history {self.history_path}: {exc}") from exc
        self._debug(f"history entry appended to {self.history_path}")
        return entry

    def load_history(self) -> list[HistoryEntry]:
        """Return every readable history entry, newest first.

        The log is append-only, so entries come back in reverse file order.
        Lines that fail to parse are skipped with a warning.
        """

        path = self.history_path
        if not path.is_file():
            return []
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as exc:
            warn(f"Failed to load history {path}: {exc}", use_emoji=self._use_emoji)
            return []
        entries = self._parse_history(lines)
        return entries[::-1]

    def clear_baseline(self) -> bool:
        """Delete the stored baseline, returning whether one existed."""

        if not self.baseline_path.exists():
            return False
        self.baseline_path.unlink()
        return True

    def clear_history(self) -> bool:
        """Delete the history log, returning whether one existed."""

        if not self.history_path.exists():
            return False
        self.history_path.unlink()
        return True

    def _parse_history(self, lines: Sequence[str]) -> list[HistoryEntry]:
        entries: list[HistoryEntry] = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                entries.append(HistoryEntry.model_validate_json(line))
            except ValidationError:
                warn(f"Skipping malformed history line {number} in {self.history_path}", use_emoji=self._use_emoji)
        return entries

    def _write(self, path: Path, text: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Unable to write {path}: {exc}") from exc

    def _debug(self, message: str) -> None:
        if self._debug_logger:
            self._debug_logger(message)


__all__ = ["BaselineStore", "compare_baseline", "compare_metrics", "now_millis"]
