# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for baseline persistence, comparison and history."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from codeqa.baseline import BaselineStore, compare_baseline, compare_metrics
from codeqa.errors import PersistenceError
from codeqa.models import AnalysisMetrics, AnalysisResult, Baseline, Priority


def _metrics(**overrides: object) -> AnalysisMetrics:
    values: dict[str, object] = {
        "findings_by_priority": {priority: 0 for priority in Priority},
    }
    values.update(overrides)
    return AnalysisMetrics(**values)


@pytest.fixture
def store(tmp_path: Path) -> BaselineStore:
    return BaselineStore(tmp_path / "out", use_emoji=False)


def test_load_baseline_absent(store: BaselineStore) -> None:
    assert store.load_baseline() is None


def test_save_and_load_baseline(store: BaselineStore, make_finding) -> None:
    metrics = _metrics(total_findings=2)
    findings = [make_finding(id="b"), make_finding(id="a", line=2)]

    saved = store.save_baseline(metrics, findings)
    loaded = store.load_baseline()

    assert loaded == saved
    assert loaded is not None
    assert loaded.finding_ids == frozenset({"a", "b"})
    document = json.loads(store.baseline_path.read_text(encoding="utf-8"))
    assert document["finding_ids"] == ["a", "b"]


def test_corrupt_baseline_is_ignored(store: BaselineStore, capsys) -> None:
    store.output_dir.mkdir(parents=True)
    store.baseline_path.write_text("{broken", encoding="utf-8")

    assert store.load_baseline() is None
    assert "Failed to parse baseline" in capsys.readouterr().out


def test_non_utf8_baseline_is_ignored(store: BaselineStore, capsys) -> None:
    store.output_dir.mkdir(parents=True)
    store.baseline_path.write_bytes(b"\xff\xfe\x00garbage")

    assert store.load_baseline() is None
    assert "not valid UTF-8" in capsys.readouterr().out


def test_non_utf8_history_is_ignored(store: BaselineStore, capsys) -> None:
    store.output_dir.mkdir(parents=True)
    store.history_path.write_bytes(b"\xff\xfe\x00garbage\n")

    assert store.load_history() == []
    assert "Failed to load history" in capsys.readouterr().out


def test_save_baseline_raises_persistence_error(tmp_path: Path, make_finding) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = BaselineStore(blocker / "out", use_emoji=False)

    with pytest.raises(PersistenceError):
        store.save_baseline(_metrics(), [make_finding()])


def test_compare_identical_runs_is_empty() -> None:
    metrics = _metrics(findings_by_priority={Priority.HIGH: 2}, average_complexity=10.0)
    baseline = Baseline(timestamp=1, metrics=metrics, finding_ids=frozenset({"a", "b"}))

    comparison = compare_baseline(metrics, baseline, ["a", "b"])

    assert comparison.improved == {}
    assert comparison.regressed == {}
    assert comparison.resolved == ()
    assert comparison.new_issues == ()


def test_compare_classifies_new_and_resolved() -> None:
    baseline = Baseline(timestamp=1, metrics=_metrics(), finding_ids=frozenset({"a", "b"}))

    comparison = compare_baseline(_metrics(), baseline, ["c", "b", "d"])

    assert comparison.resolved == ("a",)
    assert comparison.new_issues == ("c", "d")


def test_compare_metrics_directions() -> None:
    before = _metrics(
        findings_by_priority={Priority.CRITICAL: 4, Priority.HIGH: 0, Priority.MEDIUM: 2, Priority.LOW: 1},
        average_complexity=20.0,
        test_coverage_percentage=50.0,
        documentation_coverage_percentage=80.0,
    )
    after = _metrics(
        findings_by_priority={Priority.CRITICAL: 2, Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1},
        average_complexity=25.0,
        test_coverage_percentage=60.0,
        documentation_coverage_percentage=70.0,
    )

    improved, regressed = compare_metrics(after, before)

    assert improved == {"critical_issues": 50.0, "test_coverage": 10.0}
    assert regressed == {"high_issues": 300.0, "average_complexity": 25.0, "documentation_coverage": 10.0}


def test_store_compare_without_ids_only_reports_metrics(store: BaselineStore) -> None:
    baseline = Baseline(timestamp=1, metrics=_metrics(), finding_ids=frozenset({"a"}))

    comparison = store.compare(_metrics(), baseline)

    assert comparison.resolved == ()
    assert comparison.new_issues == ()


def test_history_is_newest_first(store: BaselineStore, make_finding, monkeypatch) -> None:
    stamps = iter([1_000, 2_000])
    monkeypatch.setattr("codeqa.baseline.store.now_millis", lambda: next(stamps))

    store.save_to_history(AnalysisResult(findings=(make_finding(id="one"),)))
    store.save_to_history(AnalysisResult(findings=(make_finding(id="two"),)))

    history = store.load_history()

    assert [entry.timestamp for entry in history] == [2_000, 1_000]
    assert history[0].finding_ids == ("two",)
    assert history[0].finding_count == 1


def test_history_entry_carries_comparison(store: BaselineStore, make_finding) -> None:
    baseline = Baseline(timestamp=1, metrics=_metrics(), finding_ids=frozenset({"gone"}))

    entry = store.save_to_history(AnalysisResult(findings=(make_finding(id="fresh"),)), baseline)

    assert entry.comparison is not None
    assert entry.comparison.new_issues == ("fresh",)
    assert entry.comparison.resolved == ("gone",)
    assert store.load_history()[0].comparison == entry.comparison


def test_malformed_history_lines_are_skipped(store: BaselineStore, make_finding, capsys) -> None:
    store.save_to_history(AnalysisResult(findings=(make_finding(),)))
    with store.history_path.open("a", encoding="utf-8") as handle:
        handle.write("not json\n\n")

    history = store.load_history()

    assert len(history) == 1
    assert "Skipping malformed history line 2" in capsys.readouterr().out


def test_load_history_absent(store: BaselineStore) -> None:
    assert store.load_history() == []


def test_clear_baseline_and_history(store: BaselineStore, make_finding) -> None:
    store.save_baseline(_metrics(), [make_finding()])
    store.save_to_history(AnalysisResult())

    assert store.clear_baseline()
    assert store.clear_history()
    assert not store.clear_baseline()
    assert not store.clear_history()
    assert store.load_baseline() is None
