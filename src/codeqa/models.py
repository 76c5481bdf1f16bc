# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the codeqa package."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class Layer(str, Enum):
    """Coarse architectural bucket inferred from a file path."""

    DATA = "data"
    DOMAIN = "domain"
    UI = "ui"
    DI = "dependency-injection"
    TEST = "test"


class Category(str, Enum):
    """Closed set of quality aspects a finding can belong to."""

    ARCHITECTURE = "architecture"
    COMPOSE = "compose"
    STATE_MANAGEMENT = "state-management"
    ERROR_HANDLING = "error-handling"
    DEPENDENCY_INJECTION = "dependency-injection"
    DATABASE = "database"
    PERFORMANCE = "performance"
    NAMING = "naming"
    TEST_COVERAGE = "test-coverage"
    DOCUMENTATION = "documentation"
    SECURITY = "security"
    CODE_SMELL = "code-smell"


class Priority(str, Enum):
    """Finding priority; compare severity through :mod:`codeqa.priority`."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Effort(str, Enum):
    """Rough estimate of the work needed to address a finding."""

    TRIVIAL = "trivial"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class AnalysisMode(str, Enum):
    """Entry point that produced an :class:`AnalysisResult`."""

    FULL = "full"
    INCREMENTAL = "incremental"
    FILTERED = "filtered"


class FileDescriptor(BaseModel):
    """Immutable metadata describing a discovered source file."""

    model_config = ConfigDict(frozen=True)

    absolute_path: Path
    relative_path: str
    size_bytes: int = 0
    last_modified_epoch_millis: int = 0
    layer: Layer | None = None

    @property
    def extension(self) -> str:
        """Return the lower-cased extension without the leading dot."""
        return self.absolute_path.suffix.lstrip(".").lower()

    @property
    def name(self) -> str:
        """Return the file name component."""
        return self.absolute_path.name


class Finding(BaseModel):
    """Normalized issue reported by an analyzer or the external linter."""

    model_config = ConfigDict(frozen=True)

    id: str
    analyzer: str
    category: Category
    priority: Priority
    title: str
    description: str
    file: str
    line: int
    column: int | None = None
    code_snippet: str = ""
    recommendation: str = ""
    before_example: str | None = None
    after_example: str | None = None
    auto_fixable: bool = False
    effort: Effort = Effort.SMALL
    references: tuple[str, ...] = Field(default_factory=tuple)

    @property
    def dedup_key(self) -> tuple[str, int, Category, str]:
        """Return the identity used to collapse duplicate findings."""
        return (self.file, self.line, self.category, self.title)


class AnalysisMetrics(BaseModel):
    """Summary counters and heuristic signals computed over a finding set.

    The averages and coverage percentages are scraped from finding text and
    estimated component populations. They are trend signals, not measurements.
    """

    model_config = ConfigDict(frozen=True)

    total_files: int = 0
    total_findings: int = 0
    findings_by_priority: dict[Priority, int] = Field(default_factory=dict)
    findings_by_category: dict[Category, int] = Field(default_factory=dict)
    average_complexity: float = 0.0
    average_function_length: float = 0.0
    average_class_length: float = 0.0
    test_coverage_percentage: float = 100.0
    documentation_coverage_percentage: float = 100.0


class AggregatedResult(BaseModel):
    """Deduplicated findings plus metrics and lookup indexes."""

    model_config = ConfigDict(frozen=True)

    findings: tuple[Finding, ...] = Field(default_factory=tuple)
    metrics: AnalysisMetrics = Field(default_factory=AnalysisMetrics)
    by_category: dict[Category, tuple[Finding, ...]] = Field(default_factory=dict)
    by_priority: dict[Priority, tuple[Finding, ...]] = Field(default_factory=dict)
    by_file: dict[str, tuple[Finding, ...]] = Field(default_factory=dict)

    @property
    def finding_ids(self) -> set[str]:
        """Return the identifiers of every retained finding."""
        return {finding.id for finding in self.findings}


class Baseline(BaseModel):
    """Snapshot of finding identities used for new/resolved classification."""

    model_config = ConfigDict(frozen=True)

    timestamp: int
    metrics: AnalysisMetrics
    finding_ids: frozenset[str] = Field(default_factory=frozenset)

    @field_serializer("finding_ids")
    def _serialize_ids(self, value: frozenset[str]) -> list[str]:
        return sorted(value)


class Comparison(BaseModel):
    """Difference between a current run and a stored baseline."""

    model_config = ConfigDict(frozen=True)

    improved: dict[str, float] = Field(default_factory=dict)
    regressed: dict[str, float] = Field(default_factory=dict)
    resolved: tuple[str, ...] = Field(default_factory=tuple)
    new_issues: tuple[str, ...] = Field(default_factory=tuple)


class HistoryEntry(BaseModel):
    """One appended record in the analysis history log."""

    model_config = ConfigDict(frozen=True)

    timestamp: int
    metrics: AnalysisMetrics
    finding_count: int
    finding_ids: tuple[str, ...] = Field(default_factory=tuple)
    comparison: Comparison | None = None


class AnalysisResult(BaseModel):
    """Outcome of a single orchestrator entry point."""

    model_config = ConfigDict(frozen=True)

    findings: tuple[Finding, ...] = Field(default_factory=tuple)
    metrics: AnalysisMetrics = Field(default_factory=AnalysisMetrics)
    execution_time: float = 0.0
    files_analyzed: int = 0
    mode: AnalysisMode = AnalysisMode.FULL
    report_path: Path | None = None


__all__ = [
    "AggregatedResult",
    "AnalysisMetrics",
    "AnalysisMode",
    "AnalysisResult",
    "Baseline",
    "Category",
    "Comparison",
    "Effort",
    "FileDescriptor",
    "Finding",
    "HistoryEntry",
    "Layer",
    "Priority",
]
