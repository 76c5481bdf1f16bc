# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Source-code quality analysis engine."""

from __future__ import annotations

from .aggregation import ResultAggregator
from .config import AnalysisConfig
from .models import (
    AggregatedResult,
    AnalysisMetrics,
    AnalysisResult,
    Category,
    Effort,
    FileDescriptor,
    Finding,
    Layer,
    Priority,
)
from .orchestration import Orchestrator

__all__ = [
    "AggregatedResult",
    "AnalysisConfig",
    "AnalysisMetrics",
    "AnalysisResult",
    "Category",
    "Effort",
    "FileDescriptor",
    "Finding",
    "Layer",
    "Orchestrator",
    "Priority",
    "ResultAggregator",
]
