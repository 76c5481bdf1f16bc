# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Analyzer protocol, registry and bundled analyzers."""

from __future__ import annotations

from .architecture import ArchitectureAnalyzer
from .base import Analyzer, BaseAnalyzer, stable_finding_id
from .code_smell import CodeSmellAnalyzer
from .compose import ComposeAnalyzer
from .database import DatabaseAnalyzer
from .dependency_injection import DependencyInjectionAnalyzer
from .documentation import DocumentationAnalyzer
from .error_handling import ErrorHandlingAnalyzer
from .naming import NamingAnalyzer
from .performance import PerformanceAnalyzer
from .registry import AnalyzerRegistry, build_default_registry
from .security import SecurityAnalyzer
from .state_management import StateManagementAnalyzer
from .test_coverage import TestCoverageAnalyzer

__all__ = [
    "Analyzer",
    "AnalyzerRegistry",
    "ArchitectureAnalyzer",
    "BaseAnalyzer",
    "CodeSmellAnalyzer",
    "ComposeAnalyzer",
    "DatabaseAnalyzer",
    "DependencyInjectionAnalyzer",
    "DocumentationAnalyzer",
    "ErrorHandlingAnalyzer",
    "NamingAnalyzer",
    "PerformanceAnalyzer",
    "SecurityAnalyzer",
    "StateManagementAnalyzer",
    "TestCoverageAnalyzer",
    "build_default_registry",
    "stable_finding_id",
]
