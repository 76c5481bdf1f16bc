# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy used across the analysis pipeline.

Only :class:`DiscoveryError` is allowed to escape an orchestrator entry point.
Every other error is caught at the narrowest scope, logged, and converted into
an absence of findings.
"""

from __future__ import annotations

from pathlib import Path


class CodeQAError(Exception):
    """Base class for codeqa errors."""


class ConfigError(CodeQAError):
    """Raised when configuration input is invalid."""


class DiscoveryError(CodeQAError):
    """Raised when the discovery root is missing or not a directory."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class TargetNotFoundError(CodeQAError):
    """Raised when an explicit incremental target does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"File not found: {path}")


class ContentReadError(CodeQAError):
    """Raised when the content provider cannot produce a file's text."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Error reading file {path}: {cause}")


class AnalyzerError(CodeQAError):
    """Raised when an analyzer fails on a specific file."""

    def __init__(self, analyzer: str, file: str, cause: BaseException) -> None:
        self.analyzer = analyzer
        self.file = file
        self.cause = cause
        super().__init__(f"Error in analyzer {analyzer} on {file}: {cause}")


class LinterError(CodeQAError):
    """Raised when the external linter cannot be run or its report parsed."""


class PersistenceError(CodeQAError):
    """Raised when a report, baseline, or history entry cannot be written."""


__all__ = [
    "AnalyzerError",
    "CodeQAError",
    "ConfigError",
    "ContentReadError",
    "DiscoveryError",
    "LinterError",
    "PersistenceError",
    "TargetNotFoundError",
]
