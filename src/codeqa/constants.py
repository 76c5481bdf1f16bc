# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants for codeqa."""

from __future__ import annotations

from typing import Final

DEFAULT_EXCLUDE_PATTERNS: Final[tuple[str, ...]] = (
    "**/build/**",
    "**/.gradle/**",
    "**/generated/**",
    "**/.idea/**",
    "**/.git/**",
    "**/bin/**",
    "**/out/**",
)

SOURCE_EXTENSIONS: Final[frozenset[str]] = frozenset({"kt", "kts"})

DEFAULT_OUTPUT_DIR_NAME: Final[str] = ".codeqa"
DEFAULT_LINTER_CONFIG: Final[str] = "detekt-config.yml"
DEFAULT_LINTER_EXECUTABLE: Final[str] = "detekt"
LINTER_ANALYZER_ID: Final[str] = "detekt"

REPORT_BASENAME: Final[str] = "analysis-report"
REPORT_SUFFIX_INCREMENTAL: Final[str] = "-incremental"
REPORT_SUFFIX_FILTERED: Final[str] = "-filtered"
BASELINE_FILENAME: Final[str] = "baseline.json"
HISTORY_FILENAME: Final[str] = "history.jsonl"

CONFIG_FILENAME: Final[str] = "codeqa.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_SECTION: Final[str] = "codeqa"

__all__ = [
    "BASELINE_FILENAME",
    "CONFIG_FILENAME",
    "DEFAULT_EXCLUDE_PATTERNS",
    "DEFAULT_LINTER_CONFIG",
    "DEFAULT_LINTER_EXECUTABLE",
    "DEFAULT_OUTPUT_DIR_NAME",
    "HISTORY_FILENAME",
    "LINTER_ANALYZER_ID",
    "PYPROJECT_FILENAME",
    "PYPROJECT_TOOL_SECTION",
    "REPORT_BASENAME",
    "REPORT_SUFFIX_FILTERED",
    "REPORT_SUFFIX_INCREMENTAL",
    "SOURCE_EXTENSIONS",
]
