# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""External linter integration."""

from __future__ import annotations

from .detekt import (
    DETEKT_SUCCESS_CODES,
    DetektLinter,
    LinterIssue,
    LinterResult,
    LinterSeverity,
    map_debt_to_effort,
    map_rule_set_to_category,
    map_severity_to_priority,
    parse_sarif,
)
from .process import CommandOptions, CommandRunner, run_command

__all__ = [
    "CommandOptions",
    "CommandRunner",
    "DETEKT_SUCCESS_CODES",
    "DetektLinter",
    "LinterIssue",
    "LinterResult",
    "LinterSeverity",
    "map_debt_to_effort",
    "map_rule_set_to_category",
    "map_severity_to_priority",
    "parse_sarif",
    "run_command",
]
