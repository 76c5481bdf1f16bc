# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""ViewModel state and coroutine scope checks."""

from __future__ import annotations

import re
from typing import Final

from ..models import Category, Effort, FileDescriptor, Finding, Layer, Priority
from .base import BaseAnalyzer

_DIRECT_MUTATION: Final[re.Pattern[str]] = re.compile(r"\b(_[A-Za-z]\w*)\.value\s*=(?!=)")
_GLOBAL_SCOPE: Final[re.Pattern[str]] = re.compile(r"\bGlobalScope\.(launch|async)\b")
_STATE_FLOW_REF: Final[str] = "https://developer.android.com/kotlin/flow/stateflow-and-sharedflow"


class StateManagementAnalyzer(BaseAnalyzer):
    """Flag racy state updates and unscoped coroutines inside ViewModels."""

    analyzer_id = "state-management"
    analyzer_name = "State Management Analyzer"
    analyzer_category = Category.STATE_MANAGEMENT

    def applies_to(self, file: FileDescriptor) -> bool:
        return file.layer is not Layer.TEST and "ViewModel" in file.name

    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        findings: list[Finding] = []
        for number, line in enumerate(content.splitlines(), start=1):
            stripped = line.strip()
            if stripped.startswith("//"):
                continue
            if match := _DIRECT_MUTATION.search(stripped):
                findings.append(self._direct_mutation(file, number, stripped, match.group(1)))
            if match := _GLOBAL_SCOPE.search(stripped):
                findings.append(self._global_scope(file, number, stripped, match.group(1)))
        return findings

    def _direct_mutation(self, file: FileDescriptor, line: int, snippet: str, name: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="direct-state-mutation",
            title="Direct State Mutation Instead of update { }",
            description=(
                f"'{name}.value' is assigned directly. Concurrent read-modify-write cycles can lose updates."
            ),
            priority=Priority.MEDIUM,
            code_snippet=snippet,
            recommendation="Use `update { }` so the new state is computed atomically from the current one.",
            before_example=f"{name}.value = {name}.value.copy(isLoading = true)",
            after_example=f"{name}.update {{ it.copy(isLoading = true) }}",
            auto_fixable=True,
            effort=Effort.TRIVIAL,
            references=(_STATE_FLOW_REF,),
        )

    def _global_scope(self, file: FileDescriptor, line: int, snippet: str, builder: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="global-scope",
            title="Coroutine Launch Not Using viewModelScope",
            description=(
                f"GlobalScope.{builder} outlives the ViewModel and leaks work after the screen is closed."
            ),
            priority=Priority.MEDIUM,
            code_snippet=snippet,
            recommendation=f"Replace GlobalScope with viewModelScope.{builder}.",
            before_example=f"GlobalScope.{builder} {{ loadMeals() }}",
            after_example=f"viewModelScope.{builder} {{ loadMeals() }}",
            auto_fixable=True,
            effort=Effort.TRIVIAL,
            references=("https://developer.android.com/topic/libraries/architecture/coroutines",),
        )


__all__ = ["StateManagementAnalyzer"]
