# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layer boundary checks for Clean Architecture style projects."""

from __future__ import annotations

import re
from typing import Final

from ..models import Category, Effort, FileDescriptor, Finding, Layer, Priority
from .base import BaseAnalyzer, block_end, extract_snippet

_ANDROID_IMPORT: Final[str] = "import android."
_PUBLIC_FUNCTION: Final[re.Pattern[str]] = re.compile(r"^(public\s+)?(suspend\s+)?(operator\s+)?fun\s+")
_MUTABLE_STATE_PROPERTY: Final[re.Pattern[str]] = re.compile(r"^(public\s+)?(val|var)\s+\w+.*MutableStateFlow")
_CLEAN_ARCHITECTURE_REF: Final[str] = (
    "https://developer.android.com/topic/architecture#recommended-app-arch"
)


class ArchitectureAnalyzer(BaseAnalyzer):
    """Validate that code respects layer boundaries.

    * Domain files must not import the Android framework.
    * Use cases expose a single public entry point.
    * ViewModels expose read-only state.
    """

    analyzer_id = "architecture"
    analyzer_name = "Architecture Analyzer"
    analyzer_category = Category.ARCHITECTURE

    def applies_to(self, file: FileDescriptor) -> bool:
        return file.layer is not None

    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        lines = content.splitlines()
        if file.layer is Layer.DOMAIN:
            findings = self._check_android_imports(file, lines)
            if "/usecase/" in f"/{file.relative_path}" or file.name.endswith("UseCase.kt"):
                findings.extend(self._check_use_case(file, lines))
            return findings
        if file.layer is Layer.UI and "ViewModel" in file.name:
            return self._check_view_model(file, lines)
        return []

    def _check_android_imports(self, file: FileDescriptor, lines: list[str]) -> list[Finding]:
        findings: list[Finding] = []
        for number, line in enumerate(lines, start=1):
            stripped = line.strip()
            if not stripped.startswith(_ANDROID_IMPORT):
                continue
            findings.append(
                self.finding(
                    file,
                    number,
                    rule="android-import",
                    title="Android Framework Import in Domain Layer",
                    description=(
                        f"The domain layer imports '{stripped.removeprefix('import ').strip()}'. "
                        "Domain code must stay independent of the Android framework."
                    ),
                    priority=Priority.HIGH,
                    code_snippet=stripped,
                    recommendation=(
                        "Move framework-dependent logic into the data or UI layer and expose it "
                        "to the domain through an interface."
                    ),
                    before_example="import android.content.Context\n\nclass GetMealsUseCase(private val context: Context)",
                    after_example="interface MealSource\n\nclass GetMealsUseCase(private val source: MealSource)",
                    effort=Effort.MEDIUM,
                    references=(_CLEAN_ARCHITECTURE_REF,),
                )
            )
        return findings

    def _check_use_case(self, file: FileDescriptor, lines: list[str]) -> list[Finding]:
        class_index = next(
            (index for index, line in enumerate(lines) if "class " in line and "UseCase" in line),
            None,
        )
        if class_index is None:
            return []
        end = block_end(lines, class_index)
        public_functions: list[str] = []
        for index in range(class_index + 1, end + 1):
            stripped = lines[index].strip()
            if not _PUBLIC_FUNCTION.match(stripped):
                continue
            public_functions.append(stripped)
        if len(public_functions) <= 1:
            return []
        return [
            self.finding(
                file,
                class_index + 1,
                rule="use-case-surface",
                title="Use Case Exposes Multiple Public Functions",
                description=(
                    f"Use case declares {len(public_functions)} public functions. "
                    "A use case should expose a single operator function."
                ),
                priority=Priority.MEDIUM,
                code_snippet=extract_snippet(lines, class_index + 1),
                recommendation="Keep one `operator fun invoke` and make helpers private.",
                effort=Effort.SMALL,
                references=(_CLEAN_ARCHITECTURE_REF,),
            )
        ]

    def _check_view_model(self, file: FileDescriptor, lines: list[str]) -> list[Finding]:
        findings: list[Finding] = []
        for number, line in enumerate(lines, start=1):
            stripped = line.strip()
            if not _MUTABLE_STATE_PROPERTY.match(stripped):
                continue
            findings.append(
                self.finding(
                    file,
                    number,
                    rule="exposed-mutable-state",
                    title="MutableStateFlow Exposed from ViewModel",
                    description="ViewModel exposes a MutableStateFlow, allowing the UI to mutate state directly.",
                    priority=Priority.HIGH,
                    code_snippet=stripped,
                    recommendation="Keep the MutableStateFlow private and expose it with `asStateFlow()`.",
                    before_example="val uiState = MutableStateFlow(UiState())",
                    after_example=(
                        "private val _uiState = MutableStateFlow(UiState())\n"
                        "val uiState: StateFlow<UiState> = _uiState.asStateFlow()"
                    ),
                    auto_fixable=True,
                    effort=Effort.TRIVIAL,
                )
            )
        return findings


__all__ = ["ArchitectureAnalyzer"]
