# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Hilt wiring checks for ViewModels and modules."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Final

from ..models import Category, Effort, FileDescriptor, Finding, Layer, Priority
from .base import BaseAnalyzer, annotations_above, parenthesized

_CLASS_HEADER: Final[re.Pattern[str]] = re.compile(r"\bclass\s+(?P<name>\w+)")
_VIEW_MODEL_SUPERTYPE: Final[re.Pattern[str]] = re.compile(r":\s*(?:Android)?ViewModel\(")
_MODULE_DECLARATION: Final[re.Pattern[str]] = re.compile(r"^\s*(?:object|abstract\s+class)\s+(?P<name>\w*Module)\b")
_INJECT_CONSTRUCTOR: Final[re.Pattern[str]] = re.compile(r"@Inject\s+constructor\b")
_HEADER_LOOKAHEAD: Final[int] = 10
_HILT_REF: Final[str] = "https://developer.android.com/training/dependency-injection/hilt-android"


class DependencyInjectionAnalyzer(BaseAnalyzer):
    """Flag ViewModels and modules that Hilt cannot wire."""

    analyzer_id = "dependency-injection"
    analyzer_name = "Dependency Injection Analyzer"
    analyzer_category = Category.DEPENDENCY_INJECTION

    def applies_to(self, file: FileDescriptor) -> bool:
        if file.layer is Layer.TEST:
            return False
        return file.name.endswith(("ViewModel.kt", "Module.kt"))

    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        lines = content.splitlines()
        findings: list[Finding] = []
        for index, line in enumerate(lines):
            if line.strip().startswith("//"):
                continue
            if (header := _CLASS_HEADER.search(line)) and self._extends_view_model(lines, index):
                findings.extend(self._check_view_model(file, lines, index, header))
            if module := _MODULE_DECLARATION.match(line):
                findings.extend(self._check_module(file, lines, index, module.group("name")))
        return findings

    @staticmethod
    def _header_text(lines: Sequence[str], index: int) -> str:
        collected: list[str] = []
        for line in lines[index : index + _HEADER_LOOKAHEAD]:
            collected.append(line.split("{", 1)[0])
            if "{" in line:
                break
        return "\n".join(collected)

    def _extends_view_model(self, lines: Sequence[str], index: int) -> bool:
        return bool(_VIEW_MODEL_SUPERTYPE.search(self._header_text(lines, index)))

    def _check_view_model(
        self, file: FileDescriptor, lines: Sequence[str], index: int, header: re.Match[str]
    ) -> list[Finding]:
        name = header.group("name")
        snippet = lines[index].strip()
        findings: list[Finding] = []
        if not any(annotation.startswith("@HiltViewModel") for annotation in annotations_above(lines, index)):
            findings.append(self._missing_hilt_view_model(file, index + 1, snippet, name))
        header_text = self._header_text(lines, index)
        parameters = parenthesized([header_text], 0, header.end())
        declares_constructor = not header_text[header.end() :].lstrip().startswith(":")
        if declares_constructor and parameters.strip() and not _INJECT_CONSTRUCTOR.search(header_text):
            findings.append(self._missing_inject(file, index + 1, snippet, name))
        return findings

    def _check_module(self, file: FileDescriptor, lines: Sequence[str], index: int, name: str) -> list[Finding]:
        annotations = annotations_above(lines, index)
        snippet = lines[index].strip()
        findings: list[Finding] = []
        if not any(annotation.startswith("@Module") for annotation in annotations):
            findings.append(self._module_annotation(file, index + 1, snippet, name, "@Module"))
        if not any(annotation.startswith("@InstallIn") for annotation in annotations):
            findings.append(self._module_annotation(file, index + 1, snippet, name, "@InstallIn"))
        return findings

    def _missing_hilt_view_model(self, file: FileDescriptor, line: int, snippet: str, name: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="hilt-view-model",
            title="ViewModel Missing @HiltViewModel Annotation",
            description=f"'{name}' extends ViewModel but is not annotated, so hiltViewModel() cannot create it.",
            priority=Priority.HIGH,
            code_snippet=snippet,
            recommendation="Annotate the class with @HiltViewModel.",
            before_example=f"class {name} @Inject constructor(...) : ViewModel()",
            after_example=f"@HiltViewModel\nclass {name} @Inject constructor(...) : ViewModel()",
            auto_fixable=True,
            effort=Effort.TRIVIAL,
            references=(_HILT_REF,),
        )

    def _missing_inject(self, file: FileDescriptor, line: int, snippet: str, name: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="inject-constructor",
            title="Constructor Missing @Inject Annotation",
            description=f"'{name}' takes constructor dependencies that Hilt has no way to supply.",
            priority=Priority.HIGH,
            code_snippet=snippet,
            recommendation="Mark the primary constructor with @Inject.",
            before_example=f"class {name}(private val repository: MealRepository) : ViewModel()",
            after_example=f"class {name} @Inject constructor(private val repository: MealRepository) : ViewModel()",
            auto_fixable=True,
            effort=Effort.TRIVIAL,
            references=(_HILT_REF,),
        )

    def _module_annotation(self, file: FileDescriptor, line: int, snippet: str, name: str, annotation: str) -> Finding:
        return self.finding(
            file,
            line,
            rule=f"module-{annotation.lstrip('@').lower()}",
            title=f"Hilt Module Missing {annotation} Annotation",
            description=f"Module '{name}' is not annotated with {annotation}, so Hilt ignores its bindings.",
            priority=Priority.HIGH,
            code_snippet=snippet,
            recommendation=f"Annotate '{name}' with @Module and @InstallIn(SingletonComponent::class).",
            after_example=f"@Module\n@InstallIn(SingletonComponent::class)\nobject {name}",
            auto_fixable=True,
            effort=Effort.TRIVIAL,
            references=("https://developer.android.com/training/dependency-injection/hilt-android#hilt-modules",),
        )


__all__ = ["DependencyInjectionAnalyzer"]
