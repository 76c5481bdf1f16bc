# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Jetpack Compose usage checks."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Final

from ..models import Category, Effort, FileDescriptor, Finding, Layer, Priority
from .base import BaseAnalyzer, block_end, parenthesized
from .code_smell import FUNCTION_PATTERN

_COMPOSABLE_ANNOTATION: Final[str] = "@Composable"
_ANNOTATION_LOOKAHEAD: Final[int] = 3
_PRIVATE: Final[re.Pattern[str]] = re.compile(r"\bprivate\s+(?:\w+\s+)*fun\b")
_MODIFIER_PARAMETER: Final[re.Pattern[str]] = re.compile(r"\b\w+\s*:\s*Modifier\b(?P<default>\s*=)?")
_LAZY_LIST: Final[re.Pattern[str]] = re.compile(r"\bLazy(?:Column|Row)\s*[({]")
_ITEMS_CALL: Final[re.Pattern[str]] = re.compile(r"\bitems(?:Indexed)?\s*\(")
_KEY_ARGUMENT: Final[re.Pattern[str]] = re.compile(r"\bkey\s*=")
_EXPENSIVE_VALUE: Final[re.Pattern[str]] = re.compile(
    r"^\s*val\s+(?P<name>\w+)\s*=.*\.(?:filter|map|flatMap|sorted|sortedBy|groupBy|partition|associate|distinct)\w*\s*[({]"
)
_REMEMBERED: Final[re.Pattern[str]] = re.compile(r"\b(?:remember|derivedStateOf)\b")
_COMPOSE_REF: Final[str] = "https://developer.android.com/develop/ui/compose/performance/bestpractices"


def composable_functions(lines: Sequence[str]) -> list[tuple[int, re.Match[str]]]:
    """Return ``(index, match)`` pairs for every function annotated ``@Composable``."""

    found: list[tuple[int, re.Match[str]]] = []
    seen: set[int] = set()
    for index, line in enumerate(lines):
        if _COMPOSABLE_ANNOTATION not in line:
            continue
        for candidate in range(index, min(index + _ANNOTATION_LOOKAHEAD + 1, len(lines))):
            match = FUNCTION_PATTERN.match(lines[candidate])
            if match is None:
                continue
            if candidate not in seen:
                seen.add(candidate)
                found.append((candidate, match))
            break
    return found


class ComposeAnalyzer(BaseAnalyzer):
    """Flag composables that are hard to reuse or needlessly slow to recompose."""

    analyzer_id = "compose"
    analyzer_name = "Compose Analyzer"
    analyzer_category = Category.COMPOSE

    def applies_to(self, file: FileDescriptor) -> bool:
        if file.layer is Layer.TEST:
            return False
        return file.layer is Layer.UI or file.name.endswith("Screen.kt")

    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        lines = content.splitlines()
        findings: list[Finding] = []
        for index, match in composable_functions(lines):
            name = match.group("name")
            end = block_end(lines, index)
            if not _PRIVATE.search(lines[index]):
                findings.extend(self._check_modifier(file, lines, index, match, name))
            for body_index in range(index + 1, end + 1):
                line = lines[body_index]
                if _EXPENSIVE_VALUE.match(line) and not _REMEMBERED.search(line):
                    findings.append(self._not_remembered(file, body_index + 1, line.strip()))
            findings.extend(self._check_lazy_lists(file, lines, index + 1, end))
        return findings

    def _check_modifier(
        self, file: FileDescriptor, lines: Sequence[str], index: int, match: re.Match[str], name: str
    ) -> list[Finding]:
        parameters = parenthesized(lines, index, match.end() - 1)
        modifier = _MODIFIER_PARAMETER.search(parameters)
        if modifier is None:
            return [self._missing_modifier(file, index + 1, lines[index].strip(), name)]
        if modifier.group("default") is None:
            return [self._modifier_without_default(file, index + 1, lines[index].strip(), name)]
        return []

    def _check_lazy_lists(self, file: FileDescriptor, lines: Sequence[str], start: int, end: int) -> list[Finding]:
        findings: list[Finding] = []
        nested: set[int] = set()
        keyless: set[int] = set()
        for outer in range(start, end + 1):
            if not _LAZY_LIST.search(lines[outer]):
                continue
            outer_end = block_end(lines, outer)
            for inner in range(outer + 1, outer_end + 1):
                line = lines[inner]
                if _LAZY_LIST.search(line) and inner not in nested:
                    nested.add(inner)
                    findings.append(self._nested_lazy_list(file, inner + 1, line.strip()))
                items = _ITEMS_CALL.search(line)
                if items and inner not in keyless:
                    arguments = parenthesized(lines, inner, items.start())
                    if not _KEY_ARGUMENT.search(arguments):
                        keyless.add(inner)
                        findings.append(self._missing_key(file, inner + 1, line.strip()))
        return findings

    def _missing_modifier(self, file: FileDescriptor, line: int, snippet: str, name: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="missing-modifier",
            title="Composable Missing Modifier Parameter",
            description=f"Composable '{name}' does not accept a Modifier, so callers cannot size or position it.",
            priority=Priority.MEDIUM,
            code_snippet=snippet,
            recommendation="Add `modifier: Modifier = Modifier` and apply it to the root layout.",
            before_example=f"fun {name}(meal: Meal) {{ Card {{ }} }}",
            after_example=f"fun {name}(meal: Meal, modifier: Modifier = Modifier) {{ Card(modifier) {{ }} }}",
            effort=Effort.TRIVIAL,
            references=("https://developer.android.com/develop/ui/compose/modifiers",),
        )

    def _modifier_without_default(self, file: FileDescriptor, line: int, snippet: str, name: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="modifier-default",
            title="Modifier Parameter Missing Default Value",
            description=f"The Modifier parameter of '{name}' has no default, forcing every caller to pass one.",
            priority=Priority.LOW,
            code_snippet=snippet,
            recommendation="Default the parameter to `Modifier`.",
            before_example="modifier: Modifier",
            after_example="modifier: Modifier = Modifier",
            auto_fixable=True,
            effort=Effort.TRIVIAL,
            references=("https://developer.android.com/develop/ui/compose/modifiers",),
        )

    def _nested_lazy_list(self, file: FileDescriptor, line: int, snippet: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="nested-lazy-list",
            title="Nested LazyColumn Detected",
            description="A lazy list is nested inside another lazy list scrolling the same way.",
            priority=Priority.HIGH,
            code_snippet=snippet,
            recommendation="Flatten the content into a single lazy list using several item blocks.",
            effort=Effort.MEDIUM,
            references=("https://developer.android.com/develop/ui/compose/lists",),
        )

    def _missing_key(self, file: FileDescriptor, line: int, snippet: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="items-key",
            title="LazyColumn items() Missing key Parameter",
            description="items() is called without a key, so reordering recomposes and loses item state.",
            priority=Priority.MEDIUM,
            code_snippet=snippet,
            recommendation="Pass a stable key such as the entity id.",
            before_example="items(meals) { meal -> MealRow(meal) }",
            after_example="items(meals, key = { it.id }) { meal -> MealRow(meal) }",
            effort=Effort.TRIVIAL,
            references=(_COMPOSE_REF,),
        )

    def _not_remembered(self, file: FileDescriptor, line: int, snippet: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="remember-computation",
            title="Expensive Computation Not Wrapped in remember",
            description="A collection transformation runs on every recomposition.",
            priority=Priority.MEDIUM,
            code_snippet=snippet,
            recommendation="Wrap the computation in `remember(keys) { }` or derive it in the ViewModel.",
            before_example="val sorted = meals.sortedBy { it.name }",
            after_example="val sorted = remember(meals) { meals.sortedBy { it.name } }",
            effort=Effort.SMALL,
            references=(_COMPOSE_REF,),
        )


__all__ = ["ComposeAnalyzer", "composable_functions"]
