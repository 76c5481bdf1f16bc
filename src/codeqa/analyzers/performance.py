# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Loop-level performance checks for collection and string handling."""

from __future__ import annotations

import re
from typing import Final

from ..models import Category, Effort, FileDescriptor, Finding, Priority
from .base import BaseAnalyzer, block_end

_LOOP_START: Final[re.Pattern[str]] = re.compile(r"^\s*(?:for|while)\s*\(|\.forEach(?:Indexed)?\s*[({]")
_COLLECTION_OPERATION: Final[re.Pattern[str]] = re.compile(r"\.(filter|map|flatMap|distinct|sorted)\w*\b")
_MATERIALIZE: Final[re.Pattern[str]] = re.compile(r"\.to(?:List|Set)\(\)")
_SEQUENCE: Final[str] = "asSequence()"
_STRING_VARIABLE: Final[re.Pattern[str]] = re.compile(r"^\s*var\s+(?P<name>\w+)\s*(?::\s*String\b|=\s*\")")
_CHAINED_OPERATIONS: Final[int] = 2
_SEQUENCES_REF: Final[str] = "https://kotlinlang.org/docs/sequences.html"


class PerformanceAnalyzer(BaseAnalyzer):
    """Flag allocation-heavy work repeated on every loop iteration."""

    analyzer_id = "performance"
    analyzer_name = "Performance Analyzer"
    analyzer_category = Category.PERFORMANCE

    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        lines = content.splitlines()
        string_variables = {match.group("name") for line in lines if (match := _STRING_VARIABLE.match(line))}
        appends = [re.compile(rf"\b{re.escape(name)}\s*(?:\+=|=\s*{re.escape(name)}\s*\+)") for name in string_variables]

        findings: list[Finding] = []
        reported: set[int] = set()
        for start, line in enumerate(lines):
            if line.strip().startswith("//") or not _LOOP_START.search(line):
                continue
            for index in range(start + 1, block_end(lines, start) + 1):
                if index in reported:
                    continue
                body_line = lines[index]
                stripped = body_line.strip()
                if stripped.startswith("//"):
                    continue
                if self._chains_collections(body_line):
                    reported.add(index)
                    findings.append(self._list_operations(file, index + 1, stripped))
                elif any(append.search(body_line) for append in appends):
                    reported.add(index)
                    findings.append(self._string_concatenation(file, index + 1, stripped))
        return findings

    @staticmethod
    def _chains_collections(line: str) -> bool:
        if _SEQUENCE in line:
            return False
        operations = set(_COLLECTION_OPERATION.findall(line))
        return len(operations) >= _CHAINED_OPERATIONS or (bool(operations) and bool(_MATERIALIZE.search(line)))

    def _list_operations(self, file: FileDescriptor, line: int, snippet: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="loop-collection-chain",
            title="Inefficient List Operations in Loop",
            description="Chained collection operations allocate an intermediate list on every iteration.",
            priority=Priority.MEDIUM,
            code_snippet=snippet,
            recommendation="Use asSequence() for the chain or hoist the computation out of the loop.",
            before_example="items.filter { it.isValid }.map { it.name }",
            after_example="items.asSequence().filter { it.isValid }.map { it.name }.toList()",
            effort=Effort.SMALL,
            references=(_SEQUENCES_REF,),
        )

    def _string_concatenation(self, file: FileDescriptor, line: int, snippet: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="loop-string-concatenation",
            title="String Concatenation in Loop",
            description="Appending to a String inside a loop copies the whole string on every iteration.",
            priority=Priority.MEDIUM,
            code_snippet=snippet,
            recommendation="Collect the pieces with buildString { } or joinToString().",
            before_example='var text = ""\nfor (item in items) { text += item.name }',
            after_example="val text = buildString { items.forEach { append(it.name) } }",
            effort=Effort.SMALL,
            references=("https://kotlinlang.org/api/core/kotlin-stdlib/kotlin.text/build-string.html",),
        )


__all__ = ["PerformanceAnalyzer"]
