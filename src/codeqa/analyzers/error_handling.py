# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Detect swallowed and overly broad exception handlers."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Final

from ..models import Category, Effort, FileDescriptor, Finding, Priority
from .base import BaseAnalyzer, extract_snippet

_CATCH: Final[re.Pattern[str]] = re.compile(r"catch\s*\(\s*\w+\s*:\s*([\w.]+)\s*\)")
_GENERIC_TYPES: Final[frozenset[str]] = frozenset(
    {"Exception", "Throwable", "java.lang.Exception", "java.lang.Throwable", "kotlin.Exception", "kotlin.Throwable"}
)
_LOGGING_CALL: Final[re.Pattern[str]] = re.compile(
    r"^(?:Log\.[vdiwe]\(|Timber\.\w+\(|println\(|print\(|\w+\.printStackTrace\(\)|logger\.\w+\()"
)


def catch_body(lines: Sequence[str], index: int, offset: int = 0) -> list[str]:
    """Return the statements of the catch block starting at ``lines[index][offset:]``.

    Args:
        lines: Source lines of the file.
        index: 0-based line index holding the ``catch`` clause.
        offset: Column where the clause starts, so a preceding ``}`` closing
            the ``try`` block is not counted.

    Returns:
        list[str]: Non-blank, non-comment statements inside the block.
    """

    statements: list[str] = []
    depth = 0
    opened = False
    current: list[str] = []
    for line_index in range(index, len(lines)):
        text = lines[line_index][offset:] if line_index == index else lines[line_index]
        for char in text:
            if char == "{":
                depth += 1
                if not opened:
                    opened = True
                    continue
            elif char == "}":
                depth -= 1
                if opened and depth == 0:
                    statements.append("".join(current).strip())
                    return [entry for entry in statements if entry and not entry.startswith("//")]
            if opened:
                current.append(char)
        if opened:
            statements.append("".join(current).strip())
            current = []
    return [entry for entry in statements if entry and not entry.startswith("//")]


class ErrorHandlingAnalyzer(BaseAnalyzer):
    """Flag catch blocks that hide failures or catch too broadly."""

    analyzer_id = "error-handling"
    analyzer_name = "Error Handling Analyzer"
    analyzer_category = Category.ERROR_HANDLING

    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        lines = content.splitlines()
        findings: list[Finding] = []
        for index, line in enumerate(lines):
            match = _CATCH.search(line)
            if match is None:
                continue
            number = index + 1
            snippet = extract_snippet(lines, number, max_lines=5)
            statements = catch_body(lines, index, match.start())
            if all(_LOGGING_CALL.match(statement) for statement in statements):
                findings.append(self._swallowed(file, number, snippet, logging_only=bool(statements)))
            if match.group(1) in _GENERIC_TYPES:
                findings.append(self._generic(file, number, snippet, match.group(1)))
        return findings

    def _swallowed(self, file: FileDescriptor, line: int, snippet: str, *, logging_only: bool) -> Finding:
        detail = "only logs the exception" if logging_only else "is empty"
        return self.finding(
            file,
            line,
            rule="swallowed-exception",
            title="Empty or Logging-Only Catch Block",
            description=f"The catch block {detail}, hiding the failure from callers.",
            priority=Priority.MEDIUM,
            code_snippet=snippet,
            recommendation="Map the exception to a domain error and propagate it, for example with Result.failure().",
            before_example="try {\n    repository.save(meal)\n} catch (e: IOException) {\n    Log.e(TAG, \"save failed\", e)\n}",
            after_example=(
                "try {\n    repository.save(meal)\n    Result.success(Unit)\n} catch (e: IOException) {\n"
                "    Result.failure(AppError.Storage(e))\n}"
            ),
            effort=Effort.SMALL,
        )

    def _generic(self, file: FileDescriptor, line: int, snippet: str, caught: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="generic-catch",
            title="Generic Exception Catch",
            description=f"Catching '{caught}' also traps unexpected programming errors and cancellation.",
            priority=Priority.LOW,
            code_snippet=snippet,
            recommendation="Catch the specific exception types the protected call can throw.",
            effort=Effort.SMALL,
            references=("https://kotlinlang.org/docs/exceptions.html",),
        )


__all__ = ["ErrorHandlingAnalyzer", "catch_body"]
