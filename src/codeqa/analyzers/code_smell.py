# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Size and complexity heuristics for Kotlin sources."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from ..models import Category, Effort, FileDescriptor, Finding, Priority
from .base import BaseAnalyzer, block_end, extract_snippet

MAX_FUNCTION_LINES: Final[int] = 50
MAX_CLASS_LINES: Final[int] = 300
MAX_COMPLEXITY: Final[int] = 15
MAX_NESTING_DEPTH: Final[int] = 4
MAX_PARAMETERS: Final[int] = 5

FUNCTION_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s*(?:@\w+(?:\([^)]*\))?\s+)*(?:[a-z]+\s+)*fun\s+(?:<[^>]*>\s*)?(?:[\w.<>?]+\.)?(?P<name>\w+)\s*\("
)
CLASS_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s*(?:@\w+(?:\([^)]*\))?\s+)*(?:[a-z]+\s+)*(?:class|object)\s+(?P<name>\w+)"
)
_DECISION_TOKENS: Final[re.Pattern[str]] = re.compile(r"\b(?:if|for|while|catch)\b|&&|\|\||\?:")
_STRING_LITERAL: Final[re.Pattern[str]] = re.compile(r'"(?:\\.|[^"\\])*"')
_LINE_COMMENT: Final[re.Pattern[str]] = re.compile(r"//.*$")


@dataclass(frozen=True, slots=True)
class Declaration:
    """Location of a function or class declaration within a file."""

    name: str
    start: int
    end: int

    @property
    def line_count(self) -> int:
        return self.end - self.start + 1

    @property
    def line_number(self) -> int:
        return self.start + 1


def strip_noise(line: str) -> str:
    """Return ``line`` without string literal contents and trailing comments."""

    return _LINE_COMMENT.sub("", _STRING_LITERAL.sub('""', line))


def find_declarations(lines: Sequence[str], pattern: re.Pattern[str]) -> list[Declaration]:
    """Return every declaration in ``lines`` whose header matches ``pattern``."""

    declarations: list[Declaration] = []
    for index, line in enumerate(lines):
        match = pattern.match(line)
        if match is None:
            continue
        declarations.append(Declaration(match.group("name"), index, block_end(lines, index)))
    return declarations


def cyclomatic_complexity(lines: Sequence[str]) -> int:
    """Return ``1`` plus the number of decision points found in ``lines``.

    Decision points are ``if``, ``for``, ``while``, ``catch``, ``&&``, ``||``,
    the elvis operator and each ``when`` branch arrow that is not a lambda.
    """

    complexity = 1
    for raw in lines:
        line = strip_noise(raw)
        complexity += len(_DECISION_TOKENS.findall(line))
        arrow = line.find("->")
        if arrow != -1 and "{" not in line[:arrow]:
            complexity += 1
    return complexity


def nesting_depth(lines: Sequence[str]) -> int:
    """Return the deepest brace nesting inside the body spanned by ``lines``."""

    depth = 0
    deepest = 0
    for raw in lines:
        for char in strip_noise(raw):
            if char == "{":
                depth += 1
                deepest = max(deepest, depth)
            elif char == "}":
                depth -= 1
    # The function body itself accounts for one level.
    return max(deepest - 1, 0)


def parameter_count(lines: Sequence[str], start: int) -> int:
    """Return the number of parameters declared by the function at ``start``."""

    depth = 0
    count = 0
    has_content = False
    for line in lines[start:]:
        text = strip_noise(line)
        begin = text.find("(") if depth == 0 else 0
        if begin == -1:
            continue
        segment = text[begin:].replace("->", "  ")
        for char in segment:
            if char in "(<[":
                depth += 1
                if depth == 1 and char == "(":
                    continue
            elif char in ")>]":
                depth -= 1
                if depth == 0:
                    return count + (1 if has_content else 0)
            if depth == 1 and char == ",":
                count += 1
                has_content = False
            elif depth >= 1 and not char.isspace():
                has_content = True
    return count + (1 if has_content else 0)


class CodeSmellAnalyzer(BaseAnalyzer):
    """Detect long functions, large classes, complex and deeply nested code."""

    analyzer_id = "code-smell"
    analyzer_name = "Code Smell Analyzer"
    analyzer_category = Category.CODE_SMELL

    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        lines = content.splitlines()
        findings: list[Finding] = []
        for function in find_declarations(lines, FUNCTION_PATTERN):
            body = lines[function.start : function.end + 1]
            findings.extend(self._check_function(file, lines, function, body))
        for klass in find_declarations(lines, CLASS_PATTERN):
            if klass.line_count > MAX_CLASS_LINES:
                findings.append(self._large_class(file, lines, klass))
        return findings

    def _check_function(
        self,
        file: FileDescriptor,
        lines: Sequence[str],
        function: Declaration,
        body: Sequence[str],
    ) -> list[Finding]:
        findings: list[Finding] = []
        snippet = extract_snippet(lines, function.line_number)
        if function.line_count > MAX_FUNCTION_LINES:
            findings.append(
                self.finding(
                    file,
                    function.line_number,
                    rule="long-function",
                    title=f"Long Function: {function.name}",
                    description=(
                        f"Function '{function.name}' has {function.line_count} lines, exceeding the "
                        f"recommended maximum of {MAX_FUNCTION_LINES}."
                    ),
                    priority=Priority.MEDIUM,
                    code_snippet=snippet,
                    recommendation="Extract logical blocks into smaller private functions with descriptive names.",
                    effort=Effort.MEDIUM,
                    references=("https://refactoring.guru/smells/long-method",),
                )
            )
        parameters = parameter_count(lines, function.start)
        if parameters > MAX_PARAMETERS:
            findings.append(
                self.finding(
                    file,
                    function.line_number,
                    rule="too-many-parameters",
                    title=f"Too Many Parameters: {function.name}",
                    description=(
                        f"Function '{function.name}' declares {parameters} parameters, exceeding the "
                        f"recommended maximum of {MAX_PARAMETERS}."
                    ),
                    priority=Priority.LOW,
                    code_snippet=snippet,
                    recommendation="Group related parameters into a data class.",
                    effort=Effort.SMALL,
                    references=("https://refactoring.guru/smells/long-parameter-list",),
                )
            )
        complexity = cyclomatic_complexity(body)
        if complexity > MAX_COMPLEXITY:
            findings.append(
                self.finding(
                    file,
                    function.line_number,
                    rule="high-complexity",
                    title=f"High Cyclomatic Complexity: {function.name}",
                    description=(
                        f"Function '{function.name}' has a cyclomatic complexity of {complexity}, "
                        f"exceeding the recommended maximum of {MAX_COMPLEXITY}."
                    ),
                    priority=Priority.MEDIUM,
                    code_snippet=snippet,
                    recommendation="Replace nested conditionals with early returns or a `when` expression.",
                    effort=Effort.MEDIUM,
                    references=("https://en.wikipedia.org/wiki/Cyclomatic_complexity",),
                )
            )
        depth = nesting_depth(body)
        if depth > MAX_NESTING_DEPTH:
            findings.append(
                self.finding(
                    file,
                    function.line_number,
                    rule="deep-nesting",
                    title=f"Deep Nesting: {function.name}",
                    description=(
                        f"Function '{function.name}' has a maximum nesting depth of {depth}, exceeding "
                        f"the recommended maximum of {MAX_NESTING_DEPTH}."
                    ),
                    priority=Priority.MEDIUM,
                    code_snippet=snippet,
                    recommendation="Use guard clauses to return early and flatten the control flow.",
                    effort=Effort.SMALL,
                )
            )
        return findings

    def _large_class(self, file: FileDescriptor, lines: Sequence[str], klass: Declaration) -> Finding:
        return self.finding(
            file,
            klass.line_number,
            rule="large-class",
            title=f"Large Class: {klass.name}",
            description=(
                f"Class '{klass.name}' has {klass.line_count} lines, exceeding the recommended "
                f"maximum of {MAX_CLASS_LINES}."
            ),
            priority=Priority.MEDIUM,
            code_snippet=extract_snippet(lines, klass.line_number, max_lines=20),
            recommendation="Split the class along its responsibilities and inject the collaborators.",
            effort=Effort.LARGE,
            references=("https://refactoring.guru/smells/large-class",),
        )


__all__ = [
    "CLASS_PATTERN",
    "CodeSmellAnalyzer",
    "Declaration",
    "FUNCTION_PATTERN",
    "cyclomatic_complexity",
    "find_declarations",
    "nesting_depth",
    "parameter_count",
]
