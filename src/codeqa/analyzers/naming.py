# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Kotlin naming convention checks."""

from __future__ import annotations

import re
from typing import Final

from ..models import Category, Effort, FileDescriptor, Finding, Priority
from .base import BaseAnalyzer

_PASCAL_CASE: Final[re.Pattern[str]] = re.compile(r"^[A-Z][A-Za-z0-9]*$")
_CAMEL_CASE: Final[re.Pattern[str]] = re.compile(r"^[a-z][A-Za-z0-9]*$")
_UPPER_SNAKE_CASE: Final[re.Pattern[str]] = re.compile(r"^[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*$")
_TYPE_DECLARATION: Final[re.Pattern[str]] = re.compile(
    r"^(?:(?:public|private|internal|protected|data|sealed|enum|abstract|open|inner|value|annotation)\s+)*"
    r"(?:class|interface|object)\s+(\w+)"
)
_FUNCTION_DECLARATION: Final[re.Pattern[str]] = re.compile(
    r"^(?:(?:public|private|internal|protected|suspend|inline|override|operator|open|abstract)\s+)*"
    r"fun\s+(?:<[^>]*>\s*)?(?:[\w.<>?]+\.)?(\w+)\s*\("
)
_CONST_DECLARATION: Final[re.Pattern[str]] = re.compile(
    r"^(?:(?:public|private|internal|protected)\s+)?const\s+val\s+(\w+)"
)
_CAMEL_BOUNDARY: Final[re.Pattern[str]] = re.compile(r"([a-z0-9])([A-Z])")
_CONVENTIONS_REF: Final[str] = "https://kotlinlang.org/docs/coding-conventions.html#naming-rules"
# Files holding only top-level declarations may use lowerCamelCase names.
_EXEMPT_FILE_NAMES: Final[frozenset[str]] = frozenset({"build.gradle.kts", "settings.gradle.kts"})


def to_upper_snake_case(name: str) -> str:
    """Return ``name`` rewritten as ``UPPER_SNAKE_CASE``."""

    return _CAMEL_BOUNDARY.sub(r"\1_\2", name).upper()


def to_pascal_case(name: str) -> str:
    """Return ``name`` rewritten as ``PascalCase``."""

    parts = re.split(r"[_\-\s]+", name)
    return "".join(part[:1].upper() + part[1:] for part in parts if part)


def to_camel_case(name: str) -> str:
    """Return ``name`` rewritten as ``camelCase``."""

    pascal = to_pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


class NamingAnalyzer(BaseAnalyzer):
    """Check class, file, function and constant names against Kotlin conventions."""

    analyzer_id = "naming"
    analyzer_name = "Naming Analyzer"
    analyzer_category = Category.NAMING

    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        findings: list[Finding] = []
        file_finding = self._check_file_name(file)
        if file_finding is not None:
            findings.append(file_finding)
        for number, line in enumerate(content.splitlines(), start=1):
            stripped = line.strip()
            if stripped.startswith(("//", "*", "/*")):
                continue
            if match := _TYPE_DECLARATION.match(stripped):
                name = match.group(1)
                if not _PASCAL_CASE.match(name):
                    findings.append(self._class_finding(file, number, stripped, name))
            elif match := _FUNCTION_DECLARATION.match(stripped):
                name = match.group(1)
                # Composable functions are PascalCase by convention.
                if not _CAMEL_CASE.match(name) and not _is_composable(content, name):
                    findings.append(self._function_finding(file, number, stripped, name))
            elif match := _CONST_DECLARATION.match(stripped):
                name = match.group(1)
                if not _UPPER_SNAKE_CASE.match(name):
                    findings.append(self._constant_finding(file, number, stripped, name))
        return findings

    def _check_file_name(self, file: FileDescriptor) -> Finding | None:
        if file.name in _EXEMPT_FILE_NAMES or file.extension != "kt":
            return None
        stem = file.absolute_path.stem
        if _PASCAL_CASE.match(stem):
            return None
        return self.finding(
            file,
            1,
            rule="file-name",
            title="File Name Does Not Follow PascalCase Convention",
            description=f"File '{file.name}' should be named in PascalCase.",
            priority=Priority.LOW,
            recommendation=f"Rename the file to '{to_pascal_case(stem)}.kt'.",
            effort=Effort.TRIVIAL,
            references=(_CONVENTIONS_REF,),
        )

    def _class_finding(self, file: FileDescriptor, line: int, snippet: str, name: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="class-name",
            title="Class Name Does Not Follow PascalCase Convention",
            description=f"Type '{name}' should be named in PascalCase.",
            priority=Priority.LOW,
            code_snippet=snippet,
            recommendation=f"Rename '{name}' to '{to_pascal_case(name)}'.",
            effort=Effort.TRIVIAL,
            references=(_CONVENTIONS_REF,),
        )

    def _function_finding(self, file: FileDescriptor, line: int, snippet: str, name: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="function-name",
            title="Function Name Does Not Follow camelCase Convention",
            description=f"Function '{name}' should be named in camelCase.",
            priority=Priority.LOW,
            code_snippet=snippet,
            recommendation=f"Rename '{name}' to '{to_camel_case(name)}'.",
            effort=Effort.TRIVIAL,
            references=(_CONVENTIONS_REF,),
        )

    def _constant_finding(self, file: FileDescriptor, line: int, snippet: str, name: str) -> Finding:
        fixed = to_upper_snake_case(name)
        return self.finding(
            file,
            line,
            rule="constant-name",
            title="Constant Does Not Follow UPPER_SNAKE_CASE Convention",
            description=f"Constant '{name}' should be named in UPPER_SNAKE_CASE.",
            priority=Priority.LOW,
            code_snippet=snippet,
            recommendation=f"Rename '{name}' to '{fixed}'.",
            before_example=f"const val {name} = ...",
            after_example=f"const val {fixed} = ...",
            auto_fixable=True,
            effort=Effort.TRIVIAL,
            references=(_CONVENTIONS_REF,),
        )


def _is_composable(content: str, name: str) -> bool:
    return re.search(rf"@Composable\s+(?:\w+\s+)*fun\s+{re.escape(name)}\b", content) is not None


__all__ = ["NamingAnalyzer", "to_camel_case", "to_pascal_case", "to_upper_snake_case"]
