# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""KDoc presence checks for public declarations."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Final

from ..models import Category, Effort, FileDescriptor, Finding, Priority
from .base import BaseAnalyzer

_DECLARATION: Final[re.Pattern[str]] = re.compile(
    r"^(?P<modifiers>(?:(?:public|private|internal|protected|override|data|sealed|enum|abstract|open|"
    r"suspend|inline|operator|value)\s+)*)(?P<kind>class|interface|object|fun)\s+"
    r"(?:<[^>]*>\s*)?(?:[\w.<>?]+\.)?(?P<name>\w+)"
)
_HIDDEN: Final[frozenset[str]] = frozenset({"private", "internal", "protected", "override"})
_KDOC_REF: Final[str] = "https://kotlinlang.org/docs/kotlin-doc.html"


def has_kdoc(lines: Sequence[str], index: int) -> bool:
    """Return whether the declaration at ``index`` is preceded by a KDoc block.

    Annotation lines between the comment and the declaration are skipped.
    """

    cursor = index - 1
    while cursor >= 0:
        previous = lines[cursor].strip()
        if previous.startswith("@"):
            cursor -= 1
            continue
        return previous.endswith("*/")
    return False


class DocumentationAnalyzer(BaseAnalyzer):
    """Report public classes and functions that lack KDoc."""

    analyzer_id = "documentation"
    analyzer_name = "Documentation Analyzer"
    analyzer_category = Category.DOCUMENTATION

    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        lines = content.splitlines()
        findings: list[Finding] = []
        for index, line in enumerate(lines):
            match = _DECLARATION.match(line.strip())
            if match is None:
                continue
            if _HIDDEN.intersection(match.group("modifiers").split()):
                continue
            if has_kdoc(lines, index):
                continue
            kind = "function" if match.group("kind") == "fun" else match.group("kind")
            name = match.group("name")
            findings.append(
                self.finding(
                    file,
                    index + 1,
                    rule="missing-kdoc",
                    title=f"Missing Documentation: {name}",
                    description=f"The public {kind} '{name}' has no KDoc comment.",
                    priority=Priority.LOW,
                    code_snippet=line.strip(),
                    recommendation=f"Add a /** ... */ block describing what '{name}' does.",
                    before_example=f"{match.group('kind')} {name}",
                    after_example=f"/**\n * Describe {name}.\n */\n{match.group('kind')} {name}",
                    effort=Effort.TRIVIAL,
                    references=(_KDOC_REF,),
                )
            )
        return findings


__all__ = ["DocumentationAnalyzer", "has_kdoc"]
