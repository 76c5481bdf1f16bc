# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Analyzer protocol and shared helpers for bundled analyzers."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from typing import Final, Protocol, runtime_checkable

from ..models import Category, Effort, FileDescriptor, Finding, Layer, Priority

SNIPPET_MAX_LINES: Final[int] = 10
_ID_SANITIZER: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9_.-]+")
_EXPRESSION_BODY: Final[re.Pattern[str]] = re.compile(r"\)\s*(:\s*[\w<>?,. ]+)?\s*=")
_SIGNATURE_LOOKAHEAD: Final[int] = 5


@runtime_checkable
class Analyzer(Protocol):
    """Capability every analyzer exposes to the orchestrator.

    Implementations must be pure functions of the descriptor and content so
    the orchestrator can run them on many files concurrently without locks.
    """

    @property
    def id(self) -> str:
        """Return the stable registry identifier."""
        ...

    @property
    def name(self) -> str:
        """Return a human readable analyzer name."""
        ...

    @property
    def category(self) -> Category:
        """Return the category of findings this analyzer produces."""
        ...

    def applies_to(self, file: FileDescriptor) -> bool:
        """Return whether the analyzer should inspect ``file``."""
        ...

    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        """Return findings discovered in ``content``."""
        ...


def stable_finding_id(*parts: object) -> str:
    """Return a deterministic identifier assembled from ``parts``.

    Path separators and whitespace are folded to ``-`` so the identifier stays
    readable and identical across runs for the same source location.
    """

    joined = "-".join(str(part) for part in parts if part is not None and str(part))
    return _ID_SANITIZER.sub("-", joined.replace("/", "-")).strip("-")


def iter_lines(content: str) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, line)`` pairs with 1-based numbering."""

    for index, line in enumerate(content.splitlines(), start=1):
        yield index, line


def extract_snippet(lines: Sequence[str], line_number: int, max_lines: int = SNIPPET_MAX_LINES) -> str:
    """Return up to ``max_lines`` lines starting at ``line_number`` (1-based)."""

    start = max(line_number - 1, 0)
    return "\n".join(lines[start : start + max_lines])


def block_end(lines: Sequence[str], start_index: int) -> int:
    """Return the 0-based index of the line closing the block opened at ``start_index``.

    Braces are counted naively, so string literals containing braces skew the
    result. Expression bodies end on the line holding ``=`` and declarations
    without a body end where they start.
    """

    depth = 0
    opened = False
    for index in range(start_index, len(lines)):
        line = lines[index]
        opens, closes = line.count("{"), line.count("}")
        if not opened:
            if opens == 0:
                if _EXPRESSION_BODY.search(line):
                    return index
                if index - start_index >= _SIGNATURE_LOOKAHEAD:
                    return start_index
                continue
            opened = True
        depth += opens - closes
        if depth <= 0:
            return index
    return len(lines) - 1 if opened else start_index


def parenthesized(lines: Sequence[str], start: int, column: int = 0) -> str:
    """Return the text inside the first parenthesised group at or after ``column``.

    The group may span several lines; line breaks inside it are kept. Text
    before the opening parenthesis is ignored and an unterminated group
    returns everything collected up to the end of ``lines``.

    Args:
        lines: Source lines.
        start: 0-based index of the line holding the opening parenthesis.
        column: Offset on ``lines[start]`` where the search begins.

    Returns:
        str: Contents between the matching parentheses, exclusive.
    """

    depth = 0
    collected: list[str] = []
    for index in range(start, len(lines)):
        text = lines[index][column:] if index == start else lines[index]
        for char in text:
            if char == "(":
                depth += 1
                if depth == 1:
                    continue
            elif char == ")":
                depth -= 1
                if depth == 0:
                    return "".join(collected)
            if depth >= 1:
                collected.append(char)
        if depth >= 1:
            collected.append("\n")
    return "".join(collected)


def annotations_above(lines: Sequence[str], index: int) -> list[str]:
    """Return the annotation lines stacked directly above ``lines[index]``."""

    found: list[str] = []
    cursor = index - 1
    while cursor >= 0 and lines[cursor].strip().startswith("@"):
        found.append(lines[cursor].strip())
        cursor -= 1
    return found


class BaseAnalyzer(ABC):
    """Convenience base class implementing the :class:`Analyzer` protocol."""

    analyzer_id: str = ""
    analyzer_name: str = ""
    analyzer_category: Category = Category.CODE_SMELL

    @property
    def id(self) -> str:
        """Return the registry identifier declared by ``analyzer_id``.

        Returns:
            str: Identifier used for registry lookups and finding attribution.
        """

        return self.analyzer_id

    @property
    def name(self) -> str:
        """Return the display name declared by ``analyzer_name``.

        Returns:
            str: Human readable name shown by the ``analyzers`` command.
        """

        return self.analyzer_name

    @property
    def category(self) -> Category:
        """Return the category declared by ``analyzer_category``.

        Returns:
            Category: Category stamped on every finding this analyzer builds.
        """

        return self.analyzer_category

    def applies_to(self, file: FileDescriptor) -> bool:
        """Apply to every file outside the test layer by default."""

        return file.layer is not Layer.TEST

    @abstractmethod
    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        """Return findings discovered in ``content``."""

    def finding(
        self,
        file: FileDescriptor,
        line: int,
        *,
        rule: str,
        title: str,
        description: str,
        priority: Priority,
        recommendation: str,
        code_snippet: str = "",
        column: int | None = None,
        before_example: str | None = None,
        after_example: str | None = None,
        auto_fixable: bool = False,
        effort: Effort = Effort.SMALL,
        references: Sequence[str] = (),
    ) -> Finding:
        """Build a :class:`Finding` attributed to this analyzer.

        The identifier is derived from the analyzer id, ``rule``, the file's
        relative path and ``line`` so repeated runs yield identical ids.
        """

        return Finding(
            id=stable_finding_id(self.id, rule, file.relative_path, line),
            analyzer=self.id,
            category=self.category,
            priority=priority,
            title=title,
            description=description,
            file=file.relative_path,
            line=line,
            column=column,
            code_snippet=code_snippet,
            recommendation=recommendation,
            before_example=before_example,
            after_example=after_example,
            auto_fixable=auto_fixable,
            effort=effort,
            references=tuple(references),
        )


__all__ = [
    "Analyzer",
    "BaseAnalyzer",
    "annotations_above",
    "block_end",
    "extract_snippet",
    "iter_lines",
    "parenthesized",
    "stable_finding_id",
]
