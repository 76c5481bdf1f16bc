# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Room DAO and entity checks."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Final

from ..models import Category, Effort, FileDescriptor, Finding, Layer, Priority
from .base import BaseAnalyzer, block_end, parenthesized

_DAO_FUNCTION: Final[re.Pattern[str]] = re.compile(r"^\s*(?:override\s+)?(?P<suspend>suspend\s+)?fun\s+(?P<name>\w+)\s*\(")
_RETURN_TYPE: Final[re.Pattern[str]] = re.compile(r"\)\s*:\s*(?P<type>[\w<>?,. ]+)")
_MUTATIONS: Final[tuple[str, ...]] = ("@Insert", "@Update", "@Delete", "@Upsert")
_QUERY: Final[str] = "@Query"
_CONCATENATION: Final[re.Pattern[str]] = re.compile(r"[\"']\s*\+|\+\s*[\"']|\$\{|\$\w")
_BIND_PARAMETER: Final[re.Pattern[str]] = re.compile(r":\w+|\?")
_FOREIGN_KEY: Final[re.Pattern[str]] = re.compile(r"\bForeignKey\s*\(")
_CASCADE: Final[re.Pattern[str]] = re.compile(r"\bonDelete\s*=\s*ForeignKey\.CASCADE\b")
_FUNCTION_LOOKAHEAD: Final[int] = 8
_ROOM_REF: Final[str] = "https://developer.android.com/training/data-storage/room/accessing-data"


def next_function(lines: Sequence[str], start: int) -> tuple[int, re.Match[str]] | None:
    """Return the first DAO function declared after ``lines[start]``."""

    for index in range(start + 1, min(start + 1 + _FUNCTION_LOOKAHEAD, len(lines))):
        if match := _DAO_FUNCTION.match(lines[index]):
            return index, match
    return None


class DatabaseAnalyzer(BaseAnalyzer):
    """Flag blocking DAO calls, unsafe queries and dangling foreign keys."""

    analyzer_id = "database"
    analyzer_name = "Database Analyzer"
    analyzer_category = Category.DATABASE

    def applies_to(self, file: FileDescriptor) -> bool:
        return file.layer is Layer.DATA and file.name.endswith(("Dao.kt", "Entity.kt"))

    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        lines = content.splitlines()
        findings: list[Finding] = []
        for index, line in enumerate(lines):
            stripped = line.strip()
            if stripped.startswith("//"):
                continue
            if stripped.startswith("@Dao"):
                findings.extend(self._check_dao(file, lines, index))
            if stripped.startswith(_QUERY):
                findings.extend(self._check_query(file, lines, index))
            if match := _FOREIGN_KEY.search(line):
                definition = parenthesized(lines, index, match.start())
                if not _CASCADE.search(definition):
                    findings.append(self._foreign_key(file, index + 1, stripped))
        return findings

    def _check_dao(self, file: FileDescriptor, lines: Sequence[str], annotation: int) -> list[Finding]:
        body_start = next(
            (index for index in range(annotation, len(lines)) if "interface " in lines[index] or "class " in lines[index]),
            None,
        )
        if body_start is None:
            return []
        findings: list[Finding] = []
        for index in range(body_start + 1, block_end(lines, body_start) + 1):
            stripped = lines[index].strip()
            if stripped.startswith(_QUERY):
                kind = "query"
            elif stripped.startswith(_MUTATIONS):
                kind = "mutation"
            else:
                continue
            located = next_function(lines, index)
            if located is None:
                continue
            function_index, match = located
            if match.group("suspend"):
                continue
            signature = lines[function_index].strip()
            if kind == "mutation":
                findings.append(self._blocking_mutation(file, function_index + 1, signature, match.group("name")))
                continue
            returned = _RETURN_TYPE.search(lines[function_index])
            if returned is None or not returned.group("type").strip().startswith("Flow<"):
                findings.append(self._blocking_query(file, function_index + 1, signature, match.group("name")))
        return findings

    def _check_query(self, file: FileDescriptor, lines: Sequence[str], index: int) -> list[Finding]:
        query = parenthesized(lines, index, lines[index].index(_QUERY))
        snippet = lines[index].strip()
        if _CONCATENATION.search(query):
            return [self._sql_injection(file, index + 1, snippet)]
        located = next_function(lines, index)
        if located is None:
            return []
        function_index, match = located
        if parenthesized(lines, function_index, match.end() - 1).strip() and not _BIND_PARAMETER.search(query):
            return [self._unbound_query(file, index + 1, snippet, match.group("name"))]
        return []

    def _blocking_query(self, file: FileDescriptor, line: int, snippet: str, name: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="query-flow",
            title="DAO Query Function Should Return Flow",
            description=f"Query '{name}' is neither suspend nor observable, so it blocks the calling thread.",
            priority=Priority.HIGH,
            code_snippet=snippet,
            recommendation="Return Flow<T> for observed data or mark one-shot reads as suspend.",
            before_example="fun getAll(): List<MealEntity>",
            after_example="fun getAll(): Flow<List<MealEntity>>",
            effort=Effort.SMALL,
            references=(_ROOM_REF,),
        )

    def _blocking_mutation(self, file: FileDescriptor, line: int, snippet: str, name: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="mutation-suspend",
            title="DAO Mutation Function Should Be Suspend",
            description=f"Write operation '{name}' is not suspend and blocks the calling thread.",
            priority=Priority.HIGH,
            code_snippet=snippet,
            recommendation="Mark the function suspend and call it from a coroutine.",
            before_example="fun insert(meal: MealEntity)",
            after_example="suspend fun insert(meal: MealEntity)",
            auto_fixable=True,
            effort=Effort.TRIVIAL,
            references=(_ROOM_REF,),
        )

    def _sql_injection(self, file: FileDescriptor, line: int, snippet: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="query-concatenation",
            title="SQL Injection Risk: String Concatenation in Query",
            description="The query text is assembled by concatenation or string templates.",
            priority=Priority.CRITICAL,
            code_snippet=snippet,
            recommendation="Use bind parameters (`:name`) and pass values as function arguments.",
            before_example='@Query("SELECT * FROM meals WHERE name = \'" + NAME + "\'")',
            after_example='@Query("SELECT * FROM meals WHERE name = :name")',
            effort=Effort.SMALL,
            references=("https://owasp.org/www-community/attacks/SQL_Injection",),
        )

    def _unbound_query(self, file: FileDescriptor, line: int, snippet: str, name: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="query-parameters",
            title="Query Should Use Parameterized Queries",
            description=f"'{name}' takes arguments but its query binds none of them.",
            priority=Priority.HIGH,
            code_snippet=snippet,
            recommendation="Reference each argument with a `:name` bind parameter.",
            effort=Effort.SMALL,
            references=(_ROOM_REF,),
        )

    def _foreign_key(self, file: FileDescriptor, line: int, snippet: str) -> Finding:
        return self.finding(
            file,
            line,
            rule="foreign-key-cascade",
            title="Foreign Key Should Use CASCADE for onDelete",
            description="Deleting the parent row leaves child rows pointing at a missing key.",
            priority=Priority.MEDIUM,
            code_snippet=snippet,
            recommendation="Declare `onDelete = ForeignKey.CASCADE` on the foreign key.",
            after_example="ForeignKey(entity = MealEntity::class, parentColumns = [\"id\"], "
            "childColumns = [\"mealId\"], onDelete = ForeignKey.CASCADE)",
            effort=Effort.TRIVIAL,
            references=("https://developer.android.com/reference/androidx/room/ForeignKey",),
        )


__all__ = ["DatabaseAnalyzer", "next_function"]
