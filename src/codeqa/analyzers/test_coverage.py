# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Checks that testable components ship with a matching unit test."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from ..models import Category, Effort, FileDescriptor, Finding, Layer, Priority
from .base import BaseAnalyzer

_MAIN_SOURCE: Final[str] = "/src/main/"
_TEST_SOURCES: Final[tuple[str, ...]] = ("/src/test/", "/src/androidTest/")
_TEST_SUFFIX: Final[str] = "Test.kt"
_TESTING_REF: Final[str] = "https://developer.android.com/training/testing/local-tests"


def is_test_source(file: FileDescriptor) -> bool:
    """Return whether ``file`` lives in a test source set.

    Layer detection checks package segments first, so a test under
    ``src/test/.../data/`` is classified as data; the source-set segment is
    checked as well.
    """

    normalized = "/" + file.relative_path.lstrip("/")
    return file.layer is Layer.TEST or any(segment in normalized for segment in _TEST_SOURCES)


def component_kind(file: FileDescriptor, content: str) -> str | None:
    """Return the kind of testable component ``file`` declares, if any."""

    name = file.name
    if name.endswith("ViewModel.kt") and ("ViewModel()" in content or "@HiltViewModel" in content):
        return "ViewModel"
    if name.endswith("UseCase.kt") and file.layer is Layer.DOMAIN:
        return "Use Case"
    if name.endswith("RepositoryImpl.kt") and file.layer is Layer.DATA:
        return "Repository"
    return None


def expected_test_paths(file: FileDescriptor) -> list[Path]:
    """Return candidate test locations for a ``src/main`` source file.

    The source-set segment is swapped for each test source set and ``Test``
    is appended to the file stem. Files outside ``src/main`` have no
    candidates.
    """

    source = file.absolute_path.as_posix()
    if _MAIN_SOURCE not in source:
        return []
    test_name = f"{file.absolute_path.stem}{_TEST_SUFFIX}"
    return [
        Path(source.replace(_MAIN_SOURCE, test_source, 1)).with_name(test_name) for test_source in _TEST_SOURCES
    ]


class TestCoverageAnalyzer(BaseAnalyzer):
    """Flag ViewModels, use cases and repositories that have no unit test.

    Unlike the other bundled analyzers this one consults the filesystem to
    look for the sibling test file; the content itself is only used to
    recognise the component.
    """

    __test__ = False

    analyzer_id = "test-coverage"
    analyzer_name = "Test Coverage Analyzer"
    analyzer_category = Category.TEST_COVERAGE

    def applies_to(self, file: FileDescriptor) -> bool:
        return file.extension == "kt"

    def analyze(self, file: FileDescriptor, content: str) -> list[Finding]:
        if is_test_source(file):
            if "@Test" in content and not file.name.endswith(_TEST_SUFFIX):
                return [self._naming(file)]
            return []

        kind = component_kind(file, content)
        if kind is None:
            return []
        candidates = expected_test_paths(file)
        if not candidates or any(candidate.is_file() for candidate in candidates):
            return []
        return [self._missing_test(file, kind, candidates[0])]

    def _missing_test(self, file: FileDescriptor, kind: str, expected: Path) -> Finding:
        stem = file.absolute_path.stem
        return self.finding(
            file,
            1,
            rule="missing-test",
            title=f"Missing Test File for {kind}",
            description=f"{kind} '{stem}' has no unit test. Expected {expected.name} in the test source set.",
            priority=Priority.MEDIUM,
            recommendation=f"Create {expected.name} covering the public behaviour of {stem}.",
            after_example=f"class {stem}Test {{\n    @Test\n    fun `loads meals`() {{ }}\n}}",
            effort=Effort.MEDIUM,
            references=(_TESTING_REF,),
        )

    def _naming(self, file: FileDescriptor) -> Finding:
        return self.finding(
            file,
            1,
            rule="test-file-naming",
            title="Test File Does Not Follow Naming Convention",
            description=f"'{file.name}' contains tests but its name does not end with '{_TEST_SUFFIX}'.",
            priority=Priority.LOW,
            recommendation=f"Rename the file so it ends with '{_TEST_SUFFIX}', matching the class under test.",
            effort=Effort.TRIVIAL,
            references=(_TESTING_REF,),
        )


__all__ = ["TestCoverageAnalyzer", "component_kind", "expected_test_paths", "is_test_source"]
