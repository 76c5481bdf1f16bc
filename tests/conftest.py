# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from codeqa.config import AnalysisConfig, ExecutionConfig, OutputConfig
from codeqa.discovery.layers import detect_layer
from codeqa.models import Category, FileDescriptor, Finding, Priority

WriteSource = Callable[[str, str], Path]
MakeFinding = Callable[..., Finding]


@pytest.fixture
def write_source(tmp_path: Path) -> WriteSource:
    """Return a helper writing ``content`` to ``relative`` below ``tmp_path``."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_finding() -> MakeFinding:
    """Return a factory building findings with sensible defaults."""

    def _make(**overrides: Any) -> Finding:
        values: dict[str, Any] = {
            "id": "test-finding",
            "analyzer": "test",
            "category": Category.CODE_SMELL,
            "priority": Priority.MEDIUM,
            "title": "Sample",
            "description": "Sample finding.",
            "file": "app/src/main/Sample.kt",
            "line": 1,
        }
        values.update(overrides)
        return Finding(**values)

    return _make


@pytest.fixture
def describe() -> Callable[[str], FileDescriptor]:
    """Return a helper building a descriptor for a relative path."""

    def _describe(relative: str) -> FileDescriptor:
        return FileDescriptor(
            absolute_path=Path("/project") / relative,
            relative_path=relative,
            layer=detect_layer(relative),
        )

    return _describe


@pytest.fixture
def offline_config(tmp_path: Path) -> AnalysisConfig:
    """Return a serial configuration rooted at ``tmp_path`` without the linter."""

    return AnalysisConfig(
        root=tmp_path,
        execution=ExecutionConfig(jobs=1, enable_linter=False),
        output=OutputConfig(output_dir=Path("out"), emoji=False, color=False),
    )
