# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for glob translation and layer detection."""

from __future__ import annotations

import pytest

from codeqa.discovery.globs import glob_to_regex, matches_any, matches_pattern, normalize_separators
from codeqa.discovery.layers import detect_layer
from codeqa.models import Layer


@pytest.mark.parametrize(
    ("path", "pattern", "expected"),
    [
        ("/app/build/tmp/A.kt", "**/build/**", True),
        ("/app/src/main/A.kt", "**/build/**", False),
        ("/app/src/main/A.kt", "**/*.kt", True),
        ("/app/src/main/A.kts", "**/*.kt", False),
        ("/app/src/A.kt", "/app/*/A.kt", True),
        ("/app/src/main/A.kt", "/app/*/A.kt", False),
        ("/app/srcXmain/A.kt", "/app/src.main/A.kt", False),
    ],
)
def test_matches_pattern(path: str, pattern: str, expected: bool) -> None:
    assert matches_pattern(path, pattern) is expected


def test_single_star_stays_within_segment() -> None:
    regex = glob_to_regex("*.kt")

    assert regex.fullmatch("Main.kt")
    assert regex.fullmatch("dir/Main.kt") is None


def test_windows_separators_are_normalised() -> None:
    assert normalize_separators("app\\build\\A.kt") == "app/build/A.kt"
    assert matches_any("\\app\\build\\A.kt", ["**/build/**"])


def test_matches_any_with_no_patterns() -> None:
    assert not matches_any("/app/A.kt", [])


@pytest.mark.parametrize(
    ("path", "layer"),
    [
        ("app/src/main/java/com/x/data/MealRepository.kt", Layer.DATA),
        ("app/src/main/java/com/x/domain/usecase/GetMeals.kt", Layer.DOMAIN),
        ("app/src/main/java/com/x/ui/HomeViewModel.kt", Layer.UI),
        ("app/src/main/java/com/x/presentation/HomeScreen.kt", Layer.UI),
        ("app/src/main/java/com/x/di/AppModule.kt", Layer.DI),
        ("app/src/test/java/com/x/HomeViewModelTest.kt", Layer.TEST),
        ("app/src/androidTest/java/com/x/HomeScreenTest.kt", Layer.TEST),
        ("app/src/main/java/com/x/App.kt", None),
        ("build.gradle.kts", None),
    ],
)
def test_detect_layer(path: str, layer: Layer | None) -> None:
    assert detect_layer(path) is layer


def test_first_matching_layer_wins() -> None:
    assert detect_layer("app/src/test/java/com/x/data/FakeRepository.kt") is Layer.DATA


def test_layer_segments_must_be_whole() -> None:
    assert detect_layer("app/src/main/java/com/x/metadata/Parser.kt") is None
