# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for filesystem discovery and exclusion handling."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from codeqa.discovery import FileScanner
from codeqa.errors import DiscoveryError
from codeqa.models import FileDescriptor, Layer


def test_scan_collects_kotlin_sources_with_layers(tmp_path: Path, write_source) -> None:
    write_source("app/src/main/java/com/x/domain/GetMeals.kt", "class GetMeals\n")
    write_source("app/src/main/java/com/x/ui/HomeScreen.kt", "fun HomeScreen() {}\n")
    write_source("app/build.gradle.kts", "plugins {}\n")
    write_source("README.md", "# readme\n")

    files = FileScanner(tmp_path).scan()
    by_name = {descriptor.name: descriptor for descriptor in files}

    assert set(by_name) == {"GetMeals.kt", "HomeScreen.kt", "build.gradle.kts"}
    assert by_name["GetMeals.kt"].layer is Layer.DOMAIN
    assert by_name["HomeScreen.kt"].layer is Layer.UI
    assert by_name["build.gradle.kts"].layer is None
    assert by_name["GetMeals.kt"].relative_path == "app/src/main/java/com/x/domain/GetMeals.kt"
    assert by_name["GetMeals.kt"].size_bytes == len("class GetMeals\n")


def test_scan_prunes_excluded_directories(tmp_path: Path, write_source) -> None:
    write_source("app/src/main/Keep.kt", "class Keep\n")
    write_source("app/build/generated/Gen.kt", "class Gen\n")
    write_source(".gradle/cache/Cached.kt", "class Cached\n")

    files = FileScanner(tmp_path).scan()

    assert [descriptor.name for descriptor in files] == ["Keep.kt"]


def test_scan_honours_custom_exclude_patterns(tmp_path: Path, write_source) -> None:
    write_source("app/src/main/Keep.kt", "class Keep\n")
    write_source("app/src/main/Legacy.kt", "class Legacy\n")

    scanner = FileScanner(tmp_path, exclude_patterns=("**/Legacy.kt",))

    assert [descriptor.name for descriptor in scanner.scan()] == ["Keep.kt"]


def test_scan_rejects_missing_root(tmp_path: Path) -> None:
    with pytest.raises(DiscoveryError) as excinfo:
        FileScanner(tmp_path / "missing").scan()
    assert "does not exist" in str(excinfo.value)


def test_scan_rejects_file_root(tmp_path: Path, write_source) -> None:
    path = write_source("Only.kt", "class Only\n")

    with pytest.raises(DiscoveryError) as excinfo:
        FileScanner(tmp_path).scan(path)
    assert "not a directory" in str(excinfo.value)


def test_scan_empty_directory_returns_nothing(tmp_path: Path) -> None:
    assert FileScanner(tmp_path).scan() == []


@pytest.mark.skipif(os.name == "nt", reason="symlinks require privileges on Windows")
def test_scan_does_not_follow_directory_symlinks(tmp_path: Path, write_source) -> None:
    write_source("app/src/main/Keep.kt", "class Keep\n")
    outside = tmp_path.parent / f"{tmp_path.name}-outside"
    outside.mkdir()
    (outside / "Outside.kt").write_text("class Outside\n", encoding="utf-8")
    (tmp_path / "linked").symlink_to(outside, target_is_directory=True)

    names = [descriptor.name for descriptor in FileScanner(tmp_path).scan()]

    assert names == ["Keep.kt"]


def test_filter_drops_excluded_and_unknown_extensions(tmp_path: Path) -> None:
    scanner = FileScanner(tmp_path)
    keep = FileDescriptor(absolute_path=tmp_path / "app/Keep.kt", relative_path="app/Keep.kt")
    built = FileDescriptor(absolute_path=tmp_path / "app/build/Gen.kt", relative_path="app/build/Gen.kt")
    java = FileDescriptor(absolute_path=tmp_path / "app/Legacy.java", relative_path="app/Legacy.java")

    assert scanner.filter([keep, built, java]) == [keep]
    assert scanner.should_analyze(keep)
    assert not scanner.should_analyze(built)


def test_top_level_build_directory_is_excluded(tmp_path: Path) -> None:
    scanner = FileScanner(tmp_path)
    built = FileDescriptor(absolute_path=tmp_path / "build/Gen.kt", relative_path="build/Gen.kt")

    assert not scanner.should_analyze(built)


def test_resolve_targets_skips_missing_and_deduplicates(tmp_path: Path, write_source, capsys) -> None:
    write_source("app/src/main/A.kt", "class A\n")
    write_source("app/src/main/B.kt", "class B\n")
    scanner = FileScanner(tmp_path, use_emoji=False)

    files = scanner.resolve_targets(
        [Path("app/src/main/A.kt"), Path("app/src/main"), Path("app/src/main/Missing.kt")]
    )

    assert [descriptor.name for descriptor in files] == ["A.kt", "B.kt"]
    assert "File not found" in capsys.readouterr().out


def test_resolve_targets_applies_exclusions_to_explicit_files(tmp_path: Path, write_source) -> None:
    write_source("app/build/Gen.kt", "class Gen\n")

    assert FileScanner(tmp_path).resolve_targets([Path("app/build/Gen.kt")]) == []
