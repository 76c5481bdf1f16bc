# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discovery helpers for the codeqa package."""

from __future__ import annotations

from .filesystem import FileScanner
from .globs import glob_to_regex, matches_any, matches_pattern
from .layers import detect_layer

__all__ = [
    "FileScanner",
    "detect_layer",
    "glob_to_regex",
    "matches_any",
    "matches_pattern",
]
