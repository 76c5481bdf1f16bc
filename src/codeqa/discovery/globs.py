# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Glob pattern translation used by exclusion rules."""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache
from typing import Final

_DOUBLE_STAR_TOKEN: Final[str] = "\x00DOUBLE_STAR\x00"


def normalize_separators(path: str) -> str:
    """Return ``path`` with Windows separators replaced by forward slashes."""

    return path.replace("\\", "/")


@lru_cache(maxsize=256)
def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a ``**``/``*`` glob into a compiled regular expression.

    ``**`` matches across separators and ``*`` stays within one path segment.
    Literal dots are escaped; no other glob syntax is interpreted.

    Args:
        pattern: Glob pattern such as ``**/build/**``.

    Returns:
        re.Pattern[str]: Compiled expression intended for :meth:`re.Pattern.fullmatch`.
    """

    translated = (
        normalize_separators(pattern)
        .replace(".", r"\.")
        .replace("**", _DOUBLE_STAR_TOKEN)
        .replace("*", "[^/]*")
        .replace(_DOUBLE_STAR_TOKEN, ".*")
    )
    return re.compile(translated)


def matches_pattern(path: str, pattern: str) -> bool:
    """Return whether ``path`` fully matches the glob ``pattern``."""

    return glob_to_regex(pattern).fullmatch(normalize_separators(path)) is not None


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    """Return whether ``path`` matches at least one glob in ``patterns``."""

    return any(matches_pattern(path, pattern) for pattern in patterns)


__all__ = ["glob_to_regex", "matches_any", "matches_pattern", "normalize_separators"]
