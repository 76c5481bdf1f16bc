# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for priority ranking and category defaults."""

from __future__ import annotations

import pytest

from codeqa.models import Category, Priority
from codeqa.priority import (
    CATEGORY_DEFAULT_PRIORITY,
    PRIORITY_ORDER,
    is_more_severe,
    priority_rank,
    resolve_priority,
    suggested_priority,
)


def test_priority_order_is_most_severe_first() -> None:
    ranks = [priority_rank(priority) for priority in PRIORITY_ORDER]

    assert ranks == sorted(ranks, reverse=True)
    assert PRIORITY_ORDER[0] is Priority.CRITICAL


def test_every_category_has_a_default() -> None:
    assert set(CATEGORY_DEFAULT_PRIORITY) == set(Category)


def test_is_more_severe_is_strict() -> None:
    assert is_more_severe(Priority.HIGH, Priority.MEDIUM)
    assert not is_more_severe(Priority.MEDIUM, Priority.MEDIUM)
    assert not is_more_severe(Priority.LOW, Priority.CRITICAL)


@pytest.mark.parametrize(
    ("category", "expected"),
    [
        (Category.SECURITY, Priority.CRITICAL),
        (Category.ARCHITECTURE, Priority.HIGH),
        (Category.ERROR_HANDLING, Priority.HIGH),
        (Category.CODE_SMELL, Priority.MEDIUM),
        (Category.NAMING, Priority.LOW),
        (Category.DOCUMENTATION, Priority.LOW),
    ],
)
def test_suggested_priority(category: Category, expected: Priority) -> None:
    assert suggested_priority(category) is expected


def test_resolve_priority_raises_to_category_floor() -> None:
    assert resolve_priority(Priority.LOW, Category.SECURITY) is Priority.CRITICAL
    assert resolve_priority(Priority.MEDIUM, Category.ERROR_HANDLING) is Priority.HIGH


def test_resolve_priority_never_downgrades() -> None:
    assert resolve_priority(Priority.HIGH, Category.NAMING) is Priority.HIGH
    assert resolve_priority(Priority.CRITICAL, Category.CODE_SMELL) is Priority.CRITICAL
