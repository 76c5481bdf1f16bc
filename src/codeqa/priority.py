# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Priority ranking and category default helpers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from .models import Category, Priority

PRIORITY_RANK: Final[Mapping[Priority, int]] = {
    Priority.CRITICAL: 3,
    Priority.HIGH: 2,
    Priority.MEDIUM: 1,
    Priority.LOW: 0,
}

PRIORITY_ORDER: Final[tuple[Priority, ...]] = (
    Priority.CRITICAL,
    Priority.HIGH,
    Priority.MEDIUM,
    Priority.LOW,
)

CATEGORY_DEFAULT_PRIORITY: Final[Mapping[Category, Priority]] = {
    Category.SECURITY: Priority.CRITICAL,
    Category.ARCHITECTURE: Priority.HIGH,
    Category.ERROR_HANDLING: Priority.HIGH,
    Category.PERFORMANCE: Priority.MEDIUM,
    Category.CODE_SMELL: Priority.MEDIUM,
    Category.STATE_MANAGEMENT: Priority.MEDIUM,
    Category.COMPOSE: Priority.MEDIUM,
    Category.DATABASE: Priority.MEDIUM,
    Category.DEPENDENCY_INJECTION: Priority.MEDIUM,
    Category.NAMING: Priority.LOW,
    Category.DOCUMENTATION: Priority.LOW,
    Category.TEST_COVERAGE: Priority.LOW,
}


def priority_rank(priority: Priority) -> int:
    """Return the numeric rank of ``priority`` where higher is more severe.

    Args:
        priority: Priority to rank.

    Returns:
        int: Rank drawn from :data:`PRIORITY_RANK`.
    """

    return PRIORITY_RANK[priority]


def is_more_severe(lhs: Priority, rhs: Priority) -> bool:
    """Return ``True`` when ``lhs`` is strictly more severe than ``rhs``."""

    return priority_rank(lhs) > priority_rank(rhs)


def suggested_priority(category: Category) -> Priority:
    """Return the default priority implied by ``category``."""

    return CATEGORY_DEFAULT_PRIORITY[category]


def resolve_priority(current: Priority, category: Category) -> Priority:
    """Apply the category floor to ``current`` without ever downgrading it.

    Args:
        current: Priority the producer assigned to the finding.
        category: Category of the finding.

    Returns:
        Priority: ``current`` when it already exceeds the category default,
        otherwise the category default.
    """

    suggestion = suggested_priority(category)
    if is_more_severe(current, suggestion):
        return current
    return suggestion


__all__ = [
    "CATEGORY_DEFAULT_PRIORITY",
    "PRIORITY_ORDER",
    "PRIORITY_RANK",
    "is_more_severe",
    "priority_rank",
    "resolve_priority",
    "suggested_priority",
]
