# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Analyzer registry providing lookup by identifier."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from .base import Analyzer


class AnalyzerRegistry(Mapping[str, Analyzer]):
    """Central registry for analyzer instances.

    ``AnalyzerRegistry`` behaves like a read-only mapping whose keys are
    analyzer identifiers and whose values are :class:`Analyzer` instances.
    Iteration follows registration order so runs stay deterministic.
    """

    def __init__(self, analyzers: Iterable[Analyzer] = ()) -> None:
        """Initialise the registry, optionally seeding it with ``analyzers``."""

        self._analyzers: dict[str, Analyzer] = {}
        for analyzer in analyzers:
            self.register(analyzer)

    def register(self, analyzer: Analyzer) -> None:
        """Register ``analyzer`` enforcing uniqueness by identifier.

        Args:
            analyzer: Analyzer instance to insert into the registry.

        Raises:
            ValueError: If an analyzer with the same identifier is already registered.
        """

        if analyzer.id in self._analyzers:
            raise ValueError(f"Analyzer '{analyzer.id}' already registered")
        self._analyzers[analyzer.id] = analyzer

    def get(self, analyzer_id: str, default: Analyzer | None = None) -> Analyzer | None:  # type: ignore[override]
        """Return the analyzer registered under ``analyzer_id`` or ``default``."""

        return self._analyzers.get(analyzer_id, default)

    def try_get(self, analyzer_id: str) -> Analyzer | None:
        """Return the analyzer registered under ``analyzer_id`` when present."""

        return self._analyzers.get(analyzer_id)

    def ids(self) -> tuple[str, ...]:
        """Return registered identifiers in registration order."""

        return tuple(self._analyzers)

    def analyzers(self) -> tuple[Analyzer, ...]:
        """Return registered analyzers in registration order."""

        return tuple(self._analyzers.values())

    def select(self, analyzer_ids: Iterable[str]) -> tuple[list[Analyzer], list[str]]:
        """Split ``analyzer_ids`` into known analyzers and unknown identifiers.

        Args:
            analyzer_ids: Requested identifiers; duplicates are ignored.

        Returns:
            tuple[list[Analyzer], list[str]]: Selected analyzers in request
            order and the identifiers that are not registered.
        """

        selected: list[Analyzer] = []
        unknown: list[str] = []
        seen: set[str] = set()
        for analyzer_id in analyzer_ids:
            if analyzer_id in seen:
                continue
            seen.add(analyzer_id)
            analyzer = self._analyzers.get(analyzer_id)
            if analyzer is None:
                unknown.append(analyzer_id)
            else:
                selected.append(analyzer)
        return selected, unknown

    def __contains__(self, analyzer_id: object) -> bool:
        return analyzer_id in self._analyzers

    def __len__(self) -> int:
        return len(self._analyzers)

    def __iter__(self) -> Iterator[str]:
        return iter(self._analyzers)

    def __getitem__(self, analyzer_id: str) -> Analyzer:
        """Return the analyzer identified by ``analyzer_id``.

        Raises:
            KeyError: If ``analyzer_id`` is not registered.
        """

        return self._analyzers[analyzer_id]


def build_default_registry() -> AnalyzerRegistry:
    """Return a registry populated with every bundled analyzer."""

    from .architecture import ArchitectureAnalyzer
    from .code_smell import CodeSmellAnalyzer
    from .compose import ComposeAnalyzer
    from .database import DatabaseAnalyzer
    from .dependency_injection import DependencyInjectionAnalyzer
    from .documentation import DocumentationAnalyzer
    from .error_handling import ErrorHandlingAnalyzer
    from .naming import NamingAnalyzer
    from .performance import PerformanceAnalyzer
    from .security import SecurityAnalyzer
    from .state_management import StateManagementAnalyzer
    from .test_coverage import TestCoverageAnalyzer

    return AnalyzerRegistry(
        (
            ArchitectureAnalyzer(),
            CodeSmellAnalyzer(),
            NamingAnalyzer(),
            ErrorHandlingAnalyzer(),
            StateManagementAnalyzer(),
            ComposeAnalyzer(),
            DependencyInjectionAnalyzer(),
            DatabaseAnalyzer(),
            SecurityAnalyzer(),
            PerformanceAnalyzer(),
            TestCoverageAnalyzer(),
            DocumentationAnalyzer(),
        )
    )


__all__ = ["AnalyzerRegistry", "build_default_registry"]
