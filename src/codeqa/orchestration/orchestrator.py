# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""High level orchestration of discovery, analysis, aggregation and persistence."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ..aggregation import ResultAggregator
from ..analyzers import Analyzer, AnalyzerRegistry, build_default_registry
from ..baseline import BaselineStore
from ..config import AnalysisConfig
from ..constants import LINTER_ANALYZER_ID, REPORT_SUFFIX_FILTERED, REPORT_SUFFIX_INCREMENTAL
from ..discovery import FileScanner
from ..errors import PersistenceError
from ..linting import DetektLinter, LinterResult
from ..logging import DebugLogger, fail, info, warn
from ..models import AggregatedResult, AnalysisMode, AnalysisResult, Baseline, FileDescriptor, Finding
from ..reporting import ReportGenerator, write_report
from .worker import ContentProvider, FileTask, read_utf8


class SupportsLinting(Protocol):
    """Protocol satisfied by external linter adapters."""

    def run(self, paths: Sequence[Path | str], config_path: Path) -> LinterResult:
        """Lint ``paths`` and return findings or the failure cause."""
        ...


@dataclass(frozen=True)
class OrchestratorHooks:
    """Provide lifecycle callbacks invoked around orchestration phases."""

    after_discovery: Callable[[int], None] | None = None
    after_file: Callable[[FileDescriptor, Sequence[Finding]], None] | None = None
    after_aggregation: Callable[[AggregatedResult], None] | None = None


@dataclass(frozen=True, slots=True)
class _RunPlan:
    """Inputs of a single pipeline execution."""

    mode: AnalysisMode
    files: Sequence[FileDescriptor]
    analyzers: Sequence[Analyzer]
    linter_targets: Sequence[Path | str]
    report_suffix: str


class Orchestrator:
    """Coordinate discovery, per-file analysis, linting and aggregation."""

    def __init__(
        self,
        config: AnalysisConfig,
        *,
        registry: AnalyzerRegistry | None = None,
        scanner: FileScanner | None = None,
        linter: SupportsLinting | None = None,
        aggregator: ResultAggregator | None = None,
        store: BaselineStore | None = None,
        report_generator: ReportGenerator | None = None,
        content_provider: ContentProvider = read_utf8,
        hooks: OrchestratorHooks | None = None,
        debug_logger: DebugLogger | None = None,
    ) -> None:
        """Create an orchestrator for ``config``.

        Args:
            config: Analysis configuration.
            registry: Analyzer registry; defaults to every bundled analyzer.
            scanner: File scanner; defaults to one built from ``config``.
            linter: External linter; defaults to detekt when enabled in
                ``config``. Pass an adapter explicitly to override.
            aggregator: Result aggregator.
            store: Baseline and history store; defaults to the configured
                output directory.
            report_generator: Markdown report renderer.
            content_provider: Callable returning the text of a file.
            hooks: Optional callbacks invoked throughout execution.
            debug_logger: Optional sink for debug messages.
        """

        self.config = config
        self._use_emoji = config.output.emoji
        self._debug_logger = debug_logger
        self.registry = registry if registry is not None else build_default_registry()
        self.scanner = scanner or FileScanner(
            config.root,
            exclude_patterns=config.discovery.excludes,
            extensions=config.discovery.extensions,
            use_emoji=self._use_emoji,
            debug_logger=debug_logger,
        )
        self.linter = linter if linter is not None else self._default_linter()
        self.aggregator = aggregator or ResultAggregator()
        self.store = store or BaselineStore(config.output_dir, use_emoji=self._use_emoji, debug_logger=debug_logger)
        self.report_generator = report_generator or ReportGenerator()
        self._content_provider = content_provider
        self._hooks = hooks or OrchestratorHooks()

    def analyze_all(self) -> AnalysisResult:
        """Analyze every source file under the configured root.

        The report is compared with the previously stored baseline, then a new
        baseline and a history entry are written.

        Raises:
            DiscoveryError: If the root does not exist or is not a directory.
        """

        files = self.scanner.filter(self.scanner.scan())
        plan = _RunPlan(
            mode=AnalysisMode.FULL,
            files=files,
            analyzers=self._configured_analyzers(),
            linter_targets=[self.scanner.root] if self.linter is not None else [],
            report_suffix="",
        )
        return self._execute(plan)

    def analyze_incremental(self, paths: Iterable[Path | str]) -> AnalysisResult:
        """Analyze only ``paths``; missing entries are skipped with a warning."""

        files = self.scanner.filter(self.scanner.resolve_targets([Path(entry) for entry in paths]))
        plan = _RunPlan(
            mode=AnalysisMode.INCREMENTAL,
            files=files,
            analyzers=self._configured_analyzers(),
            linter_targets=self._linter_targets(files) if self.linter is not None else [],
            report_suffix=REPORT_SUFFIX_INCREMENTAL,
        )
        return self._execute(plan)

    def analyze_with_filters(
        self,
        paths: Iterable[Path | str] | None,
        analyzer_ids: Iterable[str],
    ) -> AnalysisResult:
        """Analyze ``paths`` (or the whole root) with only ``analyzer_ids``.

        The pseudo-id ``detekt`` selects the external linter. Unknown ids are
        warned about and ignored.

        Args:
            paths: Files or directories to analyze, or ``None`` for the root.
            analyzer_ids: Identifiers of the analyzers to run.

        Returns:
            AnalysisResult: Result of the filtered run, or an empty result when
            no known analyzer remains.

        Raises:
            DiscoveryError: If ``paths`` is ``None`` and the root is invalid.
        """

        requested = list(dict.fromkeys(analyzer_ids))
        want_linter = LINTER_ANALYZER_ID in requested
        selected, unknown = self.registry.select(entry for entry in requested if entry != LINTER_ANALYZER_ID)
        for analyzer_id in unknown:
            warn(f"Unknown analyzer '{analyzer_id}' ignored", use_emoji=self._use_emoji)
        if want_linter and self.linter is None:
            warn("Linter requested but not configured", use_emoji=self._use_emoji)
            want_linter = False
        if not selected and not want_linter:
            warn("No valid analyzers selected; nothing to do", use_emoji=self._use_emoji)
            return AnalysisResult(mode=AnalysisMode.FILTERED)

        if paths is None:
            files = self.scanner.filter(self.scanner.scan())
            linter_targets: Sequence[Path | str] = [self.scanner.root]
        else:
            files = self.scanner.filter(self.scanner.resolve_targets([Path(entry) for entry in paths]))
            linter_targets = self._linter_targets(files)
        plan = _RunPlan(
            mode=AnalysisMode.FILTERED,
            files=files,
            analyzers=selected,
            linter_targets=linter_targets if want_linter else [],
            report_suffix=REPORT_SUFFIX_FILTERED,
        )
        return self._execute(plan)

    # ------------------------------------------------------------------
    def _execute(self, plan: _RunPlan) -> AnalysisResult:
        started = time.perf_counter()
        info(
            f"Analyzing {len(plan.files)} file(s) with {len(plan.analyzers)} analyzer(s)",
            use_emoji=self._use_emoji,
        )
        if self._hooks.after_discovery is not None:
            self._hooks.after_discovery(len(plan.files))

        findings = self._analyze_files(plan.files, plan.analyzers)
        if plan.linter_targets:
            findings.extend(self._run_linter(plan.linter_targets))

        aggregated = self.aggregator.aggregate(findings)
        if self._hooks.after_aggregation is not None:
            self._hooks.after_aggregation(aggregated)

        result = AnalysisResult(
            findings=aggregated.findings,
            metrics=aggregated.metrics,
            execution_time=time.perf_counter() - started,
            files_analyzed=len(plan.files),
            mode=plan.mode,
        )
        report_path = self._persist(result, plan)
        return result.model_copy(
            update={"report_path": report_path, "execution_time": time.perf_counter() - started}
        )

    def _analyze_files(self, files: Sequence[FileDescriptor], analyzers: Sequence[Analyzer]) -> list[Finding]:
        task = FileTask(
            analyzers=tuple(analyzers),
            content_provider=self._content_provider,
            use_emoji=self._use_emoji,
            debug_logger=self._debug_logger,
        )
        jobs = self.config.execution.jobs
        if jobs <= 1 or len(files) <= 1:
            per_file = [task(file) for file in files]
        else:
            with ThreadPoolExecutor(max_workers=jobs) as executor:
                futures = [executor.submit(task, file) for file in files]
                per_file = [future.result() for future in futures]

        collected: list[Finding] = []
        for file, produced in zip(files, per_file, strict=True):
            if self._hooks.after_file is not None:
                self._hooks.after_file(file, produced)
            collected.extend(produced)
        self._debug(f"analyzers produced {len(collected)} finding(s)")
        return collected

    def _run_linter(self, targets: Sequence[Path | str]) -> list[Finding]:
        if self.linter is None:
            return []
        try:
            result = self.linter.run(targets, self.config.linter_config_path)
        except Exception as exc:  # noqa: BLE001 - host-supplied linter
            warn(f"Linter failed: {exc!r}", use_emoji=self._use_emoji)
            return []
        if not result.ok:
            warn(f"Linter failed: {result.error}", use_emoji=self._use_emoji)
            return []
        self._debug(f"linter produced {len(result.findings)} finding(s)")
        return list(result.findings)

    def _persist(self, result: AnalysisResult, plan: _RunPlan) -> Path | None:
        full = plan.mode is AnalysisMode.FULL
        baseline: Baseline | None = self.store.load_baseline() if full else None
        report_path: Path | None = None
        try:
            text = self.report_generator.generate(result, baseline)
            report_path = write_report(text, self.store.output_dir, plan.report_suffix)
            info(f"Report written to {report_path}", use_emoji=self._use_emoji)
        except PersistenceError as exc:
            fail(str(exc), use_emoji=self._use_emoji)
        if not full:
            return report_path
        try:
            self.store.save_to_history(result, baseline)
        except PersistenceError as exc:
            fail(str(exc), use_emoji=self._use_emoji)
        try:
            self.store.save_baseline(result.metrics, result.findings)
        except PersistenceError as exc:
            fail(str(exc), use_emoji=self._use_emoji)
        return report_path

    def _configured_analyzers(self) -> list[Analyzer]:
        configured = self.config.execution.analyzers
        if not configured:
            return list(self.registry.analyzers())
        selected, unknown = self.registry.select(configured)
        for analyzer_id in unknown:
            warn(f"Unknown analyzer '{analyzer_id}' in configuration ignored", use_emoji=self._use_emoji)
        return selected

    def _linter_targets(self, files: Sequence[FileDescriptor]) -> list[Path | str]:
        return [file.relative_path for file in files]

    def _default_linter(self) -> SupportsLinting | None:
        if not self.config.execution.enable_linter:
            return None
        return DetektLinter(
            self.config.root,
            executable=self.config.linter.executable,
            timeout=self.config.linter.timeout,
            extra_args=self.config.linter.extra_args,
            excludes=self.config.discovery.excludes,
            use_emoji=self._use_emoji,
            debug_logger=self._debug_logger,
        )

    def _debug(self, message: str) -> None:
        if self._debug_logger:
            self._debug_logger(message)


__all__ = ["Orchestrator", "OrchestratorHooks", "SupportsLinting"]
