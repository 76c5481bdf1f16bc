# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer application exposing the ``codeqa`` command line."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer

from ..analyzers import build_default_registry
from ..baseline import BaselineStore
from ..config import AnalysisConfig, load_config
from ..constants import LINTER_ANALYZER_ID
from ..errors import ConfigError, DiscoveryError
from ..logging import build_debug_logger, emoji, fail, section
from ..models import AnalysisResult, Priority
from ..orchestration import Orchestrator
from ..reporting import render_comparison, render_summary

EXIT_OK = 0
EXIT_CRITICAL_FINDINGS = 1
EXIT_DISCOVERY_ERROR = 2

app = typer.Typer(
    name="codeqa",
    help="Source-code quality analysis for Kotlin projects.",
    add_completion=False,
    no_args_is_help=True,
)


def _load(root: Path, config_file: Path | None) -> AnalysisConfig:
    try:
        return load_config(root.resolve(), config_file=config_file)
    except ConfigError as exc:
        fail(str(exc), use_emoji=False)
        raise typer.Exit(code=EXIT_DISCOVERY_ERROR) from exc


@app.command("analyze")
def analyze_command(
    root: Annotated[Path, typer.Argument(help="Project root to analyze.")] = Path("."),
    paths: Annotated[
        list[Path] | None,
        typer.Option("--path", "-p", help="Analyze only these files or directories (repeatable)."),
    ] = None,
    analyzer_ids: Annotated[
        list[str] | None,
        typer.Option("--analyzer", "-a", help=f"Run only these analyzers; '{LINTER_ANALYZER_ID}' selects the linter."),
    ] = None,
    linter: Annotated[
        bool | None,
        typer.Option("--linter/--no-linter", help="Enable or disable the detekt pass."),
    ] = None,
    linter_config: Annotated[
        Path | None,
        typer.Option("--linter-config", help="Detekt configuration file."),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory for reports, baseline and history."),
    ] = None,
    jobs: Annotated[int | None, typer.Option("--jobs", "-j", min=1, help="Worker threads.")] = None,
    config_file: Annotated[Path | None, typer.Option("--config", help="Explicit configuration file.")] = None,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji output.")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Emit debug output.")] = False,
    fail_on_critical: Annotated[
        bool,
        typer.Option("--fail-on-critical", help="Exit with status 1 when critical findings exist."),
    ] = False,
) -> None:
    """Run an analysis and write the Markdown report."""

    config = _load(root, config_file)
    config = _apply_overrides(
        config,
        linter=linter,
        linter_config=linter_config,
        output_dir=output_dir,
        jobs=jobs,
        no_emoji=no_emoji,
        no_color=no_color,
        verbose=verbose,
    )
    use_emoji = config.output.emoji
    use_color = config.output.color
    debug_logger = build_debug_logger(verbose=config.output.verbose, use_color=use_color)
    orchestrator = Orchestrator(config, debug_logger=debug_logger)

    section("Code Quality Analysis", use_color=use_color)
    try:
        if analyzer_ids:
            result = orchestrator.analyze_with_filters(paths or None, analyzer_ids)
        elif paths:
            result = orchestrator.analyze_incremental(paths)
        else:
            result = orchestrator.analyze_all()
    except DiscoveryError as exc:
        fail(str(exc), use_emoji=use_emoji)
        raise typer.Exit(code=EXIT_DISCOVERY_ERROR) from exc

    render_summary(result, use_color=use_color, use_emoji=use_emoji)
    raise typer.Exit(code=_exit_code(result, fail_on_critical=fail_on_critical, use_emoji=use_emoji))


@app.command("analyzers")
def analyzers_command() -> None:
    """List the registered analyzers."""

    registry = build_default_registry()
    for analyzer in registry.analyzers():
        typer.echo(f"{analyzer.id:<22} {analyzer.category.value:<22} {analyzer.name}")
    typer.echo(f"{LINTER_ANALYZER_ID:<22} {'(external)':<22} Detekt static analysis")


@app.command("compare")
def compare_command(
    root: Annotated[Path, typer.Argument(help="Project root holding the output directory.")] = Path("."),
    output_dir: Annotated[Path | None, typer.Option("--output-dir", "-o", help="Output directory.")] = None,
    config_file: Annotated[Path | None, typer.Option("--config", help="Explicit configuration file.")] = None,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji output.")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")] = False,
) -> None:
    """Show how the latest full run compared with the baseline before it."""

    config = _apply_overrides(_load(root, config_file), output_dir=output_dir, no_emoji=no_emoji, no_color=no_color)
    use_emoji = config.output.emoji
    store = BaselineStore(config.output_dir, use_emoji=use_emoji)
    latest = next((entry for entry in store.load_history() if entry.comparison is not None), None)
    if latest is None or latest.comparison is None:
        typer.echo("No comparison recorded yet. Run 'codeqa analyze' at least twice.")
        raise typer.Exit(code=EXIT_OK)
    typer.echo(f"Run of {_format_millis(latest.timestamp)}: {latest.finding_count} finding(s)")
    render_comparison(latest.comparison, use_color=config.output.color, use_emoji=use_emoji)


def _apply_overrides(
    config: AnalysisConfig,
    *,
    linter: bool | None = None,
    linter_config: Path | None = None,
    output_dir: Path | None = None,
    jobs: int | None = None,
    no_emoji: bool = False,
    no_color: bool = False,
    verbose: bool = False,
) -> AnalysisConfig:
    """Return ``config`` with command-line overrides applied."""

    execution_updates: dict[str, object] = {}
    if linter is not None:
        execution_updates["enable_linter"] = linter
    if jobs is not None:
        execution_updates["jobs"] = jobs
    linter_updates: dict[str, object] = {}
    if linter_config is not None:
        linter_updates["config_path"] = linter_config
    output_updates: dict[str, object] = {}
    if output_dir is not None:
        output_updates["output_dir"] = output_dir
    if no_emoji:
        output_updates["emoji"] = False
    if no_color:
        output_updates["color"] = False
    if verbose:
        output_updates["verbose"] = True
    return config.model_copy(
        update={
            "execution": config.execution.model_copy(update=execution_updates),
            "linter": config.linter.model_copy(update=linter_updates),
            "output": config.output.model_copy(update=output_updates),
        }
    )


def _format_millis(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / 1000, tz=UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


def _exit_code(result: AnalysisResult, *, fail_on_critical: bool, use_emoji: bool) -> int:
    critical = result.metrics.findings_by_priority.get(Priority.CRITICAL, 0)
    if fail_on_critical and critical:
        typer.echo(f"{emoji('❌ ', use_emoji)}{critical} critical finding(s)".strip())
        return EXIT_CRITICAL_FINDINGS
    return EXIT_OK


__all__ = ["app"]
