# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich console rendering of run summaries."""

from __future__ import annotations

from rich import box
from rich.table import Table
from rich.text import Text

from ..logging import console_for
from ..models import AnalysisResult, Comparison, Priority
from ..priority import PRIORITY_ORDER

_PRIORITY_STYLES: dict[Priority, str] = {
    Priority.CRITICAL: "bold red",
    Priority.HIGH: "red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "cyan",
}


def render_summary(result: AnalysisResult, *, use_color: bool, use_emoji: bool) -> None:
    """Print a compact summary table for ``result``."""

    console = console_for(color=use_color, emoji_enabled=use_emoji)
    label_style = "yellow" if use_color else None
    value_style = "orange1" if use_color else None

    def styled(value: str, style: str | None) -> Text:
        return Text(value, style=style) if style else Text(value)

    table = Table(show_header=False, box=box.SIMPLE, pad_edge=False, expand=False)
    table.add_column(style=label_style, justify="left", no_wrap=True, min_width=len("Execution time"))
    table.add_column(style=value_style, justify="right", no_wrap=True)
    table.add_row(styled("Mode", label_style), styled(result.mode.value, value_style))
    table.add_row(styled("Files analyzed", label_style), styled(str(result.files_analyzed), value_style))
    table.add_row(styled("Findings", label_style), styled(str(result.metrics.total_findings), value_style))
    for priority in PRIORITY_ORDER:
        count = result.metrics.findings_by_priority.get(priority, 0)
        style = _PRIORITY_STYLES[priority] if use_color else None
        table.add_row(styled(f"  {priority.value}", style), styled(str(count), style))
    table.add_row(styled("Execution time", label_style), styled(f"{result.execution_time:.2f}s", value_style))
    console.print(table)
    if result.report_path is not None:
        console.print(Text.assemble(styled("Report: ", label_style), styled(str(result.report_path), value_style)))


def render_comparison(comparison: Comparison, *, use_color: bool, use_emoji: bool) -> None:
    """Print improved and regressed metrics plus finding churn."""

    console = console_for(color=use_color, emoji_enabled=use_emoji)
    table = Table(box=box.SIMPLE_HEAVY if use_color else box.SIMPLE)
    table.add_column("Metric", overflow="fold")
    table.add_column("Status")
    table.add_column("Change", justify="right")
    for name, value in sorted(comparison.improved.items()):
        table.add_row(name, Text("improved", style="green" if use_color else ""), f"{value:.1f}%")
    for name, value in sorted(comparison.regressed.items()):
        table.add_row(name, Text("regressed", style="red" if use_color else ""), f"{value:.1f}%")
    table.add_row("new findings", "", str(len(comparison.new_issues)))
    table.add_row("resolved findings", "", str(len(comparison.resolved)))
    console.print(table)


__all__ = ["render_comparison", "render_summary"]
