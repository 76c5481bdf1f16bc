# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Report rendering for analysis results."""

from __future__ import annotations

from .console import render_comparison, render_summary
from .markdown import REPORT_TITLE, ReportGenerator, report_path, write_report

__all__ = [
    "REPORT_TITLE",
    "ReportGenerator",
    "render_comparison",
    "render_summary",
    "report_path",
    "write_report",
]
