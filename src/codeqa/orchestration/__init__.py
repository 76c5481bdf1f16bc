# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Orchestration of analysis runs."""

from __future__ import annotations

from .orchestrator import Orchestrator, OrchestratorHooks, SupportsLinting
from .worker import ContentProvider, FileTask, read_utf8

__all__ = [
    "ContentProvider",
    "FileTask",
    "Orchestrator",
    "OrchestratorHooks",
    "SupportsLinting",
    "read_utf8",
]
