# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Baseline and history persistence."""

from __future__ import annotations

from .store import BaselineStore, compare_baseline, compare_metrics, now_millis

__all__ = ["BaselineStore", "compare_baseline", "compare_metrics", "now_millis"]
