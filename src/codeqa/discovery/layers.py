# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Architectural layer classification from path segments."""

from __future__ import annotations

from typing import Final

from ..models import Layer
from .globs import normalize_separators

# Checked in order; the first matching rule wins.
LAYER_RULES: Final[tuple[tuple[Layer, tuple[str, ...]], ...]] = (
    (Layer.DATA, ("/data/",)),
    (Layer.DOMAIN, ("/domain/",)),
    (Layer.UI, ("/ui/", "/presentation/")),
    (Layer.DI, ("/di/",)),
    (Layer.TEST, ("/test/", "/androidTest/")),
)


def detect_layer(relative_path: str) -> Layer | None:
    """Return the layer implied by ``relative_path`` or ``None`` when unknown.

    Args:
        relative_path: Path relative to the project root.

    Returns:
        Layer | None: First matching layer, or ``None`` when no rule applies.
    """

    normalized = "/" + normalize_separators(relative_path).lstrip("/")
    for layer, segments in LAYER_RULES:
        if any(segment in normalized for segment in segments):
            return layer
    return None


__all__ = ["LAYER_RULES", "detect_layer"]
