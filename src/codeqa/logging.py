# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console status lines for analysis runs, rendered through Rich."""

from __future__ import annotations

import sys
from collections.abc import Callable
from enum import Enum
from functools import lru_cache

from rich.console import Console
from rich.rule import Rule
from rich.text import Text

DebugLogger = Callable[[str], None]


class Status(Enum):
    """Kinds of status line, each with its glyph and colour."""

    INFO = ("ℹ️ ", "cyan")
    OK = ("✅ ", "green")
    WARN = ("⚠️ ", "yellow")
    FAIL = ("❌ ", "red")
    DEBUG = ("", "dim")

    def __init__(self, glyph: str, style: str) -> None:
        self.glyph = glyph
        self.style = style


def stdout_is_terminal() -> bool:
    """Return whether stdout is attached to a terminal."""

    isatty = getattr(sys.stdout, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # stdout was closed underneath us
        return False


@lru_cache(maxsize=8)
def _console(color: bool, emoji_enabled: bool, terminal: bool) -> Console:
    colored = color and terminal
    return Console(
        color_system="auto" if colored else None,
        force_terminal=terminal,
        no_color=not colored,
        emoji=emoji_enabled,
        soft_wrap=True,
    )


def console_for(*, color: bool, emoji_enabled: bool) -> Console:
    """Return the shared console for the given colour and emoji settings.

    Colour is only honoured when stdout is a terminal. Consoles resolve
    ``sys.stdout`` when printing, so captured streams keep working after
    the console is cached.
    """

    return _console(color, emoji_enabled, stdout_is_terminal())


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def status(kind: Status, msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``msg`` as a status line of the given ``kind``.

    Args:
        kind: Status kind selecting the glyph and style.
        msg: Message text.
        use_emoji: Prefix the line with the status glyph.
        use_color: Explicit colour flag. ``None`` colours only on a terminal.
    """

    color = stdout_is_terminal() if use_color is None else use_color
    line = Text(f"{emoji(kind.glyph, use_emoji)}{msg}")
    if color:
        line.stylize(kind.style)
    console_for(color=color, emoji_enabled=use_emoji).print(line)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print an informational status line.

    Args:
        msg: Message text.
        use_emoji: Prefix the line with the info glyph.
        use_color: Explicit colour flag. ``None`` colours only on a terminal.
    """

    status(Status.INFO, msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print a success status line.

    Args:
        msg: Message text.
        use_emoji: Prefix the line with the success glyph.
        use_color: Explicit colour flag. ``None`` colours only on a terminal.
    """

    status(Status.OK, msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print a warning status line for a contained, non-fatal failure.

    Args:
        msg: Message text.
        use_emoji: Prefix the line with the warning glyph.
        use_color: Explicit colour flag. ``None`` colours only on a terminal.
    """

    status(Status.WARN, msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print a failure status line.

    Args:
        msg: Message text.
        use_emoji: Prefix the line with the failure glyph.
        use_color: Explicit colour flag. ``None`` colours only on a terminal.
    """

    status(Status.FAIL, msg, use_emoji=use_emoji, use_color=use_color)


def debug(msg: str, *, use_color: bool | None = None) -> None:
    """Print ``msg`` prefixed with ``[debug]`` and without a glyph.

    Args:
        msg: Message text.
        use_color: Explicit colour flag. ``None`` colours only on a terminal.
    """

    status(Status.DEBUG, f"[debug] {msg}", use_emoji=False, use_color=use_color)


def section(title: str, *, use_color: bool) -> None:
    """Print a heading that separates phases of a run."""

    console = console_for(color=use_color, emoji_enabled=True)
    if not use_color:
        console.print(f"\n--- {title} ---")
        return
    console.print()
    console.print(Rule(title))


def build_debug_logger(*, verbose: bool, use_color: bool | None = None) -> DebugLogger | None:
    """Return a callable printing ``[debug]`` lines, or ``None`` unless ``verbose``."""

    if not verbose:
        return None

    def _debug(message: str) -> None:
        debug(message, use_color=use_color)

    return _debug


__all__ = [
    "DebugLogger",
    "Status",
    "build_debug_logger",
    "console_for",
    "debug",
    "emoji",
    "fail",
    "info",
    "ok",
    "section",
    "status",
    "stdout_is_terminal",
    "warn",
]
