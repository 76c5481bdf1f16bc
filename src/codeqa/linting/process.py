# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell-free subprocess wrapper used to invoke external linters."""

from __future__ import annotations

import subprocess  # nosec B404 - arguments are passed as a list, never through a shell
import tempfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final, Protocol

TIMEOUT_EXIT_CODE: Final[int] = 124


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Immutable command execution options."""

    cwd: Path | None = None
    timeout: float | None = None


class CommandRunner(Protocol):
    """Callable executing a command and returning its completed process."""

    def __call__(self, args: Sequence[str], *, options: CommandOptions) -> CompletedProcess[str]:
        """Run ``args`` honouring ``options``."""
        ...


def run_command(args: Sequence[str], *, options: CommandOptions) -> CompletedProcess[str]:
    """Execute ``args`` capturing text output without raising on failure.

    Args:
        args: Command and argument sequence to execute.
        options: Working directory and timeout settings.

    Returns:
        CompletedProcess[str]: Execution metadata. A timeout is reported with
        exit code ``124`` and an explanatory stderr line.

    Raises:
        FileNotFoundError: If the executable cannot be started.
    """

    normalized = [str(arg) for arg in args]
    try:
        return subprocess.run(  # nosec B603 - controlled arguments, not user supplied
            normalized,
            cwd=str(options.cwd) if options.cwd is not None else None,
            check=False,
            capture_output=True,
            text=True,
            timeout=options.timeout,
        )
    except subprocess.TimeoutExpired as exc:
        stderr = exc.stderr.decode() if isinstance(exc.stderr, bytes) else (exc.stderr or "")
        message = f"Command timed out after {options.timeout:.1f}s"
        return subprocess.CompletedProcess(
            args=normalized,
            returncode=TIMEOUT_EXIT_CODE,
            stdout="",
            stderr=f"{stderr}\n{message}" if stderr else message,
        )


@contextmanager
def temporary_report_path(suffix: str) -> Iterator[Path]:
    """Yield a temporary file path that is cleaned up afterwards."""

    handle = tempfile.NamedTemporaryFile(suffix=suffix, delete=False)
    handle.close()
    path = Path(handle.name)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


__all__ = ["CommandOptions", "CommandRunner", "TIMEOUT_EXIT_CODE", "run_command", "temporary_report_path"]
