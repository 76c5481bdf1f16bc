# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-file analysis task executed on worker threads."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..analyzers import Analyzer
from ..errors import AnalyzerError, ContentReadError
from ..logging import DebugLogger, warn
from ..models import FileDescriptor, Finding

ContentProvider = Callable[[FileDescriptor], str]


def read_utf8(file: FileDescriptor) -> str:
    """Return the UTF-8 text of ``file``.

    Raises:
        ContentReadError: If the file cannot be read or decoded.
    """

    try:
        return file.absolute_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ContentReadError(file.absolute_path, exc) from exc


@dataclass(frozen=True, slots=True)
class FileTask:
    """Run a fixed set of analyzers over one file.

    Failures are contained here: an unreadable file yields no findings and a
    failing analyzer contributes nothing for that file while the remaining
    analyzers still run.
    """

    analyzers: Sequence[Analyzer]
    content_provider: ContentProvider = read_utf8
    use_emoji: bool = True
    debug_logger: DebugLogger | None = None

    def __call__(self, file: FileDescriptor) -> list[Finding]:
        try:
            content = self.content_provider(file)
        except ContentReadError as exc:
            warn(str(exc), use_emoji=self.use_emoji)
            return []
        except Exception as exc:  # noqa: BLE001 - host-supplied content provider
            warn(str(ContentReadError(file.absolute_path, exc)), use_emoji=self.use_emoji)
            return []

        findings: list[Finding] = []
        for analyzer in self.analyzers:
            try:
                if not analyzer.applies_to(file):
                    continue
                produced = analyzer.analyze(file, content)
            except Exception as exc:  # noqa: BLE001 - third-party analyzer code
                warn(str(AnalyzerError(analyzer.id, file.relative_path, exc)), use_emoji=self.use_emoji)
                continue
            if self.debug_logger and produced:
                self.debug_logger(f"{analyzer.id}: {len(produced)} finding(s) in {file.relative_path}")
            findings.extend(produced)
        return findings


__all__ = ["ContentProvider", "FileTask", "read_utf8"]
