# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem discovery of analysable source files."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..constants import DEFAULT_EXCLUDE_PATTERNS, SOURCE_EXTENSIONS
from ..errors import DiscoveryError, TargetNotFoundError
from ..logging import warn
from ..models import FileDescriptor
from .globs import matches_any
from .layers import detect_layer


@dataclass(frozen=True, slots=True)
class WalkContext:
    """Parameters required to walk the filesystem hierarchy."""

    base: Path
    root: Path
    excludes: tuple[str, ...]
    extensions: frozenset[str]


class FileScanner:
    """Walk a project tree producing :class:`FileDescriptor` entries."""

    def __init__(
        self,
        root: Path,
        *,
        exclude_patterns: Sequence[str] = DEFAULT_EXCLUDE_PATTERNS,
        extensions: Iterable[str] = SOURCE_EXTENSIONS,
        use_emoji: bool = True,
        debug_logger: Callable[[str], None] | None = None,
    ) -> None:
        """Create a scanner anchored at ``root``.

        Args:
            root: Project root used to compute relative paths and layers.
            exclude_patterns: Glob patterns for paths that must never be analysed.
            extensions: Recognised source extensions without the leading dot.
            use_emoji: Whether warnings should include emoji prefixes.
            debug_logger: Optional sink for debug messages.
        """

        self.root = root.resolve()
        self.exclude_patterns = tuple(exclude_patterns)
        self.extensions = frozenset(ext.lstrip(".").lower() for ext in extensions)
        self._use_emoji = use_emoji
        self._debug_logger = debug_logger

    def scan(self, path: Path | None = None) -> list[FileDescriptor]:
        """Recursively collect source files beneath ``path``.

        Excluded directories are pruned and never descended into.

        Args:
            path: Directory to walk; defaults to the scanner root.

        Returns:
            list[FileDescriptor]: Descriptors sorted by traversal order.

        Raises:
            DiscoveryError: If ``path`` does not exist or is not a directory.
        """

        base = self.root if path is None else self._absolute(path)
        if not base.exists():
            raise DiscoveryError(base, "Directory does not exist")
        if not base.is_dir():
            raise DiscoveryError(base, "Path is not a directory")
        context = WalkContext(
            base=base,
            root=self.root,
            excludes=self.exclude_patterns,
            extensions=self.extensions,
        )
        return list(self._walk(context))

    scan_directory = scan

    def filter(self, files: Iterable[FileDescriptor]) -> list[FileDescriptor]:
        """Return the subset of ``files`` that should be analysed."""

        return [descriptor for descriptor in files if self.should_analyze(descriptor)]

    filter_files = filter

    def should_analyze(self, file: FileDescriptor) -> bool:
        """Return whether ``file`` passes the exclusion and extension checks.

        Args:
            file: Descriptor produced by :meth:`scan`.

        Returns:
            bool: ``True`` when no exclusion matches and the extension is recognised.
        """

        if self._is_excluded(file.relative_path):
            return False
        return file.extension in self.extensions

    def resolve_targets(self, paths: Sequence[Path]) -> list[FileDescriptor]:
        """Resolve explicit file and directory targets to descriptors.

        Directories are scanned. Files are resolved by scanning their parent
        directory and keeping the exact match so exclusion rules still apply.
        Missing targets are skipped with a warning.

        Args:
            paths: File or directory paths, relative to the root or absolute.

        Returns:
            list[FileDescriptor]: Unique descriptors in first-seen order.
        """

        collected: dict[Path, FileDescriptor] = {}
        for entry in paths:
            try:
                descriptors = self._resolve_target(entry)
            except TargetNotFoundError as exc:
                warn(str(exc), use_emoji=self._use_emoji)
                continue
            for descriptor in descriptors:
                collected.setdefault(descriptor.absolute_path, descriptor)
        return list(collected.values())

    def _resolve_target(self, entry: Path) -> list[FileDescriptor]:
        candidate = self._absolute(entry)
        if candidate.is_dir():
            return self.scan(candidate)
        if not candidate.is_file():
            raise TargetNotFoundError(candidate)
        siblings = self.scan(candidate.parent)
        matches = [descriptor for descriptor in siblings if descriptor.absolute_path == candidate]
        if not matches:
            self._debug(f"skipping {candidate}: excluded or not a recognised source file")
        return matches

    def _absolute(self, path: Path) -> Path:
        candidate = path if path.is_absolute() else self.root / path
        return candidate.resolve()

    def _walk(self, context: WalkContext) -> Iterator[FileDescriptor]:
        """Walk ``context.base`` yielding descriptors for eligible files."""

        for dirpath, dirnames, filenames in os.walk(context.base):
            current = Path(dirpath)
            dirnames[:] = sorted(name for name in dirnames if not self._should_skip_directory(current / name))
            for filename in sorted(filenames):
                candidate = current / filename
                if candidate.suffix.lstrip(".").lower() not in context.extensions:
                    continue
                relative = self._relative_path(candidate)
                if self._is_excluded(relative):
                    continue
                descriptor = self._describe(candidate, relative)
                if descriptor is not None:
                    yield descriptor

    def _describe(self, path: Path, relative: str) -> FileDescriptor | None:
        """Return a descriptor for ``path`` or ``None`` when ``stat`` fails."""

        try:
            stat = path.stat()
        except OSError as exc:
            self._debug(f"skipping {path}: {exc}")
            return None
        return FileDescriptor(
            absolute_path=path,
            relative_path=relative,
            size_bytes=stat.st_size,
            last_modified_epoch_millis=int(stat.st_mtime * 1000),
            layer=detect_layer(relative),
        )

    def _relative_path(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()

    def _should_skip_directory(self, path: Path) -> bool:
        relative = self._relative_path(path)
        return self._is_excluded(relative) or self._is_excluded(f"{relative}/")

    def _is_excluded(self, relative: str) -> bool:
        anchored = "/" + relative.lstrip("/")
        return matches_any(anchored, self.exclude_patterns)

    def _debug(self, message: str) -> None:
        if self._debug_logger:
            self._debug_logger(message)


__all__ = ["FileScanner", "WalkContext"]
