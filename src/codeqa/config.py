# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for the analysis engine."""

from __future__ import annotations

import math
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    CONFIG_FILENAME,
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_LINTER_CONFIG,
    DEFAULT_LINTER_EXECUTABLE,
    DEFAULT_OUTPUT_DIR_NAME,
    PYPROJECT_FILENAME,
    PYPROJECT_TOOL_SECTION,
    SOURCE_EXTENSIONS,
)
from .errors import ConfigError


def default_parallel_jobs() -> int:
    """Return 75% of available CPU cores (minimum of 1)."""
    cores = os.cpu_count() or 1
    return max(1, math.floor(cores * 0.75))


class DiscoveryConfig(BaseModel):
    """Configuration for how to discover and filter source files."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    excludes: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    extensions: list[str] = Field(default_factory=lambda: sorted(SOURCE_EXTENSIONS))

    @field_validator("extensions", mode="after")
    @classmethod
    def _normalise_extensions(cls, value: list[str]) -> list[str]:
        return [entry.lstrip(".").lower() for entry in value if entry.strip()]


class LinterConfig(BaseModel):
    """Settings for the external detekt pass."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    executable: str = DEFAULT_LINTER_EXECUTABLE
    config_path: Path = Path(DEFAULT_LINTER_CONFIG)
    timeout: float | None = None
    extra_args: list[str] = Field(default_factory=list)


class ExecutionConfig(BaseModel):
    """Execution behaviour for an analysis run."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    jobs: int = Field(default_factory=default_parallel_jobs, ge=1)
    enable_linter: bool = True
    analyzers: list[str] = Field(default_factory=list)


class OutputConfig(BaseModel):
    """Configuration for console output and persisted artefacts."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    output_dir: Path = Path(DEFAULT_OUTPUT_DIR_NAME)
    emoji: bool = True
    color: bool = True
    verbose: bool = False


class AnalysisConfig(BaseModel):
    """Top-level configuration consumed by the orchestrator."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    root: Path = Field(default_factory=Path)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    linter: LinterConfig = Field(default_factory=LinterConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def resolve_path(self, path: Path) -> Path:
        """Return ``path`` resolved against :attr:`root` when relative."""

        return path if path.is_absolute() else (self.root / path)

    @property
    def output_dir(self) -> Path:
        """Return the absolute output directory for reports and baselines."""

        return self.resolve_path(self.output.output_dir)

    @property
    def linter_config_path(self) -> Path:
        """Return the absolute detekt configuration path."""

        return self.resolve_path(self.linter.config_path)


def _read_toml(path: Path) -> dict[str, Any]:
    """Return the parsed TOML document at ``path``.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def _locate_config_data(root: Path, explicit: Path | None) -> Mapping[str, Any]:
    """Return the raw configuration mapping for ``root``.

    Args:
        root: Project root used to find ``codeqa.toml`` or ``pyproject.toml``.
        explicit: Optional configuration file supplied by the caller.

    Returns:
        Mapping[str, Any]: Raw configuration values, empty when no file exists.

    Raises:
        ConfigError: When an explicit file is missing or any file is malformed.
    """

    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"Configuration file not found: {explicit}")
        data = _read_toml(explicit)
        if explicit.name == PYPROJECT_FILENAME:
            return data.get("tool", {}).get(PYPROJECT_TOOL_SECTION, {})
        return data

    candidate = root / CONFIG_FILENAME
    if candidate.is_file():
        return _read_toml(candidate)
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.is_file():
        return _read_toml(pyproject).get("tool", {}).get(PYPROJECT_TOOL_SECTION, {})
    return {}


def load_config(root: Path, *, config_file: Path | None = None) -> AnalysisConfig:
    """Load :class:`AnalysisConfig` for ``root`` from TOML sources.

    Args:
        root: Project root directory.
        config_file: Optional explicit configuration file.

    Returns:
        AnalysisConfig: Validated configuration with ``root`` populated.

    Raises:
        ConfigError: When the configuration cannot be read or fails validation.
    """

    data = dict(_locate_config_data(root, config_file))
    data.pop("root", None)
    try:
        return AnalysisConfig(root=root, **data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid codeqa configuration: {exc}") from exc


__all__ = [
    "AnalysisConfig",
    "DiscoveryConfig",
    "ExecutionConfig",
    "LinterConfig",
    "OutputConfig",
    "default_parallel_jobs",
    "load_config",
]
