# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and helpers for the codefixer pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    APP_DIR_NAME,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_PARALLEL_JOBS,
    SENSITIVE_ROOTS,
)
from .logging import warn

UNUSUAL_MAX_DEPTH: Final[int] = 20
UNUSUAL_PARALLEL_JOBS: Final[int] = 32

SuspiciousContentMode = Literal["off", "warn", "block"]


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


def _coerce_strict_bool(value: object) -> object:
    """Accept real booleans or the literal strings ``true``/``false``.

    Pydantic's lax mode would happily turn ``"yes"`` or ``1`` into ``True``;
    configuration files must spell booleans out.
    """

    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise ValueError(f"must be true or false, got {value!r}")


def _coerce_strict_int(value: object) -> object:
    if isinstance(value, bool):
        raise ValueError(f"must be a number, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValueError(f"must be a number, got {value!r}")


class FileDiscoveryConfig(BaseModel):
    """Configuration for how to discover and filter files within a project."""

    model_config = ConfigDict(validate_assignment=True)

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)
    git_only: bool = False
    ignore_patterns: list[str] = Field(default_factory=list)
    respect_vcs_ignore: bool = True

    @field_validator("max_depth", mode="before")
    @classmethod
    def _validate_depth(cls, value: object) -> object:
        return _coerce_strict_int(value)

    @field_validator("git_only", "respect_vcs_ignore", mode="before")
    @classmethod
    def _validate_flags(cls, value: object) -> object:
        return _coerce_strict_bool(value)


class ExecutionConfig(BaseModel):
    """Execution behaviour: parallelism, fixing and interaction policy."""

    model_config = ConfigDict(validate_assignment=True)

    jobs: int = Field(default=DEFAULT_PARALLEL_JOBS, ge=1)
    auto_fix: bool = False
    dry_run: bool = False
    backup_enabled: bool = True
    prompt: bool = False
    ci: bool = False
    experimental_fixes: bool = False
    prompt_timeout: float = Field(default=30.0, gt=0)

    @field_validator("jobs", mode="before")
    @classmethod
    def _validate_jobs(cls, value: object) -> object:
        return _coerce_strict_int(value)

    @field_validator("auto_fix", "dry_run", "backup_enabled", "prompt", "ci", "experimental_fixes", mode="before")
    @classmethod
    def _validate_flags(cls, value: object) -> object:
        return _coerce_strict_bool(value)

    @property
    def mutations_allowed(self) -> bool:
        """Return ``True`` when the fix phase may modify files."""

        return self.auto_fix and not self.dry_run


class OutputConfig(BaseModel):
    """Configuration for controlling console output and report generation."""

    model_config = ConfigDict(validate_assignment=True)

    verbose: bool = False
    emoji: bool = True
    color: bool = True
    report: bool = False
    report_dir: Path | None = None

    @field_validator("verbose", "emoji", "color", "report", mode="before")
    @classmethod
    def _validate_flags(cls, value: object) -> object:
        return _coerce_strict_bool(value)


class SafetyConfig(BaseModel):
    """Admission limits applied to every candidate file."""

    model_config = ConfigDict(validate_assignment=True)

    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, gt=0)
    blocked_paths: list[str] = Field(default_factory=lambda: list(SENSITIVE_ROOTS))
    suspicious_content: SuspiciousContentMode = "off"


class PathsConfig(BaseModel):
    """Locations of the per-user state directories."""

    model_config = ConfigDict(validate_assignment=True)

    base_dir: Path = Field(default_factory=lambda: Path.home() / APP_DIR_NAME)
    backup_dir: Path | None = None
    log_dir: Path | None = None
    cache_dir: Path | None = None

    @property
    def backups(self) -> Path:
        """Return the directory receiving pre-fix backups."""

        return self.backup_dir or self.base_dir / "backups"

    @property
    def logs(self) -> Path:
        """Return the directory receiving logs and reports."""

        return self.log_dir or self.base_dir / "logs"

    @property
    def cache(self) -> Path:
        """Return the cache directory."""

        return self.cache_dir or self.base_dir / "cache"

    @property
    def config_file(self) -> Path:
        """Return the per-user configuration file."""

        return self.base_dir / "config.toml"

    def ensure(self) -> None:
        """Create the state directories, failing loudly when that is impossible.

        Raises:
            ConfigError: If a directory cannot be created or is not writable.
        """

        for directory in (self.base_dir, self.backups, self.logs, self.cache):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise ConfigError(f"Cannot create directory: {directory} ({exc})") from exc
            marker = directory / ".write-test"
            try:
                marker.touch()
                marker.unlink()
            except OSError as exc:
                raise ConfigError(f"Directory not writable: {directory}") from exc


class Config(BaseModel):
    """Top-level configuration consumed by the pipeline, read-only during a run."""

    model_config = ConfigDict(validate_assignment=True)

    discovery: FileDiscoveryConfig = Field(default_factory=FileDiscoveryConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    safety: SafetyConfig = Field(default_factory=SafetyConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    tools: dict[str, str] = Field(default_factory=dict)


def build_config(payload: dict[str, Any]) -> Config:
    """Validate ``payload`` into a :class:`Config`, translating pydantic errors.

    Args:
        payload: Nested mapping keyed by section name.

    Returns:
        Config: Validated configuration.

    Raises:
        ConfigError: If any value is invalid.
    """

    try:
        config = Config.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(_describe_validation_error(exc)) from exc
    warn_unusual_values(config)
    return config


def warn_unusual_values(config: Config) -> None:
    """Emit warnings for values that are legal but unlikely to be intended."""

    if config.discovery.max_depth > UNUSUAL_MAX_DEPTH:
        warn(f"max_depth {config.discovery.max_depth} is unusual (recommended: 1-10)")
    if config.execution.jobs > UNUSUAL_PARALLEL_JOBS:
        warn(f"jobs {config.execution.jobs} is unusual (recommended: 1-16)")


def _describe_validation_error(exc: ValidationError) -> str:
    messages: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"Invalid {location}: {error['msg']}")
    return "; ".join(messages)


__all__ = [
    "Config",
    "ConfigError",
    "ExecutionConfig",
    "FileDiscoveryConfig",
    "OutputConfig",
    "PathsConfig",
    "SafetyConfig",
    "build_config",
    "warn_unusual_values",
]
