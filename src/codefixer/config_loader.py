# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Layered configuration loading (defaults, user TOML, pyproject, CLI)."""

from __future__ import annotations

import copy
import tomllib
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Final, Protocol

from .config import Config, ConfigError, build_config
from .constants import GITIGNORE_FILE_NAME, IGNORE_FILE_NAME
from .logging import debug

PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "codefixer"
TOOL_KEY_PREFIX: Final[str] = "tool_"

# Flat keys accepted at the top level of a config document.
_LEGACY_KEYS: Final[dict[str, tuple[str, str]]] = {
    "depth": ("discovery", "max_depth"),
    "max_depth": ("discovery", "max_depth"),
    "git_only": ("discovery", "git_only"),
    "ignore": ("discovery", "ignore_patterns"),
    "ignore_patterns": ("discovery", "ignore_patterns"),
    "jobs": ("execution", "jobs"),
    "parallel_jobs": ("execution", "jobs"),
    "fix": ("execution", "auto_fix"),
    "auto_fix": ("execution", "auto_fix"),
    "dry_run": ("execution", "dry_run"),
    "backup": ("execution", "backup_enabled"),
    "prompt": ("execution", "prompt"),
    "ci": ("execution", "ci"),
    "experimental_fixes": ("execution", "experimental_fixes"),
    "verbose": ("output", "verbose"),
    "report": ("output", "report"),
    "emoji": ("output", "emoji"),
    "color": ("output", "color"),
}


class ConfigSource(Protocol):
    """Provide a configuration fragment."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return the fragment contributed by this source."""

    def describe(self) -> str:
        """Return a human-readable description of the source."""


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated recursively with ``override``."""

    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        existing = merged.get(key)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(existing, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def normalise_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Fold flat legacy keys into their configuration sections.

    ``depth = 3`` becomes ``discovery.max_depth`` and ``tool_black = "..."``
    becomes ``tools.black``. A comma separated ``ignore`` string is split
    into a list.

    Args:
        payload: Raw document as read from TOML.

    Returns:
        dict[str, Any]: Sectioned payload suitable for :func:`build_config`.
    """

    result: dict[str, Any] = {}
    for key, value in payload.items():
        if key in _LEGACY_KEYS:
            section, field_name = _LEGACY_KEYS[key]
            if field_name == "ignore_patterns" and isinstance(value, str):
                value = [item.strip() for item in value.split(",") if item.strip()]
            result.setdefault(section, {})[field_name] = value
        elif key.startswith(TOOL_KEY_PREFIX):
            result.setdefault("tools", {})[key.removeprefix(TOOL_KEY_PREFIX)] = value
        elif isinstance(value, Mapping):
            result[key] = _deep_merge(result.get(key, {}), value)
        else:
            raise ConfigError(f"Unknown configuration key: {key}")
    return result


class DefaultConfigSource:
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return Config().model_dump()

    def describe(self) -> str:
        return "Built-in defaults"


class TomlConfigSource:
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self._path = path
        self.name = name or str(path)

    def _read(self) -> dict[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            with self._path.open("rb") as handle:
                return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {self._path}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

    def load(self) -> Mapping[str, Any]:
        return normalise_payload(self._read())

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.codefixer]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        tool_section = self._read().get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if not isinstance(section, Mapping):
            return {}
        return normalise_payload(section)

    def describe(self) -> str:
        return f"pyproject.toml ({self.name})"


class MappingConfigSource:
    """Wrap an in-memory mapping, typically built from CLI options."""

    def __init__(self, payload: Mapping[str, Any], *, name: str = "cli") -> None:
        self._payload = payload
        self.name = name

    def load(self) -> Mapping[str, Any]:
        return normalise_payload(self._payload)

    def describe(self) -> str:
        return f"{self.name} overrides"


def read_ignore_file(path: Path) -> list[str]:
    """Return the patterns listed in an ignore file.

    Blank lines and ``#`` comments are skipped. Missing files yield an empty
    list.
    """

    if not path.is_file():
        return []
    try:
        lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as exc:
        raise ConfigError(f"Cannot read ignore file {path}: {exc}") from exc
    patterns: list[str] = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#") or line.startswith("!"):
            continue
        patterns.append(line.lstrip("/"))
    return patterns


class ConfigLoader:
    """Merge configuration sources in priority order and validate the result."""

    def __init__(self, sources: Iterable[ConfigSource], *, root: Path | None = None) -> None:
        self._sources = list(sources)
        self._root = root

    @classmethod
    def for_root(
        cls,
        root: Path,
        *,
        user_config: Path | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> ConfigLoader:
        """Build the standard source chain for a project rooted at ``root``.

        Args:
            root: Directory being processed.
            user_config: Per-user TOML file; defaults to ``~/.codefixer/config.toml``.
            overrides: Highest-priority values, usually from the command line.

        Returns:
            ConfigLoader: Loader over defaults, user file, pyproject and overrides.
        """

        user_path = user_config or Config().paths.config_file
        sources: list[ConfigSource] = [
            DefaultConfigSource(),
            TomlConfigSource(user_path),
            PyProjectConfigSource(root / "pyproject.toml"),
        ]
        if overrides:
            sources.append(MappingConfigSource(overrides))
        return cls(sources, root=root)

    def load(self, *, verbose: bool = False) -> Config:
        """Return the merged configuration.

        Raises:
            ConfigError: If any source is unreadable or a value is invalid.
        """

        merged: dict[str, Any] = {}
        for source in self._sources:
            fragment = source.load()
            if fragment:
                debug(f"Loaded configuration from {source.describe()}", enabled=verbose)
            merged = _deep_merge(merged, fragment)
        if self._root is not None:
            discovery = merged.setdefault("discovery", {})
            patterns = list(discovery.get("ignore_patterns") or [])
            for name in (IGNORE_FILE_NAME, GITIGNORE_FILE_NAME):
                for pattern in read_ignore_file(self._root / name):
                    if pattern not in patterns:
                        patterns.append(pattern)
            discovery["ignore_patterns"] = patterns
        return build_config(merged)


__all__ = [
    "ConfigLoader",
    "ConfigSource",
    "DefaultConfigSource",
    "MappingConfigSource",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "normalise_payload",
    "read_ignore_file",
]
