# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filtering rules shared by the filesystem and git discovery strategies."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from fnmatch import fnmatch
from functools import lru_cache
from pathlib import Path

from ..constants import ALWAYS_EXCLUDE_DIRS, JUNK_SUFFIXES

_PATH_SEPARATOR = "/"


def relative_parts(candidate: Path, root: Path) -> tuple[str, ...]:
    """Return the components of ``candidate`` relative to ``root``.

    Paths outside ``root`` fall back to their absolute components.
    """

    try:
        return candidate.relative_to(root).parts
    except ValueError:
        return candidate.parts


def depth_of(candidate: Path, root: Path) -> int:
    """Return the depth of ``candidate`` below ``root`` (root files are depth 1)."""

    return len(relative_parts(candidate, root))


def is_junk(candidate: Path, root: Path) -> bool:
    """Return whether ``candidate`` is a backup/minified artefact or lives in a junk directory.

    Args:
        candidate: File being considered.
        root: Discovery root used to derive directory components.

    Returns:
        bool: ``True`` when the file must never be scheduled.
    """

    name = candidate.name.lower()
    if name.endswith(JUNK_SUFFIXES):
        return True
    directories = relative_parts(candidate, root)[:-1]
    return any(part in ALWAYS_EXCLUDE_DIRS for part in directories)


def _root_relative(candidate: Path, root: Path) -> tuple[str, ...]:
    try:
        return candidate.relative_to(root).parts
    except ValueError:
        return (candidate.name,)


def _match_segments(parts: Sequence[str], segments: Sequence[str]) -> bool:
    """Match path components against pattern segments; ``**`` spans any number of components."""

    if not segments:
        return not parts
    head, rest = segments[0], segments[1:]
    if head == "**":
        return any(_match_segments(parts[index:], rest) for index in range(len(parts) + 1))
    return bool(parts) and fnmatch(parts[0], head) and _match_segments(parts[1:], rest)


def matches_ignore(candidate: Path, root: Path, patterns: Sequence[str]) -> bool:
    """Return whether ``candidate`` matches any user ignore pattern.

    Only the path below ``root`` is considered. Each component is matched
    with :mod:`fnmatch`, so ``*`` never crosses a ``/``. A pattern without a
    slash matches any single component, a pattern with a slash is anchored
    at ``root`` and a trailing slash restricts the pattern to directories.

    Args:
        candidate: File being considered.
        root: Discovery root.
        patterns: Ignore patterns from configuration and ignore files.

    Returns:
        bool: ``True`` when the file is ignored.
    """

    if not patterns:
        return False
    parts = _root_relative(candidate, root)
    directories = parts[:-1]
    for pattern in patterns:
        directory_only = pattern.endswith(_PATH_SEPARATOR)
        body = pattern.strip(_PATH_SEPARATOR)
        if not body:
            continue
        segments = body.split(_PATH_SEPARATOR)
        if len(segments) == 1 and not pattern.startswith(_PATH_SEPARATOR):
            pool = directories if directory_only else parts
            if any(fnmatch(part, body) for part in pool):
                return True
            continue
        # Anchored patterns also cover everything beneath a matching directory.
        limit = len(directories) if directory_only else len(parts)
        if any(_match_segments(parts[:end], segments) for end in range(1, limit + 1)):
            return True
    return False


def matches_any_glob(name: str, patterns: Iterable[str]) -> bool:
    """Return whether the base ``name`` matches any glob in ``patterns``."""

    return any(fnmatch(name, pattern) for pattern in patterns)


@lru_cache(maxsize=64)
def glob_regex(patterns: tuple[str, ...]) -> re.Pattern[str]:
    """Translate ``*.ext`` globs into one anchored suffix regular expression.

    ``("*.py", "*.pyw")`` becomes ``(\\.py|\\.pyw)$``.
    """

    alternatives: list[str] = []
    for pattern in patterns:
        translated = "".join(".*" if char == "*" else "." if char == "?" else re.escape(char) for char in pattern)
        alternatives.append(translated.removeprefix(".*"))
    return re.compile(f"({'|'.join(alternatives)})$", re.IGNORECASE)


__all__ = [
    "depth_of",
    "glob_regex",
    "is_junk",
    "matches_any_glob",
    "matches_ignore",
    "relative_parts",
]
