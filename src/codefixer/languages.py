# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Language detection utilities for routing files to adapters."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

from .constants import EXTENSION_LANGUAGES, SHEBANG_INTERPRETERS, SPECIAL_FILENAME_PREFIXES, Language

# ``#!/usr/bin/python3`` and ``#!/usr/bin/env -S python3 -u`` both resolve to ``python3``.
_SHEBANG_RE: Final[re.Pattern[str]] = re.compile(
    r"^#!\s*(?P<program>\S+)(?:\s+(?:-\S+\s+)*(?P<argument>\S+))?",
)
_VERSION_SUFFIX_RE: Final[re.Pattern[str]] = re.compile(r"[0-9.]+$")


def language_from_shebang(first_line: str | None) -> Language | None:
    """Return the language implied by a shebang line, if any.

    Args:
        first_line: First line of the file, or ``None`` when unavailable.

    Returns:
        Language | None: Language for recognised interpreters, otherwise ``None``.
    """

    if not first_line:
        return None
    match = _SHEBANG_RE.match(first_line.strip())
    if match is None:
        return None
    interpreter = match.group("program").rsplit("/", 1)[-1]
    if interpreter == "env":
        argument = match.group("argument")
        if argument is None:
            return None
        interpreter = argument.rsplit("/", 1)[-1]
    stem = _VERSION_SUFFIX_RE.sub("", interpreter)
    return SHEBANG_INTERPRETERS.get(stem)


def language_from_filename(name: str) -> Language | None:
    """Return the language associated with special base names like ``Makefile``."""

    lowered = name.lower()
    for prefix, language in SPECIAL_FILENAME_PREFIXES:
        if lowered.startswith(prefix):
            return language
    return None


def detect_language(path: Path | str, first_line: str | None = None) -> Language:
    """Classify ``path`` into a single language tag.

    Shebangs win over special filenames, which win over extensions. The
    function performs no I/O; callers supply ``first_line`` themselves.

    Args:
        path: File path whose name and suffix are inspected.
        first_line: Optional first line of the file content.

    Returns:
        Language: Detected language, :attr:`Language.UNKNOWN` when nothing matched.
    """

    candidate = Path(path)
    by_shebang = language_from_shebang(first_line)
    if by_shebang is not None:
        return by_shebang
    by_name = language_from_filename(candidate.name)
    if by_name is not None:
        return by_name
    return EXTENSION_LANGUAGES.get(candidate.suffix.lower(), Language.UNKNOWN)


def read_first_line(path: Path) -> str | None:
    """Return the first line of ``path`` or ``None`` when it cannot be read."""

    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            return handle.readline().rstrip("\r\n")
    except OSError:
        return None


def classify_file(path: Path) -> Language:
    """Read the first line of ``path`` and classify it."""

    return detect_language(path, read_first_line(path))


__all__ = [
    "classify_file",
    "detect_language",
    "language_from_filename",
    "language_from_shebang",
    "read_first_line",
]
