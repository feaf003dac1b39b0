# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models flowing between discovery, adapters and aggregation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .constants import Language


class FileTask(BaseModel):
    """One unit of work: a file and the language it was classified as."""

    model_config = ConfigDict(frozen=True)

    path: Path
    language: Language

    @property
    def name(self) -> str:
        """Return the display name used by progress reporting."""

        return self.path.name


class ProcessResult(BaseModel):
    """Uniform per-file outcome produced by every adapter.

    The serialised form is a single JSON object per line so that records
    emitted by independent workers can be concatenated and parsed one at a
    time.
    """

    model_config = ConfigDict(frozen=True)

    file: str
    lang: Language
    issues: int = Field(ge=0, strict=True)
    fixed: int = Field(ge=0, strict=True)

    @classmethod
    def empty(cls, path: Path | str, language: Language) -> ProcessResult:
        """Return a zero/zero record for ``path``."""

        return cls(file=str(path), lang=language, issues=0, fixed=0)

    def to_line(self) -> str:
        """Serialise the record as one JSON line without a trailing newline."""

        return self.model_dump_json()

    @classmethod
    def from_line(cls, line: str) -> ProcessResult:
        """Parse a JSON line produced by :meth:`to_line`.

        Raises:
            pydantic.ValidationError: If the line is not a well-formed record.
        """

        return cls.model_validate_json(line)


@dataclass(slots=True)
class LanguageStats:
    """Per-language counters."""

    files: int = 0
    issues: int = 0
    fixed: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"files": self.files, "issues": self.issues, "fixed": self.fixed}


@dataclass(slots=True)
class Statistics:
    """Aggregate counters built from a stream of :class:`ProcessResult` records."""

    total_files: int = 0
    total_issues: int = 0
    total_fixed: int = 0
    by_language: dict[Language, LanguageStats] = field(default_factory=dict)
    file_issues: dict[str, int] = field(default_factory=dict)
    file_fixed: dict[str, int] = field(default_factory=dict)

    def add(self, result: ProcessResult) -> None:
        """Fold ``result`` into the counters."""

        self.total_files += 1
        self.total_issues += result.issues
        self.total_fixed += result.fixed
        stats = self.by_language.setdefault(result.lang, LanguageStats())
        stats.files += 1
        stats.issues += result.issues
        stats.fixed += result.fixed
        self.file_issues[result.file] = result.issues
        self.file_fixed[result.file] = result.fixed

    def has_file(self, path: str) -> bool:
        """Return ``True`` when a record for ``path`` was already folded in."""

        return path in self.file_issues

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible snapshot of the counters."""

        return {
            "files": self.total_files,
            "issues": self.total_issues,
            "fixed": self.total_fixed,
            "by_language": {
                language.value: stats.to_dict() for language, stats in sorted(self.by_language.items())
            },
            "details": [
                {"file": path, "issues": issues, "fixed": self.file_fixed.get(path, 0)}
                for path, issues in sorted(self.file_issues.items())
            ],
        }


@dataclass(frozen=True, slots=True)
class SkippedFile:
    """File rejected before scheduling, with the reason it was rejected."""

    path: Path
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"file": str(self.path), "reason": self.reason}


__all__ = [
    "FileTask",
    "LanguageStats",
    "ProcessResult",
    "SkippedFile",
    "Statistics",
]
