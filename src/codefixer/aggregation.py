# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fold the per-file result stream into :class:`~codefixer.models.Statistics`."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import ValidationError

from .logging import warn
from .models import ProcessResult, Statistics


class DuplicateResultError(RuntimeError):
    """Raised when two records name the same file."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Duplicate result record for {path}")
        self.path = path


class ResultAggregator:
    """Consume result lines one at a time into a fresh :class:`Statistics`."""

    def __init__(self) -> None:
        self._statistics = Statistics()
        self.malformed = 0

    @property
    def statistics(self) -> Statistics:
        return self._statistics

    def feed(self, line: str) -> ProcessResult | None:
        """Parse ``line`` and fold it into the statistics.

        Blank lines are ignored. Lines that are not valid records are
        reported as warnings and skipped.

        Args:
            line: One record from the result stream.

        Returns:
            ProcessResult | None: Parsed record, or ``None`` when skipped.

        Raises:
            DuplicateResultError: If a record for the same file was already seen.
        """

        stripped = line.strip()
        if not stripped:
            return None
        try:
            result = ProcessResult.from_line(stripped)
        except ValidationError as exc:
            self.malformed += 1
            warn(f"Skipping malformed result record ({exc.error_count()} error(s)): {stripped[:200]}")
            return None
        if self._statistics.has_file(result.file):
            raise DuplicateResultError(result.file)
        self._statistics.add(result)
        return result

    def feed_all(self, lines: Iterable[str]) -> Statistics:
        for line in lines:
            self.feed(line)
        return self._statistics


def aggregate(lines: Iterable[str]) -> Statistics:
    """Return statistics for a complete result stream.

    Args:
        lines: Result records, one JSON object per line. Multi-line chunks
            are split on newlines.

    Returns:
        Statistics: Fresh aggregate for this stream.
    """

    aggregator = ResultAggregator()
    for chunk in lines:
        for line in chunk.splitlines():
            aggregator.feed(line)
    return aggregator.statistics


__all__ = ["DuplicateResultError", "ResultAggregator", "aggregate"]
