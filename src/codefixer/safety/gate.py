# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Admission checks applied to every discovered file before scheduling."""

from __future__ import annotations

import os
import re
import stat
from collections.abc import Sequence
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Final

from ..config import SafetyConfig
from ..constants import BINARY_SNIFF_BYTES, SUSPICIOUS_TOKENS
from ..logging import warn

_SUSPICIOUS_RE: Final[re.Pattern[str]] = re.compile(
    r"\b(?:" + "|".join(re.escape(token) for token in SUSPICIOUS_TOKENS) + r")\b",
)


@dataclass(frozen=True, slots=True)
class SafetyVerdict:
    """Outcome of :meth:`SafetyGate.evaluate`."""

    admitted: bool
    reason: str | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def reject(cls, reason: str) -> SafetyVerdict:
        return cls(admitted=False, reason=reason)


class SafetyGate:
    """Decide whether a file may be handed to an adapter.

    Hard checks always apply. The suspicious-content scan is governed by
    :attr:`SafetyConfig.suspicious_content`.
    """

    def __init__(self, config: SafetyConfig | None = None) -> None:
        self._config = config or SafetyConfig()

    @cached_property
    def blocked_roots(self) -> tuple[str, ...]:
        return tuple(entry if entry.endswith("/") else f"{entry}/" for entry in self._config.blocked_paths)

    def evaluate(self, path: Path) -> SafetyVerdict:
        """Run every admission check against ``path``.

        Args:
            path: Candidate file.

        Returns:
            SafetyVerdict: Admission decision with a rejection reason or warnings.
        """

        try:
            info = path.stat()
        except FileNotFoundError:
            return SafetyVerdict.reject("file does not exist")
        except OSError as exc:
            return SafetyVerdict.reject(f"cannot stat file ({exc.strerror})")
        if not stat.S_ISREG(info.st_mode):
            return SafetyVerdict.reject("not a regular file")
        if info.st_size == 0:
            return SafetyVerdict.reject("file is empty")
        if info.st_size > self._config.max_file_size:
            size_mb = info.st_size / (1024 * 1024)
            return SafetyVerdict.reject(f"file too large ({size_mb:.1f}MB)")
        if not os.access(path, os.R_OK):
            return SafetyVerdict.reject("file not readable")
        # Blocked roots can be symlinks (``/etc`` -> ``/private/etc``).
        locations = {Path(os.path.abspath(path)).as_posix(), path.resolve().as_posix()}
        for blocked in self.blocked_roots:
            if any(location.startswith(blocked) for location in locations):
                return SafetyVerdict.reject(f"blocked path ({blocked})")
        try:
            head = _read_head(path)
        except OSError as exc:
            return SafetyVerdict.reject(f"file not readable ({exc.strerror})")
        if b"\x00" in head:
            return SafetyVerdict.reject("binary file")
        return self._scan_content(path)

    def _scan_content(self, path: Path) -> SafetyVerdict:
        mode = self._config.suspicious_content
        if mode == "off":
            return SafetyVerdict(admitted=True)
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            return SafetyVerdict.reject(f"file not readable ({exc.strerror})")
        match = _SUSPICIOUS_RE.search(text)
        if match is None:
            return SafetyVerdict(admitted=True)
        message = f"suspicious content ({match.group(0)})"
        if mode == "block":
            return SafetyVerdict.reject(message)
        return SafetyVerdict(admitted=True, warnings=(message,))

    def admit(self, paths: Sequence[Path]) -> tuple[list[Path], list[tuple[Path, str]]]:
        """Partition ``paths`` into admitted files and rejections.

        Each rejection and each content warning is reported through
        :func:`codefixer.logging.warn`.

        Returns:
            tuple[list[Path], list[tuple[Path, str]]]: Admitted paths and ``(path, reason)`` rejections.
        """

        admitted: list[Path] = []
        rejected: list[tuple[Path, str]] = []
        for path in paths:
            verdict = self.evaluate(path)
            for message in verdict.warnings:
                warn(f"{path}: {message}")
            if verdict.admitted:
                admitted.append(path)
                continue
            reason = verdict.reason or "rejected"
            warn(f"Skipping {path}: {reason}")
            rejected.append((path, reason))
        return admitted, rejected


def _read_head(path: Path) -> bytes:
    with path.open("rb") as handle:
        return handle.read(BINARY_SNIFF_BYTES)


__all__ = ["SafetyGate", "SafetyVerdict"]
