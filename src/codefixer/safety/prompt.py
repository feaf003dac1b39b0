# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Interactive confirmation before a file is modified."""

from __future__ import annotations

import select
import sys
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from ..constants import PROMPT_TIMEOUT_SECONDS
from ..logging import warn

Prompter = Callable[[Path], bool]

_AFFIRMATIVE = frozenset({"y", "yes"})


def is_affirmative(answer: str | None) -> bool:
    """Return ``True`` only for ``y`` or ``yes`` (case-insensitive)."""

    return answer is not None and answer.strip().lower() in _AFFIRMATIVE


def read_answer(stream: TextIO, timeout: float) -> str | None:
    """Read one line from ``stream`` waiting at most ``timeout`` seconds.

    Returns:
        str | None: The line read, or ``None`` on timeout or end of input.
    """

    try:
        ready, _, _ = select.select([stream], [], [], timeout)
    except (OSError, ValueError):
        return _read_in_thread(stream, timeout)
    if not ready:
        return None
    line = stream.readline()
    return line or None


def _read_in_thread(stream: TextIO, timeout: float) -> str | None:
    """Bound ``readline`` on streams that ``select`` cannot watch."""

    lines: list[str] = []
    reader = threading.Thread(target=lambda: lines.append(stream.readline()), name="codefixer-prompt", daemon=True)
    reader.start()
    reader.join(timeout)
    if reader.is_alive() or not lines:
        return None
    return lines[0] or None


class StdinPrompter:
    """Ask on the terminal whether to fix a file, defaulting to no."""

    def __init__(
        self,
        *,
        timeout: float = PROMPT_TIMEOUT_SECONDS,
        stream: TextIO | None = None,
        output: TextIO | None = None,
    ) -> None:
        self._timeout = timeout
        self._stream = stream
        self._output = output

    def __call__(self, path: Path) -> bool:
        output = self._output or sys.stderr
        output.write(f"\nApply auto-fix to {path}? [y/N]: ")
        output.flush()
        answer = read_answer(self._stream or sys.stdin, self._timeout)
        if answer is None:
            warn(f"No answer for {path}; skipping fixes")
            return False
        return is_affirmative(answer)


__all__ = ["Prompter", "StdinPrompter", "is_affirmative", "read_answer"]
