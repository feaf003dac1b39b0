# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell script adapter backed by shellcheck and, experimentally, shfmt."""

from __future__ import annotations

from pathlib import Path

from ..constants import Language
from .base import AdapterContext, FixSession, LanguageAdapter, count_json_array


class ShellAdapter(LanguageAdapter):
    languages = (Language.SHELL,)

    def check(self, path: Path, context: AdapterContext) -> int:
        completed = context.run_tool("shellcheck", ["-f", "json", str(path)])
        if completed is None:
            return 0
        return count_json_array(completed.stdout, tool="shellcheck")

    def fix(self, path: Path, session: FixSession, issues: int) -> int:
        # Rewriting shell scripts is opt-in and only for scripts shellcheck flagged.
        if issues == 0 or not session.context.config.execution.experimental_fixes:
            return 0
        return session.run_fixer("shfmt", ["-w", str(path)])


__all__ = ["ShellAdapter"]
