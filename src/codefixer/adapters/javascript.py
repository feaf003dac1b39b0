# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""JavaScript and TypeScript adapter backed by eslint and prettier."""

from __future__ import annotations

import json
from pathlib import Path

from ..constants import Language
from ..logging import warn
from .base import AdapterContext, FixSession, LanguageAdapter


def count_eslint_problems(stdout: str | None) -> int:
    """Return ``errorCount + warningCount`` of the first eslint result entry.

    Unparseable output is reported as a warning and counts as zero.
    """

    text = (stdout or "").strip()
    if not text:
        return 0
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        warn("Could not parse eslint output")
        return 0
    if not isinstance(payload, list) or not payload or not isinstance(payload[0], dict):
        return 0
    entry = payload[0]
    total = 0
    for key in ("errorCount", "warningCount"):
        value = entry.get(key, 0)
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            total += value
    return total


class JavaScriptAdapter(LanguageAdapter):
    """Lint with eslint; fix with ``eslint --fix`` then prettier."""

    languages = (Language.JAVASCRIPT, Language.TYPESCRIPT)

    def check(self, path: Path, context: AdapterContext) -> int:
        completed = context.run_tool("eslint", ["--format", "json", str(path)], cwd=context.root)
        if completed is None:
            return 0
        return count_eslint_problems(completed.stdout)

    def fix(self, path: Path, session: FixSession, issues: int) -> int:
        fixed = 0
        if issues > 0:
            fixed += session.run_fixer("eslint", ["--fix", str(path)], cwd=session.context.root)
        fixed += session.run_fixer("prettier", ["--write", str(path)], cwd=session.context.root)
        return fixed


__all__ = ["JavaScriptAdapter", "count_eslint_problems"]
