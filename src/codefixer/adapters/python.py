# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Python adapter: pylint for checks, isort and black for fixes."""

from __future__ import annotations

from pathlib import Path

from ..constants import Language
from .base import AdapterContext, FixSession, LanguageAdapter, count_json_array


class PythonAdapter(LanguageAdapter):
    """Count pylint messages and reformat with isort followed by black."""

    languages = (Language.PYTHON,)

    def check(self, path: Path, context: AdapterContext) -> int:
        completed = context.run_tool("pylint", ["--output-format=json", str(path)])
        if completed is None:
            return 0
        # pylint encodes message categories in its exit status; stdout is the signal.
        return count_json_array(completed.stdout, tool="pylint")

    def fix(self, path: Path, session: FixSession, issues: int) -> int:
        fixed = session.run_fixer("isort", ["--quiet", str(path)])
        fixed += session.run_fixer("black", ["--quiet", str(path)])
        return fixed


__all__ = ["PythonAdapter"]
