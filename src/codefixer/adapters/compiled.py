# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapters for compiled languages: Go, Rust and C/C++."""

from __future__ import annotations

from pathlib import Path

from ..constants import Language
from .base import AdapterContext, FixSession, LanguageAdapter, count_matching_lines

CPPCHECK_CHECKS = "warning,style,performance,portability"


def find_crate_root(path: Path) -> Path | None:
    """Return the nearest ancestor directory containing ``Cargo.toml``."""

    for directory in path.resolve().parents:
        if (directory / "Cargo.toml").is_file():
            return directory
    return None


class GoAdapter(LanguageAdapter):
    """``go vet`` and ``staticcheck`` each contribute one issue on failure."""

    languages = (Language.GO,)

    def check(self, path: Path, context: AdapterContext) -> int:
        issues = 0
        for tool, args in (("go", ["vet", str(path)]), ("staticcheck", [str(path)])):
            completed = context.run_tool(tool, args, cwd=path.parent)
            if completed is not None and completed.returncode != 0:
                issues += 1
        return issues

    def fix(self, path: Path, session: FixSession, issues: int) -> int:
        return session.run_fixer("gofmt", ["-w", str(path)])


class RustAdapter(LanguageAdapter):
    """Run clippy for the enclosing crate and format with rustfmt."""

    languages = (Language.RUST,)

    def check(self, path: Path, context: AdapterContext) -> int:
        crate = find_crate_root(path)
        if crate is None:
            return 0
        completed = context.run_tool("cargo", ["clippy", "--quiet"], cwd=crate)
        if completed is None:
            return 0
        return 1 if completed.returncode != 0 else 0

    def fix(self, path: Path, session: FixSession, issues: int) -> int:
        return session.run_fixer("rustfmt", [str(path)])


class CppAdapter(LanguageAdapter):
    """Count cppcheck diagnostics and format with clang-format."""

    languages = (Language.CPP,)

    def check(self, path: Path, context: AdapterContext) -> int:
        completed = context.run_tool("cppcheck", [f"--enable={CPPCHECK_CHECKS}", str(path)])
        if completed is None:
            return 0
        # cppcheck reports findings on stderr.
        output = "\n".join(part for part in (completed.stdout, completed.stderr) if part)
        return count_matching_lines(output, ("error", "warning"))

    def fix(self, path: Path, session: FixSession, issues: int) -> int:
        return session.run_fixer("clang-format", ["-i", str(path)])


__all__ = ["CppAdapter", "GoAdapter", "RustAdapter", "find_crate_root"]
