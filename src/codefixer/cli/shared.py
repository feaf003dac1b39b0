# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared CLI helpers: error type, exit codes and override building."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final

EXIT_OK: Final[int] = 0
EXIT_ISSUES: Final[int] = 1
EXIT_CANNOT_RUN: Final[int] = 2


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = EXIT_CANNOT_RUN) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


def build_overrides(
    *,
    fix: bool = False,
    dry_run: bool = False,
    depth: int | None = None,
    jobs: int | None = None,
    no_backup: bool = False,
    ci: bool = False,
    report: bool = False,
    prompt: bool = False,
    experimental_fixes: bool = False,
    git_only: bool = False,
    verbose: bool = False,
    backup_dir: Path | None = None,
) -> dict[str, Any]:
    """Translate command-line flags into a sectioned configuration fragment.

    Flags left at their defaults are omitted so that lower-priority sources
    keep their values.

    Returns:
        dict[str, Any]: Fragment suitable for :class:`~codefixer.config_loader.MappingConfigSource`.
    """

    discovery: dict[str, Any] = {}
    execution: dict[str, Any] = {}
    output: dict[str, Any] = {}
    paths: dict[str, Any] = {}
    if depth is not None:
        discovery["max_depth"] = depth
    if git_only:
        discovery["git_only"] = True
    if jobs is not None:
        execution["jobs"] = jobs
    if fix:
        execution["auto_fix"] = True
    if dry_run:
        execution["dry_run"] = True
    if no_backup:
        execution["backup_enabled"] = False
    if ci:
        execution["ci"] = True
    if prompt:
        execution["prompt"] = True
    if experimental_fixes:
        execution["experimental_fixes"] = True
    if verbose:
        output["verbose"] = True
    if report:
        output["report"] = True
    if backup_dir is not None:
        paths["backup_dir"] = backup_dir
    sections = {"discovery": discovery, "execution": execution, "output": output, "paths": paths}
    return {name: values for name, values in sections.items() if values}


__all__ = ["CLIError", "EXIT_CANNOT_RUN", "EXIT_ISSUES", "EXIT_OK", "build_overrides"]
