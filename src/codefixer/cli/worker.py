# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""The hidden ``codefixer worker`` command: process one file, print one record."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import ConfigError
from ..config_loader import ConfigLoader
from ..console import get_console_manager
from ..logging import fail
from ..orchestration import WorkerSettings, process_path
from .shared import EXIT_CANNOT_RUN


def worker_command(
    path: Annotated[Path, typer.Argument(help="File to process.")],
    root: Annotated[Path | None, typer.Option("--root", help="Project root; defaults to the current directory.")] = None,
    fix: Annotated[bool, typer.Option("--fix", "-f")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", "-n")] = False,
) -> None:
    """Process PATH and print its JSON result record on stdout."""

    # stdout carries only the result record.
    get_console_manager().stderr = True
    project_root = (root or Path.cwd()).resolve()
    overrides: dict[str, object] = {}
    if fix:
        overrides["execution"] = {"auto_fix": True, "dry_run": dry_run}
    elif dry_run:
        overrides["execution"] = {"dry_run": True}
    try:
        config = ConfigLoader.for_root(project_root, overrides=overrides).load()
    except ConfigError as exc:
        fail(f"Configuration error: {exc}")
        raise typer.Exit(code=EXIT_CANNOT_RUN) from exc
    result = process_path(path, WorkerSettings(config=config, root=project_root))
    if result is not None:
        typer.echo(result.to_line())


__all__ = ["worker_command"]
