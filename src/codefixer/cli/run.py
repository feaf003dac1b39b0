# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""The ``codefixer run`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import Config, ConfigError
from ..config_loader import ConfigLoader
from ..discovery import DiscoveryError
from ..logging import configure_log_file, detach_log_handler, fail, info, ok, section
from ..orchestration import Orchestrator, OrchestratorDeps, OrchestratorHooks, RunResult
from ..reporting import emit_summary, write_reports
from .progress import ProgressController
from .shared import CLIError, build_overrides

LOG_FILE_NAME = "codefixer.log"


def load_run_config(root: Path, *, config_path: Path | None, overrides: dict[str, object], verbose: bool) -> Config:
    """Load and prepare the configuration for a run.

    Raises:
        CLIError: If configuration is invalid or state directories are unusable.
    """

    if config_path is not None and not config_path.is_file():
        raise CLIError(f"Config file not found: {config_path}")
    try:
        config = ConfigLoader.for_root(root, user_config=config_path, overrides=overrides).load(verbose=verbose)
        config.paths.ensure()
    except ConfigError as exc:
        raise CLIError(f"Configuration error: {exc}") from exc
    return config


def execute_run(root: Path, config: Config, *, deps: OrchestratorDeps | None = None) -> RunResult:
    """Run the pipeline over ``root`` with progress and log-file handling.

    Raises:
        CLIError: If discovery fails.
    """

    output = config.output
    handler = configure_log_file(config.paths.logs / LOG_FILE_NAME, verbose=output.verbose)
    try:
        section("CodeFixer", use_color=output.color)
        mode = "auto-fix" if config.execution.auto_fix else "check"
        if config.execution.dry_run:
            mode = f"{mode} (dry run)"
        info(f"Processing {root} in {mode} mode", use_emoji=output.emoji, use_color=output.color)
        with ProgressController(config) as progress:
            base = deps or OrchestratorDeps()
            hooks = base.hooks or OrchestratorHooks()
            if hooks.progress is None and progress.enabled:
                hooks.progress = progress.advance
            deps_with_hooks = OrchestratorDeps(
                discovery=base.discovery,
                gate=base.gate,
                registry=base.registry,
                runner=base.runner,
                which=base.which,
                prompter=base.prompter,
                git_runner=base.git_runner,
                pool_factory=base.pool_factory,
                hooks=hooks,
            )
            result = Orchestrator(config, deps_with_hooks).run(root)
    except DiscoveryError as exc:
        raise CLIError(f"Discovery error: {exc}") from exc
    finally:
        detach_log_handler(handler)
    return result


def run_command(
    directory: Annotated[Path, typer.Argument(help="Directory to process.")] = Path("."),
    fix: Annotated[bool, typer.Option("--fix", "-f", help="Apply automatic fixes.")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", "-n", help="Report only; never modify files.")] = False,
    depth: Annotated[int | None, typer.Option("--depth", "-d", help="Maximum directory depth.")] = None,
    jobs: Annotated[int | None, typer.Option("--jobs", "-j", help="Number of parallel workers.")] = None,
    no_backup: Annotated[bool, typer.Option("--no-backup", help="Disable pre-fix backups.")] = False,
    ci: Annotated[bool, typer.Option("--ci", help="CI mode: sequential, exit 1 on issues.")] = False,
    report: Annotated[bool, typer.Option("--report", help="Write JSON and Markdown reports.")] = False,
    prompt: Annotated[bool, typer.Option("--prompt", help="Confirm each fix interactively.")] = False,
    experimental_fixes: Annotated[
        bool,
        typer.Option("--experimental-fixes", help="Enable fixers that rewrite shell scripts."),
    ] = False,
    git_only: Annotated[bool, typer.Option("--git-only", help="Only process git-tracked files.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug output.")] = False,
    config_path: Annotated[Path | None, typer.Option("--config", help="Path to a TOML config file.")] = None,
    backup_dir: Annotated[Path | None, typer.Option("--backup-dir", help="Directory receiving backups.")] = None,
) -> None:
    """Check (and optionally fix) every supported file under DIRECTORY."""

    overrides = build_overrides(
        fix=fix,
        dry_run=dry_run,
        depth=depth,
        jobs=jobs,
        no_backup=no_backup,
        ci=ci,
        report=report,
        prompt=prompt,
        experimental_fixes=experimental_fixes,
        git_only=git_only,
        verbose=verbose,
        backup_dir=backup_dir,
    )
    try:
        config = load_run_config(directory, config_path=config_path, overrides=overrides, verbose=verbose)
        result = execute_run(directory, config)
    except CLIError as exc:
        fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    output = config.output
    emit_summary(result, output)
    if output.report:
        paths = write_reports(result, output.report_dir or config.paths.logs)
        ok(f"Reports written to {paths.json} and {paths.markdown}", use_emoji=output.emoji, use_color=output.color)
    raise typer.Exit(code=result.exit_code(ci=config.execution.ci))


__all__ = ["execute_run", "load_run_config", "run_command"]
