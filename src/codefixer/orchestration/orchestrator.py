# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Coordinate discovery, admission, scheduling and aggregation for one run."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from ..adapters import AdapterRegistry, ToolRunner
from ..adapters.base import Which
from ..aggregation import aggregate
from ..config import Config
from ..discovery import DiscoveryService, GitRunner, build_default_discovery
from ..logging import info
from ..models import FileTask, SkippedFile, Statistics
from ..safety.gate import SafetyGate
from ..safety.prompt import Prompter
from .scheduler import (
    ExecutionMode,
    PoolFactory,
    ProgressCallback,
    TaskScheduler,
    default_pool_factory,
)
from .worker import WorkerSettings


@dataclass(slots=True)
class OrchestratorHooks:
    """Optional hooks to customise orchestration behaviour."""

    after_discovery: Callable[[int], None] | None = None
    after_admission: Callable[[int, int], None] | None = None
    progress: ProgressCallback | None = None
    after_execution: Callable[[RunResult], None] | None = None


@dataclass(frozen=True, slots=True)
class OrchestratorDeps:
    """Collaborators injected into an :class:`Orchestrator`."""

    discovery: DiscoveryService | None = None
    gate: SafetyGate | None = None
    registry: AdapterRegistry | None = None
    runner: ToolRunner | None = None
    which: Which | None = None
    prompter: Prompter | None = None
    git_runner: GitRunner | None = None
    pool_factory: PoolFactory = default_pool_factory
    hooks: OrchestratorHooks | None = None


@dataclass(slots=True)
class RunResult:
    """Everything reporting needs after a run."""

    root: Path
    statistics: Statistics
    skipped: list[SkippedFile] = field(default_factory=list)
    mode: ExecutionMode = ExecutionMode.SEQUENTIAL
    fell_back: bool = False

    def exit_code(self, *, ci: bool) -> int:
        """Return ``1`` when issues were found in CI mode, otherwise ``0``."""

        return 1 if ci and self.statistics.total_issues > 0 else 0


class Orchestrator:
    """Run the Discovery, Safety Gate, Scheduler and Aggregator pipeline."""

    def __init__(self, config: Config, deps: OrchestratorDeps | None = None) -> None:
        self._config = config
        self._deps = deps or OrchestratorDeps()
        self._hooks = self._deps.hooks or OrchestratorHooks()

    @property
    def config(self) -> Config:
        return self._config

    def discover(self, root: Path) -> list[FileTask]:
        """Return the de-duplicated tasks found under ``root``.

        Raises:
            DiscoveryError: If ``root`` cannot be traversed.
        """

        discovery = self._deps.discovery or build_default_discovery(
            self._config.discovery,
            git_runner=self._deps.git_runner,
        )
        return discovery.tasks(self._config.discovery, root)

    def admit(self, tasks: list[FileTask]) -> tuple[list[FileTask], list[SkippedFile]]:
        """Split ``tasks`` into admitted tasks and skipped files."""

        gate = self._deps.gate or SafetyGate(self._config.safety)
        by_path = {task.path: task for task in tasks}
        admitted_paths, rejected = gate.admit([task.path for task in tasks])
        admitted = [by_path[path] for path in admitted_paths]
        skipped = [SkippedFile(path=path, reason=reason) for path, reason in rejected]
        return admitted, skipped

    def run(self, root: Path) -> RunResult:
        """Process every eligible file under ``root``.

        Args:
            root: Project directory.

        Returns:
            RunResult: Statistics, skipped files and the execution mode used.

        Raises:
            DiscoveryError: If ``root`` cannot be traversed.
            DuplicateResultError: If the result stream names a file twice.
        """

        resolved_root = root.resolve()
        tasks = self.discover(resolved_root)
        if self._hooks.after_discovery is not None:
            self._hooks.after_discovery(len(tasks))
        admitted, skipped = self.admit(tasks)
        if self._hooks.after_admission is not None:
            self._hooks.after_admission(len(admitted), len(skipped))
        if not admitted:
            info("No files to process", use_color=self._config.output.color, use_emoji=self._config.output.emoji)
        settings = WorkerSettings(
            config=self._config,
            root=resolved_root,
            runner=self._deps.runner,
            which=self._deps.which,
            prompter=self._deps.prompter,
            registry=self._deps.registry,
        )
        scheduler = TaskScheduler(
            settings,
            pool_factory=self._deps.pool_factory,
            progress=self._hooks.progress,
        )
        outcome = scheduler.run(admitted)
        result = RunResult(
            root=resolved_root,
            statistics=aggregate(outcome.lines),
            skipped=skipped,
            mode=outcome.mode,
            fell_back=outcome.fell_back,
        )
        if self._hooks.after_execution is not None:
            self._hooks.after_execution(result)
        return result


__all__ = ["Orchestrator", "OrchestratorDeps", "OrchestratorHooks", "RunResult"]
