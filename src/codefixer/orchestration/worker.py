# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Single-file worker: run the adapter pipeline and emit one result record."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..adapters import AdapterContext, AdapterRegistry, ToolRunner, default_registry
from ..adapters.base import Which
from ..config import Config
from ..languages import classify_file
from ..logging import warn
from ..models import FileTask, ProcessResult
from ..safety.gate import SafetyGate
from ..safety.prompt import Prompter


@dataclass(frozen=True, slots=True)
class WorkerSettings:
    """Everything a worker needs to process a task in any process.

    Instances are pickled into pool workers. Collaborators that cannot be
    pickled make the scheduler fall back to sequential processing.
    """

    config: Config
    root: Path
    runner: ToolRunner | None = None
    which: Which | None = None
    prompter: Prompter | None = None
    registry: AdapterRegistry | None = None

    def context(self) -> AdapterContext:
        """Build a fresh adapter context for this process."""

        return AdapterContext.from_config(
            self.config,
            self.root,
            runner=self.runner,
            which=self.which,
            prompter=self.prompter,
        )

    def adapters(self) -> AdapterRegistry:
        return self.registry or default_registry()


def process_task(task: FileTask, context: AdapterContext, registry: AdapterRegistry) -> ProcessResult:
    """Run the adapter for ``task`` and always return exactly one record.

    Unexpected adapter failures are reported as warnings and yield a
    zero/zero record so that the one-record-per-task contract holds.
    """

    adapter = registry.adapter_for(task.language)
    try:
        return adapter.process(task.path, task.language, context)
    except Exception as exc:  # noqa: BLE001 - one file never aborts the run
        warn(f"{adapter.name} failed on {task.path}: {exc}")
        return ProcessResult.empty(task.path, task.language)


def run_task_line(task: FileTask, settings: WorkerSettings) -> str:
    """Process ``task`` and return its serialised record.

    This is the function submitted to the worker pool.
    """

    return process_task(task, settings.context(), settings.adapters()).to_line()


def process_path(path: Path, settings: WorkerSettings) -> ProcessResult | None:
    """Gate, classify and process a single path.

    Args:
        path: File to process.
        settings: Worker settings.

    Returns:
        ProcessResult | None: Record for the file, or ``None`` when the safety
        gate rejected it.
    """

    verdict = SafetyGate(settings.config.safety).evaluate(path)
    for message in verdict.warnings:
        warn(f"{path}: {message}")
    if not verdict.admitted:
        warn(f"Skipping {path}: {verdict.reason}")
        return None
    task = FileTask(path=path.resolve(), language=classify_file(path))
    return process_task(task, settings.context(), settings.adapters())


__all__ = ["WorkerSettings", "process_path", "process_task", "run_task_line"]
