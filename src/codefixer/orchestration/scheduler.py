# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Dispatch file tasks to a worker pool or run them one after another."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import Executor, ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from functools import partial

from ..adapters import AdapterContext
from ..config import ExecutionConfig
from ..logging import debug, warn
from ..models import FileTask
from .worker import WorkerSettings, process_task, run_task_line

ProgressCallback = Callable[[int, int, str], None]
PoolFactory = Callable[[int], Executor]


def default_pool_factory(jobs: int) -> Executor:
    """Return a process pool bounded by ``jobs`` workers."""

    return ProcessPoolExecutor(max_workers=jobs)


class SchedulerState(str, Enum):
    """Lifecycle of one scheduler run."""

    IDLE = "idle"
    DISPATCHED = "dispatched"
    PARALLEL = "parallel"
    SEQUENTIAL = "sequential"
    COLLECTING = "collecting"
    DONE = "done"


class ExecutionMode(str, Enum):
    PARALLEL = "parallel"
    SEQUENTIAL = "sequential"


def select_mode(execution: ExecutionConfig) -> ExecutionMode:
    """Return parallel mode only for ``jobs > 1`` without prompt or CI mode."""

    if execution.jobs > 1 and not execution.prompt and not execution.ci:
        return ExecutionMode.PARALLEL
    return ExecutionMode.SEQUENTIAL


@dataclass(slots=True)
class ScheduleOutcome:
    """Result stream of one run plus how it was produced."""

    lines: list[str] = field(default_factory=list)
    mode: ExecutionMode = ExecutionMode.SEQUENTIAL
    fell_back: bool = False


class TaskScheduler:
    """Run every task exactly once and collect one result line per task."""

    def __init__(
        self,
        settings: WorkerSettings,
        *,
        pool_factory: PoolFactory = default_pool_factory,
        progress: ProgressCallback | None = None,
    ) -> None:
        """Create a scheduler.

        Args:
            settings: Worker settings shared with every task.
            pool_factory: Callable creating the executor for parallel mode.
            progress: Callback invoked as ``(index, total, name)`` after each
                sequential task; never called in CI mode.
        """

        self._settings = settings
        self._pool_factory = pool_factory
        self._progress = progress
        self.state = SchedulerState.IDLE

    @property
    def execution(self) -> ExecutionConfig:
        return self._settings.config.execution

    def run(self, tasks: Sequence[FileTask]) -> ScheduleOutcome:
        """Process ``tasks`` and return the collected result lines.

        Args:
            tasks: De-duplicated tasks to process.

        Returns:
            ScheduleOutcome: One line per task, in completion order.
        """

        self.state = SchedulerState.DISPATCHED
        mode = select_mode(self.execution)
        outcome = ScheduleOutcome(mode=mode)
        if mode is ExecutionMode.PARALLEL:
            self.state = SchedulerState.PARALLEL
            collected, remaining = self._run_parallel(tasks)
            outcome.lines.extend(collected)
            if remaining:
                outcome.fell_back = True
                self.state = SchedulerState.SEQUENTIAL
                outcome.lines.extend(self._run_sequential(remaining))
        else:
            self.state = SchedulerState.SEQUENTIAL
            outcome.lines.extend(self._run_sequential(tasks))
        self.state = SchedulerState.COLLECTING
        debug(f"Collected {len(outcome.lines)} result(s) in {mode.value} mode", enabled=self._verbose)
        self.state = SchedulerState.DONE
        return outcome

    @property
    def _verbose(self) -> bool:
        return self._settings.config.output.verbose

    def _run_parallel(self, tasks: Sequence[FileTask]) -> tuple[list[str], list[FileTask]]:
        """Submit ``tasks`` to the pool.

        Returns:
            tuple[list[str], list[FileTask]]: Collected lines and the tasks
            still lacking a result when the pool failed.
        """

        collected: dict[int, str] = {}
        worker = partial(run_task_line, settings=self._settings)
        # Workers turn per-file errors into records, so anything raised here is a pool failure.
        try:
            with self._pool_factory(self.execution.jobs) as pool:
                try:
                    futures = {pool.submit(worker, task): index for index, task in enumerate(tasks)}
                    for future in as_completed(futures):
                        collected[futures[future]] = future.result()
                except Exception:
                    pool.shutdown(wait=True, cancel_futures=True)
                    raise
        except Exception as exc:
            warn(f"Parallel processing failed ({exc!r}); falling back to sequential")
        remaining = [task for index, task in enumerate(tasks) if index not in collected]
        return list(collected.values()), remaining

    def _run_sequential(self, tasks: Sequence[FileTask]) -> list[str]:
        context: AdapterContext = self._settings.context()
        registry = self._settings.adapters()
        total = len(tasks)
        lines: list[str] = []
        for index, task in enumerate(tasks, start=1):
            lines.append(process_task(task, context, registry).to_line())
            if self._progress is not None and not self.execution.ci:
                self._progress(index, total, task.name)
        return lines


__all__ = [
    "ExecutionMode",
    "PoolFactory",
    "ProgressCallback",
    "ScheduleOutcome",
    "SchedulerState",
    "TaskScheduler",
    "default_pool_factory",
    "select_mode",
]
