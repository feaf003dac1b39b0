# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Scheduling and orchestration of per-file work."""

from __future__ import annotations

from .orchestrator import Orchestrator, OrchestratorDeps, OrchestratorHooks, RunResult
from .scheduler import (
    ExecutionMode,
    PoolFactory,
    ProgressCallback,
    ScheduleOutcome,
    SchedulerState,
    TaskScheduler,
    default_pool_factory,
    select_mode,
)
from .worker import WorkerSettings, process_path, process_task, run_task_line

__all__ = [
    "ExecutionMode",
    "Orchestrator",
    "OrchestratorDeps",
    "OrchestratorHooks",
    "PoolFactory",
    "ProgressCallback",
    "RunResult",
    "ScheduleOutcome",
    "SchedulerState",
    "TaskScheduler",
    "WorkerSettings",
    "default_pool_factory",
    "process_path",
    "process_task",
    "run_task_line",
    "select_mode",
]
