# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Progress rendering for sequential runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import TracebackType

from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn, TimeElapsedColumn

from ..config import Config
from ..console import get_console_manager, is_tty
from ..orchestration import ExecutionMode, select_mode


@dataclass(slots=True)
class ProgressController:
    """Drive a transient Rich progress bar from scheduler progress callbacks.

    The bar is only shown for sequential, interactive, non-CI runs; in every
    other case the controller is inert.
    """

    config: Config
    is_terminal: bool = field(default_factory=is_tty)
    progress_factory: type[Progress] = Progress
    enabled: bool = field(init=False, default=False)
    _progress: Progress | None = field(init=False, default=None)
    _task_id: TaskID | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        execution = self.config.execution
        self.enabled = (
            self.is_terminal
            and not execution.ci
            and not execution.prompt
            and select_mode(execution) is ExecutionMode.SEQUENTIAL
        )

    def __enter__(self) -> ProgressController:
        if self.enabled:
            console = get_console_manager().get(color=self.config.output.color, emoji=self.config.output.emoji)
            self._progress = self.progress_factory(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TextColumn("{task.completed}/{task.total}"),
                TimeElapsedColumn(),
                TextColumn("{task.fields[current]}", justify="right"),
                console=console,
                transient=True,
            )
            self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task_id = None

    def advance(self, index: int, total: int, name: str) -> None:
        """Progress callback matching the scheduler's ``(index, total, name)`` contract."""

        if self._progress is None:
            return
        if self._task_id is None:
            self._task_id = self._progress.add_task("Processing", total=total, current="")
        self._progress.update(self._task_id, completed=index, current=name)


__all__ = ["ProgressController"]
