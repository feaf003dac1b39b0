# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapter contract shared by every language: a check phase and a gated fix phase."""

from __future__ import annotations

import json
import shlex
import shutil
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from subprocess import CompletedProcess
from typing import ClassVar

from ..config import Config
from ..constants import PROJECT_LOCAL_BIN_DIRS, Language
from ..logging import debug, warn
from ..models import ProcessResult
from ..process import CommandOptions, run_command
from ..safety.backup import BackupError, BackupStore
from ..safety.prompt import Prompter, StdinPrompter

ToolRunner = Callable[[Sequence[str], CommandOptions], CompletedProcess[str]]
Which = Callable[[str], str | None]


def default_tool_runner(args: Sequence[str], options: CommandOptions) -> CompletedProcess[str]:
    """Run an external tool through :func:`codefixer.process.run_command`."""

    return run_command(args, options=options)


class ToolResolver:
    """Locate external tools honouring overrides, project-local bins and ``PATH``.

    Resolution order: the configured override command (parsed with
    :func:`shlex.split`), then ``<root>/node_modules/.bin`` and
    ``<root>/.venv/bin``, then :func:`shutil.which`.
    """

    def __init__(
        self,
        *,
        overrides: dict[str, str] | None = None,
        root: Path | None = None,
        which: Which = shutil.which,
    ) -> None:
        self._overrides = dict(overrides or {})
        self._root = root
        self._which = which
        self._cache: dict[str, tuple[str, ...] | None] = {}

    def resolve(self, tool: str) -> tuple[str, ...] | None:
        """Return the command prefix for ``tool`` or ``None`` when unavailable.

        Args:
            tool: Executable name such as ``pylint``.

        Returns:
            tuple[str, ...] | None: Command words to which arguments are appended.
        """

        if tool not in self._cache:
            self._cache[tool] = self._resolve(tool)
        return self._cache[tool]

    def available(self, tool: str) -> bool:
        return self.resolve(tool) is not None

    def _resolve(self, tool: str) -> tuple[str, ...] | None:
        override = (self._overrides.get(tool) or "").strip()
        if override:
            try:
                words = shlex.split(override)
            except ValueError as exc:
                warn(f"Invalid override for {tool}: {exc}")
                return None
            executable = self._locate(words[0])
            if executable is None:
                warn(f"Override for {tool} not found: {words[0]}")
                return None
            return (executable, *words[1:])
        executable = self._locate(tool)
        return (executable,) if executable is not None else None

    def _locate(self, name: str) -> str | None:
        candidate = Path(name)
        if candidate.is_absolute() or "/" in name:
            return str(candidate) if candidate.is_file() else None
        if self._root is not None:
            for bin_dir in PROJECT_LOCAL_BIN_DIRS:
                local = self._root / bin_dir / name
                if local.is_file():
                    return str(local)
        return self._which(name)


@dataclass(slots=True)
class AdapterContext:
    """Collaborators and settings shared by every adapter call in one process."""

    config: Config
    root: Path
    resolver: ToolResolver
    runner: ToolRunner = default_tool_runner
    backups: BackupStore | None = None
    prompter: Prompter | None = None

    @classmethod
    def from_config(
        cls,
        config: Config,
        root: Path,
        *,
        runner: ToolRunner | None = None,
        which: Which | None = None,
        prompter: Prompter | None = None,
    ) -> AdapterContext:
        """Build a context with the standard resolver, backup store and prompter."""

        execution = config.execution
        resolver = ToolResolver(overrides=config.tools, root=root, which=which or shutil.which)
        backups = BackupStore(
            config.paths.backups,
            root=root,
            enabled=execution.backup_enabled,
            dry_run=execution.dry_run,
            verbose=config.output.verbose,
        )
        if prompter is None and execution.prompt:
            prompter = StdinPrompter(timeout=execution.prompt_timeout)
        return cls(
            config=config,
            root=root,
            resolver=resolver,
            runner=runner or default_tool_runner,
            backups=backups,
            prompter=prompter,
        )

    @property
    def verbose(self) -> bool:
        return self.config.output.verbose

    def run_tool(
        self,
        tool: str,
        args: Iterable[str],
        *,
        cwd: Path | None = None,
    ) -> CompletedProcess[str] | None:
        """Invoke ``tool`` with ``args``.

        Returns:
            CompletedProcess[str] | None: Completed process, or ``None`` when the
            tool is unavailable or could not be started.
        """

        prefix = self.resolver.resolve(tool)
        if prefix is None:
            debug(f"{tool} not available", enabled=self.verbose)
            return None
        command = [*prefix, *args]
        try:
            return self.runner(command, CommandOptions(cwd=cwd))
        except OSError as exc:
            warn(f"Failed to run {tool}: {exc}")
            return None


@dataclass(slots=True)
class FixSession:
    """Per-file approval state for the fix phase.

    The prompt is asked and the backup taken at most once, immediately
    before the first fixer runs.
    """

    path: Path
    context: AdapterContext
    _approved: bool | None = field(default=None, init=False)

    def approve(self) -> bool:
        """Return ``True`` when the file may be mutated."""

        if self._approved is None:
            self._approved = self._decide()
        return self._approved

    def _decide(self) -> bool:
        prompter = self.context.prompter
        if self.context.config.execution.prompt and prompter is not None and not prompter(self.path):
            debug(f"Fix declined for {self.path}", enabled=self.context.verbose)
            return False
        if self.context.backups is not None:
            try:
                self.context.backups.backup(self.path)
            except BackupError as exc:
                warn(f"{exc}; skipping fixes for {self.path}")
                return False
        return True

    def run_fixer(self, tool: str, args: Iterable[str], *, cwd: Path | None = None) -> int:
        """Run one fixer after approval and return ``1`` on success, else ``0``."""

        if not self.context.resolver.available(tool):
            return 0
        if not self.approve():
            return 0
        completed = self.context.run_tool(tool, args, cwd=cwd)
        if completed is None:
            return 0
        if completed.returncode != 0:
            warn(f"{tool} failed on {self.path} (exit {completed.returncode})")
            return 0
        return 1


class LanguageAdapter(ABC):
    """Base class for per-language adapters.

    Subclasses implement :meth:`check` and optionally :meth:`fix`;
    :meth:`process` combines them into a :class:`ProcessResult`.
    """

    languages: ClassVar[tuple[Language, ...]] = ()

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def check(self, path: Path, context: AdapterContext) -> int:
        """Return the number of issues reported for ``path``."""

    def fix(self, path: Path, session: FixSession, issues: int) -> int:
        """Run fixers for ``path`` and return how many succeeded."""

        return 0

    def process(self, path: Path, language: Language, context: AdapterContext) -> ProcessResult:
        """Run the check phase and, when mutations are allowed, the fix phase.

        Args:
            path: File to analyse.
            language: Language tag recorded in the result.
            context: Shared adapter collaborators.

        Returns:
            ProcessResult: Record for ``path``.
        """

        issues = self.check(path, context)
        fixed = 0
        if context.config.execution.mutations_allowed:
            fixed = self.fix(path, FixSession(path=path, context=context), issues)
        return ProcessResult(file=str(path), lang=language, issues=issues, fixed=fixed)


class NullAdapter(LanguageAdapter):
    """Adapter for languages without tooling; always reports zero/zero."""

    def check(self, path: Path, context: AdapterContext) -> int:
        return 0


def count_json_array(stdout: str | None, *, tool: str) -> int:
    """Return the length of a JSON array printed by ``tool``.

    Empty output counts as zero; unparseable output is a warning and zero.
    """

    text = (stdout or "").strip()
    if not text:
        return 0
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        warn(f"Could not parse {tool} output")
        return 0
    return len(payload) if isinstance(payload, list) else 0


def count_matching_lines(stdout: str | None, keywords: Sequence[str]) -> int:
    """Return the number of output lines containing any of ``keywords`` (case-insensitive)."""

    lowered = tuple(keyword.lower() for keyword in keywords)
    return sum(1 for line in (stdout or "").splitlines() if any(keyword in line.lower() for keyword in lowered))


__all__ = [
    "AdapterContext",
    "FixSession",
    "LanguageAdapter",
    "NullAdapter",
    "ToolResolver",
    "ToolRunner",
    "Which",
    "count_json_array",
    "count_matching_lines",
    "default_tool_runner",
]
