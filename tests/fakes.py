# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Test doubles for external tools."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from codefixer.config import Config, build_config
from codefixer.process import CommandOptions


@dataclass
class FakeToolbox:
    """Stand-in for external linters: a fake ``which`` plus a recording runner."""

    responses: dict[str, tuple[int, str, str]] = field(default_factory=dict)
    flagged: dict[tuple[str, str], tuple[int, str, str]] = field(default_factory=dict)
    calls: list[list[str]] = field(default_factory=list)
    cwds: list[Path | None] = field(default_factory=list)

    def install(self, tool: str, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.responses[tool] = (returncode, stdout, stderr)

    def respond_to_flag(self, tool: str, flag: str, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        """Answer invocations of ``tool`` that pass ``flag`` differently from its default response."""

        self.flagged[(tool, flag)] = (returncode, stdout, stderr)

    def which(self, name: str) -> str | None:
        return f"/fake/bin/{name}" if name in self.responses else None

    def runner(self, args: Sequence[str], options: CommandOptions) -> subprocess.CompletedProcess[str]:
        command = list(args)
        self.calls.append(command)
        self.cwds.append(options.cwd)
        tool = Path(command[0]).name
        returncode, stdout, stderr = next(
            (self.flagged[(tool, arg)] for arg in command[1:] if (tool, arg) in self.flagged),
            self.responses[tool],
        )
        return subprocess.CompletedProcess(command, returncode, stdout, stderr)

    def tools_called(self) -> list[str]:
        return [Path(call[0]).name for call in self.calls]


def make_config(base_dir: Path, **sections: dict[str, object]) -> Config:
    """Return a validated configuration whose state directories live under ``base_dir``."""

    payload: dict[str, object] = {"paths": {"base_dir": base_dir}}
    payload.update(sections)
    return build_config(payload)
