# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for subprocess helpers and console logging."""

import logging
import shutil
import sys
from pathlib import Path

import pytest

from codefixer.logging import configure_log_file, detach_log_handler, fail, info, ok, warn
from codefixer.process import TIMEOUT_RETURNCODE, CommandOptions, SubprocessExecutionError, run_command


def test_run_command_captures_output(tmp_path: Path) -> None:
    completed = run_command(
        [sys.executable, "-c", "import os; print(os.getcwd())"],
        options=CommandOptions(cwd=tmp_path),
    )

    assert completed.returncode == 0
    assert Path(completed.stdout.strip()).resolve() == tmp_path.resolve()


def test_run_command_missing_executable() -> None:
    with pytest.raises(FileNotFoundError):
        run_command(["definitely-not-a-real-tool-xyz"])


def test_run_command_check_raises() -> None:
    with pytest.raises(SubprocessExecutionError) as excinfo:
        run_command([sys.executable, "-c", "raise SystemExit(3)"], options=CommandOptions(check=True))

    assert excinfo.value.returncode == 3


def test_run_command_timeout_returns_sentinel() -> None:
    completed = run_command(
        [sys.executable, "-c", "import time; time.sleep(5)"],
        options=CommandOptions(timeout=0.2),
    )

    assert completed.returncode == TIMEOUT_RETURNCODE
    assert "timed out" in completed.stderr


def test_run_command_resolves_relative_executable() -> None:
    name = Path(sys.executable).name
    if shutil.which(name) is None:
        pytest.skip("interpreter not on PATH")

    completed = run_command([name, "-c", "print('hi')"])

    assert completed.stdout.strip() == "hi"


def test_messages_are_mirrored_to_log_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    log_path = tmp_path / "codefixer.log"
    handler = configure_log_file(log_path)
    try:
        info("starting", use_color=False)
        ok("finished", use_color=False, use_emoji=False)
        warn("careful", use_color=False)
        fail("broken", use_color=False)
    finally:
        detach_log_handler(handler)

    text = log_path.read_text(encoding="utf-8")
    assert "[INFO] starting" in text
    assert "[WARNING] careful" in text
    assert "[ERROR] broken" in text
    out = capsys.readouterr().out
    assert "finished" in out
    assert "✅" not in out
    assert handler not in logging.getLogger("codefixer").handlers
