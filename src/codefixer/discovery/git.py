# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Git-backed discovery and version-control ignore checks."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from pathlib import Path
from typing import Final, NamedTuple

from ..config import FileDiscoveryConfig
from ..constants import LANGUAGE_PATTERNS, Language
from ..process import CommandOptions, run_command
from .base import DiscoveryError
from .rules import glob_regex, is_junk, matches_ignore

_CHECK_IGNORE_BATCH: Final[int] = 200
_NUL_FLAG: Final[str] = "-z"


class GitOutput(NamedTuple):
    """Exit status and stdout entries of a git command."""

    returncode: int
    lines: list[str]


GitRunner = Callable[[Sequence[str], Path], GitOutput]


def default_git_runner(cmd: Sequence[str], root: Path) -> GitOutput:
    """Execute a git command in ``root`` and return its exit status and stdout entries.

    Output of ``-z`` commands is split on NUL so paths arrive unquoted.
    A missing ``git`` executable is reported as exit status ``127``.
    """

    try:
        cp = run_command(cmd, options=CommandOptions(cwd=root, capture_output=True, text=True, check=False))
    except FileNotFoundError:
        return GitOutput(127, [])
    stdout = cp.stdout or ""
    if _NUL_FLAG in cmd:
        return GitOutput(cp.returncode, [entry for entry in stdout.split("\0") if entry])
    return GitOutput(cp.returncode, stdout.splitlines())


def is_work_tree(root: Path, *, runner: GitRunner = default_git_runner) -> bool:
    """Return ``True`` when ``root`` lies inside a git work tree."""

    output = runner(["git", "rev-parse", "--is-inside-work-tree"], root)
    return output.returncode == 0 and bool(output.lines) and output.lines[0].strip() == "true"


def ignored_by_vcs(paths: Sequence[Path], root: Path, *, runner: GitRunner = default_git_runner) -> set[Path]:
    """Return the subset of ``paths`` that git reports as ignored.

    ``git check-ignore`` exits with ``1`` when nothing matched, which simply
    yields an empty set. Paths are checked in batches to keep command lines
    bounded.

    Args:
        paths: Absolute candidate paths.
        root: Work tree in which to run git.
        runner: Command runner used to execute git.

    Returns:
        set[Path]: Resolved paths that are ignored.
    """

    ignored: set[Path] = set()
    for start in range(0, len(paths), _CHECK_IGNORE_BATCH):
        batch = [str(path) for path in paths[start : start + _CHECK_IGNORE_BATCH]]
        output = runner(["git", "check-ignore", _NUL_FLAG, "--", *batch], root)
        if output.returncode not in (0, 1):
            continue
        for entry in output.lines:
            if entry:
                candidate = Path(entry)
                ignored.add((candidate if candidate.is_absolute() else root / candidate).resolve())
    return ignored


class GitDiscovery:
    """Collect tracked files from ``git ls-files`` for a single language."""

    def __init__(self, *, runner: GitRunner | None = None) -> None:
        """Create a git discovery strategy.

        Args:
            runner: Optional command runner used to execute git commands.
        """

        self._runner = runner or default_git_runner

    @property
    def identifier(self) -> str:
        """Return the identifier for the git discovery strategy."""

        return "git"

    def discover(self, config: FileDiscoveryConfig, root: Path, language: Language) -> Iterable[Path]:
        """Return tracked files of ``language`` in index order.

        Args:
            config: Discovery configuration (ignore patterns).
            root: Repository root directory.
            language: Language whose glob table selects files.

        Returns:
            Iterable[Path]: Resolved tracked paths.

        Raises:
            DiscoveryError: If ``root`` is not inside a git work tree.
        """

        patterns = LANGUAGE_PATTERNS.get(language)
        if not patterns:
            return []
        if not is_work_tree(root, runner=self._runner):
            raise DiscoveryError(f"Git-only mode requested but {root} is not inside a git work tree")
        return list(self._tracked(config, root, patterns))

    def _tracked(self, config: FileDiscoveryConfig, root: Path, patterns: tuple[str, ...]) -> Iterator[Path]:
        output = self._runner(["git", "ls-files", _NUL_FLAG], root)
        if output.returncode != 0:
            raise DiscoveryError(f"git ls-files failed in {root}")
        regex = glob_regex(patterns)
        for entry in output.lines:
            if not entry or not regex.search(entry):
                continue
            candidate = root / entry
            if not candidate.is_file():
                continue
            if is_junk(candidate, root) or matches_ignore(candidate, root, config.ignore_patterns):
                continue
            yield candidate.resolve()


__all__ = [
    "GitDiscovery",
    "GitOutput",
    "GitRunner",
    "default_git_runner",
    "ignored_by_vcs",
    "is_work_tree",
]
