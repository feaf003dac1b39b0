# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem discovery strategy."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from ..config import FileDiscoveryConfig
from ..constants import ALWAYS_EXCLUDE_DIRS, LANGUAGE_PATTERNS, Language
from .base import DiscoveryError
from .git import GitRunner, default_git_runner, ignored_by_vcs, is_work_tree
from .rules import depth_of, is_junk, matches_any_glob, matches_ignore


@dataclass(frozen=True, slots=True)
class WalkContext:
    """Parameters required to walk the filesystem hierarchy."""

    root: Path
    patterns: tuple[str, ...]
    max_depth: int
    follow_symlinks: bool


class FilesystemDiscovery:
    """Traverse the filesystem collecting candidate files for one language."""

    def __init__(self, *, follow_symlinks: bool = False, git_runner: GitRunner | None = None) -> None:
        """Create a discovery strategy optionally following symlinks.

        Args:
            follow_symlinks: When ``True`` walk directories pointed to by
                symlinks instead of skipping them.
            git_runner: Command runner used for ``git check-ignore``.
        """

        self.follow_symlinks = follow_symlinks
        self._git_runner = git_runner or default_git_runner
        self._work_tree_cache: dict[Path, bool] = {}

    @property
    def identifier(self) -> str:
        """Return the identifier for the filesystem discovery strategy."""

        return "filesystem"

    def discover(self, config: FileDiscoveryConfig, root: Path, language: Language) -> Iterable[Path]:
        """Return files of ``language`` under ``root`` within the depth limit.

        Args:
            config: User-provided discovery configuration.
            root: Directory to walk.
            language: Language whose glob patterns select files.

        Returns:
            Iterable[Path]: Resolved paths that pass junk, ignore and VCS filters.
        """

        patterns = LANGUAGE_PATTERNS.get(language)
        if not patterns:
            return []
        context = WalkContext(
            root=root,
            patterns=patterns,
            max_depth=config.max_depth,
            follow_symlinks=self.follow_symlinks,
        )
        candidates = [
            path
            for path in self._walk(context)
            if not is_junk(path, root) and not matches_ignore(path, root, config.ignore_patterns)
        ]
        if candidates and config.respect_vcs_ignore and self._inside_work_tree(root):
            ignored = ignored_by_vcs(candidates, root, runner=self._git_runner)
            candidates = [path for path in candidates if path.resolve() not in ignored]
        return [path.resolve() for path in candidates]

    def _inside_work_tree(self, root: Path) -> bool:
        if root not in self._work_tree_cache:
            self._work_tree_cache[root] = is_work_tree(root, runner=self._git_runner)
        return self._work_tree_cache[root]

    def _walk(self, context: WalkContext) -> Iterator[Path]:
        """Walk ``context.root`` yielding regular files matching the language globs.

        Args:
            context: Immutable walk context containing traversal settings.

        Yields:
            Path: Matching files no deeper than ``context.max_depth``.

        Raises:
            DiscoveryError: If the root itself cannot be listed.
        """

        def _on_error(error: OSError) -> None:
            if Path(error.filename or "") == context.root:
                raise DiscoveryError(f"Cannot read directory {context.root}: {error.strerror}") from error

        for dirpath, dirnames, filenames in os.walk(
            context.root,
            onerror=_on_error,
            followlinks=context.follow_symlinks,
        ):
            current = Path(dirpath)
            # Entries directly under ``current`` sit one level deeper than it.
            child_depth = depth_of(current, context.root) + 1
            if child_depth >= context.max_depth:
                dirnames[:] = []
            else:
                dirnames[:] = [name for name in dirnames if name not in ALWAYS_EXCLUDE_DIRS]
            if child_depth > context.max_depth:
                continue
            for filename in filenames:
                if not matches_any_glob(filename.lower(), context.patterns):
                    continue
                candidate = current / filename
                if candidate.is_file():
                    yield candidate


__all__ = ["FilesystemDiscovery", "WalkContext"]
