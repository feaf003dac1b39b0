# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discovery helpers for the codefixer package."""

from __future__ import annotations

from ..config import FileDiscoveryConfig
from .base import DiscoveryError, DiscoveryService, DiscoveryStrategy, validate_root
from .filesystem import FilesystemDiscovery
from .git import GitDiscovery, GitOutput, GitRunner, default_git_runner, ignored_by_vcs, is_work_tree
from .rules import depth_of, glob_regex, is_junk, matches_ignore


def build_default_discovery(config: FileDiscoveryConfig, *, git_runner: GitRunner | None = None) -> DiscoveryService:
    """Return the discovery service matching ``config``.

    Args:
        config: Discovery configuration; ``git_only`` selects the git strategy.
        git_runner: Optional git command runner shared by both strategies.

    Returns:
        DiscoveryService: Service ready to produce file tasks.
    """

    strategy: DiscoveryStrategy
    if config.git_only:
        strategy = GitDiscovery(runner=git_runner)
    else:
        strategy = FilesystemDiscovery(git_runner=git_runner)
    return DiscoveryService(strategy)


__all__ = [
    "DiscoveryError",
    "DiscoveryService",
    "DiscoveryStrategy",
    "FilesystemDiscovery",
    "GitDiscovery",
    "GitOutput",
    "GitRunner",
    "build_default_discovery",
    "default_git_runner",
    "depth_of",
    "glob_regex",
    "ignored_by_vcs",
    "is_junk",
    "is_work_tree",
    "matches_ignore",
    "validate_root",
]
