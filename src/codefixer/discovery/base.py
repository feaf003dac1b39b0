# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Abstractions for locating files to process."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..config import FileDiscoveryConfig
from ..constants import LANGUAGE_PATTERNS, Language
from ..languages import classify_file
from ..models import FileTask

Classifier = Callable[[Path], Language]


class DiscoveryError(RuntimeError):
    """Raised when the discovery root cannot be traversed."""


@runtime_checkable
class DiscoveryStrategy(Protocol):
    """Protocol implemented by discovery strategies.

    Implementations yield resolved candidate paths for one language without
    mutating global state.
    """

    @property
    def identifier(self) -> str:
        """Return a short name for the strategy."""

    def discover(self, config: FileDiscoveryConfig, root: Path, language: Language) -> Iterable[Path]:
        """Yield candidate files of ``language`` beneath ``root``."""


def validate_root(root: Path) -> Path:
    """Return the resolved discovery root.

    Raises:
        DiscoveryError: If ``root`` is missing, not a directory or unreadable.
    """

    if not root.exists():
        raise DiscoveryError(f"Directory does not exist: {root}")
    if not root.is_dir():
        raise DiscoveryError(f"Not a directory: {root}")
    if not os.access(root, os.R_OK | os.X_OK):
        raise DiscoveryError(f"Directory not readable: {root}")
    return root.resolve()


class DiscoveryService:
    """Run a strategy for every language and merge the results into tasks."""

    def __init__(
        self,
        strategy: DiscoveryStrategy,
        *,
        languages: Sequence[Language] | None = None,
        classifier: Classifier = classify_file,
    ) -> None:
        """Create a service over ``strategy``.

        Args:
            strategy: Strategy producing candidate paths per language.
            languages: Languages to search; defaults to every language with glob patterns.
            classifier: Function assigning the final language of each file.
        """

        self._strategy = strategy
        self._languages = tuple(languages) if languages is not None else tuple(LANGUAGE_PATTERNS)
        self._classifier = classifier

    @property
    def strategy(self) -> DiscoveryStrategy:
        return self._strategy

    def run(self, config: FileDiscoveryConfig, root: Path) -> list[Path]:
        """Execute the strategy for each language and de-duplicate discovered paths.

        Args:
            config: Discovery configuration.
            root: Directory to search.

        Returns:
            list[Path]: Unique resolved paths in discovery order.

        Raises:
            DiscoveryError: If the root is invalid or the strategy fails.
        """

        resolved_root = validate_root(root)
        results: list[Path] = []
        seen: set[Path] = set()
        for language in self._languages:
            for path in self._strategy.discover(config, resolved_root, language):
                resolved = path.resolve()
                if resolved in seen:
                    continue
                seen.add(resolved)
                results.append(resolved)
        return results

    def tasks(self, config: FileDiscoveryConfig, root: Path) -> list[FileTask]:
        """Return one :class:`FileTask` per unique discovered file.

        The task language comes from the classifier, so a shebang can
        override the extension that caused the file to be found.
        """

        return [FileTask(path=path, language=self._classifier(path)) for path in self.run(config, root)]


__all__ = [
    "Classifier",
    "DiscoveryError",
    "DiscoveryService",
    "DiscoveryStrategy",
    "validate_root",
]
