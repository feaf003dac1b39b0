# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pre-fix backups written atomically into the per-user backup store."""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Final
from urllib.parse import quote

from ..logging import debug

TIMESTAMP_FORMAT: Final[str] = "%Y%m%d_%H%M%S_%f"


class BackupError(RuntimeError):
    """Raised when a backup copy cannot be written."""


def backup_name(path: Path, root: Path | None, timestamp: datetime) -> str:
    """Return the backup file name for ``path``.

    The root-relative path is percent-encoded so that ``a/x.py`` and
    ``b/x.py`` never collide.

    Args:
        path: File about to be modified.
        root: Project root used to derive the relative path.
        timestamp: Moment the backup is taken.

    Returns:
        str: ``<timestamp>_<quoted relative path>``.
    """

    resolved = path.resolve()
    relative: str
    if root is not None and resolved.is_relative_to(root.resolve()):
        relative = resolved.relative_to(root.resolve()).as_posix()
    else:
        relative = resolved.as_posix().lstrip("/")
    return f"{timestamp.strftime(TIMESTAMP_FORMAT)}_{quote(relative, safe='')}"


class BackupStore:
    """Copy files into the backup directory before their first mutation."""

    def __init__(
        self,
        directory: Path,
        *,
        root: Path | None = None,
        enabled: bool = True,
        dry_run: bool = False,
        verbose: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.directory = directory
        self._root = root
        self._enabled = enabled
        self._dry_run = dry_run
        self._verbose = verbose
        self._clock = clock

    @property
    def active(self) -> bool:
        """Return ``True`` when backups will actually be written."""

        return self._enabled and not self._dry_run

    def backup(self, path: Path) -> Path | None:
        """Copy ``path`` into the store.

        Args:
            path: File about to be modified in place.

        Returns:
            Path | None: Location of the backup, or ``None`` when backups are
            disabled or the run is a dry run.

        Raises:
            BackupError: If the copy cannot be written.
        """

        if not self.active:
            return None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BackupError(f"Cannot create backup directory {self.directory}: {exc}") from exc
        target = self._unique_target(backup_name(path, self._root, self._clock()))
        fd, temp_name = tempfile.mkstemp(prefix=".codefixer-", dir=self.directory)
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "wb") as handle, path.open("rb") as source:
                shutil.copyfileobj(source, handle)
            os.replace(temp_path, target)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            raise BackupError(f"Failed to back up {path}: {exc}") from exc
        debug(f"Backed up {path} to {target}", enabled=self._verbose)
        return target

    def _unique_target(self, name: str) -> Path:
        candidate = self.directory / name
        counter = 1
        while candidate.exists():
            candidate = self.directory / f"{name}.{counter}"
            counter += 1
        return candidate


__all__ = ["BackupError", "BackupStore", "TIMESTAMP_FORMAT", "backup_name"]
