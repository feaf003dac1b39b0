# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Admission, backup and confirmation gates applied around file mutation."""

from __future__ import annotations

from .backup import BackupError, BackupStore, backup_name
from .gate import SafetyGate, SafetyVerdict
from .prompt import Prompter, StdinPrompter, is_affirmative, read_answer

__all__ = [
    "BackupError",
    "BackupStore",
    "Prompter",
    "SafetyGate",
    "SafetyVerdict",
    "StdinPrompter",
    "backup_name",
    "is_affirmative",
    "read_answer",
]
