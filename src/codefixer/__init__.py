# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""codefixer: classify source files, run per-language linters and fixers, aggregate results."""

from __future__ import annotations

from .constants import VERSION, Language
from .languages import classify_file, detect_language
from .models import FileTask, ProcessResult, Statistics

__version__ = VERSION

__all__ = [
    "FileTask",
    "Language",
    "ProcessResult",
    "Statistics",
    "VERSION",
    "__version__",
    "classify_file",
    "detect_language",
]
