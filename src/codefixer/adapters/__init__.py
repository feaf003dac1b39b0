# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-language adapters wrapping external linters and formatters."""

from __future__ import annotations

from .base import (
    AdapterContext,
    FixSession,
    LanguageAdapter,
    NullAdapter,
    ToolResolver,
    ToolRunner,
    count_json_array,
    count_matching_lines,
    default_tool_runner,
)
from .registry import AdapterRegistry, build_default_registry, default_registry

__all__ = [
    "AdapterContext",
    "AdapterRegistry",
    "FixSession",
    "LanguageAdapter",
    "NullAdapter",
    "ToolResolver",
    "ToolRunner",
    "build_default_registry",
    "count_json_array",
    "count_matching_lines",
    "default_registry",
    "default_tool_runner",
]
