# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Reporting helpers: console summary and report files."""

from __future__ import annotations

from .emitters import (
    ReportPaths,
    build_report_payload,
    render_markdown_report,
    write_json_report,
    write_markdown_report,
    write_reports,
)
from .presenters import create_summary_panel, create_summary_table, emit_summary

__all__ = [
    "ReportPaths",
    "build_report_payload",
    "create_summary_panel",
    "create_summary_table",
    "emit_summary",
    "render_markdown_report",
    "write_json_report",
    "write_markdown_report",
    "write_reports",
]
