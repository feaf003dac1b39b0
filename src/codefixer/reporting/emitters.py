# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Report emitters writing run results to JSON and Markdown files."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from ..constants import VERSION
from ..orchestration import RunResult

REPORT_STEM = "codefixer_report"


@dataclass(frozen=True, slots=True)
class ReportPaths:
    """Locations of the generated report files."""

    json: Path
    markdown: Path


def build_report_payload(result: RunResult, *, generated: datetime) -> dict[str, Any]:
    """Return the JSON-compatible report document for ``result``."""

    payload: dict[str, Any] = {
        "version": VERSION,
        "generated": generated.isoformat(timespec="seconds"),
        "root": str(result.root),
        "mode": result.mode.value,
    }
    payload.update(result.statistics.to_dict())
    payload["skipped"] = [entry.to_dict() for entry in result.skipped]
    return payload


def write_json_report(result: RunResult, path: Path, *, generated: datetime | None = None) -> None:
    """Write a JSON report summarising the run.

    Args:
        result: Completed run result to serialise.
        path: Destination path that receives the JSON payload.
        generated: Timestamp recorded in the report; defaults to now.
    """

    payload = build_report_payload(result, generated=generated or datetime.now())
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def render_markdown_report(result: RunResult, *, generated: datetime) -> str:
    """Return the Markdown report for ``result``."""

    stats = result.statistics
    lines = [
        "# CodeFixer Report",
        "",
        f"**Generated:** {generated.isoformat(sep=' ', timespec='seconds')}",
        f"**Version:** {VERSION}",
        f"**Files:** {stats.total_files}",
        f"**Issues Found:** {stats.total_issues}",
        f"**Issues Fixed:** {stats.total_fixed}",
        "",
        "## By Language",
        "",
        "| Language | Files | Issues | Fixed |",
        "|---|---|---|---|",
    ]
    for language, counts in sorted(stats.by_language.items()):
        lines.append(f"| {language.value} | {counts.files} | {counts.issues} | {counts.fixed} |")
    flagged = sorted((path, issues) for path, issues in stats.file_issues.items() if issues > 0)
    if flagged:
        lines.extend(["", "## Files With Issues", "", "| File | Issues | Fixed |", "|---|---|---|"])
        for path, issues in flagged:
            lines.append(f"| `{path}` | {issues} | {stats.file_fixed.get(path, 0)} |")
    if result.skipped:
        lines.extend(["", "## Skipped", ""])
        lines.extend(f"- `{entry.path}`: {entry.reason}" for entry in result.skipped)
    return "\n".join(lines) + "\n"


def write_markdown_report(result: RunResult, path: Path, *, generated: datetime | None = None) -> None:
    """Write a Markdown report summarising the run."""

    path.write_text(render_markdown_report(result, generated=generated or datetime.now()), encoding="utf-8")


def write_reports(
    result: RunResult,
    directory: Path,
    *,
    clock: Callable[[], datetime] = datetime.now,
) -> ReportPaths:
    """Write both report formats into ``directory``.

    Args:
        result: Completed run result.
        directory: Directory receiving the reports; created when missing.
        clock: Source of the report timestamp.

    Returns:
        ReportPaths: Paths of the written files.
    """

    directory.mkdir(parents=True, exist_ok=True)
    generated = clock()
    stem = f"{REPORT_STEM}_{generated.strftime('%Y%m%d_%H%M%S')}"
    paths = ReportPaths(json=directory / f"{stem}.json", markdown=directory / f"{stem}.md")
    write_json_report(result, paths.json, generated=generated)
    write_markdown_report(result, paths.markdown, generated=generated)
    return paths


__all__ = [
    "ReportPaths",
    "build_report_payload",
    "render_markdown_report",
    "write_json_report",
    "write_markdown_report",
    "write_reports",
]
