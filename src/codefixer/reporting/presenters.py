# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rich rendering of run statistics."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..config import OutputConfig
from ..console import get_console_manager
from ..models import Statistics
from ..orchestration import RunResult


def create_summary_table(statistics: Statistics, cfg: OutputConfig) -> Table:
    """Return a table with one row per language plus a totals row.

    Args:
        statistics: Aggregated counters for the run.
        cfg: Output configuration describing formatting preferences.

    Returns:
        Table: Rich table ready to print.
    """

    header_style = "bold cyan" if cfg.color else None
    table = Table(box=box.SIMPLE, header_style=header_style, pad_edge=False, show_footer=False)
    table.add_column("Language", justify="left", no_wrap=True)
    table.add_column("Files", justify="right")
    table.add_column("Issues", justify="right")
    table.add_column("Fixed", justify="right")

    issue_style = "yellow" if cfg.color else None
    fixed_style = "green" if cfg.color else None
    for language, counts in sorted(statistics.by_language.items()):
        table.add_row(
            language.value,
            str(counts.files),
            Text(str(counts.issues), style=issue_style if counts.issues and issue_style else ""),
            Text(str(counts.fixed), style=fixed_style if counts.fixed and fixed_style else ""),
        )
    table.add_section()
    table.add_row(
        Text("total", style="bold" if cfg.color else ""),
        str(statistics.total_files),
        str(statistics.total_issues),
        str(statistics.total_fixed),
    )
    return table


def create_summary_panel(result: RunResult, cfg: OutputConfig) -> Panel:
    """Wrap the summary table in a titled panel."""

    title_text = "summary"
    if cfg.emoji:
        title_text = f"📊 {title_text}"
    title = title_text if not cfg.color else f"[yellow]{title_text}[/yellow]"
    panel = Panel.fit(create_summary_table(result.statistics, cfg), title=title, padding=(0, 1))
    if cfg.color:
        panel.border_style = "yellow"
    return panel


def emit_summary(result: RunResult, cfg: OutputConfig, *, console: Console | None = None) -> None:
    """Print the run summary and any skipped files.

    Args:
        result: Completed run result.
        cfg: Output configuration describing formatting preferences.
        console: Optional console; defaults to the shared console.
    """

    target = console or get_console_manager().get(color=cfg.color, emoji=cfg.emoji)
    target.print(create_summary_panel(result, cfg))
    if result.skipped:
        target.print(Text(f"Skipped {len(result.skipped)} file(s):", style="yellow" if cfg.color else ""))
        for entry in result.skipped:
            target.print(Text(f"  {entry.path}: {entry.reason}"))
    if result.fell_back:
        target.print(Text("Parallel execution fell back to sequential processing."))


__all__ = ["create_summary_panel", "create_summary_table", "emit_summary"]
