# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

from typing import Annotated

import typer

from ..constants import VERSION
from .run import run_command
from .worker import worker_command

app = typer.Typer(
    name="codefixer",
    help="Polyglot code checker and fixer.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"codefixer {VERSION}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Polyglot code checker and fixer."""


@app.command("version")
def version_command() -> None:
    """Show the version and exit."""

    typer.echo(f"codefixer {VERSION}")


app.command("run")(run_command)
app.command("worker", hidden=True)(worker_command)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main"]
