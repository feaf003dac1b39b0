# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support.

Every helper renders to the shared Rich console and mirrors the message to
the ``codefixer`` standard-library logger, which the CLI points at the log
file under ``~/.codefixer/logs``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from rich.rule import Rule
from rich.text import Text

from .console import detect_tty, get_console_manager

LOGGER_NAME: Final[str] = "codefixer"
LOGGER: Final[logging.Logger] = logging.getLogger(LOGGER_NAME)
LOGGER.addHandler(logging.NullHandler())

_FILE_FORMAT: Final[str] = "[%(asctime)s] [%(levelname)s] %(message)s"
_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
) -> None:
    """Render ``msg`` to the console using shared styling helpers.

    Args:
        msg: Message text to print to the console.
        style: Rich style name to apply when colour output is active.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def section(title: str, *, use_color: bool) -> None:
    """Render a section header to delineate console output blocks."""

    console = get_console_manager().get(color=use_color, emoji=True)
    if use_color:
        console.print()
        console.print(Rule(title))
    else:
        console.print(f"\n--- {title} ---")


def info(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit an informational message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    LOGGER.info(msg)
    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit a success message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    LOGGER.info(msg)
    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit a warning message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    LOGGER.warning(msg)
    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit an error message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    LOGGER.error(msg)
    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def debug(msg: str, *, enabled: bool) -> None:
    """Record a debug message, echoing it to the console only when ``enabled``."""

    LOGGER.debug(msg)
    if enabled:
        _print_line(f"[debug] {msg}", style="dim", use_emoji=False)


def configure_log_file(path: Path, *, verbose: bool = False) -> logging.Handler:
    """Attach a file handler mirroring console messages to ``path``.

    Args:
        path: Log file location; parent directories must already exist.
        verbose: When ``True`` debug records are written as well.

    Returns:
        logging.Handler: Installed handler so callers can detach it later.
    """

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATE_FORMAT))
    level = logging.DEBUG if verbose else logging.INFO
    handler.setLevel(level)
    LOGGER.addHandler(handler)
    LOGGER.setLevel(min(LOGGER.level or logging.INFO, level))
    return handler


def detach_log_handler(handler: logging.Handler) -> None:
    """Remove and close a handler installed by :func:`configure_log_file`."""

    LOGGER.removeHandler(handler)
    handler.close()


__all__ = [
    "LOGGER",
    "configure_log_file",
    "debug",
    "detach_log_handler",
    "emoji",
    "fail",
    "info",
    "ok",
    "section",
    "warn",
]
