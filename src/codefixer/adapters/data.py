# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapters for data formats: JSON (built in) and YAML (yamllint, prettier)."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from ..constants import Language
from ..logging import warn
from .base import AdapterContext, FixSession, LanguageAdapter, count_matching_lines

YAMLLINT_KEYWORDS = ("[error]", "[warning]")


def _strip_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments that appear outside string literals."""

    out: list[str] = []
    index = 0
    length = len(text)
    in_string = False
    while index < length:
        char = text[index]
        if in_string:
            out.append(char)
            if char == "\\" and index + 1 < length:
                out.append(text[index + 1])
                index += 2
                continue
            if char == '"':
                in_string = False
            index += 1
            continue
        if char == '"':
            in_string = True
        elif text.startswith("//", index):
            newline = text.find("\n", index)
            index = length if newline == -1 else newline
            continue
        elif text.startswith("/*", index):
            end = text.find("*/", index + 2)
            index = length if end == -1 else end + 2
            continue
        out.append(char)
        index += 1
    return "".join(out)


def _strip_trailing_commas(text: str) -> str:
    """Drop commas directly followed (ignoring whitespace) by ``}`` or ``]``."""

    out: list[str] = []
    length = len(text)
    in_string = False
    index = 0
    while index < length:
        char = text[index]
        if in_string:
            out.append(char)
            if char == "\\" and index + 1 < length:
                out.append(text[index + 1])
                index += 2
                continue
            if char == '"':
                in_string = False
            index += 1
            continue
        if char == '"':
            in_string = True
        elif char == ",":
            lookahead = index + 1
            while lookahead < length and text[lookahead].isspace():
                lookahead += 1
            if lookahead < length and text[lookahead] in "}]":
                index += 1
                continue
        out.append(char)
        index += 1
    return "".join(out)


def repair_json(text: str) -> str | None:
    """Return ``text`` normalised into valid, two-space indented JSON.

    Comments and trailing commas are removed before parsing. ``None`` is
    returned when the document is still invalid.
    """

    cleaned = _strip_trailing_commas(_strip_comments(text))
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError:
        return None
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def write_atomic(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` through a temporary file in the same directory."""

    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        mode = path.stat().st_mode & 0o777
        os.chmod(temp_path, mode)
        os.replace(temp_path, path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


class JsonAdapter(LanguageAdapter):
    """Validate JSON with the standard decoder and repair common breakage."""

    languages = (Language.JSON,)

    def check(self, path: Path, context: AdapterContext) -> int:
        try:
            json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return 1
        except OSError as exc:
            warn(f"Cannot read {path}: {exc}")
            return 0
        return 0

    def fix(self, path: Path, session: FixSession, issues: int) -> int:
        if issues == 0:
            return 0
        try:
            original = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            warn(f"Cannot read {path}: {exc}")
            return 0
        repaired = repair_json(original)
        if repaired is None:
            warn(f"Failed to fix JSON: {path}")
            return 0
        if not session.approve():
            return 0
        try:
            write_atomic(path, repaired)
        except OSError as exc:
            warn(f"Failed to write {path}: {exc}")
            return 0
        return 1


class YamlAdapter(LanguageAdapter):
    """Count yamllint findings and reformat with prettier."""

    languages = (Language.YAML,)

    def check(self, path: Path, context: AdapterContext) -> int:
        completed = context.run_tool("yamllint", ["-f", "parsable", str(path)])
        if completed is None:
            return 0
        return count_matching_lines(completed.stdout, YAMLLINT_KEYWORDS)

    def fix(self, path: Path, session: FixSession, issues: int) -> int:
        return session.run_fixer("prettier", ["--write", "--parser", "yaml", str(path)], cwd=session.context.root)


__all__ = ["JsonAdapter", "YamlAdapter", "repair_json", "write_atomic"]
