# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across codefixer modules."""

from __future__ import annotations

from enum import Enum
from typing import Final

VERSION: Final[str] = "6.0.0"
APP_DIR_NAME: Final[str] = ".codefixer"
IGNORE_FILE_NAME: Final[str] = ".codefixerignore"
GITIGNORE_FILE_NAME: Final[str] = ".gitignore"


class Language(str, Enum):
    """Language tags understood by the classifier and adapter registry."""

    SHELL = "shell"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    CSS = "css"
    JSON = "json"
    YAML = "yaml"
    MARKDOWN = "markdown"
    GO = "go"
    RUST = "rust"
    RUBY = "ruby"
    JAVA = "java"
    CPP = "cpp"
    DOCKERFILE = "dockerfile"
    MAKEFILE = "makefile"
    UNKNOWN = "unknown"


LANGUAGE_EXTENSIONS: Final[dict[Language, tuple[str, ...]]] = {
    Language.SHELL: (".sh", ".bash", ".zsh", ".fish"),
    Language.PYTHON: (".py", ".pyw", ".py3"),
    Language.JAVASCRIPT: (".js", ".jsx", ".mjs"),
    Language.TYPESCRIPT: (".ts", ".tsx"),
    Language.CSS: (".css", ".scss", ".sass", ".less"),
    Language.JSON: (".json", ".jsonc"),
    Language.YAML: (".yml", ".yaml"),
    Language.MARKDOWN: (".md", ".markdown", ".mdown"),
    Language.GO: (".go",),
    Language.RUST: (".rs",),
    Language.RUBY: (".rb", ".rake"),
    Language.JAVA: (".java",),
    Language.CPP: (".cpp", ".cxx", ".cc", ".c", ".h", ".hpp", ".hxx"),
}

# Glob patterns consumed by discovery; derived from the extension table.
LANGUAGE_PATTERNS: Final[dict[Language, tuple[str, ...]]] = {
    language: tuple(f"*{suffix}" for suffix in suffixes) for language, suffixes in LANGUAGE_EXTENSIONS.items()
}

EXTENSION_LANGUAGES: Final[dict[str, Language]] = {
    suffix: language for language, suffixes in LANGUAGE_EXTENSIONS.items() for suffix in suffixes
}

SPECIAL_FILENAME_PREFIXES: Final[tuple[tuple[str, Language], ...]] = (
    ("dockerfile", Language.DOCKERFILE),
    ("makefile", Language.MAKEFILE),
    ("rakefile", Language.RUBY),
)

SHEBANG_INTERPRETERS: Final[dict[str, Language]] = {
    "bash": Language.SHELL,
    "sh": Language.SHELL,
    "python": Language.PYTHON,
    "node": Language.JAVASCRIPT,
}

JUNK_SUFFIXES: Final[tuple[str, ...]] = (".bak", ".backup", ".tmp", ".log", ".min.js", ".min.css")

ALWAYS_EXCLUDE_DIRS: Final[frozenset[str]] = frozenset({"node_modules", ".git", "__pycache__", ".cache"})

SENSITIVE_ROOTS: Final[tuple[str, ...]] = ("/etc/", "/proc/", "/sys/", "/dev/", "/boot/", "/root/")

SUSPICIOUS_TOKENS: Final[tuple[str, ...]] = ("eval", "exec", "system", "shell_exec", "passthru")

DEFAULT_MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024
DEFAULT_MAX_DEPTH: Final[int] = 5
DEFAULT_PARALLEL_JOBS: Final[int] = 4
BINARY_SNIFF_BYTES: Final[int] = 8192
PROMPT_TIMEOUT_SECONDS: Final[float] = 30.0

PROJECT_LOCAL_BIN_DIRS: Final[tuple[str, ...]] = ("node_modules/.bin", ".venv/bin")

__all__ = [
    "ALWAYS_EXCLUDE_DIRS",
    "APP_DIR_NAME",
    "BINARY_SNIFF_BYTES",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_MAX_FILE_SIZE",
    "DEFAULT_PARALLEL_JOBS",
    "EXTENSION_LANGUAGES",
    "GITIGNORE_FILE_NAME",
    "IGNORE_FILE_NAME",
    "JUNK_SUFFIXES",
    "LANGUAGE_EXTENSIONS",
    "LANGUAGE_PATTERNS",
    "Language",
    "PROJECT_LOCAL_BIN_DIRS",
    "PROMPT_TIMEOUT_SECONDS",
    "SENSITIVE_ROOTS",
    "SHEBANG_INTERPRETERS",
    "SPECIAL_FILENAME_PREFIXES",
    "SUSPICIOUS_TOKENS",
    "VERSION",
]
