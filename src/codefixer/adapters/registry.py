# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapter registry keyed by language."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from functools import cache

from ..constants import Language
from .base import LanguageAdapter, NullAdapter
from .compiled import CppAdapter, GoAdapter, RustAdapter
from .data import JsonAdapter, YamlAdapter
from .javascript import JavaScriptAdapter
from .python import PythonAdapter
from .shell import ShellAdapter


class AdapterRegistry(Mapping[Language, LanguageAdapter]):
    """Read-only mapping from language to the adapter that handles it.

    Languages without a registered adapter resolve to a shared
    :class:`NullAdapter` through :meth:`adapter_for`.
    """

    def __init__(self) -> None:
        self._adapters: dict[Language, LanguageAdapter] = {}
        self._fallback = NullAdapter()

    def register(self, adapter: LanguageAdapter) -> None:
        """Register ``adapter`` for each language it declares.

        Raises:
            ValueError: If one of its languages already has an adapter.
        """

        for language in adapter.languages:
            if language in self._adapters:
                raise ValueError(f"Adapter for '{language.value}' already registered")
        for language in adapter.languages:
            self._adapters[language] = adapter

    def adapter_for(self, language: Language) -> LanguageAdapter:
        """Return the adapter for ``language``, falling back to the null adapter."""

        return self._adapters.get(language, self._fallback)

    def __getitem__(self, language: Language) -> LanguageAdapter:
        return self._adapters[language]

    def __iter__(self) -> Iterator[Language]:
        return iter(self._adapters)

    def __len__(self) -> int:
        return len(self._adapters)


def build_default_registry() -> AdapterRegistry:
    """Return a registry populated with every built-in adapter."""

    registry = AdapterRegistry()
    for adapter in (
        ShellAdapter(),
        PythonAdapter(),
        JavaScriptAdapter(),
        JsonAdapter(),
        YamlAdapter(),
        GoAdapter(),
        RustAdapter(),
        CppAdapter(),
    ):
        registry.register(adapter)
    return registry


@cache
def default_registry() -> AdapterRegistry:
    """Return the process-wide registry of built-in adapters."""

    return build_default_registry()


__all__ = ["AdapterRegistry", "build_default_registry", "default_registry"]
