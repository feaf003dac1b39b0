# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for language adapters, tool resolution and the fix session."""

import json
from pathlib import Path

import pytest
from fakes import FakeToolbox, make_config

from codefixer.adapters import (
    AdapterContext,
    AdapterRegistry,
    FixSession,
    NullAdapter,
    ToolResolver,
    build_default_registry,
    count_json_array,
    count_matching_lines,
)
from codefixer.adapters.compiled import CppAdapter, GoAdapter, RustAdapter, find_crate_root
from codefixer.adapters.data import JsonAdapter, YamlAdapter, repair_json
from codefixer.adapters.javascript import JavaScriptAdapter, count_eslint_problems
from codefixer.adapters.python import PythonAdapter
from codefixer.adapters.shell import ShellAdapter
from codefixer.config import Config
from codefixer.constants import Language


def _config(tmp_path: Path, **execution: object) -> Config:
    return make_config(tmp_path / "state", execution=dict(execution))


def _context(
    project: Path,
    toolbox: FakeToolbox,
    config: Config,
    *,
    answers: list[bool] | None = None,
) -> AdapterContext:
    prompter = None
    if answers is not None:
        remaining = list(answers)

        def prompter(path: Path) -> bool:
            return remaining.pop(0)

    return AdapterContext.from_config(config, project, runner=toolbox.runner, which=toolbox.which, prompter=prompter)


def _backups(config: Config) -> list[Path]:
    directory = config.paths.backups
    return sorted(directory.iterdir()) if directory.exists() else []


def _source(project: Path, name: str, text: str = "x = 1\n") -> Path:
    path = project / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


# Tool resolution -----------------------------------------------------------


def test_resolver_prefers_project_local_bin(project: Path, toolbox: FakeToolbox) -> None:
    local = project / "node_modules" / ".bin" / "eslint"
    local.parent.mkdir(parents=True)
    local.write_text("#!/bin/sh\n", encoding="utf-8")
    toolbox.install("eslint")

    resolver = ToolResolver(root=project, which=toolbox.which)

    assert resolver.resolve("eslint") == (str(local),)


def test_resolver_falls_back_to_path(project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("pylint")
    resolver = ToolResolver(root=project, which=toolbox.which)

    assert resolver.resolve("pylint") == ("/fake/bin/pylint",)
    assert resolver.resolve("black") is None
    assert not resolver.available("black")


def test_resolver_uses_override_command(project: Path, toolbox: FakeToolbox) -> None:
    wrapper = project / "bin" / "black-wrapper"
    wrapper.parent.mkdir()
    wrapper.write_text("#!/bin/sh\n", encoding="utf-8")
    toolbox.install("black")

    resolver = ToolResolver(overrides={"black": f"{wrapper} --fast"}, root=project, which=toolbox.which)

    assert resolver.resolve("black") == (str(wrapper), "--fast")


def test_resolver_override_missing_disables_tool(
    project: Path,
    toolbox: FakeToolbox,
    caplog: pytest.LogCaptureFixture,
) -> None:
    toolbox.install("black")
    resolver = ToolResolver(overrides={"black": "/nowhere/black"}, root=project, which=toolbox.which)

    with caplog.at_level("WARNING", logger="codefixer"):
        assert resolver.resolve("black") is None
    assert "Override for black not found" in caplog.text


def test_resolver_rejects_unparseable_override(project: Path, toolbox: FakeToolbox) -> None:
    resolver = ToolResolver(overrides={"black": "black 'unterminated"}, root=project, which=toolbox.which)

    assert resolver.resolve("black") is None


def test_resolver_override_by_name_goes_through_path(project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("ruff")
    resolver = ToolResolver(overrides={"black": "ruff format"}, root=project, which=toolbox.which)

    assert resolver.resolve("black") == ("/fake/bin/ruff", "format")


def test_context_resolver_uses_configured_tools(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("ruff")
    toolbox.install("isort")
    config = make_config(tmp_path / "state", tools={"black": "ruff format", "isort": "   "})

    context = AdapterContext.from_config(config, project, runner=toolbox.runner, which=toolbox.which)

    assert context.resolver.resolve("black") == ("/fake/bin/ruff", "format")
    assert context.resolver.resolve("isort") == ("/fake/bin/isort",)


# Output parsing ------------------------------------------------------------


def test_count_helpers(caplog: pytest.LogCaptureFixture) -> None:
    assert count_json_array('[{"a": 1}, {"b": 2}]', tool="pylint") == 2
    assert count_json_array("", tool="pylint") == 0
    assert count_json_array('{"not": "a list"}', tool="pylint") == 0
    with caplog.at_level("WARNING", logger="codefixer"):
        assert count_json_array("Traceback: boom", tool="pylint") == 0
    assert "Could not parse pylint output" in caplog.text
    assert count_matching_lines("a [ERROR] x\nb ok\nc warning y\n", ("error", "warning")) == 2


def test_count_eslint_problems() -> None:
    assert count_eslint_problems('[{"errorCount": 2, "warningCount": 3}]') == 5
    assert count_eslint_problems('[{"errorCount": 0}]') == 0
    assert count_eslint_problems("[]") == 0
    assert count_eslint_problems("not json") == 0


# Python --------------------------------------------------------------------


def test_python_check_only(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("pylint", returncode=16, stdout=json.dumps([{"msg": "a"}, {"msg": "b"}, {"msg": "c"}]))
    toolbox.install("isort")
    toolbox.install("black")
    source = _source(project, "a.py")
    config = _config(tmp_path)

    result = PythonAdapter().process(source, Language.PYTHON, _context(project, toolbox, config))

    assert (result.issues, result.fixed) == (3, 0)
    assert toolbox.tools_called() == ["pylint"]
    assert _backups(config) == []


def test_python_fix_runs_isort_then_black_with_one_backup(
    tmp_path: Path,
    project: Path,
    toolbox: FakeToolbox,
) -> None:
    toolbox.install("pylint", stdout="[]")
    toolbox.install("isort")
    toolbox.install("black")
    source = _source(project, "a.py")
    config = _config(tmp_path, auto_fix=True)

    result = PythonAdapter().process(source, Language.PYTHON, _context(project, toolbox, config))

    assert result.model_dump(mode="json") == {"file": str(source), "lang": "python", "issues": 0, "fixed": 2}
    assert toolbox.tools_called() == ["pylint", "isort", "black"]
    backups = _backups(config)
    assert len(backups) == 1
    assert backups[0].read_text(encoding="utf-8") == "x = 1\n"


def test_dry_run_never_fixes_or_backs_up(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("pylint", stdout='[{"msg": "a"}]')
    toolbox.install("isort")
    toolbox.install("black")
    source = _source(project, "a.py")
    config = _config(tmp_path, auto_fix=True, dry_run=True)

    result = PythonAdapter().process(source, Language.PYTHON, _context(project, toolbox, config))

    assert (result.issues, result.fixed) == (1, 0)
    assert toolbox.tools_called() == ["pylint"]
    assert _backups(config) == []


def test_missing_tools_yield_zero(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    source = _source(project, "a.py")
    config = _config(tmp_path, auto_fix=True)

    result = PythonAdapter().process(source, Language.PYTHON, _context(project, toolbox, config))

    assert (result.issues, result.fixed) == (0, 0)
    assert toolbox.calls == []
    assert _backups(config) == []


def test_failed_fixer_is_not_counted(
    tmp_path: Path,
    project: Path,
    toolbox: FakeToolbox,
    caplog: pytest.LogCaptureFixture,
) -> None:
    toolbox.install("pylint", stdout="[]")
    toolbox.install("isort", returncode=1, stderr="boom")
    toolbox.install("black")
    source = _source(project, "a.py")
    config = _config(tmp_path, auto_fix=True)

    with caplog.at_level("WARNING", logger="codefixer"):
        result = PythonAdapter().process(source, Language.PYTHON, _context(project, toolbox, config))

    assert result.fixed == 1
    assert "isort failed" in caplog.text


def test_backups_can_be_disabled(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("black")
    source = _source(project, "a.py")
    config = _config(tmp_path, auto_fix=True, backup_enabled=False)

    result = PythonAdapter().process(source, Language.PYTHON, _context(project, toolbox, config))

    assert result.fixed == 1
    assert _backups(config) == []


# Fix session ---------------------------------------------------------------


def test_prompt_declined_skips_fixers_and_backup(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("pylint", stdout='[{"msg": "a"}]')
    toolbox.install("isort")
    toolbox.install("black")
    source = _source(project, "a.py")
    config = _config(tmp_path, auto_fix=True, prompt=True)

    result = PythonAdapter().process(source, Language.PYTHON, _context(project, toolbox, config, answers=[False]))

    assert (result.issues, result.fixed) == (1, 0)
    assert toolbox.tools_called() == ["pylint"]
    assert _backups(config) == []


def test_prompt_is_asked_once_per_file(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("isort")
    toolbox.install("black")
    source = _source(project, "a.py")
    config = _config(tmp_path, auto_fix=True, prompt=True)
    asked: list[Path] = []

    def prompter(path: Path) -> bool:
        asked.append(path)
        return True

    context = AdapterContext.from_config(config, project, runner=toolbox.runner, which=toolbox.which, prompter=prompter)
    result = PythonAdapter().process(source, Language.PYTHON, context)

    assert result.fixed == 2
    assert asked == [source]
    assert len(_backups(config)) == 1


def test_session_without_available_fixer_asks_nothing(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    source = _source(project, "a.py")
    config = _config(tmp_path, auto_fix=True, prompt=True)
    context = _context(project, toolbox, config, answers=[])
    session = FixSession(path=source, context=context)

    assert session.run_fixer("black", [str(source)]) == 0
    assert _backups(config) == []


def test_backup_failure_aborts_fix(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("black")
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    source = _source(project, "a.py")
    config = make_config(
        tmp_path / "state",
        execution={"auto_fix": True},
        paths={"base_dir": tmp_path / "state", "backup_dir": blocker / "backups"},
    )

    session = FixSession(path=source, context=_context(project, toolbox, config))

    assert session.run_fixer("black", [str(source)]) == 0
    assert toolbox.calls == []


# JavaScript / TypeScript ---------------------------------------------------


def test_javascript_adapter(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("eslint", returncode=1, stdout=json.dumps([{"errorCount": 1, "warningCount": 2}]))
    toolbox.respond_to_flag("eslint", "--fix")
    toolbox.install("prettier")
    source = _source(project, "b.ts", "let a = 1\n")
    config = _config(tmp_path, auto_fix=True)

    result = JavaScriptAdapter().process(source, Language.TYPESCRIPT, _context(project, toolbox, config))

    assert (result.issues, result.fixed, result.lang) == (3, 2, Language.TYPESCRIPT)
    assert toolbox.tools_called() == ["eslint", "eslint", "prettier"]
    assert toolbox.calls[1][1:] == ["--fix", str(source)]
    assert set(toolbox.cwds) == {project}


def test_javascript_failed_eslint_fix_is_not_counted(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("eslint", returncode=1, stdout=json.dumps([{"errorCount": 1, "warningCount": 0}]))
    toolbox.respond_to_flag("eslint", "--fix", returncode=1)
    toolbox.install("prettier")
    source = _source(project, "b.js", "let a = 1\n")
    config = _config(tmp_path, auto_fix=True)

    result = JavaScriptAdapter().process(source, Language.JAVASCRIPT, _context(project, toolbox, config))

    assert (result.issues, result.fixed) == (1, 1)
    assert toolbox.tools_called() == ["eslint", "eslint", "prettier"]


def test_javascript_clean_file_skips_eslint_fix(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("eslint", stdout=json.dumps([{"errorCount": 0, "warningCount": 0}]))
    toolbox.install("prettier")
    source = _source(project, "b.js", "let a = 1;\n")
    config = _config(tmp_path, auto_fix=True)

    result = JavaScriptAdapter().process(source, Language.JAVASCRIPT, _context(project, toolbox, config))

    assert (result.issues, result.fixed) == (0, 1)
    assert toolbox.tools_called() == ["eslint", "prettier"]


# Shell ---------------------------------------------------------------------


def test_shell_formatting_requires_experimental_flag(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("shellcheck", returncode=1, stdout='[{"code": 2086}]')
    toolbox.install("shfmt")
    source = _source(project, "run.sh", "echo $1\n")

    plain = _config(tmp_path, auto_fix=True)
    result = ShellAdapter().process(source, Language.SHELL, _context(project, toolbox, plain))
    assert (result.issues, result.fixed) == (1, 0)
    assert "shfmt" not in toolbox.tools_called()

    experimental = _config(tmp_path, auto_fix=True, experimental_fixes=True)
    result = ShellAdapter().process(source, Language.SHELL, _context(project, toolbox, experimental))
    assert result.fixed == 1
    assert toolbox.calls[-1][1:] == ["-w", str(source)]


def test_shell_clean_script_is_not_reformatted(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("shellcheck", stdout="[]")
    toolbox.install("shfmt")
    source = _source(project, "run.sh", 'echo "$1"\n')
    config = _config(tmp_path, auto_fix=True, experimental_fixes=True)

    result = ShellAdapter().process(source, Language.SHELL, _context(project, toolbox, config))

    assert (result.issues, result.fixed) == (0, 0)
    assert toolbox.tools_called() == ["shellcheck"]


# JSON / YAML ---------------------------------------------------------------


def test_repair_json_strips_comments_and_trailing_commas() -> None:
    broken = '{\n  // comment\n  "url": "http://example.com/*x*/",\n  "items": [1, 2,],\n  /* block */ "ok": true,\n}\n'

    repaired = repair_json(broken)

    assert repaired is not None
    assert json.loads(repaired) == {"url": "http://example.com/*x*/", "items": [1, 2], "ok": True}
    assert repaired.endswith("}\n")
    assert '\n  "url"' in repaired


def test_repair_json_gives_up_on_garbage() -> None:
    assert repair_json("{not json at all") is None


def test_json_adapter_repairs_file(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    source = _source(project, "bad.json", '{"a": 1,}')
    config = _config(tmp_path, auto_fix=True)

    result = JsonAdapter().process(source, Language.JSON, _context(project, toolbox, config))

    assert (result.issues, result.fixed) == (1, 1)
    assert json.loads(source.read_text(encoding="utf-8")) == {"a": 1}
    backups = _backups(config)
    assert [path.read_text(encoding="utf-8") for path in backups] == ['{"a": 1,}']


def test_json_adapter_leaves_unrepairable_file(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    source = _source(project, "bad.json", "{oops")
    config = _config(tmp_path, auto_fix=True)

    result = JsonAdapter().process(source, Language.JSON, _context(project, toolbox, config))

    assert (result.issues, result.fixed) == (1, 0)
    assert source.read_text(encoding="utf-8") == "{oops"
    assert _backups(config) == []


def test_json_adapter_valid_file(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    source = _source(project, "good.json", '{"a": [1, 2]}\n')
    config = _config(tmp_path, auto_fix=True)

    result = JsonAdapter().process(source, Language.JSON, _context(project, toolbox, config))

    assert (result.issues, result.fixed) == (0, 0)
    assert source.read_text(encoding="utf-8") == '{"a": [1, 2]}\n'


def test_yaml_adapter(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install(
        "yamllint",
        returncode=1,
        stdout="c.yml:1:1: [warning] missing document start\nc.yml:3:5: [error] syntax error\n",
    )
    toolbox.install("prettier")
    source = _source(project, "c.yml", "a: 1\n")
    config = _config(tmp_path, auto_fix=True)

    result = YamlAdapter().process(source, Language.YAML, _context(project, toolbox, config))

    assert (result.issues, result.fixed) == (2, 1)
    assert toolbox.calls[-1][1:] == ["--write", "--parser", "yaml", str(source)]


# Compiled languages --------------------------------------------------------


def test_go_adapter_counts_failing_checkers(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("go", returncode=1)
    toolbox.install("staticcheck")
    toolbox.install("gofmt")
    source = _source(project, "cmd/main.go", "package main\n")
    config = _config(tmp_path, auto_fix=True)

    result = GoAdapter().process(source, Language.GO, _context(project, toolbox, config))

    assert (result.issues, result.fixed) == (1, 1)
    assert toolbox.cwds[0] == source.parent


def test_rust_adapter_runs_clippy_in_crate(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("cargo", returncode=101)
    source = _source(project, "crate/src/lib.rs", "fn main() {}\n")
    (project / "crate" / "Cargo.toml").write_text("[package]\n", encoding="utf-8")

    result = RustAdapter().process(source, Language.RUST, _context(project, toolbox, _config(tmp_path)))

    assert result.issues == 1
    assert toolbox.calls[0][1:] == ["clippy", "--quiet"]
    assert toolbox.cwds[0] == (project / "crate").resolve()


def test_rust_adapter_without_crate(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install("cargo", returncode=101)
    source = _source(project, "loose.rs", "fn main() {}\n")

    assert find_crate_root(source) is None
    result = RustAdapter().process(source, Language.RUST, _context(project, toolbox, _config(tmp_path)))
    assert result.issues == 0
    assert toolbox.calls == []


def test_cpp_adapter_reads_stderr(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    toolbox.install(
        "cppcheck",
        stderr="[d.c:1]: (error) Null pointer\n[d.c:2]: (warning) Unused\nChecking d.c ...\n",
    )
    toolbox.install("clang-format")
    source = _source(project, "d.c", "int main(void) { return 0; }\n")
    config = _config(tmp_path, auto_fix=True)

    result = CppAdapter().process(source, Language.CPP, _context(project, toolbox, config))

    assert (result.issues, result.fixed) == (2, 1)
    assert toolbox.calls[-1][1:] == ["-i", str(source)]


# Registry ------------------------------------------------------------------


def test_default_registry_covers_tooled_languages() -> None:
    registry = build_default_registry()

    assert isinstance(registry.adapter_for(Language.TYPESCRIPT), JavaScriptAdapter)
    assert registry.adapter_for(Language.JAVASCRIPT) is registry.adapter_for(Language.TYPESCRIPT)
    assert isinstance(registry.adapter_for(Language.MARKDOWN), NullAdapter)
    assert Language.MARKDOWN not in registry
    assert set(registry) == {
        Language.SHELL,
        Language.PYTHON,
        Language.JAVASCRIPT,
        Language.TYPESCRIPT,
        Language.JSON,
        Language.YAML,
        Language.GO,
        Language.RUST,
        Language.CPP,
    }


def test_registry_rejects_duplicate_language() -> None:
    registry = AdapterRegistry()
    registry.register(PythonAdapter())

    with pytest.raises(ValueError, match="already registered"):
        registry.register(PythonAdapter())
    assert len(registry) == 1


def test_null_adapter_reports_nothing(tmp_path: Path, project: Path, toolbox: FakeToolbox) -> None:
    source = _source(project, "README.md", "# hi\n")
    config = _config(tmp_path, auto_fix=True)

    result = NullAdapter().process(source, Language.MARKDOWN, _context(project, toolbox, config))

    assert (result.issues, result.fixed) == (0, 0)
