#!/usr/bin/env python3
"""Tests for mpv_validation_common.py - run aggregation, discovery and reporting."""

import io
from pathlib import Path
from typing import Callable

from conftest import write_file
from mpv_validation_common import (
    EXIT_ERROR,
    EXIT_OK,
    ValidationIssue,
    ValidationRun,
    discover_plugins,
    format_issue,
    print_issues,
    resolve_declared_path,
)


class TestValidationIssue:
    def test_location_with_kind(self) -> None:
        issue = ValidationIssue("alpha", "agents", "a.md", "Missing frontmatter")
        assert issue.format() == "ERROR: alpha/agents/a.md - Missing frontmatter"
        assert issue.severity == "error"

    def test_location_without_kind(self) -> None:
        issue = ValidationIssue("alpha", "", "plugin.json", "Missing required field: name")
        assert issue.location == "alpha/plugin.json"

    def test_colored_label_keeps_message(self) -> None:
        issue = ValidationIssue("alpha", "rules", "r.md", "Empty rule file")
        colored = format_issue(issue, color=True)
        assert colored.startswith("\033[91mERROR:\033[0m")
        assert colored.endswith("alpha/rules/r.md - Empty rule file")


class TestValidationRun:
    def test_fresh_run_is_clean(self) -> None:
        run = ValidationRun()
        assert not run.has_errors
        assert run.exit_code == EXIT_OK

    def test_any_issue_fails_run(self) -> None:
        run = ValidationRun()
        run.error("alpha", "agents", "a.md", "Missing frontmatter")
        assert run.exit_code == EXIT_ERROR

    def test_merge_combines_issues_counts_and_plugins(self) -> None:
        first = ValidationRun(plugins=["alpha"])
        first.count("agents", 2)
        second = ValidationRun(plugins=["alpha", "beta"])
        second.count("agents")
        second.error("beta", "agents", "b.md", "Missing frontmatter")

        first.merge(second)

        assert first.counted("agents") == 3
        assert first.plugins == ["alpha", "beta"]
        assert len(first.issues) == 1

    def test_print_issues_writes_plain_lines_to_non_tty(self) -> None:
        run = ValidationRun()
        run.error("alpha", "commands", "c.md", "Empty command file")
        stream = io.StringIO()

        print_issues(run, stream)

        assert stream.getvalue() == "ERROR: alpha/commands/c.md - Empty command file\n"


class TestDiscovery:
    def test_only_directories_are_plugins(self, plugins_dir: Path, make_plugin: Callable[..., Path]) -> None:
        make_plugin("alpha")
        make_plugin("beta")
        write_file(plugins_dir / "README.md", "index")

        assert [plugin.name for plugin in discover_plugins(plugins_dir)] == ["alpha", "beta"]

    def test_missing_plugins_dir(self, tmp_path: Path) -> None:
        assert discover_plugins(tmp_path / "nope") == []


class TestResolveDeclaredPath:
    def test_resolves_relative_to_base(self, tmp_path: Path) -> None:
        write_file(tmp_path / "agents" / "a.md", "x")
        assert resolve_declared_path(tmp_path, "./agents/a.md") == tmp_path / "agents" / "a.md"

    def test_dangling_returns_none(self, tmp_path: Path) -> None:
        assert resolve_declared_path(tmp_path, "./agents") is None
