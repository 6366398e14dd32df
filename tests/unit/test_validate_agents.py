#!/usr/bin/env python3
"""Tests for validate_agents.py - agent frontmatter checks."""

from pathlib import Path
from typing import Callable

from conftest import write_file
from validate_agents import validate_agents


class TestAgentFrontmatter:
    """Required frontmatter fields on agent files."""

    def test_well_formed_agent_has_no_issues(self, plugins_dir: Path, make_plugin: Callable[..., Path]) -> None:
        """An agent with model and tools yields zero issues and is counted."""
        root = make_plugin("alpha")
        content = "---\nname: reviewer\nmodel: sonnet\ntools: Read, Grep\n---\nBody\n"
        write_file(root / "agents" / "reviewer.md", content)

        run = validate_agents(plugins_dir)

        assert run.issues == []
        assert run.counted("agents") == 1
        assert run.exit_code == 0

    def test_missing_frontmatter_reports_exactly_one_issue(
        self, plugins_dir: Path, make_plugin: Callable[..., Path]
    ) -> None:
        """No header block means one 'Missing frontmatter' and no field issues."""
        root = make_plugin("alpha")
        write_file(root / "agents" / "plain.md", "# Plain agent\n\nNo header here.\n")

        run = validate_agents(plugins_dir)

        assert run.messages() == ["ERROR: alpha/agents/plain.md - Missing frontmatter"]
        assert run.counted("agents") == 0

    def test_missing_model_and_tools_reported_separately(
        self, plugins_dir: Path, make_plugin: Callable[..., Path]
    ) -> None:
        """Each absent or empty required field is its own issue."""
        root = make_plugin("alpha")
        write_file(root / "agents" / "partial.md", "---\nname: partial\nmodel:\n---\nBody\n")

        run = validate_agents(plugins_dir)

        assert set(run.messages()) == {
            "ERROR: alpha/agents/partial.md - Missing required field: model",
            "ERROR: alpha/agents/partial.md - Missing required field: tools",
        }
        assert run.counted("agents") == 1

    def test_empty_frontmatter_is_not_missing(self, plugins_dir: Path, make_plugin: Callable[..., Path]) -> None:
        """An empty header block reports missing fields, not missing frontmatter."""
        root = make_plugin("alpha")
        write_file(root / "agents" / "empty.md", "---\n---\nBody\n")

        run = validate_agents(plugins_dir)

        assert len(run.issues) == 2
        assert all("Missing required field" in issue.message for issue in run.issues)

    def test_non_markdown_and_nested_files_ignored(
        self, plugins_dir: Path, make_plugin: Callable[..., Path]
    ) -> None:
        """Only top-level .md files in agents/ are agent descriptors."""
        root = make_plugin("alpha")
        write_file(root / "agents" / "notes.txt", "not an agent")
        write_file(root / "agents" / "drafts" / "wip.md", "no frontmatter")

        run = validate_agents(plugins_dir)

        assert run.issues == []
        assert run.counted("agents") == 0


class TestAgentRun:
    """Run-level behaviour across plugins."""

    def test_issues_isolated_per_file(self, plugins_dir: Path, make_plugin: Callable[..., Path]) -> None:
        """A broken agent in one plugin does not hide results from another."""
        write_file(make_plugin("alpha") / "agents" / "bad.md", "nothing")
        write_file(make_plugin("beta") / "agents" / "good.md", "---\nmodel: opus\ntools: Bash\n---\n")

        run = validate_agents(plugins_dir)

        assert [issue.plugin for issue in run.issues] == ["alpha"]
        assert run.counted("agents") == 1
        assert run.plugin_count == 2

    def test_repeated_runs_are_identical(self, plugins_dir: Path, make_plugin: Callable[..., Path]) -> None:
        """Validating an unchanged tree twice yields the same issue set."""
        root = make_plugin("alpha")
        write_file(root / "agents" / "a.md", "nothing")
        write_file(root / "agents" / "b.md", "---\nmodel: opus\n---\n")

        assert validate_agents(plugins_dir).issue_set() == validate_agents(plugins_dir).issue_set()
