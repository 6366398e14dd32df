#!/usr/bin/env python3
"""
Marketplace Plugin Validation - Agent Validator

Validates that every agent markdown file in plugins/<name>/agents/ carries a
frontmatter block with non-empty `model` and `tools` fields.

Usage:
    uv run python scripts/validate_agents.py

Exit codes:
    0 - All checks passed
    1 - Issues found
"""

from __future__ import annotations

import sys
from pathlib import Path

from mpv_validation_common import (
    KIND_AGENTS,
    REQUIRED_AGENT_FIELDS,
    ComponentFile,
    Plugin,
    ValidationRun,
    discover_plugins,
    get_plugins_dir,
    iter_markdown_files,
    load_component,
    missing_plugins_dir,
    report_run,
)


def validate_agent_file(agent: ComponentFile, run: ValidationRun) -> None:
    """Validate a single agent file.

    A file without a frontmatter block gets exactly one "Missing frontmatter"
    issue; field checks only apply when the block is present.
    """
    if agent.frontmatter is None:
        run.error(agent.plugin, KIND_AGENTS, agent.rel_path, "Missing frontmatter")
        return

    for field_name in REQUIRED_AGENT_FIELDS:
        if not agent.frontmatter.get(field_name):
            run.error(agent.plugin, KIND_AGENTS, agent.rel_path, f"Missing required field: {field_name}")

    run.count(KIND_AGENTS)


def validate_plugin_agents(plugin: Plugin, run: ValidationRun) -> None:
    """Validate all agent files of one plugin."""
    for path in iter_markdown_files(plugin.component_dir(KIND_AGENTS)):
        agent = load_component(path, plugin, KIND_AGENTS, run)
        if agent is not None:
            validate_agent_file(agent, run)


def validate_agents(plugins_dir: Path, run: ValidationRun | None = None) -> ValidationRun:
    """Validate agent files across every plugin.

    Args:
        plugins_dir: The marketplace plugins/ directory
        run: Optional existing run to accumulate into

    Returns:
        ValidationRun with all issues and the agent file tally
    """
    if run is None:
        run = ValidationRun()

    plugins = discover_plugins(plugins_dir)
    run.add_plugins(plugins)
    for plugin in plugins:
        validate_plugin_agents(plugin, run)

    return run


def main() -> int:
    """Main entry point."""
    plugins_dir = get_plugins_dir()
    if not plugins_dir.is_dir():
        return missing_plugins_dir()

    run = validate_agents(plugins_dir)
    return report_run(run, f"Validated {run.counted(KIND_AGENTS)} agent files across {run.plugin_count} plugins")


if __name__ == "__main__":
    sys.exit(main())
