#!/usr/bin/env python3
"""
Marketplace Plugin Validation - Command Validator

Validates that command markdown files under plugins/<name>/commands/ are
readable and non-empty. Command groups may nest in subdirectories.
Commands have no frontmatter schema.

Usage:
    uv run python scripts/validate_commands.py

Exit codes:
    0 - All checks passed
    1 - Issues found
"""

from __future__ import annotations

import sys
from pathlib import Path

from mpv_validation_common import (
    KIND_COMMANDS,
    Plugin,
    ValidationRun,
    discover_plugins,
    get_plugins_dir,
    iter_markdown_files,
    load_component,
    missing_plugins_dir,
    report_run,
)


def validate_plugin_commands(plugin: Plugin, run: ValidationRun) -> None:
    """Validate all command files of one plugin."""
    for path in iter_markdown_files(plugin.component_dir(KIND_COMMANDS), recursive=True):
        command = load_component(path, plugin, KIND_COMMANDS, run)
        if command is None:
            continue
        if command.is_blank:
            run.error(plugin.name, KIND_COMMANDS, command.rel_path, "Empty command file")
            continue
        run.count(KIND_COMMANDS)


def validate_commands(plugins_dir: Path, run: ValidationRun | None = None) -> ValidationRun:
    """Validate command files across every plugin."""
    if run is None:
        run = ValidationRun()

    plugins = discover_plugins(plugins_dir)
    run.add_plugins(plugins)
    for plugin in plugins:
        validate_plugin_commands(plugin, run)

    return run


def main() -> int:
    """Main entry point."""
    plugins_dir = get_plugins_dir()
    if not plugins_dir.is_dir():
        return missing_plugins_dir()

    run = validate_commands(plugins_dir)
    return report_run(
        run, f"Validated {run.counted(KIND_COMMANDS)} command files across {run.plugin_count} plugins"
    )


if __name__ == "__main__":
    sys.exit(main())
