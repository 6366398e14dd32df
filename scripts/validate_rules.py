#!/usr/bin/env python3
"""
Marketplace Plugin Validation - Rules Validator

Validates rule files (.md) in each plugin's rules/ directory.
Rules are plain markdown loaded into the host's context; the only
requirement is that every rule file has content. Rule files may nest
arbitrarily deep under rules/.

Usage:
    uv run python scripts/validate_rules.py

Exit codes:
    0 - All checks passed
    1 - Issues found
"""

from __future__ import annotations

import sys
from pathlib import Path

from mpv_validation_common import (
    KIND_RULES,
    Plugin,
    ValidationRun,
    discover_plugins,
    get_plugins_dir,
    iter_markdown_files,
    load_component,
    missing_plugins_dir,
    report_run,
)


def validate_plugin_rules(plugin: Plugin, run: ValidationRun) -> None:
    """Validate every rule file of one plugin, recursing into subdirectories."""
    for path in iter_markdown_files(plugin.component_dir(KIND_RULES), recursive=True):
        rule = load_component(path, plugin, KIND_RULES, run)
        if rule is None:
            continue
        if rule.is_blank:
            run.error(plugin.name, KIND_RULES, rule.rel_path, "Empty rule file")
            continue
        run.count(KIND_RULES)


def validate_rules(plugins_dir: Path, run: ValidationRun | None = None) -> ValidationRun:
    """Validate rule files across every plugin.

    Args:
        plugins_dir: The marketplace plugins/ directory
        run: Optional existing run to accumulate into

    Returns:
        ValidationRun with all issues and the rule file tally
    """
    if run is None:
        run = ValidationRun()

    plugins = discover_plugins(plugins_dir)
    run.add_plugins(plugins)
    for plugin in plugins:
        validate_plugin_rules(plugin, run)

    return run


# =============================================================================
# Main
# =============================================================================


def main() -> int:
    """Main entry point."""
    plugins_dir = get_plugins_dir()
    if not plugins_dir.is_dir():
        return missing_plugins_dir()

    run = validate_rules(plugins_dir)
    return report_run(run, f"Validated {run.counted(KIND_RULES)} rule files across {run.plugin_count} plugins")


if __name__ == "__main__":
    sys.exit(main())
