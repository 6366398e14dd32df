#!/usr/bin/env python3
"""
Marketplace Plugin Validation - Full Suite

Runs every validator family in sequence, each with its own report and
summary line. The suite fails if any family fails; a failing family never
stops the ones after it.

Usage:
    uv run python scripts/validate_all.py

Exit codes:
    0 - All families passed
    1 - At least one family found issues
"""

from __future__ import annotations

import sys
from typing import Callable

import validate_agents
import validate_commands
import validate_hooks
import validate_plugin_json
import validate_rules
import validate_skills
import validate_symlinks
from mpv_validation_common import EXIT_ERROR, EXIT_OK, get_plugins_dir, missing_plugins_dir

# Validator families in execution order
FAMILIES: list[tuple[str, Callable[[], int]]] = [
    ("plugin.json", validate_plugin_json.main),
    ("agents", validate_agents.main),
    ("commands", validate_commands.main),
    ("rules", validate_rules.main),
    ("skills", validate_skills.main),
    ("hooks", validate_hooks.main),
    ("symlinks", validate_symlinks.main),
]


def run_suite(families: list[tuple[str, Callable[[], int]]] | None = None) -> dict[str, int]:
    """Run each family entry point and collect its exit code."""
    results: dict[str, int] = {}
    for name, entry_point in families if families is not None else FAMILIES:
        results[name] = entry_point()
    return results


def main() -> int:
    """Main entry point."""
    if not get_plugins_dir().is_dir():
        return missing_plugins_dir()

    results = run_suite()
    failed = [name for name, code in results.items() if code != EXIT_OK]
    if failed:
        print(f"Validation failed: {', '.join(failed)}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
