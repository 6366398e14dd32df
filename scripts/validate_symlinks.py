#!/usr/bin/env python3
"""
Marketplace Plugin Validation - Symlink Validator

Validates that every symbolic link inside a plugin's agents/, commands/,
skills/ and rules/ directories resolves to an existing target. Links are
resolved relative to the directory that contains them. Nested directories
(e.g. commands/workflow/) are walked as well.

Usage:
    uv run python scripts/validate_symlinks.py

Exit codes:
    0 - All checks passed
    1 - Issues found
"""

from __future__ import annotations

import sys
from pathlib import Path

from mpv_validation_common import (
    KIND_SYMLINKS,
    SYMLINK_SCANNED_DIRS,
    Plugin,
    ValidationRun,
    discover_plugins,
    get_plugins_dir,
    missing_plugins_dir,
    report_run,
    scan_symlinks,
)


def validate_plugin_symlinks(plugin: Plugin, run: ValidationRun) -> None:
    """Check every symlink in the scanned component directories of one plugin."""
    for kind in SYMLINK_SCANNED_DIRS:
        directory = plugin.component_dir(kind)
        if not directory.is_dir():
            continue

        def scan_failed(rel_path: str, e: OSError, kind: str = kind) -> None:
            run.error(plugin.name, kind, rel_path, f"Cannot scan: {e}")

        for link in scan_symlinks(directory, on_error=scan_failed):
            run.count(KIND_SYMLINKS)
            if link.broken:
                run.error(plugin.name, kind, link.rel_path, f"Broken symlink -> {link.target}", "referential")


def validate_symlinks(plugins_dir: Path, run: ValidationRun | None = None) -> ValidationRun:
    """Validate symlinks across every plugin."""
    if run is None:
        run = ValidationRun()

    plugins = discover_plugins(plugins_dir)
    run.add_plugins(plugins)
    for plugin in plugins:
        validate_plugin_symlinks(plugin, run)

    return run


def main() -> int:
    """Main entry point."""
    plugins_dir = get_plugins_dir()
    if not plugins_dir.is_dir():
        return missing_plugins_dir()

    run = validate_symlinks(plugins_dir)
    return report_run(run, f"Validated {run.counted(KIND_SYMLINKS)} symlinks across {run.plugin_count} plugins")


if __name__ == "__main__":
    sys.exit(main())
