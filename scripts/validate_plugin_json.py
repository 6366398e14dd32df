#!/usr/bin/env python3
"""
Marketplace Plugin Validation - Manifest Validator

Validates plugins/<name>/.claude-plugin/plugin.json manifests:
- manifest exists and is a valid JSON object
- required fields: name, version, description, license
- no template placeholder text left anywhere in the manifest
- name matches the plugin directory name (case-sensitive)
- declared component paths (agents, skills, commands, rules, hooks)
  resolve to existing entries relative to the plugin root

A manifest that fails to parse is reported once and its remaining checks are
skipped; other plugins are still validated.

Usage:
    uv run python scripts/validate_plugin_json.py

Exit codes:
    0 - All checks passed
    1 - Issues found
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from mpv_validation_common import (
    KIND_MANIFEST,
    MANIFEST_PATH_FIELDS,
    MANIFEST_RELPATH,
    PLACEHOLDER_PATTERNS,
    REQUIRED_MANIFEST_FIELDS,
    Plugin,
    ValidationRun,
    discover_plugins,
    get_plugins_dir,
    iter_declared_paths,
    missing_plugins_dir,
    read_text_file,
    report_run,
    resolve_declared_path,
)

MANIFEST_FILE = MANIFEST_RELPATH.name


def validate_required_fields(manifest: dict[str, Any], plugin: str, run: ValidationRun) -> None:
    """Each required field must be present and non-empty."""
    for field_name in REQUIRED_MANIFEST_FIELDS:
        if not manifest.get(field_name):
            run.error(plugin, "", MANIFEST_FILE, f"Missing required field: {field_name}")


def validate_no_placeholders(manifest: dict[str, Any], plugin: str, run: ValidationRun) -> None:
    """Scan the serialized manifest for template boilerplate."""
    serialized = json.dumps(manifest, ensure_ascii=False)
    for placeholder in PLACEHOLDER_PATTERNS:
        if placeholder in serialized:
            run.error(plugin, "", MANIFEST_FILE, f'Contains placeholder text: "{placeholder}"', "placeholder")


def validate_name_matches_dir(manifest: dict[str, Any], plugin: str, run: ValidationRun) -> None:
    name = manifest.get("name")
    if name and name != plugin:
        run.error(plugin, "", MANIFEST_FILE, f'Name "{name}" does not match directory "{plugin}"')


def validate_declared_paths(manifest: dict[str, Any], plugin: Plugin, run: ValidationRun) -> None:
    """Every declared component path must resolve relative to the plugin root."""
    for field_name in MANIFEST_PATH_FIELDS:
        value = manifest.get(field_name)
        if not value:
            continue
        for declared in iter_declared_paths(value):
            if not isinstance(declared, str):
                run.error(plugin.name, "", MANIFEST_FILE, f'"{field_name}" path must be a string')
                continue
            if resolve_declared_path(plugin.root, declared) is None:
                run.error(
                    plugin.name,
                    "",
                    MANIFEST_FILE,
                    f'"{field_name}" path does not exist: {declared}',
                    "referential",
                )


def validate_manifest(manifest: Any, plugin: Plugin, run: ValidationRun) -> bool:
    """Apply every manifest check to decoded manifest data.

    Returns:
        True if the manifest was an object and was checked
    """
    if not isinstance(manifest, dict):
        run.error(plugin.name, "", MANIFEST_FILE, f"Manifest must be a JSON object, got {type(manifest).__name__}")
        return False

    validate_required_fields(manifest, plugin.name, run)
    validate_no_placeholders(manifest, plugin.name, run)
    validate_name_matches_dir(manifest, plugin.name, run)
    validate_declared_paths(manifest, plugin, run)
    return True


def validate_plugin_manifest(plugin: Plugin, run: ValidationRun) -> None:
    """Load, parse and validate one plugin's manifest."""
    if not plugin.manifest_path.is_file():
        run.error(plugin.name, "", "", f"Missing {MANIFEST_RELPATH.as_posix()}")
        return

    content = read_text_file(plugin.manifest_path, run, plugin.name, "", MANIFEST_FILE)
    if content is None:
        return

    try:
        manifest = json.loads(content)
    except json.JSONDecodeError as e:
        run.error(
            plugin.name,
            "",
            MANIFEST_FILE,
            f"Invalid manifest syntax: {e.msg} (line {e.lineno})",
            "syntax",
        )
        return
    except RecursionError:
        run.error(plugin.name, "", MANIFEST_FILE, "Invalid manifest syntax: nesting too deep", "syntax")
        return

    if validate_manifest(manifest, plugin, run):
        run.count(KIND_MANIFEST)


def validate_plugin_json(plugins_dir: Path, run: ValidationRun | None = None) -> ValidationRun:
    """Validate the manifest of every plugin.

    Args:
        plugins_dir: The marketplace plugins/ directory
        run: Optional existing run to accumulate into

    Returns:
        ValidationRun with all issues and the manifest tally
    """
    if run is None:
        run = ValidationRun()

    plugins = discover_plugins(plugins_dir)
    run.add_plugins(plugins)
    for plugin in plugins:
        validate_plugin_manifest(plugin, run)

    return run


def main() -> int:
    """Main entry point."""
    plugins_dir = get_plugins_dir()
    if not plugins_dir.is_dir():
        return missing_plugins_dir()

    run = validate_plugin_json(plugins_dir)
    return report_run(run, f"Validated {run.counted(KIND_MANIFEST)} plugin.json manifests")


if __name__ == "__main__":
    sys.exit(main())
