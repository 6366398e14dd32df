#!/usr/bin/env python3
"""
Marketplace Plugin Validation - Hook Validator

Validates plugins/<name>/hooks/hooks.json documents.

Two document shapes are accepted, optionally wrapped in {"hooks": ...}:
- object keyed by event type, each value a list of matcher blocks
- legacy flat list of matcher blocks

Both shapes are normalized once into a list of MatcherEntry values and run
through the same matcher checks.

Usage:
    uv run python scripts/validate_hooks.py

Exit codes:
    0 - All checks passed
    1 - Issues found
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mpv_validation_common import (
    HOOKS_RELPATH,
    KIND_HOOKS,
    VALID_HOOK_EVENTS,
    Plugin,
    ValidationRun,
    discover_plugins,
    get_plugins_dir,
    missing_plugins_dir,
    read_text_file,
    report_run,
)

HOOKS_FILE = HOOKS_RELPATH.name


@dataclass(frozen=True)
class MatcherEntry:
    """A matcher block located in a hook document.

    Attributes:
        event: Event type the block is registered under, or None in the legacy list shape
        index: Position of the block within its list
        value: The raw decoded block
    """

    event: str | None
    index: int
    value: Any

    @property
    def label(self) -> str:
        if self.event is None:
            return f"Hook {self.index}"
        return f"{self.event}[{self.index}]"

    def action_label(self, action_index: int) -> str:
        if self.event is None:
            return f"Hook {self.index}.hooks[{action_index}]"
        return f"{self.label}.hooks[{action_index}]"


def unwrap_hooks(data: Any) -> Any:
    """Return the hook table, unwrapping a top-level {"hooks": ...} wrapper."""
    if isinstance(data, dict) and "hooks" in data:
        return data["hooks"]
    return data


def normalize_hook_document(data: Any, plugin: str, run: ValidationRun) -> list[MatcherEntry]:
    """Resolve a decoded hook document into matcher entries.

    Shape errors (unknown event types, non-list event values, a document that
    is neither object nor array) are recorded on the run.
    """
    hooks = unwrap_hooks(data)
    entries: list[MatcherEntry] = []

    if isinstance(hooks, dict):
        for event, matchers in hooks.items():
            if event not in VALID_HOOK_EVENTS:
                run.error(plugin, KIND_HOOKS, HOOKS_FILE, f"Invalid event type: {event}")
                continue
            if not isinstance(matchers, list):
                run.error(plugin, KIND_HOOKS, HOOKS_FILE, f"{event} must be an array")
                continue
            entries.extend(MatcherEntry(event, i, matcher) for i, matcher in enumerate(matchers))
    elif isinstance(hooks, list):
        entries.extend(MatcherEntry(None, i, matcher) for i, matcher in enumerate(hooks))
    else:
        run.error(plugin, KIND_HOOKS, HOOKS_FILE, "must be an object or array")

    return entries


def _is_valid_command(command: Any) -> bool:
    if isinstance(command, str):
        return bool(command)
    if isinstance(command, list):
        return bool(command) and all(isinstance(part, str) for part in command)
    return False


def validate_hook_action(action: Any, label: str, plugin: str, run: ValidationRun) -> None:
    """Validate one entry of a matcher block's hooks array."""
    if not isinstance(action, dict):
        run.error(plugin, KIND_HOOKS, HOOKS_FILE, f"{label} is not an object")
        return
    action_type = action.get("type")
    if not action_type or not isinstance(action_type, str):
        run.error(plugin, KIND_HOOKS, HOOKS_FILE, f"{label} missing or invalid 'type' field")
    if not _is_valid_command(action.get("command")):
        run.error(plugin, KIND_HOOKS, HOOKS_FILE, f"{label} missing or invalid 'command' field")


def validate_matcher_entry(entry: MatcherEntry, plugin: str, run: ValidationRun) -> None:
    """Validate a single matcher block and its hook actions."""
    block = entry.value
    if not isinstance(block, dict):
        run.error(plugin, KIND_HOOKS, HOOKS_FILE, f"{entry.label} is not an object")
        return

    matcher = block.get("matcher")
    if not matcher or not isinstance(matcher, str):
        run.error(plugin, KIND_HOOKS, HOOKS_FILE, f"{entry.label} missing 'matcher' field")

    actions = block.get("hooks")
    if not isinstance(actions, list):
        run.error(plugin, KIND_HOOKS, HOOKS_FILE, f"{entry.label} missing 'hooks' array")
        return

    for j, action in enumerate(actions):
        validate_hook_action(action, entry.action_label(j), plugin, run)


def validate_hook_document(data: Any, plugin: str, run: ValidationRun) -> None:
    """Validate a decoded hook document, counting every matcher examined."""
    for entry in normalize_hook_document(data, plugin, run):
        validate_matcher_entry(entry, plugin, run)
        run.count(KIND_HOOKS)


def validate_hooks_file(plugin: Plugin, run: ValidationRun) -> None:
    """Parse and validate one plugin's hooks.json."""
    content = read_text_file(plugin.hooks_path, run, plugin.name, KIND_HOOKS, HOOKS_FILE)
    if content is None:
        return

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        run.error(plugin.name, KIND_HOOKS, HOOKS_FILE, f"Invalid JSON: {e.msg} (line {e.lineno})", "syntax")
        return
    except RecursionError:
        run.error(plugin.name, KIND_HOOKS, HOOKS_FILE, "Invalid JSON: nesting too deep", "syntax")
        return

    validate_hook_document(data, plugin.name, run)


def validate_hooks(plugins_dir: Path, run: ValidationRun | None = None) -> ValidationRun:
    """Validate hook documents across every plugin that has one.

    Only plugins with a hooks file count toward the plugin tally.
    """
    if run is None:
        run = ValidationRun()

    with_hooks = [plugin for plugin in discover_plugins(plugins_dir) if plugin.hooks_path.is_file()]
    run.add_plugins(with_hooks)
    for plugin in with_hooks:
        validate_hooks_file(plugin, run)

    return run


def main() -> int:
    """Main entry point."""
    plugins_dir = get_plugins_dir()
    if not plugins_dir.is_dir():
        return missing_plugins_dir()

    run = validate_hooks(plugins_dir)
    return report_run(run, f"Validated {run.counted(KIND_HOOKS)} hook matchers across {run.plugin_count} plugins")


if __name__ == "__main__":
    sys.exit(main())
