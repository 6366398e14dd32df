"""Shared fixtures for marketplace validator tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

VALID_SKILL_DESCRIPTION = "Formats release notes. Use when preparing a changelog entry."


def write_file(path: Path, content: str) -> Path:
    """Write a text file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def valid_manifest(name: str, **overrides: Any) -> dict[str, Any]:
    manifest: dict[str, Any] = {
        "name": name,
        "version": "1.0.0",
        "description": "Release tooling for the marketplace",
        "license": "MIT",
    }
    manifest.update(overrides)
    return manifest


def skill_md(name: str, description: str = VALID_SKILL_DESCRIPTION) -> str:
    return f"---\nname: {name}\ndescription: {description}\n---\n\n# {name}\n\nBody text.\n"


@pytest.fixture
def plugins_dir(tmp_path: Path) -> Path:
    """An empty marketplace plugins/ directory."""
    path = tmp_path / "plugins"
    path.mkdir()
    return path


@pytest.fixture
def make_plugin(plugins_dir: Path) -> Callable[..., Path]:
    """Factory creating a plugin directory, optionally with a manifest."""

    def _make(name: str, manifest: dict[str, Any] | None = None) -> Path:
        root = plugins_dir / name
        root.mkdir(parents=True, exist_ok=True)
        if manifest is not None:
            write_file(root / ".claude-plugin" / "plugin.json", json.dumps(manifest, indent=2))
        return root

    return _make
