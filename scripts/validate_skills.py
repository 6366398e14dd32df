#!/usr/bin/env python3
"""
Marketplace Plugin Validation - Skill Validator

Validates skill directories under plugins/<name>/skills/. Each skill lives in
a kebab-case directory holding a SKILL.md whose frontmatter declares a `name`
matching the directory and a discoverable `description`.

Checks per skill directory:
- directory name is kebab-case (reported regardless of contents)
- SKILL.md exists and is non-empty
- frontmatter block is present
- name: required, kebab-case, no angle brackets, no reserved brand terms,
  equal to the directory name
- description: required, at most 1024 characters, no angle brackets,
  contains a "use when" style trigger phrase

All field violations of one file are reported together.

Usage:
    uv run python scripts/validate_skills.py

Exit codes:
    0 - All checks passed
    1 - Issues found
"""

from __future__ import annotations

import sys
from pathlib import Path

from mpv_validation_common import (
    ANGLE_BRACKET_PATTERN,
    DISCOVERY_PHRASES,
    KEBAB_CASE_PATTERN,
    KIND_SKILLS,
    MAX_DESCRIPTION_LENGTH,
    RESERVED_NAME_TERMS,
    SKILL_FILENAME,
    ComponentFile,
    Plugin,
    ValidationRun,
    discover_plugins,
    get_plugins_dir,
    iter_skill_dirs,
    load_component,
    missing_plugins_dir,
    report_run,
)


def is_valid_kebab_case(name: str) -> bool:
    """Check if name follows kebab-case convention."""
    return bool(KEBAB_CASE_PATTERN.match(name))


def validate_name_field(skill: ComponentFile, skill_dir_name: str, run: ValidationRun) -> None:
    """Validate the 'name' frontmatter field."""
    frontmatter = skill.frontmatter or {}
    name = frontmatter.get("name")
    if not name:
        run.error(skill.plugin, KIND_SKILLS, skill.rel_path, "Missing required frontmatter field: name")
        return

    if not is_valid_kebab_case(name):
        run.error(skill.plugin, KIND_SKILLS, skill.rel_path, f'name must be kebab-case (got "{name}")')
    if ANGLE_BRACKET_PATTERN.search(name):
        run.error(skill.plugin, KIND_SKILLS, skill.rel_path, "name must not contain XML angle brackets (< or >)")
    name_lower = name.lower()
    if any(term in name_lower for term in RESERVED_NAME_TERMS):
        reserved = " or ".join(f'"{term}"' for term in RESERVED_NAME_TERMS)
        run.error(skill.plugin, KIND_SKILLS, skill.rel_path, f"name must not contain {reserved}")
    if name != skill_dir_name:
        run.error(
            skill.plugin,
            KIND_SKILLS,
            skill.rel_path,
            f'name "{name}" must match folder name "{skill_dir_name}"',
        )


def validate_description_field(skill: ComponentFile, run: ValidationRun) -> None:
    """Validate the 'description' frontmatter field."""
    frontmatter = skill.frontmatter or {}
    description = frontmatter.get("description")
    if not description:
        run.error(skill.plugin, KIND_SKILLS, skill.rel_path, "Missing required frontmatter field: description")
        return

    if len(description) > MAX_DESCRIPTION_LENGTH:
        run.error(
            skill.plugin,
            KIND_SKILLS,
            skill.rel_path,
            f"description must be under {MAX_DESCRIPTION_LENGTH} characters (got {len(description)})",
        )
    if ANGLE_BRACKET_PATTERN.search(description):
        run.error(skill.plugin, KIND_SKILLS, skill.rel_path, "description must not contain XML tags (< or >)")
    description_lower = description.lower()
    if not any(phrase in description_lower for phrase in DISCOVERY_PHRASES):
        phrases = " or ".join(f'"{phrase}"' for phrase in DISCOVERY_PHRASES)
        run.error(skill.plugin, KIND_SKILLS, skill.rel_path, f"description must include {phrases}")


def validate_skill_frontmatter(skill: ComponentFile, skill_dir_name: str, run: ValidationRun) -> None:
    """Record every frontmatter violation of a SKILL.md, without short-circuiting."""
    validate_name_field(skill, skill_dir_name, run)
    validate_description_field(skill, run)


def validate_skill_dir(skill_dir: Path, plugin: Plugin, run: ValidationRun) -> None:
    """Validate one skill directory."""
    dir_name = skill_dir.name

    if not is_valid_kebab_case(dir_name):
        run.error(
            plugin.name,
            KIND_SKILLS,
            f"{dir_name}/",
            "Folder name must be kebab-case (no spaces, no underscores, no capitals)",
        )

    skill_md = skill_dir / SKILL_FILENAME
    if not skill_md.is_file():
        run.error(plugin.name, KIND_SKILLS, f"{dir_name}/", f"Missing {SKILL_FILENAME}")
        return

    skill = load_component(skill_md, plugin, KIND_SKILLS, run, base_dir=skill_dir.parent)
    if skill is None:
        return

    if skill.is_blank:
        run.error(plugin.name, KIND_SKILLS, skill.rel_path, "Empty file")
        return

    if skill.frontmatter is None:
        run.error(plugin.name, KIND_SKILLS, skill.rel_path, "Missing frontmatter")
        return

    validate_skill_frontmatter(skill, dir_name, run)

    run.count(KIND_SKILLS)


def validate_skills(plugins_dir: Path, run: ValidationRun | None = None) -> ValidationRun:
    """Validate skill directories across every plugin.

    Args:
        plugins_dir: The marketplace plugins/ directory
        run: Optional existing run to accumulate into

    Returns:
        ValidationRun with all issues and the skill directory tally
    """
    if run is None:
        run = ValidationRun()

    plugins = discover_plugins(plugins_dir)
    run.add_plugins(plugins)
    for plugin in plugins:
        for skill_dir in iter_skill_dirs(plugin.component_dir(KIND_SKILLS)):
            validate_skill_dir(skill_dir, plugin, run)

    return run


def main() -> int:
    """Main entry point."""
    plugins_dir = get_plugins_dir()
    if not plugins_dir.is_dir():
        return missing_plugins_dir()

    run = validate_skills(plugins_dir)
    return report_run(
        run, f"Validated {run.counted(KIND_SKILLS)} skill directories across {run.plugin_count} plugins"
    )


if __name__ == "__main__":
    sys.exit(main())
