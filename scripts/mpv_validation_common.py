#!/usr/bin/env python3
"""
Marketplace Plugin Validation - Common Module

Shared validation infrastructure for all marketplace plugin validators.
This module contains:
- Constants (layout, required fields, patterns, hook events)
- Type definitions (ValidationIssue, ValidationRun, Plugin, ComponentFile)
- Frontmatter extraction
- Plugin discovery and component file enumeration
- Path and symlink reference resolution
- Reporting utilities (formatting, summary, exit codes)

All validator families import from this module so that output and exit
codes stay consistent across the suite.
"""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Literal, TextIO

# =============================================================================
# Type Definitions
# =============================================================================

# Only errors are reported; there is no warning channel.
Severity = Literal["error"]

# Error taxonomy:
# - structural: missing required file/field, wrong name or pattern
# - referential: dangling declared path, broken symlink
# - syntax: manifest or hook document fails to parse
# - placeholder: template text was never replaced
Category = Literal["structural", "referential", "syntax", "placeholder"]

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_OK = 0  # No issues found
EXIT_ERROR = 1  # At least one issue found

# =============================================================================
# Marketplace Layout
# =============================================================================

PLUGINS_DIRNAME = "plugins"
MANIFEST_RELPATH = Path(".claude-plugin") / "plugin.json"
HOOKS_RELPATH = Path("hooks") / "hooks.json"
SKILL_FILENAME = "SKILL.md"
MARKDOWN_SUFFIX = ".md"

# Component kinds, also the directory names under a plugin root
KIND_AGENTS = "agents"
KIND_COMMANDS = "commands"
KIND_RULES = "rules"
KIND_SKILLS = "skills"
KIND_HOOKS = "hooks"
KIND_MANIFEST = "manifest"
KIND_SYMLINKS = "symlinks"

# =============================================================================
# Schema Constants
# =============================================================================

FRONTMATTER_DELIMITER = "---"
BYTE_ORDER_MARK = "\ufeff"

REQUIRED_MANIFEST_FIELDS = ("name", "version", "description", "license")

# Boilerplate left over from the plugin template
PLACEHOLDER_PATTERNS = ("Description of your plugin", "Your Name", "keyword1", "keyword2")

# Manifest fields whose value is a path (or list of paths) relative to the plugin root
MANIFEST_PATH_FIELDS = ("agents", "skills", "commands", "rules", "hooks")

REQUIRED_AGENT_FIELDS = ("model", "tools")

KEBAB_CASE_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
ANGLE_BRACKET_PATTERN = re.compile(r"[<>]")

# Brand terms a skill name must not contain (case-insensitive)
RESERVED_NAME_TERMS = ("claude", "anthropic")

# A skill description must contain one of these (case-insensitive) to be discoverable
DISCOVERY_PHRASES = ("use when", "use proactively when")

MAX_DESCRIPTION_LENGTH = 1024

# Hook event types accepted by the host
VALID_HOOK_EVENTS = {
    "PreToolUse",
    "PostToolUse",
    "PreCompact",
    "SessionStart",
    "SessionEnd",
    "Stop",
    "Notification",
    "SubagentStop",
}

# Component directories walked by the symlink checker
SYMLINK_SCANNED_DIRS = (KIND_AGENTS, KIND_COMMANDS, KIND_SKILLS, KIND_RULES)

# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class ValidationIssue:
    """One reported rule violation.

    Attributes:
        plugin: Name of the plugin directory the issue belongs to
        kind: Component kind directory ("agents", "skills", ...) or "" for plugin-level files
        path: Path of the offending file or directory, relative to the kind directory
        message: Human-readable description of the violation
        category: Error taxonomy bucket
        severity: Always "error"
    """

    plugin: str
    kind: str
    path: str
    message: str
    category: Category = "structural"
    severity: Severity = "error"

    @property
    def location(self) -> str:
        """Location string in `plugin/kind/path` form."""
        if self.kind:
            return f"{self.plugin}/{self.kind}/{self.path}"
        return f"{self.plugin}/{self.path}"

    def format(self) -> str:
        """Format as a single report line."""
        return f"ERROR: {self.location} - {self.message}"


@dataclass
class ValidationRun:
    """Aggregate state of one validation invocation.

    Owns the append-only issue list and the per-kind counters used by the
    summary line. Every validator takes an optional run and returns it, so a
    fresh run can be handed to any single validator in isolation.
    """

    issues: list[ValidationIssue] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)
    plugins: list[str] = field(default_factory=list)

    def error(
        self,
        plugin: str,
        kind: str,
        path: str,
        message: str,
        category: Category = "structural",
    ) -> None:
        """Record an issue."""
        self.issues.append(ValidationIssue(plugin, kind, path, message, category))

    def count(self, kind: str, n: int = 1) -> None:
        """Increase the tally for a component kind."""
        self.counts[kind] = self.counts.get(kind, 0) + n

    def counted(self, kind: str) -> int:
        return self.counts.get(kind, 0)

    def add_plugins(self, plugins: list[Plugin]) -> None:
        for plugin in plugins:
            if plugin.name not in self.plugins:
                self.plugins.append(plugin.name)

    @property
    def plugin_count(self) -> int:
        return len(self.plugins)

    @property
    def has_errors(self) -> bool:
        return bool(self.issues)

    @property
    def exit_code(self) -> int:
        return EXIT_ERROR if self.issues else EXIT_OK

    def messages(self) -> list[str]:
        """Formatted report lines, in the order issues were found."""
        return [issue.format() for issue in self.issues]

    def issue_set(self) -> set[ValidationIssue]:
        """Order-insensitive view of the issues, for comparing runs."""
        return set(self.issues)

    def merge(self, other: ValidationRun) -> None:
        """Merge issues and counters from another run into this one."""
        self.issues.extend(other.issues)
        for kind, n in other.counts.items():
            self.count(kind, n)
        for name in other.plugins:
            if name not in self.plugins:
                self.plugins.append(name)


@dataclass(frozen=True)
class Plugin:
    """A plugin directory under the marketplace plugins root."""

    name: str
    root: Path

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_RELPATH

    @property
    def hooks_path(self) -> Path:
        return self.root / HOOKS_RELPATH

    def component_dir(self, kind: str) -> Path:
        return self.root / kind


@dataclass
class ComponentFile:
    """A descriptor file (agent, command, rule or skill) loaded from disk.

    Attributes:
        plugin: Owning plugin name
        kind: Component kind directory name
        path: Absolute path of the file
        rel_path: Path relative to the kind directory, used in reports
        text: Raw file content
        frontmatter: Parsed header fields, or None when the header block is missing
        body: Content after the header block (the whole text when it is missing)
    """

    plugin: str
    kind: str
    path: Path
    rel_path: str
    text: str
    frontmatter: dict[str, str] | None
    body: str

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


# =============================================================================
# Frontmatter Extraction
# =============================================================================


def split_frontmatter(content: str) -> tuple[dict[str, str] | None, str]:
    """Split a descriptor file into its frontmatter fields and body.

    The header block must start on the first line with a line that is exactly
    the delimiter and end with the next line that is exactly the delimiter.
    Inside the block each line is split on its first colon; lines without a
    colon (nested list items and the like) are ignored. Values are kept as
    stripped strings.

    Returns:
        Tuple of (frontmatter, body). frontmatter is None when the block is
        absent or unterminated, and an empty dict when the block is empty.
    """
    if content.startswith(BYTE_ORDER_MARK):
        content = content[len(BYTE_ORDER_MARK) :]

    lines = content.split("\n")
    if lines[0].rstrip("\r") != FRONTMATTER_DELIMITER:
        return None, content

    for end, line in enumerate(lines[1:], start=1):
        if line.rstrip("\r") == FRONTMATTER_DELIMITER:
            break
    else:
        return None, content

    frontmatter: dict[str, str] = {}
    for line in lines[1:end]:
        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        frontmatter[key] = value.strip()

    return frontmatter, "\n".join(lines[end + 1 :])


def extract_frontmatter(content: str) -> dict[str, str] | None:
    """Return the frontmatter fields of a descriptor file, or None if it has none."""
    frontmatter, _body = split_frontmatter(content)
    return frontmatter


# =============================================================================
# Discovery
# =============================================================================


def get_marketplace_root() -> Path:
    """The marketplace root is the directory the validators are run from."""
    return Path.cwd()


def get_plugins_dir(root: Path | None = None) -> Path:
    return (root if root is not None else get_marketplace_root()) / PLUGINS_DIRNAME


def discover_plugins(plugins_dir: Path) -> list[Plugin]:
    """List every plugin directory under the plugins root."""
    if not plugins_dir.is_dir():
        return []
    return [Plugin(entry.name, entry) for entry in sorted(plugins_dir.iterdir()) if entry.is_dir()]


def iter_markdown_files(directory: Path, recursive: bool = False) -> Iterator[Path]:
    """Yield markdown files in a component directory.

    Non-file entries (directories that happen to end in .md, dangling links)
    are skipped without error.
    """
    if not directory.is_dir():
        return
    candidates = directory.rglob(f"*{MARKDOWN_SUFFIX}") if recursive else directory.glob(f"*{MARKDOWN_SUFFIX}")
    for path in sorted(candidates):
        if path.is_file():
            yield path


def iter_skill_dirs(skills_dir: Path) -> Iterator[Path]:
    """Yield every subdirectory of a plugin's skills root."""
    if not skills_dir.is_dir():
        return
    for entry in sorted(skills_dir.iterdir()):
        if entry.is_dir():
            yield entry


def read_text_file(path: Path, run: ValidationRun, plugin: str, kind: str, rel_path: str) -> str | None:
    """Read a UTF-8 text file, recording an issue instead of raising on failure."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        run.error(plugin, kind, rel_path, f"Cannot read file: {e}")
        return None


def load_component(
    path: Path,
    plugin: Plugin,
    kind: str,
    run: ValidationRun,
    base_dir: Path | None = None,
) -> ComponentFile | None:
    """Load a descriptor file and split its frontmatter.

    Args:
        path: File to load
        plugin: Owning plugin
        kind: Component kind directory name
        run: Run that receives read failures
        base_dir: Directory rel_path is computed from (defaults to the kind directory)

    Returns:
        The loaded ComponentFile, or None if the file could not be read
    """
    base = base_dir if base_dir is not None else plugin.component_dir(kind)
    rel_path = path.relative_to(base).as_posix()
    text = read_text_file(path, run, plugin.name, kind, rel_path)
    if text is None:
        return None
    frontmatter, body = split_frontmatter(text)
    return ComponentFile(plugin.name, kind, path, rel_path, text, frontmatter, body)


# =============================================================================
# Path & Reference Resolution
# =============================================================================


def resolve_declared_path(base_dir: Path, declared: str) -> Path | None:
    """Resolve a declared relative path against a base directory.

    Returns:
        The resolved path if something exists there, otherwise None
    """
    resolved = Path(os.path.normpath(base_dir / declared))
    if resolved.exists():
        return resolved
    return None


def iter_declared_paths(value: object) -> Iterator[object]:
    """Yield each entry of a path-or-list-of-paths field."""
    if isinstance(value, list):
        yield from value
    else:
        yield value


@dataclass(frozen=True)
class SymlinkEntry:
    """A symbolic link found while walking a component directory."""

    rel_path: str
    target: str
    broken: bool


def scan_symlinks(
    directory: Path,
    prefix: str = "",
    on_error: Callable[[str, OSError], None] | None = None,
) -> Iterator[SymlinkEntry]:
    """Walk a directory and yield every symbolic link with its resolution state.

    Link targets are resolved relative to the directory that holds the link.
    Real subdirectories are descended into (nested command groups); linked
    directories are not followed.

    Args:
        directory: Directory to walk
        prefix: Relative path of directory, prepended to yielded paths
        on_error: Called with (relative path, error) when a directory cannot be
            listed or a link cannot be read; the walk then continues with the
            next entry. Without it the error propagates.
    """
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        if on_error is None:
            raise
        on_error(prefix, e)
        return
    for entry in entries:
        rel_path = f"{prefix}{entry.name}"
        if entry.is_symlink():
            try:
                target = os.readlink(entry.path)
            except OSError as e:
                if on_error is None:
                    raise
                on_error(rel_path, e)
                continue
            broken = not os.path.exists(os.path.join(directory, target))
            yield SymlinkEntry(rel_path, target, broken)
        elif entry.is_dir(follow_symlinks=False):
            yield from scan_symlinks(Path(entry.path), f"{rel_path}/", on_error)


# =============================================================================
# Reporting
# =============================================================================

# ANSI color codes
COLORS = {
    "ERROR": "\033[91m",  # Red
    "PASSED": "\033[92m",  # Green
    "RESET": "\033[0m",  # Reset
    "BOLD": "\033[1m",  # Bold
}


def colorize(text: str, level: str) -> str:
    """Apply color to text based on level."""
    color = COLORS.get(level, "")
    return f"{color}{text}{COLORS['RESET']}"


def _is_tty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def format_issue(issue: ValidationIssue, color: bool = False) -> str:
    """Format a single issue for terminal output."""
    line = issue.format()
    if color:
        label = "ERROR:"
        return colorize(label, "ERROR") + line[len(label) :]
    return line


def print_issues(run: ValidationRun, stream: TextIO | None = None) -> None:
    """Print one line per issue on the error stream."""
    out = stream if stream is not None else sys.stderr
    color = _is_tty(out)
    for issue in run.issues:
        print(format_issue(issue, color), file=out)


def print_summary(summary: str, stream: TextIO | None = None) -> None:
    out = stream if stream is not None else sys.stdout
    print(summary, file=out)


def report_run(run: ValidationRun, summary: str) -> int:
    """Print issues and the summary line, and return the exit code for the run."""
    print_issues(run)
    print_summary(summary)
    return run.exit_code


def missing_plugins_dir() -> int:
    print("ERROR: plugins/ directory not found", file=sys.stderr)
    return EXIT_ERROR
