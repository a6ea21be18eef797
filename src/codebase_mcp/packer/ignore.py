"""Project-local ignore file support."""

from __future__ import annotations

from pathlib import Path

IGNORE_FILE_NAME = ".codebaseignore"


def load_ignore_globs(directory: Path) -> str | None:
    """Read .codebaseignore into a comma-joined glob list, or None when absent or empty."""
    ignore_path = directory / IGNORE_FILE_NAME
    if not ignore_path.exists():
        return None
    text = ignore_path.read_text(encoding="utf-8")
    patterns: list[str] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    if not patterns:
        return None
    return ",".join(patterns)


def merge_ignore_globs(caller: str | None, from_file: str | None) -> str | None:
    """Combine caller patterns and ignore-file patterns, caller first."""
    parts = [value for value in (caller, from_file) if value]
    if not parts:
        return None
    return ",".join(parts)
