"""Path canonicalization and record lookup for parsed dumps."""

from __future__ import annotations

from codebase_mcp.bundle.models import BundleIndex, FileRecord


def normalize_bundle_path(path: str) -> str:
    """Canonicalize a dump path for equality checks only."""
    if path.startswith("./"):
        path = path[2:]
    return path.replace("\\", "/").strip()


def find_file_record(index: BundleIndex, requested_path: str) -> FileRecord | None:
    """Return the first record matching exactly, else the first case-insensitive match."""
    requested = normalize_bundle_path(requested_path)
    for record in index:
        if normalize_bundle_path(record.path) == requested:
            return record

    folded = requested.casefold()
    for record in index:
        if normalize_bundle_path(record.path).casefold() == folded:
            return record
    return None
