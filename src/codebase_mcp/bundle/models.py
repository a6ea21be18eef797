"""Typed models for parsed codebase dumps."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class FileRecord:
    """One file reconstructed from a dump, path exactly as written there."""

    path: str
    content: tuple[str, ...]


BundleIndex = tuple[FileRecord, ...]
