"""Codebase dump parsing and retrieval."""

from .models import BundleIndex, FileRecord
from .parser import DELIMITERS, DelimiterMatcher, parse_bundle, split_dump_lines
from .paths import find_file_record, normalize_bundle_path
from .snippets import DEFAULT_SNIPPET_LINES, extract_snippet, render_file_snippet

__all__ = [
    "BundleIndex",
    "DEFAULT_SNIPPET_LINES",
    "DELIMITERS",
    "DelimiterMatcher",
    "FileRecord",
    "extract_snippet",
    "find_file_record",
    "normalize_bundle_path",
    "parse_bundle",
    "render_file_snippet",
    "split_dump_lines",
]
