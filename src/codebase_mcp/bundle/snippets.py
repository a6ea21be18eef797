"""Line-numbered excerpts of parsed file records."""

from __future__ import annotations

from codebase_mcp.bundle.models import FileRecord

DEFAULT_SNIPPET_LINES = 40


def extract_snippet(record: FileRecord, max_lines: int = DEFAULT_SNIPPET_LINES) -> str:
    """Render the first max_lines content lines as ' n: text' rows."""
    if max_lines < 0:
        raise ValueError("max_lines must be >= 0")
    rows = [
        f" {number}: {text}\n"
        for number, text in enumerate(record.content[:max_lines], start=1)
    ]
    return "".join(rows).rstrip()


def render_file_snippet(record: FileRecord, max_lines: int = DEFAULT_SNIPPET_LINES) -> str:
    """Wrap an excerpt in a <file> block carrying the record's original path."""
    body = extract_snippet(record, max_lines)
    return f'<file path="{record.path}">\n{body}\n</file>'
