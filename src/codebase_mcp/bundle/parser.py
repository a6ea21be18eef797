"""Line-based reconstruction of per-file records from a flat codebase dump."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Literal

from codebase_mcp.bundle.models import BundleIndex, FileRecord

DelimiterKind = Literal["open", "close"]


@dataclass(slots=True, frozen=True)
class DelimiterMatcher:
    """Recognizes one delimiter line of one dump syntax."""

    kind: DelimiterKind
    syntax: str
    pattern: re.Pattern[str]

    def match(self, line: str) -> str | None:
        """Return the captured path for openers, "" for closers, None on no match."""
        matched = self.pattern.fullmatch(line)
        if matched is None:
            return None
        if self.kind == "close":
            return ""
        return matched.group(1).strip()


# Evaluated in order; the first matcher that accepts a line wins.
DELIMITERS: Final[tuple[DelimiterMatcher, ...]] = (
    DelimiterMatcher(kind="open", syntax="xml", pattern=re.compile(r'<file path="(.+?)">')),
    DelimiterMatcher(kind="open", syntax="heading", pattern=re.compile(r"# File: (.+)")),
    DelimiterMatcher(kind="close", syntax="xml", pattern=re.compile(r"</file>")),
)


def split_dump_lines(raw_text: str) -> list[str]:
    """Split dump text on newlines, tolerating CRLF and a final newline."""
    if not raw_text:
        return []
    lines = raw_text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_bundle(
    raw_text: str,
    delimiters: tuple[DelimiterMatcher, ...] = DELIMITERS,
) -> BundleIndex:
    """Reconstruct file records from dump text in dump order."""
    records: list[FileRecord] = []
    open_path: str | None = None
    open_lines: list[str] = []

    def seal() -> None:
        nonlocal open_path, open_lines
        if open_path is not None:
            records.append(FileRecord(path=open_path, content=tuple(open_lines)))
        open_path = None
        open_lines = []

    for line in split_dump_lines(raw_text):
        delimiter, captured = _match_delimiter(line, delimiters)
        if delimiter is None:
            if open_path is not None:
                open_lines.append(line)
            continue
        seal()
        if delimiter.kind == "open":
            open_path = captured
    seal()
    return tuple(records)


def _match_delimiter(
    line: str, delimiters: tuple[DelimiterMatcher, ...]
) -> tuple[DelimiterMatcher | None, str]:
    for delimiter in delimiters:
        captured = delimiter.match(line)
        if captured is not None:
            return delimiter, captured
    return None, ""
