"""Heuristic section extraction from Repomix console reports.

The report printed by Repomix is meant for humans and its layout changes
between releases, so nothing here parses a grammar. Sections are located
by marker strings, and every step has a fallback that still returns
something useful when markers move or disappear.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

SUMMARY_FALLBACK_LINES = 20


@dataclass(slots=True, frozen=True)
class ReportMarkers:
    """Marker strings used to filter and slice a Repomix report."""

    noise_substrings: tuple[str, ...] = (
        "Repomix is now available",
        "https://repomix.com",
        "Pack your codebase into AI-friendly formats",
    )
    noise_substrings_casefold: tuple[str, ...] = ("repomix",)
    directory_heading: str = r"Directory Structure:?"
    directory_terminators: tuple[str, ...] = ("Pack Summary", "Total Files")
    summary_starts: tuple[str, ...] = ("Pack Summary:", "Total Files:")
    summary_fallback_lines: int = SUMMARY_FALLBACK_LINES


DEFAULT_REPORT_MARKERS = ReportMarkers()


@dataclass(slots=True, frozen=True)
class ReportSections:
    """Sections recovered from one report."""

    directory_structure: str | None
    summary: str


def filter_report_noise(raw_output: str, markers: ReportMarkers = DEFAULT_REPORT_MARKERS) -> str:
    """Drop banner and promotional lines, then trim the remaining text."""
    kept: list[str] = []
    for line in raw_output.split("\n"):
        if any(marker in line for marker in markers.noise_substrings):
            continue
        folded = line.casefold()
        if any(marker.casefold() in folded for marker in markers.noise_substrings_casefold):
            continue
        kept.append(line)
    return "\n".join(kept).strip()


def extract_directory_structure(
    filtered: str, markers: ReportMarkers = DEFAULT_REPORT_MARKERS
) -> str | None:
    """Return the text between the directory heading and the next summary marker."""
    heading = re.search(markers.directory_heading, filtered, flags=re.IGNORECASE)
    if heading is None:
        return None
    end = len(filtered)
    for terminator in markers.directory_terminators:
        position = filtered.find(terminator, heading.start() + 1)
        if position != -1:
            end = min(end, position)
    body = filtered[heading.end() : end].strip()
    return body or None


def extract_summary(filtered: str, markers: ReportMarkers = DEFAULT_REPORT_MARKERS) -> str:
    """Return everything from the first summary marker, else the report tail."""
    starts = [
        position
        for position in (filtered.find(marker) for marker in markers.summary_starts)
        if position != -1
    ]
    if starts:
        return filtered[min(starts) :].strip()
    lines = filtered.strip().split("\n")
    return "\n".join(lines[-markers.summary_fallback_lines :])


def extract_sections(
    raw_output: str, markers: ReportMarkers = DEFAULT_REPORT_MARKERS
) -> ReportSections:
    """Filter a raw report and recover its directory and summary sections."""
    filtered = filter_report_noise(raw_output, markers)
    return ReportSections(
        directory_structure=extract_directory_structure(filtered, markers),
        summary=extract_summary(filtered, markers),
    )


def render_sections(sections: ReportSections) -> list[str]:
    """Render sections as the text blocks returned to the client."""
    blocks: list[str] = []
    if sections.directory_structure:
        blocks.append(
            f"<directory_structure>\n{sections.directory_structure}\n</directory_structure>"
        )
    blocks.append(sections.summary)
    return blocks
