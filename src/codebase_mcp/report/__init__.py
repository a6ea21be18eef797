"""Report parsing for packer console output."""

from .sections import (
    DEFAULT_REPORT_MARKERS,
    SUMMARY_FALLBACK_LINES,
    ReportMarkers,
    ReportSections,
    extract_directory_structure,
    extract_sections,
    extract_summary,
    filter_report_noise,
    render_sections,
)

__all__ = [
    "DEFAULT_REPORT_MARKERS",
    "ReportMarkers",
    "ReportSections",
    "SUMMARY_FALLBACK_LINES",
    "extract_directory_structure",
    "extract_sections",
    "extract_summary",
    "filter_report_noise",
    "render_sections",
]
