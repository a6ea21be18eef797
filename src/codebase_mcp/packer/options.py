"""Pack options and Repomix argument construction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

OUTPUT_STYLES: Final[tuple[str, ...]] = ("xml", "markdown", "plain")


@dataclass(slots=True, frozen=True)
class PackOptions:
    """Output options shared by every packing tool."""

    style: str = "xml"
    include_file_summary: bool = True
    include_directory_structure: bool = True
    remove_comments: bool = False
    remove_empty_lines: bool = False
    show_line_numbers: bool = True
    include_patterns: str | None = None
    ignore_patterns: str | None = None


def build_pack_command(
    base_command: tuple[str, ...],
    output_path: str,
    options: PackOptions,
    remote: str | None = None,
) -> list[str]:
    """Build the argument vector for one Repomix invocation."""
    if options.style not in OUTPUT_STYLES:
        raise ValueError(f"Unsupported output style: {options.style}")
    command = list(base_command)
    if remote is not None:
        command.extend(["--remote", remote])
    command.extend(["--output", output_path, "--style", options.style])
    if options.remove_comments:
        command.append("--remove-comments")
    if options.remove_empty_lines:
        command.append("--remove-empty-lines")
    if options.show_line_numbers:
        command.append("--output-show-line-numbers")
    if not options.include_file_summary:
        command.append("--no-file-summary")
    if not options.include_directory_structure:
        command.append("--no-directory-structure")
    if options.include_patterns:
        command.extend(["--include", options.include_patterns])
    if options.ignore_patterns:
        command.extend(["--ignore", options.ignore_patterns])
    return command
