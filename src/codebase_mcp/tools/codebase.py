"""Codebase tools: pack with Repomix, save, and read back excerpts."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from codebase_mcp.bundle import find_file_record, parse_bundle, render_file_snippet
from codebase_mcp.config import DEFAULT_REMOTE_CODEBASE_FILE, ServerConfig
from codebase_mcp.packer import (
    OUTPUT_STYLES,
    PackerError,
    PackOptions,
    build_pack_command,
    load_ignore_globs,
    merge_ignore_globs,
    run_packer,
)
from codebase_mcp.report import extract_sections, render_sections
from codebase_mcp.tools.registry import ToolDispatchError, ToolHandler, ToolRegistry

LOGGER = logging.getLogger(__name__)

AUDIT_LOG_DEFAULT_LIMIT = 50
AUDIT_LOG_LIMIT_CAP = 200

AuditReader = Callable[[str | None, int, str | None], list[dict[str, object]]]


def register_codebase_tools(
    registry: ToolRegistry,
    config: ServerConfig,
    read_audit_entries: AuditReader,
) -> None:
    """Register the codebase tool set."""
    registry.register(
        "getCodebase",
        _get_codebase_handler(config),
        "Retrieve the entire codebase as a single text output using Repomix.",
    )
    registry.register(
        "getRemoteCodebase",
        _get_remote_codebase_handler(config),
        "Retrieve a remote repository's codebase as a single text output using Repomix.",
    )
    registry.register(
        "saveCodebase",
        _save_codebase_handler(config),
        "Save the codebase to a file using Repomix.",
    )
    registry.register(
        "searchCodebase",
        _search_codebase_handler(config),
        "Return the content of a specific file from a saved codebase, with line numbers.",
    )
    registry.register(
        "getAuditLog",
        _audit_log_handler(read_audit_entries),
        "Return recent sanitized request audit entries.",
    )


def text_result(*texts: str) -> dict[str, object]:
    """Build a tool result made of plain text content blocks."""
    return {"content": [{"type": "text", "text": text} for text in texts]}


def _get_codebase_handler(config: ServerConfig) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        options = _pack_options(arguments, "getCodebase")
        working_dir = _working_dir(config, _optional_str(arguments, "cwd", "getCodebase"))
        try:
            _require_directory(working_dir)
            ignore = merge_ignore_globs(options.ignore_patterns, load_ignore_globs(working_dir))
            command = build_pack_command(
                config.packer.command,
                output_path=config.search.codebase_file,
                options=replace(options, ignore_patterns=ignore),
            )
            output = run_packer(command, cwd=working_dir, config=config.packer)
        except (PackerError, OSError, UnicodeDecodeError) as error:
            LOGGER.error("Error running Repomix: %s", error)
            return text_result(f"Error retrieving codebase: {error}")
        return text_result(*render_sections(extract_sections(output)))

    return handler


def _get_remote_codebase_handler(config: ServerConfig) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        repo = _optional_str(arguments, "repo", "getRemoteCodebase")
        if repo is None or not repo.strip():
            return text_result("Parameter 'repo' is required.")
        options = _pack_options(arguments, "getRemoteCodebase")
        try:
            command = build_pack_command(
                config.packer.command,
                output_path=DEFAULT_REMOTE_CODEBASE_FILE,
                options=options,
                remote=repo.strip(),
            )
            output = run_packer(command, cwd=config.working_dir, config=config.packer)
        except (PackerError, OSError) as error:
            LOGGER.error("Error running Repomix on remote repository: %s", error)
            return text_result(f"Error retrieving remote codebase: {error}")
        return text_result(output)

    return handler


def _save_codebase_handler(config: ServerConfig) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        options = _pack_options(arguments, "saveCodebase")
        working_dir = _working_dir(config, _optional_str(arguments, "cwd", "saveCodebase"))
        output_file = (
            _optional_str(arguments, "outputFile", "saveCodebase") or config.save.output_file
        )
        output_path = _resolve_against(working_dir, output_file)
        try:
            _require_directory(working_dir)
            ignore = merge_ignore_globs(options.ignore_patterns, load_ignore_globs(working_dir))
            command = build_pack_command(
                config.packer.command,
                output_path=str(output_path),
                options=replace(options, ignore_patterns=ignore),
            )
            run_packer(command, cwd=working_dir, config=config.packer)
            if not output_path.is_file():
                return text_result(
                    f"Failed to save codebase to {output_path}. File was not created."
                )
            size_mb = output_path.stat().st_size / (1024 * 1024)
        except (PackerError, OSError, UnicodeDecodeError) as error:
            LOGGER.error("Error saving codebase: %s", error)
            return text_result(f"Error saving codebase: {error}")
        return text_result(f"Codebase saved successfully to {output_path} ({size_mb:.2f} MB)")

    return handler


def _search_codebase_handler(config: ServerConfig) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        codebase = (
            _optional_str(arguments, "codebase", "searchCodebase") or config.search.codebase_file
        )
        max_lines = arguments.get("maxLines", config.search.max_lines)
        if max_lines is None:
            max_lines = config.search.max_lines
        if isinstance(max_lines, float) and max_lines.is_integer():
            max_lines = int(max_lines)
        if isinstance(max_lines, bool) or not isinstance(max_lines, int) or max_lines < 0:
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="searchCodebase maxLines must be an integer >= 0.",
            )
        file_value = arguments.get("file")
        if file_value is not None and not isinstance(file_value, str):
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="searchCodebase file must be a string.",
            )

        codebase_path = _resolve_against(config.working_dir, codebase)
        if not codebase_path.is_file():
            return text_result(f"Codebase file not found: {codebase}")
        if not file_value or not file_value.strip():
            return text_result("Parameter 'file' is required.")

        try:
            raw = codebase_path.read_text(encoding="utf-8", errors="replace")
        except OSError as error:
            LOGGER.error("Error reading codebase file %s: %s", codebase_path, error)
            return text_result(f"Error while extracting file: {error}")

        record = find_file_record(parse_bundle(raw), file_value)
        if record is None:
            return text_result(f'File "{file_value}" not found in codebase.')
        return text_result(render_file_snippet(record, max_lines))

    return handler


def _audit_log_handler(read_audit_entries: AuditReader) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        since = _optional_str(arguments, "since", "getAuditLog")
        tool = _optional_str(arguments, "tool", "getAuditLog")
        limit = arguments.get("limit", AUDIT_LOG_DEFAULT_LIMIT)
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise ToolDispatchError(
                code="INVALID_PARAMS",
                message="getAuditLog limit must be an integer.",
            )
        limit = max(1, min(limit, AUDIT_LOG_LIMIT_CAP))
        return {"entries": read_audit_entries(since, limit, tool)}

    return handler


def _pack_options(arguments: dict[str, object], tool: str) -> PackOptions:
    defaults = PackOptions()
    style = _optional_str(arguments, "format", tool) or defaults.style
    if style not in OUTPUT_STYLES:
        raise ToolDispatchError(
            code="INVALID_PARAMS",
            message=f"{tool} format must be one of: {', '.join(OUTPUT_STYLES)}.",
        )
    return PackOptions(
        style=style,
        include_file_summary=_optional_bool(
            arguments, "includeFileSummary", defaults.include_file_summary, tool
        ),
        include_directory_structure=_optional_bool(
            arguments, "includeDirectoryStructure", defaults.include_directory_structure, tool
        ),
        remove_comments=_optional_bool(arguments, "removeComments", defaults.remove_comments, tool),
        remove_empty_lines=_optional_bool(
            arguments, "removeEmptyLines", defaults.remove_empty_lines, tool
        ),
        show_line_numbers=_optional_bool(
            arguments, "showLineNumbers", defaults.show_line_numbers, tool
        ),
        include_patterns=_optional_str(arguments, "includePatterns", tool),
        ignore_patterns=_optional_str(arguments, "ignorePatterns", tool),
    )


def _optional_str(arguments: dict[str, object], key: str, tool: str) -> str | None:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ToolDispatchError(code="INVALID_PARAMS", message=f"{tool} {key} must be a string.")
    return value or None


def _optional_bool(arguments: dict[str, object], key: str, default: bool, tool: str) -> bool:
    value = arguments.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ToolDispatchError(code="INVALID_PARAMS", message=f"{tool} {key} must be a boolean.")
    return value


def _working_dir(config: ServerConfig, cwd: str | None) -> Path:
    if cwd is None:
        return config.working_dir
    return _resolve_against(config.working_dir, cwd)


def _resolve_against(base: Path, candidate: str) -> Path:
    path = Path(candidate).expanduser()
    if path.is_absolute():
        return path
    return base / path


def _require_directory(path: Path) -> None:
    if not path.is_dir():
        raise NotADirectoryError(f"Working directory does not exist: {path}")
