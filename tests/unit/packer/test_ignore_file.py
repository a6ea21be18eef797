from __future__ import annotations

from pathlib import Path

import pytest

from codebase_mcp.packer import load_ignore_globs, merge_ignore_globs


def test_missing_ignore_file_returns_none(tmp_path: Path) -> None:
    assert load_ignore_globs(tmp_path) is None


def test_ignore_file_skips_blank_and_comment_lines(tmp_path: Path) -> None:
    (tmp_path / ".codebaseignore").write_text(
        "\n".join(
            [
                "# generated artifacts",
                "dist/**",
                "",
                "   ",
                "  node_modules/**  ",
                "   # indented comment",
                "*.log",
            ]
        )
        + "\n",
        encoding="utf-8",
    )

    assert load_ignore_globs(tmp_path) == "dist/**,node_modules/**,*.log"


def test_ignore_file_with_only_comments_returns_none(tmp_path: Path) -> None:
    (tmp_path / ".codebaseignore").write_text("# nothing here\n\n", encoding="utf-8")

    assert load_ignore_globs(tmp_path) is None


def test_ignore_file_handles_crlf_line_endings(tmp_path: Path) -> None:
    (tmp_path / ".codebaseignore").write_bytes(b"build/**\r\n*.tmp\r\n")

    assert load_ignore_globs(tmp_path) == "build/**,*.tmp"


def test_unreadable_ignore_path_propagates_os_error(tmp_path: Path) -> None:
    (tmp_path / ".codebaseignore").mkdir()

    with pytest.raises(OSError):
        load_ignore_globs(tmp_path)


def test_merge_puts_caller_patterns_first() -> None:
    assert merge_ignore_globs("*.md", "dist/**,*.log") == "*.md,dist/**,*.log"
    assert merge_ignore_globs("*.md", None) == "*.md"
    assert merge_ignore_globs(None, "dist/**") == "dist/**"
    assert merge_ignore_globs(None, None) is None
    assert merge_ignore_globs("", None) is None
