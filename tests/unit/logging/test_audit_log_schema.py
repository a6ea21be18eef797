from __future__ import annotations

import json
from pathlib import Path

from codebase_mcp.logging import AuditEvent, JsonlAuditLogger, sanitize_arguments
from codebase_mcp.server import create_server


def _event(request_id: str, timestamp: str, tool: str = "searchCodebase") -> AuditEvent:
    return AuditEvent(
        timestamp=timestamp,
        request_id=request_id,
        tool=tool,
        ok=True,
        error_code=None,
        metadata={},
    )


def test_audit_log_writes_jsonl_schema(tmp_path: Path) -> None:
    server = create_server(working_dir=str(tmp_path))
    server.handle_payload(
        {"id": "req-100", "method": "searchCodebase", "params": {"file": "src/cli.ts"}}
    )

    audit_path = tmp_path / ".codebase_mcp" / "audit.jsonl"
    assert audit_path.exists()

    lines = audit_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])

    assert set(event.keys()) == {
        "error_code",
        "metadata",
        "ok",
        "request_id",
        "timestamp",
        "tool",
    }
    assert event["request_id"] == "req-100"
    assert event["tool"] == "searchCodebase"
    assert event["ok"] is True
    assert event["error_code"] is None
    assert event["metadata"] == {"file": "src/cli.ts"}


def test_data_dir_is_created_on_first_write(tmp_path: Path) -> None:
    server = create_server(working_dir=str(tmp_path))
    assert not (tmp_path / ".codebase_mcp").exists()

    server.handle_payload({"id": "req-1", "method": "tools/list"})
    assert not (tmp_path / ".codebase_mcp").exists()

    server.handle_payload({"id": "req-2", "method": "searchCodebase", "params": {}})
    assert (tmp_path / ".codebase_mcp" / "audit.jsonl").is_file()


def test_sanitize_hides_free_text_arguments() -> None:
    sanitized = sanitize_arguments(
        {
            "repo": "https://github.com/user/private-repo",
            "ignorePatterns": "secrets/**",
            "cwd": "/home/user/project",
            "maxLines": 10,
            "removeComments": True,
            "format": "xml",
            "extra": ["a", "b"],
        }
    )

    assert sanitized == {
        "cwd_length": len("/home/user/project"),
        "cwd_present": True,
        "extra_type": "list",
        "format": "xml",
        "ignorePatterns_length": len("secrets/**"),
        "ignorePatterns_present": True,
        "maxLines": 10,
        "removeComments": True,
        "repo_length": len("https://github.com/user/private-repo"),
        "repo_present": True,
    }


def test_reader_applies_since_and_limit(tmp_path: Path) -> None:
    logger = JsonlAuditLogger(tmp_path)
    for index, timestamp in enumerate(
        ["2026-01-01T00:00:00.000Z", "2026-01-02T00:00:00.000Z", "2026-01-03T00:00:00.000Z"]
    ):
        logger.append(_event(f"req-{index}", timestamp))
    with logger.path.open("a", encoding="utf-8") as handle:
        handle.write("{broken\n")
        handle.write("[1, 2]\n")

    assert [entry["request_id"] for entry in logger.read(limit=2)] == ["req-1", "req-2"]
    since = logger.read(since="2026-01-02T00:00:00.000Z", limit=10)
    assert [entry["request_id"] for entry in since] == ["req-1", "req-2"]
    assert logger.read(limit=0) == []


def test_reader_filters_by_tool(tmp_path: Path) -> None:
    logger = JsonlAuditLogger(tmp_path)
    logger.append(_event("req-1", "2026-01-01T00:00:00.000Z", tool="saveCodebase"))
    logger.append(_event("req-2", "2026-01-01T00:00:01.000Z", tool="searchCodebase"))
    logger.append(_event("req-3", "2026-01-01T00:00:02.000Z", tool="saveCodebase"))

    entries = logger.read(limit=10, tool="saveCodebase")

    assert [entry["request_id"] for entry in entries] == ["req-1", "req-3"]


def test_reader_without_file_returns_empty(tmp_path: Path) -> None:
    assert JsonlAuditLogger(tmp_path / "missing").read() == []
