from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from codebase_mcp.server import create_server

RAW = "Repomix v0.2.0\nPack Summary:\nTotal Files: 3 files\n"


def test_remote_codebase_returns_raw_output(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    calls: list[dict[str, object]] = []

    def fake_run(command: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        calls.append({"command": command, **kwargs})
        return subprocess.CompletedProcess(command, 0, stdout=RAW, stderr="")

    monkeypatch.setattr("codebase_mcp.packer.runner.subprocess.run", fake_run)
    (tmp_path / ".codebaseignore").write_text("local-only/**\n", encoding="utf-8")
    server = create_server(working_dir=str(tmp_path))

    response = server.handle_payload(
        {
            "id": "req-1",
            "method": "getRemoteCodebase",
            "params": {"repo": " user/repo ", "ignorePatterns": "tests/**"},
        }
    )

    assert response["result"]["content"] == [{"type": "text", "text": RAW}]
    command = calls[0]["command"]
    assert command[:4] == ["npx", "repomix", "--remote", "user/repo"]
    assert command[command.index("--output") + 1] == "remote.codebase"
    assert command[command.index("--ignore") + 1] == "tests/**"
    assert calls[0]["cwd"] == tmp_path.resolve()


def test_remote_codebase_requires_repo(tmp_path: Path) -> None:
    server = create_server(working_dir=str(tmp_path))

    response = server.handle_payload(
        {"id": "req-2", "method": "getRemoteCodebase", "params": {"repo": "   "}}
    )

    assert response["result"]["content"][0]["text"] == "Parameter 'repo' is required."


def test_remote_codebase_timeout_is_reported(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    def fake_run(command: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        raise subprocess.TimeoutExpired(command, kwargs["timeout"])

    monkeypatch.setattr("codebase_mcp.packer.runner.subprocess.run", fake_run)
    (tmp_path / "codebase_mcp.toml").write_text("[packer]\ntimeout_seconds = 5\n", encoding="utf-8")
    server = create_server(working_dir=str(tmp_path))

    response = server.handle_payload(
        {"id": "req-3", "method": "getRemoteCodebase", "params": {"repo": "user/repo"}}
    )

    text = response["result"]["content"][0]["text"]
    assert text.startswith("Error retrieving remote codebase: Command timed out after 5 seconds")
