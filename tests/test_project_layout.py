from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/codebase_mcp/server.py",
        "src/codebase_mcp/cli.py",
        "src/codebase_mcp/config.py",
        "src/codebase_mcp/tools/__init__.py",
        "src/codebase_mcp/bundle/__init__.py",
        "src/codebase_mcp/report/__init__.py",
        "src/codebase_mcp/packer/__init__.py",
        "src/codebase_mcp/logging/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
