"""Subprocess execution of the external packaging tool."""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

from codebase_mcp.config import PackerConfig

LOGGER = logging.getLogger(__name__)


class PackerError(Exception):
    """Raised when the packaging tool fails or its output is unusable."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.returncode = returncode


def run_packer(command: list[str], cwd: Path, config: PackerConfig) -> str:
    """Run one packer command to completion and return its stdout."""
    LOGGER.info("Running command: %s", shlex.join(command))
    try:
        completed = subprocess.run(
            command,
            cwd=cwd,
            check=False,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=config.timeout_seconds,
        )
    except FileNotFoundError as error:
        raise PackerError(f"Packer executable not found: {command[0]}") from error
    except subprocess.TimeoutExpired as error:
        raise PackerError(
            f"Command timed out after {config.timeout_seconds} seconds: {shlex.join(command)}"
        ) from error

    if completed.returncode != 0:
        detail = (completed.stderr or "").strip() or (completed.stdout or "").strip()
        message = f"Command failed with exit code {completed.returncode}: {shlex.join(command)}"
        if detail:
            message = f"{message}\n{detail}"
        raise PackerError(message, returncode=completed.returncode)

    output = completed.stdout or ""
    if len(output.encode("utf-8")) > config.max_output_bytes:
        raise PackerError(
            f"Command output exceeds max_output_bytes limit ({config.max_output_bytes} bytes)."
        )
    return output
