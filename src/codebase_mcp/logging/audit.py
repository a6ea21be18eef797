"""JSONL audit trail of tool requests.

One line per dispatched request. Repository URLs, working directories and
glob lists are reduced to presence and length before they reach disk; file
paths inside a dump, output formats and numeric limits are kept as-is.
"""

from __future__ import annotations

import json
from collections import deque
from collections.abc import Iterator
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

AUDIT_FILE_NAME = "audit.jsonl"

_VERBATIM_STRING_KEYS = frozenset({"file", "codebase", "format", "outputFile", "since", "tool"})
_VERBATIM_INT_KEYS = frozenset({"maxLines", "limit"})


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """Sanitized record of one tool request and its outcome."""

    timestamp: str
    request_id: str
    tool: str
    ok: bool
    error_code: str | None
    metadata: dict[str, object]

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), sort_keys=True) + "\n"


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_arguments(arguments: dict[str, object]) -> dict[str, object]:
    """Sanitize arguments so repository URLs, directories and globs are not logged verbatim."""
    sanitized: dict[str, object] = {}
    for key in sorted(arguments.keys()):
        value = arguments[key]
        if key in _VERBATIM_STRING_KEYS and isinstance(value, str):
            sanitized[key] = value
        elif key in _VERBATIM_INT_KEYS and isinstance(value, int):
            sanitized[key] = value
        elif isinstance(value, (int, float, bool)) or value is None:
            sanitized[key] = value
        elif isinstance(value, str):
            sanitized[f"{key}_present"] = True
            sanitized[f"{key}_length"] = len(value)
        else:
            sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


class JsonlAuditLogger:
    """Append-only audit file under the server data directory."""

    def __init__(self, data_dir: Path) -> None:
        self._path = data_dir / AUDIT_FILE_NAME

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: AuditEvent) -> None:
        """Append one event, creating the data directory on first write."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(event.to_json_line())

    def read(
        self, since: str | None = None, limit: int = 50, tool: str | None = None
    ) -> list[dict[str, object]]:
        """Return the newest `limit` events at or after `since`, oldest first.

        `tool` narrows the result to requests for one tool name. Lines that
        are not valid JSON objects are skipped.
        """
        if limit < 1:
            return []
        tail: deque[dict[str, object]] = deque(maxlen=limit)
        for record in self._records():
            if since is not None:
                timestamp = record.get("timestamp")
                if not isinstance(timestamp, str) or timestamp < since:
                    continue
            if tool is not None and record.get("tool") != tool:
                continue
            tail.append(record)
        return list(tail)

    def _records(self) -> Iterator[dict[str, object]]:
        if not self._path.exists():
            return
        with self._path.open("r", encoding="utf-8", errors="replace") as handle:
            for line in handle:
                stripped = line.strip()
                if not stripped:
                    continue
                try:
                    record = json.loads(stripped)
                except json.JSONDecodeError:
                    continue
                if isinstance(record, dict):
                    yield record
