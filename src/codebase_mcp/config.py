"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "codebase_mcp.toml"

TIMEOUT_SECONDS_CAP = 60 * 60
MAX_OUTPUT_BYTES_CAP = 256 * 1024 * 1024
MAX_LINES_CAP = 10_000

DEFAULT_PACKER_COMMAND = ("npx", "repomix")
DEFAULT_TIMEOUT_SECONDS = 600
DEFAULT_MAX_OUTPUT_BYTES = 50 * 1024 * 1024
DEFAULT_CODEBASE_FILE = "project.codebase"
DEFAULT_REMOTE_CODEBASE_FILE = "remote.codebase"
DEFAULT_SAVE_OUTPUT_FILE = "repomix-output.txt"
DEFAULT_MAX_LINES = 40


@dataclass(slots=True, frozen=True)
class PackerConfig:
    """How the external packaging tool is invoked."""

    command: tuple[str, ...]
    timeout_seconds: int
    max_output_bytes: int


@dataclass(slots=True, frozen=True)
class SearchConfig:
    """Defaults for reading excerpts out of a saved codebase file."""

    codebase_file: str
    max_lines: int


@dataclass(slots=True, frozen=True)
class SaveConfig:
    """Defaults for saving a codebase file."""

    output_file: str


@dataclass(slots=True, frozen=True)
class ServerConfig:
    """Fully merged server configuration."""

    working_dir: Path
    data_dir: Path
    packer: PackerConfig
    search: SearchConfig
    save: SaveConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "working_dir": str(self.working_dir),
            "data_dir": str(self.data_dir),
            "packer": {
                "command": list(self.packer.command),
                "timeout_seconds": self.packer.timeout_seconds,
                "max_output_bytes": self.packer.max_output_bytes,
            },
            "search": {
                "codebase_file": self.search.codebase_file,
                "max_lines": self.search.max_lines,
            },
            "save": {
                "output_file": self.save.output_file,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    packer_command: tuple[str, ...] | None = None
    timeout_seconds: int | None = None
    max_output_bytes: int | None = None


def default_config(working_dir: Path) -> ServerConfig:
    """Build default config for a given working directory."""
    resolved = working_dir.resolve()
    return ServerConfig(
        working_dir=resolved,
        data_dir=resolved / ".codebase_mcp",
        packer=PackerConfig(
            command=DEFAULT_PACKER_COMMAND,
            timeout_seconds=DEFAULT_TIMEOUT_SECONDS,
            max_output_bytes=DEFAULT_MAX_OUTPUT_BYTES,
        ),
        search=SearchConfig(codebase_file=DEFAULT_CODEBASE_FILE, max_lines=DEFAULT_MAX_LINES),
        save=SaveConfig(output_file=DEFAULT_SAVE_OUTPUT_FILE),
    )


def load_config_file(working_dir: Path) -> dict[str, object]:
    """Load optional codebase_mcp.toml from the working directory."""
    config_path = working_dir / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _command_tuple(value: object, name: str) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)) or not value:
        raise ValueError(f"Config field '{name}' must be a non-empty list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item:
            raise ValueError(f"Config field '{name}' must contain only non-empty strings.")
        output.append(item)
    return tuple(output)


def _optional_string(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    return value


def merge_config(
    base: ServerConfig, payload: dict[str, object], overrides: CliOverrides
) -> ServerConfig:
    """Merge defaults, working-directory config, then CLI/startup overrides."""
    packer_payload = _get_table(payload, "packer")
    search_payload = _get_table(payload, "search")
    save_payload = _get_table(payload, "save")

    command = base.packer.command
    if "command" in packer_payload:
        command = _command_tuple(packer_payload["command"], "packer.command")

    merged = ServerConfig(
        working_dir=base.working_dir,
        data_dir=base.data_dir,
        packer=PackerConfig(
            command=command,
            timeout_seconds=_optional_positive_int_with_cap(
                packer_payload.get("timeout_seconds"),
                "packer.timeout_seconds",
                base.packer.timeout_seconds,
                TIMEOUT_SECONDS_CAP,
            ),
            max_output_bytes=_optional_positive_int_with_cap(
                packer_payload.get("max_output_bytes"),
                "packer.max_output_bytes",
                base.packer.max_output_bytes,
                MAX_OUTPUT_BYTES_CAP,
            ),
        ),
        search=SearchConfig(
            codebase_file=_optional_string(
                search_payload.get("codebase_file"),
                "search.codebase_file",
                base.search.codebase_file,
            ),
            max_lines=_optional_positive_int_with_cap(
                search_payload.get("max_lines"),
                "search.max_lines",
                base.search.max_lines,
                MAX_LINES_CAP,
            ),
        ),
        save=SaveConfig(
            output_file=_optional_string(
                save_payload.get("output_file"),
                "save.output_file",
                base.save.output_file,
            ),
        ),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ServerConfig, overrides: CliOverrides) -> ServerConfig:
    """Apply startup overrides at highest precedence."""
    command = config.packer.command
    if overrides.packer_command is not None:
        command = _command_tuple(overrides.packer_command, "overrides.packer_command")
    packer = PackerConfig(
        command=command,
        timeout_seconds=_optional_positive_int_with_cap(
            overrides.timeout_seconds,
            "overrides.timeout_seconds",
            config.packer.timeout_seconds,
            TIMEOUT_SECONDS_CAP,
        ),
        max_output_bytes=_optional_positive_int_with_cap(
            overrides.max_output_bytes,
            "overrides.max_output_bytes",
            config.packer.max_output_bytes,
            MAX_OUTPUT_BYTES_CAP,
        ),
    )
    data_dir = overrides.data_dir or config.data_dir
    return ServerConfig(
        working_dir=config.working_dir,
        data_dir=data_dir.resolve(),
        packer=packer,
        search=config.search,
        save=config.save,
    )


def load_effective_config(
    working_dir: Path, overrides: CliOverrides | None = None
) -> ServerConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved = working_dir.resolve()
    base = default_config(resolved)
    payload = load_config_file(resolved)
    return merge_config(base, payload, overrides or CliOverrides())


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
