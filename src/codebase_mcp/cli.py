"""Command-line entrypoint: start the server, install Repomix, show versions."""

from __future__ import annotations

import argparse
import logging
import subprocess
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from codebase_mcp.config import DEFAULT_PACKER_COMMAND, CliOverrides
from codebase_mcp.server import create_server

INSTALL_COMMAND = ("npm", "install", "-g", "repomix")
USAGE = """Usage: codebase-mcp <command>
Commands:
  start   - Start the MCP server
  install - Install Repomix globally
  version - Show version information"""


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the CLI commands."""
    parser = argparse.ArgumentParser(prog="codebase-mcp", add_help=True)
    subparsers = parser.add_subparsers(dest="command")

    start = subparsers.add_parser("start", help="Start the MCP server on stdio.")
    start.add_argument("--working-dir", required=False, default=".")
    start.add_argument("--data-dir", required=False, default=None)
    start.add_argument("--timeout-seconds", type=int, required=False, default=None)
    start.add_argument("--max-output-bytes", type=int, required=False, default=None)
    start.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        required=False,
        default="INFO",
    )

    subparsers.add_parser("install", help="Install Repomix globally with npm.")
    subparsers.add_parser("version", help="Show codebase-mcp and Repomix versions.")
    return parser


def package_version() -> str:
    """Return the installed codebase-mcp version."""
    try:
        return version("codebase-mcp")
    except PackageNotFoundError:
        return "unknown"


def repomix_version(command: tuple[str, ...] = DEFAULT_PACKER_COMMAND) -> str | None:
    """Return the Repomix version string, or None when it cannot be run."""
    try:
        completed = subprocess.run(
            [*command, "--version"],
            check=False,
            capture_output=True,
            text=True,
            timeout=60,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if completed.returncode != 0:
        return None
    return completed.stdout.strip() or None


def _start(args: argparse.Namespace) -> int:
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        timeout_seconds=args.timeout_seconds,
        max_output_bytes=args.max_output_bytes,
    )
    try:
        server = create_server(working_dir=args.working_dir, cli_overrides=overrides)
    except ValueError as error:
        print(f"Failed to start MCP server: {error}", file=sys.stderr)
        return 1
    print("Starting Codebase MCP Server...", file=sys.stderr)
    server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
    return 0


def _install() -> int:
    print("Installing Repomix globally...")
    try:
        completed = subprocess.run(list(INSTALL_COMMAND), check=False)
    except OSError as error:
        print(f"Failed to install Repomix: {error}", file=sys.stderr)
        return 1
    if completed.returncode != 0:
        print(
            f"Failed to install Repomix: npm exited with code {completed.returncode}",
            file=sys.stderr,
        )
        return 1
    print("Repomix installed successfully!")
    return 0


def _version() -> int:
    print(f"codebase-mcp version: {package_version()}")
    packer_version = repomix_version()
    if packer_version is None:
        print("Repomix is not installed or not available in PATH")
    else:
        print(f"Repomix version: {packer_version}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the codebase-mcp command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.command == "start":
        return _start(args)
    if args.command == "install":
        return _install()
    if args.command == "version":
        return _version()
    print(USAGE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
