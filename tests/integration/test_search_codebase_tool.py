from __future__ import annotations

from pathlib import Path

import pytest

from codebase_mcp.server import StdioServer, create_server

DUMP = "\n".join(
    [
        "This file is a merged representation of the entire codebase.",
        '<file path="src/App.ts">',
        "export function main() {",
        "  return 1;",
        "}",
        "</file>",
        "# File: ./docs/readme.md",
        "# Title",
        "",
        "Body text",
        '<file path="src/app.ts">',
        "lower",
        "</file>",
    ]
)


def _search(server: StdioServer, **params: object) -> dict[str, object]:
    return server.handle_payload({"id": "req-search", "method": "searchCodebase", "params": params})


def _text(response: dict[str, object]) -> str:
    assert response["ok"] is True
    content = response["result"]["content"]
    assert len(content) == 1
    return content[0]["text"]


@pytest.fixture
def server(tmp_path: Path) -> StdioServer:
    (tmp_path / "project.codebase").write_text(DUMP, encoding="utf-8")
    return create_server(working_dir=str(tmp_path))


def test_exact_match_returns_numbered_snippet(server: StdioServer) -> None:
    text = _text(_search(server, file="src/App.ts"))

    assert text == (
        '<file path="src/App.ts">\n'
        " 1: export function main() {\n"
        " 2:   return 1;\n"
        " 3: }\n"
        "</file>"
    )


def test_exact_match_wins_over_case_insensitive_match(server: StdioServer) -> None:
    assert _text(_search(server, file="src/app.ts")) == '<file path="src/app.ts">\n 1: lower\n</file>'


def test_case_insensitive_fallback_takes_first_in_dump_order(server: StdioServer) -> None:
    assert _text(_search(server, file="SRC/APP.TS")).startswith('<file path="src/App.ts">')


def test_heading_record_matches_backslash_and_dot_prefix(server: StdioServer) -> None:
    text = _text(_search(server, file="docs\\readme.md", maxLines=1))

    assert text == '<file path="./docs/readme.md">\n 1: # Title\n</file>'


def test_max_lines_zero_yields_empty_body(server: StdioServer) -> None:
    assert _text(_search(server, file="src/App.ts", maxLines=0)) == '<file path="src/App.ts">\n\n</file>'


def test_unknown_file_reports_not_found(server: StdioServer) -> None:
    assert _text(_search(server, file="src/missing.ts")) == (
        'File "src/missing.ts" not found in codebase.'
    )


def test_missing_file_parameter(server: StdioServer) -> None:
    assert _text(_search(server)) == "Parameter 'file' is required."


def test_missing_codebase_file(tmp_path: Path) -> None:
    server = create_server(working_dir=str(tmp_path))

    text = _text(_search(server, file="src/App.ts", codebase="other.codebase"))

    assert text == "Codebase file not found: other.codebase"


def test_configured_codebase_file_and_line_cap(tmp_path: Path) -> None:
    (tmp_path / "codebase_mcp.toml").write_text(
        '[search]\ncodebase_file = "snap.txt"\nmax_lines = 2\n', encoding="utf-8"
    )
    (tmp_path / "snap.txt").write_text(DUMP, encoding="utf-8")
    server = create_server(working_dir=str(tmp_path))

    text = _text(_search(server, file="src/App.ts"))

    assert text == '<file path="src/App.ts">\n 1: export function main() {\n 2:   return 1;\n</file>'


@pytest.mark.parametrize("max_lines", [-1, "10", True, 1.5])
def test_invalid_max_lines_is_invalid_params(server: StdioServer, max_lines: object) -> None:
    response = _search(server, file="src/App.ts", maxLines=max_lines)

    assert response["ok"] is False
    assert response["error"] == {
        "code": "INVALID_PARAMS",
        "message": "searchCodebase maxLines must be an integer >= 0.",
    }


def test_non_string_file_is_invalid_params(server: StdioServer) -> None:
    response = _search(server, file=["src/App.ts"])

    assert response["ok"] is False
    assert response["error"]["code"] == "INVALID_PARAMS"


def test_whole_number_float_max_lines_is_accepted(server: StdioServer) -> None:
    text = _text(_search(server, file="src/App.ts", maxLines=2.0))

    assert text == '<file path="src/App.ts">\n 1: export function main() {\n 2:   return 1;\n</file>'
