# topmark:header:start
#
#   project      : Probity
#   file         : test_error_formatters.py
#   file_relpath : tests/formatters/test_error_formatters.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the table, raw and JSON error formatters."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from probity.analyser.diagnostics import FileError
from probity.command.formatters import ErrorFormat, get_error_formatter
from probity.command.formatters.json import JsonErrorFormatter, build_json_payload
from probity.command.formatters.raw import RawErrorFormatter
from probity.command.formatters.table import (
    DEFAULT_LEVEL_TIP,
    INFERRABLE_PROPERTY_TYPES_TIP,
    TableErrorFormatter,
)
from probity.command.result import AnalysisResult
from probity.exit_codes import ExitCode
from tests.conftest import RecordingOutput, parametrize

if TYPE_CHECKING:
    from probity.command.formatters.base import ErrorFormatter


def _result(
    file_errors: tuple[FileError, ...] = (),
    global_errors: tuple[str, ...] = (),
    *,
    default_level_used: bool = False,
    inferrable: bool = False,
    config_file: str | None = None,
) -> AnalysisResult:
    return AnalysisResult(
        file_specific_errors=file_errors,
        not_file_specific_errors=global_errors,
        default_level_used=default_level_used,
        has_inferrable_property_types_from_constructor=inferrable,
        project_config_file=config_file,
    )


ERRORS = (
    FileError("/src/a.py", 3, "Method A.f() is already defined on line 1."),
    FileError("/src/b.py", None, "Cannot read file: denied", can_be_ignored=False),
    FileError("/src/a.py", 9, "Unreachable statement", tip="Remove it."),
)


def test_table_success_with_tips() -> None:
    output = RecordingOutput()

    status: int = TableErrorFormatter().format_errors(
        _result(default_level_used=True, inferrable=True, config_file="/p/probity.toml"), output
    )

    assert status == ExitCode.SUCCESS
    assert output.lines[0] == "Note: Using configuration file /p/probity.toml."
    assert any("[OK] No errors" in line for line in output.lines)
    assert output.lines.index(DEFAULT_LEVEL_TIP) < output.lines.index(INFERRABLE_PROPERTY_TYPES_TIP)


def test_table_success_without_tips() -> None:
    output = RecordingOutput()

    TableErrorFormatter().format_errors(_result(), output)

    assert DEFAULT_LEVEL_TIP not in output.lines
    assert INFERRABLE_PROPERTY_TYPES_TIP not in output.lines


def test_table_failure_lists_every_error() -> None:
    output = RecordingOutput()

    status: int = TableErrorFormatter().format_errors(
        _result(ERRORS, ("cfg missing",), inferrable=True), output
    )

    assert status == ExitCode.FAILURE
    text: str = output.text
    assert text.index("/src/a.py") < text.index("/src/b.py")
    for needle in ("already defined", "Cannot read file", "Tip: Remove it.", "cfg missing"):
        assert needle in text
    assert "[ERROR] Found 4 errors" in text
    assert output.lines[-1] == INFERRABLE_PROPERTY_TYPES_TIP


def test_table_failure_singular_noun() -> None:
    output = RecordingOutput()

    TableErrorFormatter().format_errors(_result(global_errors=("only one",)), output)

    assert "[ERROR] Found 1 error " in output.text


def test_raw_format() -> None:
    output = RecordingOutput()

    status: int = RawErrorFormatter().format_errors(_result(ERRORS, ("cfg missing",)), output)

    assert status == ExitCode.FAILURE
    assert output.lines == [
        "?:?:cfg missing",
        "/src/a.py:3:Method A.f() is already defined on line 1.",
        "/src/b.py:?:Cannot read file: denied",
        "/src/a.py:9:Unreachable statement",
    ]


def test_json_payload_shape() -> None:
    payload = build_json_payload(_result(ERRORS, ("cfg missing",)))

    assert payload["totals"] == {"errors": 1, "file_errors": 3}
    assert list(payload["files"]) == ["/src/a.py", "/src/b.py"]
    assert payload["files"]["/src/a.py"]["errors"] == 2
    assert payload["files"]["/src/a.py"]["messages"][1] == {
        "message": "Unreachable statement",
        "line": 9,
        "ignorable": True,
        "tip": "Remove it.",
    }
    assert payload["files"]["/src/b.py"]["messages"][0]["line"] is None
    assert payload["errors"] == ["cfg missing"]


def test_json_formatter_writes_one_document() -> None:
    output = RecordingOutput()

    status: int = JsonErrorFormatter().format_errors(_result(), output)

    assert status == ExitCode.SUCCESS
    assert len(output.lines) == 1
    assert json.loads(output.lines[0]) == {
        "totals": {"errors": 0, "file_errors": 0},
        "files": {},
        "errors": [],
    }


@parametrize(
    ("error_format", "expected"),
    [
        (ErrorFormat.TABLE, TableErrorFormatter),
        (ErrorFormat.RAW, RawErrorFormatter),
        (ErrorFormat.JSON, JsonErrorFormatter),
        (ErrorFormat.PRETTY_JSON, JsonErrorFormatter),
    ],
)
def test_get_error_formatter(error_format: ErrorFormat, expected: type) -> None:
    formatter: ErrorFormatter = get_error_formatter(error_format)

    assert isinstance(formatter, expected)


def test_pretty_json_is_indented() -> None:
    output = RecordingOutput()

    get_error_formatter(ErrorFormat.PRETTY_JSON).format_errors(_result(), output)

    assert "\n  " in output.lines[0]
