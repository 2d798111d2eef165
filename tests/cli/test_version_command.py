# topmark:header:start
#
#   project      : Probity
#   file         : test_version_command.py
#   file_relpath : tests/cli/test_version_command.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI tests for `probity version` and the bare group invocation."""

from __future__ import annotations

import json

from click.testing import CliRunner, Result

from probity.cli.main import cli
from probity.constants import PROBITY_VERSION
from probity.exit_codes import ExitCode
from tests.conftest import mark_cli


@mark_cli
def test_version_plain() -> None:
    result: Result = CliRunner().invoke(cli, ["version"])

    assert result.exit_code == ExitCode.SUCCESS
    assert result.stdout.strip() == f"Probity {PROBITY_VERSION}"


@mark_cli
def test_version_json() -> None:
    result: Result = CliRunner().invoke(cli, ["version", "--json"])

    assert result.exit_code == ExitCode.SUCCESS
    assert json.loads(result.stdout) == {"version": PROBITY_VERSION}


@mark_cli
def test_group_without_command_prints_help() -> None:
    result: Result = CliRunner().invoke(cli, [])

    assert result.exit_code == ExitCode.SUCCESS
    assert "probity analyse" in result.stdout
    assert "analyse" in result.stdout
