# topmark:header:start
#
#   project      : Probity
#   file         : version.py
#   file_relpath : src/probity/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Probity `version` command.

Prints the current Probity version as installed in the active Python environment.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from probity.constants import PROBITY_VERSION

if TYPE_CHECKING:
    from probity.cli.console import ClickOutput


@click.command(
    name="version",
    help="Show the current version of Probity.",
)
@click.option("--json", "as_json", is_flag=True, help="Emit the version as a JSON object.")
def version_command(*, as_json: bool = False) -> None:
    """Show the current version of Probity.

    Args:
        as_json (bool): Emit ``{"version": ...}`` instead of plain text.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    std_output: ClickOutput = ctx.obj["std_output"]

    if as_json:
        std_output.write_line(json.dumps({"version": PROBITY_VERSION}))
    else:
        std_output.write_line(f"Probity {PROBITY_VERSION}")
