# topmark:header:start
#
#   project      : Probity
#   file         : main.py
#   file_relpath : src/probity/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Probity command-line interface.

Key ideas:
- Group-level options (verbosity, color) are initialized once, placed into ``ctx.obj``.
- ``ctx.obj`` carries the two output streams shared by all subcommands:
  ``std_output`` (stdout) and ``error_output`` (stderr).
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import click

from probity.cli.commands.analyse import analyse_command
from probity.cli.commands.version import version_command
from probity.cli.console import ClickOutput
from probity.cli.options import (
    ColorMode,
    common_color_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from probity.config.logging import get_logger, resolve_env_log_level, setup_logging

if TYPE_CHECKING:
    from probity.config.logging import ProbityLogger

logger: ProbityLogger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging, color, outputs) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (ColorMode | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}

    # Configure program-output verbosity:
    level_cli: int = resolve_verbosity(verbose, quiet)
    ctx.obj["verbosity_level"] = level_cli

    # Configure internal logging via env:
    level_env = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env)

    effective_color_mode = ColorMode.NEVER if no_color else ColorMode(color_mode or ColorMode.AUTO)
    enable_color: bool = resolve_color_mode(cli_mode=effective_color_mode)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color
    logger.debug("Output verbosity: %d, color: %s", level_cli, enable_color)

    ctx.obj["std_output"] = ClickOutput(stream=sys.stdout, enable_color=enable_color)
    ctx.obj["error_output"] = ClickOutput(
        stream=sys.stderr,
        enable_color=enable_color,
        quiet=level_cli >= logging.ERROR,
    )


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="Probity: batch static analysis for Python sources.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Entry point for the Probity CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=color_mode,
        no_color=no_color,
    )
    std_output: ClickOutput = ctx.obj["std_output"]

    if ctx.invoked_subcommand is None:
        std_output.write_line("Hint: use 'probity analyse [PATHS...]' to analyse sources.")
        std_output.write_line()
        std_output.write_line(ctx.get_help())


cli.add_command(analyse_command)

cli.add_command(version_command)

if __name__ == "__main__":
    cli()
