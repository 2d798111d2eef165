# topmark:header:start
#
#   project      : Probity
#   file         : analyse.py
#   file_relpath : src/probity/cli/commands/analyse.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Probity `analyse` command.

Analyses the given paths (or the configured ``paths``) and reports the
diagnostics with the selected error formatter. The process exits with the
formatter's status.

Examples:
  Analyse a source tree with the default table output:

    $ probity analyse src

  Raise the rule level and emit JSON:

    $ probity analyse --level max --error-format json src

  List files as they are analysed (no progress bar) and record timestamps:

    $ probity analyse --debug --changed src
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

import click

from probity.analyser.analyser import PythonAnalyser
from probity.cache.storage import FileCacheStorage
from probity.cli.cli_types import EnumChoiceParam
from probity.cli.errors import ProbityConfigError, ProbityUsageError
from probity.cli.files import resolve_file_list
from probity.command.application import AnalyseApplication
from probity.command.formatters import ErrorFormat, get_error_formatter
from probity.config.logging import get_logger
from probity.config.model import ConfigError, load_config, parse_level
from probity.constants import PROBITY_VERSION

if TYPE_CHECKING:
    from probity.cli.console import ClickOutput
    from probity.config import Config
    from probity.config.logging import ProbityLogger

logger: ProbityLogger = get_logger(__name__)

_MACHINE_FORMATS: frozenset[ErrorFormat] = frozenset({ErrorFormat.JSON, ErrorFormat.PRETTY_JSON})


def _level_option(ctx: click.Context, param: click.Parameter, value: str | None) -> int | None:
    """Validate ``--level`` (0..max or ``max``)."""
    if value is None:
        return None
    try:
        return parse_level(value)
    except ConfigError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param) from e


def warn_about_previous_crash(memory_limit_file: Path, error_output: ClickOutput) -> None:
    """Report and remove a memory ceiling record left behind by a crashed run."""
    if not memory_limit_file.is_file():
        return
    try:
        consumed: str = memory_limit_file.read_text(encoding="utf-8").strip() or "an unknown amount"
    except OSError as e:
        logger.warning("Cannot read memory limit file %s: %s", memory_limit_file, e)
        consumed = "an unknown amount"

    error_output.warn(
        "Probity crashed in the previous run probably because of excessive memory consumption."
    )
    error_output.warn(f"It consumed around {consumed} of memory.")
    error_output.warn(
        "To avoid this issue, analyse fewer paths per run or make more memory available."
    )
    error_output.write_line()
    try:
        memory_limit_file.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Cannot remove memory limit file %s: %s", memory_limit_file, e)


def _resolve_error_format(config: Config, cli_format: ErrorFormat | None) -> ErrorFormat:
    if cli_format is not None:
        return cli_format
    for choice in ErrorFormat:
        if choice.value.lower() == config.error_format.lower():
            return choice
    raise ProbityConfigError(
        f"Invalid error_format '{config.error_format}'. "
        f"Must be one of: {', '.join(e.value for e in ErrorFormat)}"
    )


@click.command(
    name="analyse",
    help="Analyse source files and report problems.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "-c",
    "--configuration",
    "configuration",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to a configuration file (probity.toml or pyproject.toml).",
)
@click.option(
    "-l",
    "--level",
    "level",
    type=str,
    default=None,
    callback=_level_option,
    help="Rule level (0 = loosest, 'max' = strictest).",
)
@click.option(
    "--error-format",
    "error_format",
    type=EnumChoiceParam(ErrorFormat),
    default=None,
    help=f"Error output format ({', '.join(v.value for v in ErrorFormat)}).",
)
@click.option(
    "--debug",
    is_flag=True,
    help="List files as they are analysed (no progress bar); re-raise internal errors.",
)
@click.option(
    "--changed",
    is_flag=True,
    help="Record file modification times in the cache for incremental runs.",
)
@click.option(
    "--memory-limit-file",
    "memory_limit_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="File tracking the peak memory of the current run.",
)
@click.pass_context
def analyse_command(
    ctx: click.Context,
    *,
    paths: tuple[Path, ...],
    configuration: Path | None,
    level: int | None,
    error_format: ErrorFormat | None,
    debug: bool,
    changed: bool,
    memory_limit_file: Path | None,
) -> None:
    """Run an analysis and exit with the formatter's status.

    Args:
        ctx (click.Context): Click context; carries the output streams.
        paths (tuple[Path, ...]): Files and directories to analyse.
        configuration (Path | None): Explicit configuration file.
        level (int | None): Rule level override.
        error_format (ErrorFormat | None): Error formatter override.
        debug (bool): Debug mode.
        changed (bool): Changed-files (incremental) mode.
        memory_limit_file (Path | None): Memory ceiling record override.

    Raises:
        ProbityConfigError: If the configuration is missing or invalid.
        ProbityUsageError: If there is nothing to analyse.
    """
    std_output: ClickOutput = ctx.obj["std_output"]
    error_output: ClickOutput = ctx.obj["error_output"]
    verbosity_level: int = ctx.obj.get("verbosity_level", logging.WARNING)

    try:
        config: Config = load_config(
            config_path=configuration,
            overrides={
                "level": level,
                "paths": [str(p) for p in paths],
                "memory_limit_file": memory_limit_file,
            },
        )
        analyser = PythonAnalyser(config.effective_level, config.ignore_errors)
    except ConfigError as e:
        raise ProbityConfigError(str(e)) from e
    except re.error as e:
        raise ProbityConfigError(f"Invalid ignore_errors pattern '{e.pattern}': {e}") from e

    chosen_format: ErrorFormat = _resolve_error_format(config, error_format)
    if chosen_format in _MACHINE_FORMATS:
        std_output.enable_color = False

    warn_about_previous_crash(config.memory_limit_file, error_output)

    if not config.paths:
        raise ProbityUsageError("At least one path must be specified to analyse.")
    files, only_files = resolve_file_list(config.paths)
    if not files:
        raise ProbityUsageError("No files found to analyse.")

    if verbosity_level <= logging.INFO:
        error_output.write_line(
            f"Probity {PROBITY_VERSION}: analysing {len(files)} file(s) "
            f"at level {config.effective_level}"
        )

    application = AnalyseApplication(
        analyser,
        config.memory_limit_file,
        FileCacheStorage(config.cache_dir),
    )
    exit_code: int = application.analyse(
        files,
        only_files=only_files,
        std_output=std_output,
        error_output=error_output,
        error_formatter=get_error_formatter(chosen_format),
        default_level_used=config.default_level_used,
        debug=debug,
        project_config_file=str(config.config_file) if config.config_file is not None else None,
        changed=changed,
    )
    ctx.exit(exit_code)
