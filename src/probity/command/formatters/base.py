# topmark:header:start
#
#   project      : Probity
#   file         : base.py
#   file_relpath : src/probity/command/formatters/base.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Error formatter contract and shared helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from probity.exit_codes import ExitCode

if TYPE_CHECKING:
    from probity.command.output import OutputLike
    from probity.command.result import AnalysisResult


class ErrorFormatter(Protocol):
    """Render an `AnalysisResult` and decide the run's exit status."""

    def format_errors(self, analysis_result: AnalysisResult, output: OutputLike) -> int:
        """Write ``analysis_result`` to ``output`` and return the exit status."""
        ...


def exit_code_for(analysis_result: AnalysisResult) -> ExitCode:
    """Return FAILURE if the result has errors, SUCCESS otherwise."""
    return ExitCode.FAILURE if analysis_result.has_errors() else ExitCode.SUCCESS


def write_config_note(analysis_result: AnalysisResult, output: OutputLike) -> None:
    """Write the "using configuration file" note when a config file is in effect."""
    if analysis_result.project_config_file is not None:
        output.write_line(f"Note: Using configuration file {analysis_result.project_config_file}.")
