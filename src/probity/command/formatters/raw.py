# topmark:header:start
#
#   project      : Probity
#   file         : raw.py
#   file_relpath : src/probity/command/formatters/raw.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Raw formatter: one ``file:line:message`` line per diagnostic.

Global diagnostics use ``?`` for both file and line; unknown lines use ``?``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from probity.command.formatters.base import exit_code_for, write_config_note

if TYPE_CHECKING:
    from probity.command.output import OutputLike
    from probity.command.result import AnalysisResult


class RawErrorFormatter:
    """Grep-friendly, uncolored output."""

    def format_errors(self, analysis_result: AnalysisResult, output: OutputLike) -> int:
        """Write one line per diagnostic and return the exit status."""
        write_config_note(analysis_result, output)

        for message in analysis_result.not_file_specific_errors:
            output.write_line(f"?:?:{message}")

        for error in analysis_result.file_specific_errors:
            line: str = "?" if error.line is None else str(error.line)
            output.write_line(f"{error.file}:{line}:{error.message}")

        return int(exit_code_for(analysis_result))
