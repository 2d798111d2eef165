# topmark:header:start
#
#   project      : Probity
#   file         : table.py
#   file_relpath : src/probity/command/formatters/table.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Human-readable table formatter (the default).

Layout:
    - an optional note naming the configuration file in use;
    - one table per file (``Line | Message``), in first-seen file order;
    - one table for global errors;
    - a closing ``[OK]``/``[ERROR]`` status line;
    - tips: default rule level, and inferrable private property types.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from probity.command.formatters.base import exit_code_for, write_config_note
from probity.constants import DEFAULT_LEVEL, MAX_LEVEL

if TYPE_CHECKING:
    from collections.abc import Sequence

    from probity.command.output import OutputLike
    from probity.command.result import AnalysisResult

DEFAULT_LEVEL_TIP: str = (
    f"Tip: Probity ran with the default rule level {DEFAULT_LEVEL}, which only performs "
    f"the most basic checks. Pass a higher level (up to {MAX_LEVEL}) via --level to find more problems."
)
INFERRABLE_PROPERTY_TYPES_TIP: str = (
    "Tip: One or more private properties have no declared type, but their type could be "
    "inferred from the constructor. Declaring it would let Probity find more problems."
)


def _render_table(output: OutputLike, headers: tuple[str, str], rows: Sequence[tuple[str, str]]) -> None:
    left_width: int = max(len(headers[0]), *(len(r[0]) for r in rows)) if rows else len(headers[0])
    right_width: int = max(len(headers[1]), *(len(r[1]) for r in rows)) if rows else len(headers[1])
    rule: str = f" {'-' * (left_width + 2)} {'-' * (right_width + 2)}"

    output.write_line(rule)
    output.write_line(
        f"  {output.styled(headers[0].ljust(left_width), bold=True)}"
        f"   {output.styled(headers[1], bold=True)}"
    )
    output.write_line(rule)
    for left, right in rows:
        output.write_line(f"  {left.ljust(left_width)}   {right}")
    output.write_line(rule)
    output.write_line()


class TableErrorFormatter:
    """Tables per file, a status line, and tips."""

    def format_errors(self, analysis_result: AnalysisResult, output: OutputLike) -> int:
        """Render the result and return the exit status."""
        write_config_note(analysis_result, output)

        if not analysis_result.has_errors():
            output.write_line()
            output.write_line(output.styled(" [OK] No errors ", fg="black", bg="green"))
            output.write_line()
            if analysis_result.default_level_used:
                output.write_line(DEFAULT_LEVEL_TIP)
            self._write_inference_tip(analysis_result, output)
            return int(exit_code_for(analysis_result))

        for file, errors in analysis_result.errors_by_file().items():
            rows: list[tuple[str, str]] = []
            for error in errors:
                rows.append(("" if error.line is None else str(error.line), error.message))
                if error.tip is not None:
                    rows.append(("", output.styled(f"Tip: {error.tip}", dim=True)))
            _render_table(output, ("Line", file), rows)

        if analysis_result.not_file_specific_errors:
            _render_table(
                output,
                ("", "Error"),
                [("", message) for message in analysis_result.not_file_specific_errors],
            )

        count: int = analysis_result.total_errors_count
        noun: str = "error" if count == 1 else "errors"
        output.write_line(output.styled(f" [ERROR] Found {count} {noun} ", fg="white", bg="red"))
        output.write_line()
        self._write_inference_tip(analysis_result, output)
        return int(exit_code_for(analysis_result))

    def _write_inference_tip(self, analysis_result: AnalysisResult, output: OutputLike) -> None:
        if analysis_result.has_inferrable_property_types_from_constructor:
            output.write_line(INFERRABLE_PROPERTY_TYPES_TIP)
