# topmark:header:start
#
#   project      : Probity
#   file         : json.py
#   file_relpath : src/probity/command/formatters/json.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""JSON formatter: a single machine-readable document on standard output.

Shape::

    {
      "totals": {"errors": <global count>, "file_errors": <file-scoped count>},
      "files": {"<path>": {"errors": <n>, "messages": [{"message": ..., "line": ...}]}},
      "errors": ["<global message>", ...]
    }
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from probity.command.formatters.base import exit_code_for

if TYPE_CHECKING:
    from probity.command.output import OutputLike
    from probity.command.result import AnalysisResult


def build_json_payload(analysis_result: AnalysisResult) -> dict[str, Any]:
    """Return the JSON-friendly representation of ``analysis_result``."""
    files: dict[str, dict[str, Any]] = {}
    for file, errors in analysis_result.errors_by_file().items():
        files[file] = {
            "errors": len(errors),
            "messages": [
                {
                    "message": e.message,
                    "line": e.line,
                    "ignorable": e.can_be_ignored,
                    **({"tip": e.tip} if e.tip is not None else {}),
                }
                for e in errors
            ],
        }
    return {
        "totals": {
            "errors": len(analysis_result.not_file_specific_errors),
            "file_errors": len(analysis_result.file_specific_errors),
        },
        "files": files,
        "errors": list(analysis_result.not_file_specific_errors),
    }


class JsonErrorFormatter:
    """Machine-readable output (no colors, no notes, no tips)."""

    def __init__(self, *, pretty: bool = False) -> None:
        self.pretty = pretty

    def format_errors(self, analysis_result: AnalysisResult, output: OutputLike) -> int:
        """Write the JSON document and return the exit status."""
        payload: dict[str, Any] = build_json_payload(analysis_result)
        output.write_line(json.dumps(payload, indent=2 if self.pretty else None))
        return int(exit_code_for(analysis_result))
