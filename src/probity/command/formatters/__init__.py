# topmark:header:start
#
#   project      : Probity
#   file         : __init__.py
#   file_relpath : src/probity/command/formatters/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Error formatters: render an `AnalysisResult` and pick the exit status.

Formatters are selected by name through `ErrorFormat` and `get_error_formatter`.
"""

from __future__ import annotations

from enum import Enum

from probity.command.formatters.base import ErrorFormatter
from probity.command.formatters.json import JsonErrorFormatter
from probity.command.formatters.raw import RawErrorFormatter
from probity.command.formatters.table import TableErrorFormatter


class ErrorFormat(Enum):
    """Available ``--error-format`` values."""

    TABLE = "table"
    RAW = "raw"
    JSON = "json"
    PRETTY_JSON = "prettyJson"


def get_error_formatter(error_format: ErrorFormat) -> ErrorFormatter:
    """Return a formatter instance for ``error_format``."""
    if error_format is ErrorFormat.RAW:
        return RawErrorFormatter()
    if error_format is ErrorFormat.JSON:
        return JsonErrorFormatter()
    if error_format is ErrorFormat.PRETTY_JSON:
        return JsonErrorFormatter(pretty=True)
    return TableErrorFormatter()


__all__ = [
    "ErrorFormat",
    "ErrorFormatter",
    "JsonErrorFormatter",
    "RawErrorFormatter",
    "TableErrorFormatter",
    "get_error_formatter",
]
