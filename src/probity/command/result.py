# topmark:header:start
#
#   project      : Probity
#   file         : result.py
#   file_relpath : src/probity/command/result.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Aggregate result of an analysis run and the diagnostic partitioner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from probity.analyser.diagnostics import FileError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from probity.analyser.diagnostics import Diagnostic


def partition_errors(errors: Iterable[Diagnostic]) -> tuple[list[FileError], list[str]]:
    """Split a diagnostic stream into file-scoped and global diagnostics.

    Classification is by value type: plain strings are global, anything else
    is a file-scoped record. Relative order is preserved within each partition.

    Args:
        errors (Iterable[Diagnostic]): Diagnostics as returned by the engine.

    Returns:
        tuple[list[FileError], list[str]]: ``(file_specific, not_file_specific)``.
    """
    file_specific: list[FileError] = []
    not_file_specific: list[str] = []
    for error in errors:
        if isinstance(error, str):
            not_file_specific.append(error)
        else:
            file_specific.append(error)
    return file_specific, not_file_specific


@dataclass(frozen=True)
class AnalysisResult:
    """Immutable aggregate handed to an error formatter, once per run.

    Attributes:
        file_specific_errors (tuple[FileError, ...]): Diagnostics attached to a file.
        not_file_specific_errors (tuple[str, ...]): Global diagnostics.
        default_level_used (bool): Whether the run used the default rule level.
        has_inferrable_property_types_from_constructor (bool): Whether a private,
            untyped property could have had its type inferred from the constructor.
        project_config_file (str | None): Configuration file in effect, if any.
    """

    file_specific_errors: tuple[FileError, ...]
    not_file_specific_errors: tuple[str, ...]
    default_level_used: bool
    has_inferrable_property_types_from_constructor: bool
    project_config_file: str | None = None

    def has_errors(self) -> bool:
        """Return True if any diagnostic was reported."""
        return self.total_errors_count > 0

    @property
    def total_errors_count(self) -> int:
        """Return the number of file-scoped plus global diagnostics."""
        return len(self.file_specific_errors) + len(self.not_file_specific_errors)

    def errors_by_file(self) -> dict[str, list[FileError]]:
        """Group file-scoped diagnostics by file, preserving first-seen file order."""
        grouped: dict[str, list[FileError]] = {}
        for error in self.file_specific_errors:
            grouped.setdefault(error.file, []).append(error)
        return grouped
