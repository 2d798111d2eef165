# topmark:header:start
#
#   project      : Probity
#   file         : errors.py
#   file_relpath : src/probity/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for Probity CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes.

Styling:
    Exceptions prefer the project error output if available (see `show()`); if
    none is present in the Click context, they fall back to Click's default styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from probity.exit_codes import ExitCode


class ProbityError(click.ClickException):
    """Base class for all Probity CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colors are applied in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project error output if available."""
        ctx = click.get_current_context(silent=True)
        if ctx is not None and isinstance(getattr(ctx, "obj", None), dict):
            error_output = ctx.obj.get("error_output")
            if error_output is not None:
                error_output.write_line(error_output.styled(self.format_message(), fg="bright_red"))
                return
        super().show(file)


class ProbityUsageError(ProbityError):
    """Error for command-line invocation errors (invalid flags/args, no files)."""

    exit_code = ExitCode.USAGE_ERROR


class ProbityConfigError(ProbityError):
    """Error for configuration errors (missing/invalid/malformed config)."""

    exit_code = ExitCode.CONFIG_ERROR
