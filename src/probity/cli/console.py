# topmark:header:start
#
#   project      : Probity
#   file         : console.py
#   file_relpath : src/probity/cli/console.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click-backed output streams for user-facing program output.

`ClickOutput` implements [`OutputLike`][probity.command.output.OutputLike]
over a single text stream. A run uses two of them: one over ``stdout``
(formatter output) and one over ``stderr`` (progress indicator, warnings).
Internal diagnostics go through `logging`, never through these streams.
"""

from __future__ import annotations

import sys
from contextlib import ExitStack
from typing import TYPE_CHECKING, Any, TextIO, TypedDict

import click

if TYPE_CHECKING:
    from click._termui_impl import ProgressBar


# This TypedDict is for documentation and type-checking on the *caller* side.
class StyleKwargs(TypedDict, total=False):
    """Keyword arguments accepted by click.style()."""

    fg: str
    bg: str
    bold: bool
    dim: bool
    underline: bool
    reverse: bool


class ClickOutput:
    """Program-output stream, independent from the logger.

    Args:
        stream (TextIO | None): Target stream; defaults to `sys.stdout`.
        enable_color (bool): If True, emits ANSI color codes.
        quiet (bool): If True, the progress indicator is suppressed.

    Attributes:
        stream (TextIO): Target stream.
        enable_color (bool): Whether to emit ANSI color codes.
        quiet (bool): Whether the progress indicator is suppressed.
    """

    def __init__(
        self,
        *,
        stream: TextIO | None = None,
        enable_color: bool = True,
        quiet: bool = False,
    ) -> None:
        self.stream: TextIO = stream or sys.stdout
        self.enable_color = enable_color
        self.quiet = quiet
        self._progress: ProgressBar[int] | None = None
        self._progress_stack = ExitStack()

    def write_line(self, text: str = "") -> None:
        """Write a line to the stream.

        Args:
            text (str): Line text (without newline).
        """
        click.echo(text, file=self.stream, color=self.enable_color)

    def warn(self, text: str) -> None:
        """Write a yellow warning line."""
        self.write_line(self.styled(text, fg="yellow"))

    def styled(self, text: str, **style_kwargs: Any) -> str:
        """Return a styled string using click.style.

        Args:
            text (str): Text to style.
            **style_kwargs (Any): Subset of keyword arguments supported by click.style.
                Expected keys are defined in the StyleKwargs TypedDict.

        Returns:
            str: The styled text (or plain text if color is disabled).
        """
        if not self.enable_color:
            return text
        return click.style(text, **style_kwargs)

    def progress_start(self, total: int) -> None:
        """Start a Click progress bar sized to ``total``."""
        if self.quiet or self._progress is not None:
            return
        bar: ProgressBar[int] = click.progressbar(
            length=total,
            label="Analysing",
            file=self.stream,
            color=self.enable_color,
            show_pos=True,
        )
        self._progress = self._progress_stack.enter_context(bar)

    def progress_advance(self, step: int = 1) -> None:
        """Advance the progress bar (no-op when none is running)."""
        if self._progress is not None:
            self._progress.update(step)

    def progress_finish(self) -> None:
        """Render the final state of the progress bar and close it."""
        if self._progress is None:
            return
        self._progress_stack.close()
        self._progress = None
