# topmark:header:start
#
#   project      : Probity
#   file         : output.py
#   file_relpath : src/probity/command/output.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Output stream contract used by the orchestrator and the error formatters.

A run addresses two independent streams: standard output (formatter output,
debug file listing) and error output (progress indicator). Implementations
live in the CLI layer ([`probity.cli.console`][]); this module only declares
the protocol so the command layer stays free of Click imports.
"""

from __future__ import annotations

from typing import Any, Protocol


class OutputLike(Protocol):
    """Line-oriented output stream with a progress-indicator protocol."""

    def write_line(self, text: str = "") -> None:
        """Write ``text`` followed by a newline."""
        ...

    def styled(self, text: str, **style_kwargs: Any) -> str:
        """Return ``text`` styled for this stream (plain when colors are off)."""
        ...

    def progress_start(self, total: int) -> None:
        """Start a progress indicator sized to ``total`` units."""
        ...

    def progress_advance(self, step: int = 1) -> None:
        """Advance the progress indicator by ``step`` units."""
        ...

    def progress_finish(self) -> None:
        """Complete and close the progress indicator."""
        ...
