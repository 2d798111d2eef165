# topmark:header:start
#
#   project      : Probity
#   file         : instrumentation.py
#   file_relpath : src/probity/command/instrumentation.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per-file hooks for the two run modes.

* Progress mode (default): no pre-file hook. The post-file hook lazily starts a
  progress indicator on the error output, advances it, samples memory every
  `MEMORY_SAMPLE_INTERVAL` files, then records the file timestamp.
* Debug mode: the pre-file hook prints the file path on standard output, and
  the post-file hook only records the file timestamp.

The mode is selected once per run by `select_instrumentation`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from probity.config.logging import get_logger
from probity.constants import MEMORY_SAMPLE_INTERVAL

if TYPE_CHECKING:
    from collections.abc import Sequence

    from probity.analyser.protocols import FileHook
    from probity.command.memory import MemoryWatchdog
    from probity.command.output import OutputLike
    from probity.command.timestamps import TimestampRecorder
    from probity.config.logging import ProbityLogger

logger: ProbityLogger = get_logger(__name__)


class RunInstrumentation(Protocol):
    """A ``{before_file, after_file}`` hook pair plus end-of-run finalization."""

    before_file: FileHook | None
    after_file: FileHook | None

    def finish(self) -> None:
        """Finalize any user-facing state once the engine call has returned."""
        ...


class ProgressInstrumentation:
    """Progress-bar mode instrumentation.

    Args:
        total (int): Number of files in the run; sizes the progress indicator.
        error_output (OutputLike): Stream carrying the progress indicator.
        watchdog (MemoryWatchdog): Sampled every `MEMORY_SAMPLE_INTERVAL` files.
        recorder (TimestampRecorder): Invoked for every file.
    """

    def __init__(
        self,
        total: int,
        error_output: OutputLike,
        watchdog: MemoryWatchdog,
        recorder: TimestampRecorder,
    ) -> None:
        self.total = total
        self.error_output = error_output
        self.watchdog = watchdog
        self.recorder = recorder
        self.progress_started: bool = False
        self.file_order: int = 0
        self.before_file: FileHook | None = None
        self.after_file: FileHook | None = self._after_file

    def _after_file(self, file: str) -> None:
        if not self.progress_started:
            self.error_output.progress_start(self.total)
            self.progress_started = True
        if self.file_order < self.total:
            self.error_output.progress_advance()
        if self.file_order % MEMORY_SAMPLE_INTERVAL == 0:
            self.watchdog.record_peak_usage()
        self.file_order += 1

        self.recorder.record(file)

    def finish(self) -> None:
        """Close the progress indicator if it was started."""
        if self.progress_started:
            self.error_output.progress_finish()
            self.progress_started = False


class DebugInstrumentation:
    """Verbose/debug mode instrumentation.

    Args:
        std_output (OutputLike): Receives one line per file before it is analysed.
        recorder (TimestampRecorder): Invoked for every file.
    """

    def __init__(self, std_output: OutputLike, recorder: TimestampRecorder) -> None:
        self.std_output = std_output
        self.before_file: FileHook | None = self._before_file
        self.after_file: FileHook | None = recorder.record

    def _before_file(self, file: str) -> None:
        self.std_output.write_line(file)

    def finish(self) -> None:
        """Nothing to finalize in debug mode."""


def select_instrumentation(
    *,
    debug: bool,
    files: Sequence[str],
    std_output: OutputLike,
    error_output: OutputLike,
    watchdog: MemoryWatchdog,
    recorder: TimestampRecorder,
) -> RunInstrumentation:
    """Return the instrumentation for the run mode."""
    if debug:
        logger.debug("Instrumentation: debug (file listing)")
        return DebugInstrumentation(std_output, recorder)
    logger.debug("Instrumentation: progress (%d files)", len(files))
    return ProgressInstrumentation(len(files), error_output, watchdog, recorder)
