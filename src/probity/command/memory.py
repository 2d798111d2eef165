# topmark:header:start
#
#   project      : Probity
#   file         : memory.py
#   file_relpath : src/probity/command/memory.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Memory ceiling tracking for runs that may be killed by memory exhaustion.

During a run, `MemoryWatchdog` keeps a small record file up to date with the
highest peak memory observed so far (``"<N> MB"``). An external monitor, or the
next run, can read it to learn how much memory a crashed run consumed.

At process exit the record is removed, except when the process died from an
uncaught exception that looks like memory exhaustion: then the file is left in
place as evidence of the ceiling reached.

Uncaught exceptions are observed by chaining ``sys.excepthook`` (Python runs
the hook before ``atexit`` handlers), see `FatalErrorTracker`.
"""

from __future__ import annotations

import atexit
import errno
import math
import sys
from typing import TYPE_CHECKING

import psutil

from probity.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path
    from types import TracebackType

    from probity.config.logging import ProbityLogger

logger: ProbityLogger = get_logger(__name__)

# Best-effort: fatal allocation failures do not carry a stable signal.
_OUT_OF_MEMORY_MARKERS: tuple[str, ...] = (
    "out of memory",
    "cannot allocate memory",
    "allowed memory size",
)


def _rusage_peak_rss() -> int:
    """Return the kernel-tracked peak RSS of this process, in bytes (POSIX only)."""
    if sys.platform == "win32":
        return 0
    import resource

    max_rss: int = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports kilobytes, macOS reports bytes.
    return max_rss if sys.platform == "darwin" else max_rss * 1024


def process_peak_memory() -> int:
    """Return the peak resident memory of the current process, in bytes.

    Windows reports a true peak working set through psutil. On POSIX the
    high-water mark comes from ``getrusage``, so spikes between two samples
    are not lost; the current RSS is taken into account as well.
    """
    info = psutil.Process().memory_info()
    peak_wset: int | None = getattr(info, "peak_wset", None)
    if peak_wset is not None:
        return int(peak_wset)
    return max(int(info.rss), _rusage_peak_rss())


def is_out_of_memory(exc: BaseException) -> bool:
    """Return True if ``exc`` looks like a memory exhaustion failure."""
    if isinstance(exc, MemoryError):
        return True
    if isinstance(exc, OSError) and exc.errno == errno.ENOMEM:
        return True
    message: str = str(exc).lower()
    return any(marker in message for marker in _OUT_OF_MEMORY_MARKERS)


class FatalErrorTracker:
    """Remember the last exception that reached ``sys.excepthook``.

    The tracker chains whatever hook was installed before it, so default
    traceback printing (or another tool's hook) keeps working.
    """

    def __init__(self) -> None:
        self.last_fatal: BaseException | None = None
        self._installed: bool = False

    def install(self) -> None:
        """Install the chaining hook once per tracker."""
        if self._installed:
            return
        previous = sys.excepthook

        def _hook(
            exc_type: type[BaseException],
            exc: BaseException,
            tb: TracebackType | None,
        ) -> None:
            self.last_fatal = exc
            previous(exc_type, exc, tb)

        sys.excepthook = _hook
        self._installed = True


#: Process-wide tracker; there is only one ``sys.excepthook``.
fatal_errors = FatalErrorTracker()


class MemoryWatchdog:
    """Persist the peak memory ceiling and clean it up at exit.

    Args:
        memory_limit_file (Path): Record file, overwritten on each sample.
        sampler (Callable[[], int]): Returns the current peak memory in bytes.
        tracker (FatalErrorTracker): Source of the fatal exception, if any.
        register_exit (Callable[[Callable[[], None]], object]): Registers the
            exit-time cleanup (``atexit.register`` by default).
    """

    def __init__(
        self,
        memory_limit_file: Path,
        *,
        sampler: Callable[[], int] = process_peak_memory,
        tracker: FatalErrorTracker = fatal_errors,
        register_exit: Callable[[Callable[[], None]], object] = atexit.register,
    ) -> None:
        self.memory_limit_file = memory_limit_file
        self.sampler = sampler
        self.tracker = tracker
        self.register_exit = register_exit
        self.peak_bytes: int = 0
        self._exit_hook_registered: bool = False

    def record_peak_usage(self) -> int:
        """Sample memory and overwrite the record with the ceiling seen so far.

        Returns:
            int: The recorded ceiling, in whole megabytes rounded up.
        """
        self.peak_bytes = max(self.peak_bytes, self.sampler())
        megabytes: int = math.ceil(self.peak_bytes / 1024 / 1024)
        try:
            self.memory_limit_file.parent.mkdir(parents=True, exist_ok=True)
            self.memory_limit_file.write_text(f"{megabytes} MB", encoding="utf-8")
        except OSError as e:
            logger.warning("Cannot write memory limit file %s: %s", self.memory_limit_file, e)
        else:
            logger.debug("Memory ceiling: %d MB", megabytes)
        return megabytes

    def register_exit_hook(self) -> None:
        """Register `on_exit` and start tracking fatal exceptions (idempotent)."""
        if self._exit_hook_registered:
            return
        self.tracker.install()
        self.register_exit(self.on_exit)
        self._exit_hook_registered = True

    def on_exit(self) -> None:
        """Delete the record unless the process is dying from memory exhaustion.

        Runs during interpreter shutdown: never raises.
        """
        try:
            fatal: BaseException | None = self.tracker.last_fatal
            if fatal is not None and is_out_of_memory(fatal):
                return
            self.memory_limit_file.unlink(missing_ok=True)
        except Exception as e:  # noqa: BLE001 - interpreter is shutting down
            logger.debug("Memory limit file cleanup failed: %s", e)
