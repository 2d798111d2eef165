# topmark:header:start
#
#   project      : Probity
#   file         : test_memory_watchdog.py
#   file_relpath : tests/command/test_memory_watchdog.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `probity.command.memory`: ceiling record and exit-time cleanup."""

from __future__ import annotations

import errno
import sys
from typing import TYPE_CHECKING

from probity.command.memory import FatalErrorTracker, is_out_of_memory, process_peak_memory
from tests.conftest import MB, make_watchdog, parametrize

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path
    from types import TracebackType


def test_record_keeps_highest_ceiling(tmp_path: Path) -> None:
    """Samples of 10, 15 and 40 MB leave "40 MB"; a later lower sample does not shrink it."""
    limit_file: Path = tmp_path / "memory_limit"
    watchdog = make_watchdog(limit_file, 10 * MB, 15 * MB, 40 * MB, 12 * MB)

    recorded: list[int] = [watchdog.record_peak_usage() for _ in range(4)]

    assert recorded == [10, 15, 40, 40]
    assert limit_file.read_text(encoding="utf-8") == "40 MB"


def test_record_rounds_up_to_whole_megabytes(tmp_path: Path) -> None:
    limit_file: Path = tmp_path / "memory_limit"
    watchdog = make_watchdog(limit_file, 10 * MB + 1)

    assert watchdog.record_peak_usage() == 11
    assert limit_file.read_text(encoding="utf-8") == "11 MB"


def test_record_creates_missing_parent_directory(tmp_path: Path) -> None:
    limit_file: Path = tmp_path / "nested" / "dir" / "memory_limit"
    make_watchdog(limit_file, 3 * MB).record_peak_usage()

    assert limit_file.read_text(encoding="utf-8") == "3 MB"


def test_record_survives_unwritable_file(tmp_path: Path) -> None:
    """A directory in place of the record file is reported, not raised."""
    watchdog = make_watchdog(tmp_path, 5 * MB)

    assert watchdog.record_peak_usage() == 5
    assert tmp_path.is_dir()


def test_register_exit_hook_is_idempotent(tmp_path: Path) -> None:
    registered: list[Callable[[], None]] = []
    watchdog = make_watchdog(tmp_path / "memory_limit", MB, registered=registered)

    watchdog.register_exit_hook()
    watchdog.register_exit_hook()

    assert registered == [watchdog.on_exit]


def test_clean_exit_removes_record(tmp_path: Path) -> None:
    limit_file: Path = tmp_path / "memory_limit"
    watchdog = make_watchdog(limit_file, 2 * MB)
    watchdog.record_peak_usage()

    watchdog.on_exit()

    assert not limit_file.exists()


def test_clean_exit_without_record_does_not_fail(tmp_path: Path) -> None:
    make_watchdog(tmp_path / "never_written", MB).on_exit()


def test_out_of_memory_exit_keeps_record(tmp_path: Path) -> None:
    limit_file: Path = tmp_path / "memory_limit"
    tracker = FatalErrorTracker()
    tracker.last_fatal = MemoryError()
    watchdog = make_watchdog(limit_file, 64 * MB, tracker=tracker)
    watchdog.record_peak_usage()

    watchdog.on_exit()

    assert limit_file.read_text(encoding="utf-8") == "64 MB"


def test_other_fatal_error_removes_record(tmp_path: Path) -> None:
    limit_file: Path = tmp_path / "memory_limit"
    tracker = FatalErrorTracker()
    tracker.last_fatal = ValueError("boom")
    watchdog = make_watchdog(limit_file, MB, tracker=tracker)
    watchdog.record_peak_usage()

    watchdog.on_exit()

    assert not limit_file.exists()


@parametrize(
    ("exc", "expected"),
    [
        (MemoryError(), True),
        (OSError(errno.ENOMEM, "Cannot allocate memory"), True),
        (RuntimeError("Allowed memory size of 134217728 bytes exhausted"), True),
        (RuntimeError("worker ran out of memory"), True),
        (OSError(errno.ENOENT, "No such file or directory"), False),
        (ValueError("boom"), False),
    ],
)
def test_is_out_of_memory(exc: BaseException, expected: bool) -> None:
    assert is_out_of_memory(exc) is expected


def test_tracker_chains_previous_excepthook() -> None:
    seen: list[BaseException] = []

    def previous(
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        seen.append(exc)

    sys.excepthook = previous
    tracker = FatalErrorTracker()
    tracker.install()
    tracker.install()

    error = MemoryError()
    sys.excepthook(MemoryError, error, None)

    assert tracker.last_fatal is error
    assert seen == [error]


def test_peak_sample_covers_freed_spike() -> None:
    """A buffer allocated and released between two samples still counts."""
    size: int = 128 * MB
    buffer = bytearray(size)
    for offset in range(0, size, 4096):
        buffer[offset] = 1
    del buffer

    assert process_peak_memory() >= size
