# topmark:header:start
#
#   project      : Probity
#   file         : test_timestamps.py
#   file_relpath : tests/command/test_timestamps.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `probity.command.timestamps`."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from probity.command.timestamps import TimestampRecorder, timestamp_cache_key

if TYPE_CHECKING:
    from pathlib import Path

    from probity.cache.storage import MemoryCacheStorage


def test_cache_key_uses_absolute_path(tmp_path: Path) -> None:
    target: Path = tmp_path / "a.py"
    assert timestamp_cache_key(str(target)) == f"filemtime-{target}"


def test_cache_key_resolves_relative_path(tmp_path: Path) -> None:
    cwd: str = os.getcwd()
    try:
        os.chdir(tmp_path)
        expected: str = os.path.join(os.getcwd(), "pkg", "mod.py")
        key: str = timestamp_cache_key("pkg/mod.py")
    finally:
        os.chdir(cwd)
    assert key == f"filemtime-{expected}"


def test_enabled_recorder_saves_mtime(tmp_path: Path, memory_cache: MemoryCacheStorage) -> None:
    source: Path = tmp_path / "a.py"
    source.write_text("x = 1\n", encoding="utf-8")
    os.utime(source, (1_700_000_000, 1_700_000_000))

    TimestampRecorder(memory_cache, enabled=True).record(str(source))

    assert memory_cache.entries == {timestamp_cache_key(str(source)): 1_700_000_000}


def test_disabled_recorder_never_touches_cache(
    tmp_path: Path, memory_cache: MemoryCacheStorage
) -> None:
    source: Path = tmp_path / "a.py"
    source.write_text("x = 1\n", encoding="utf-8")

    TimestampRecorder(memory_cache, enabled=False).record(str(source))

    assert memory_cache.entries == {}


def test_missing_file_is_skipped(tmp_path: Path, memory_cache: MemoryCacheStorage) -> None:
    TimestampRecorder(memory_cache, enabled=True).record(str(tmp_path / "gone.py"))

    assert memory_cache.entries == {}
