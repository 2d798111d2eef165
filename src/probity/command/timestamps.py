# topmark:header:start
#
#   project      : Probity
#   file         : timestamps.py
#   file_relpath : src/probity/command/timestamps.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Record file modification times for incremental ("changed files") runs."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from probity.config.logging import get_logger
from probity.constants import TIMESTAMP_CACHE_KEY_PREFIX

if TYPE_CHECKING:
    from probity.cache.storage import Cache
    from probity.config.logging import ProbityLogger

logger: ProbityLogger = get_logger(__name__)


def timestamp_cache_key(file: str) -> str:
    """Return the cache key for ``file``: ``filemtime-<absolute path>``."""
    return f"{TIMESTAMP_CACHE_KEY_PREFIX}{os.path.abspath(file)}"


class TimestampRecorder:
    """Save each analysed file's mtime into the cache.

    Disabled recorders do nothing at all. Timestamp caching is an
    optimization, so an unreadable mtime is skipped silently.

    Args:
        cache (Cache): Destination cache.
        enabled (bool): Whether the run is in changed-files mode.
    """

    def __init__(self, cache: Cache, *, enabled: bool) -> None:
        self.cache = cache
        self.enabled = enabled

    def record(self, file: str) -> None:
        """Persist the modification time of ``file`` (no-op when disabled)."""
        if not self.enabled:
            return
        try:
            timestamp: int = int(os.path.getmtime(file))
        except OSError:
            return
        self.cache.save(timestamp_cache_key(file), timestamp)
        logger.trace("Recorded mtime %d for %s", timestamp, file)
