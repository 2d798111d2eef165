# topmark:header:start
#
#   project      : Probity
#   file         : storage.py
#   file_relpath : src/probity/cache/storage.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Key/value cache storages.

The orchestrator only ever calls `Cache.save`. `load` exists for the
consumers of the cache (e.g. a later run skipping unchanged files).
"""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from probity.config.logging import ProbityLogger, get_logger

logger: ProbityLogger = get_logger(__name__)


class Cache(Protocol):
    """Structural interface of a key/value cache."""

    def save(self, key: str, value: Any) -> None:
        """Persist ``value`` under ``key``, replacing any previous value."""
        ...

    def load(self, key: str) -> Any | None:
        """Return the value stored under ``key``, or None if absent."""
        ...


class MemoryCacheStorage:
    """Process-local cache backed by a dict."""

    def __init__(self) -> None:
        self.entries: dict[str, Any] = {}

    def save(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``."""
        self.entries[key] = value

    def load(self, key: str) -> Any | None:
        """Return the stored value or None."""
        return self.entries.get(key)


class FileCacheStorage:
    """On-disk cache: one JSON document per key.

    File names are the SHA-256 of the key, fanned out over two-character
    sub-directories. Each document stores the key next to the value so that
    hash collisions are detected on load.

    Args:
        directory (Path): Root directory of the cache; created on first save.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path_for(self, key: str) -> Path:
        digest: str = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / digest[:2] / f"{digest}.json"

    def save(self, key: str, value: Any) -> None:
        """Atomically write ``value`` under ``key``.

        Raises:
            TypeError: If ``value`` is not JSON-serializable.
            OSError: If the cache directory cannot be written.
        """
        path: Path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload: str = json.dumps({"key": key, "value": value})

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.trace("Cache save %s -> %s", key, path)

    def load(self, key: str) -> Any | None:
        """Return the value stored under ``key``, or None if absent or unreadable."""
        path: Path = self._path_for(key)
        try:
            document: Any = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Cannot read cache entry %s: %s", path, e)
            return None
        if not isinstance(document, dict) or document.get("key") != key:
            return None
        return document.get("value")
