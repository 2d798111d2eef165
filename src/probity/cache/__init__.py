# topmark:header:start
#
#   project      : Probity
#   file         : __init__.py
#   file_relpath : src/probity/cache/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Key/value cache contract and storages."""

from __future__ import annotations

from probity.cache.storage import Cache, FileCacheStorage, MemoryCacheStorage

__all__ = [
    "Cache",
    "FileCacheStorage",
    "MemoryCacheStorage",
]
