# topmark:header:start
#
#   project      : Probity
#   file         : __init__.py
#   file_relpath : src/probity/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Probity configuration package.

Holds the logging setup ([`probity.config.logging`][]) and the layered
configuration model ([`probity.config.model`][]): runtime defaults, an optional
TOML config file, and CLI overrides, frozen into an immutable `Config`.
"""

from __future__ import annotations

from probity.config.model import Config, MutableConfig, load_config

__all__ = [
    "Config",
    "MutableConfig",
    "load_config",
]
